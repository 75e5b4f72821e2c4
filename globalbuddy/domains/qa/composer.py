"""
Answer Composer - Retrieve the best recent posts and summarize them.

The answer is an enumerated list, one line per referenced post:

    1. 曼谷租房攻略: 推荐在 BTS 线附近找公寓...
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from globalbuddy.config.settings import (
    NO_ANSWER_TEXT,
    QA_RESULT_LIMIT,
    QA_SNIPPET_LENGTH,
    QA_WINDOW_SIZE,
)
from globalbuddy.domains.matching import Document, DocumentRanker, post_text

from .models import QAAnswer, QAReference

logger = logging.getLogger(__name__)

__all__ = ["AnswerComposer"]

ELLIPSIS = "..."


class AnswerComposer:
    """
    Question answering over a bounded window of recent posts.

    Example:
        >>> composer = AnswerComposer(ranker)
        >>> result = composer.answer("曼谷怎么租房", recent_posts)
        >>> result.references[0].title
        '曼谷租房攻略'
    """

    def __init__(
        self,
        ranker: DocumentRanker,
        result_limit: int = QA_RESULT_LIMIT,
        window_size: int = QA_WINDOW_SIZE,
        snippet_length: int = QA_SNIPPET_LENGTH,
        empty_answer: str = NO_ANSWER_TEXT,
    ) -> None:
        """
        Initialize composer.

        Args:
            ranker: Ranker used to score the window
            result_limit: Maximum number of referenced posts
            window_size: Maximum number of recent posts considered
            snippet_length: Body characters quoted per reference
            empty_answer: Text returned when there is nothing to cite
        """
        self._ranker = ranker
        self._result_limit = result_limit
        self._window_size = window_size
        self._snippet_length = snippet_length
        self._empty_answer = empty_answer

    def answer(self, question: str | None, recent_documents: Sequence[Document]) -> QAAnswer:
        """
        Answer a question from recent posts.

        Args:
            question: Free-text question
            recent_documents: Posts ordered newest first

        Returns:
            Answer text and references. When nothing matches, the first posts
            of the window are cited with a score of 0.
        """
        window = list(recent_documents)[: self._window_size]
        matches = self._ranker.rank(question, window, post_text, limit=self._result_limit)

        if matches:
            selected = [(match.document, match.score) for match in matches]
        else:
            # Score 0 marks a fallback citation, never a match
            selected = [(document, 0.0) for document in window[: self._result_limit]]
            logger.info(
                "QA fallback: no match in %d posts, citing %d most recent",
                len(window),
                len(selected),
            )

        return QAAnswer(
            answer=self.compose_text([document for document, _ in selected]),
            references=[
                QAReference(id=document.id, title=document.title, score=value)
                for document, value in selected
            ],
        )

    def compose_text(self, documents: Sequence[Document]) -> str:
        """Format documents as an enumerated list, or the empty-answer text."""
        if not documents:
            return self._empty_answer

        return "\n".join(
            f"{number}. {document.title}: {self._snippet(document.body)}"
            for number, document in enumerate(documents, 1)
        )

    def _snippet(self, body: str) -> str:
        if len(body) > self._snippet_length:
            return body[: self._snippet_length] + ELLIPSIS
        return body
