"""
NLP Routes - Community question answering.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from globalbuddy.adapters import SQLiteRepository
from globalbuddy.config import Settings, get_settings
from globalbuddy.config.errors import QAError
from globalbuddy.domains.matching import Document
from globalbuddy.domains.qa import AnswerComposer, QAAnswer
from globalbuddy.interfaces.api.deps import get_answer_composer, get_sqlite_repository

logger = logging.getLogger(__name__)

router = APIRouter()


class QuestionRequest(BaseModel):
    """Question body."""

    question: str | None = None


@router.post("/qa", response_model=QAAnswer)
async def answer_question(
    request: QuestionRequest | None = None,
    repo: SQLiteRepository = Depends(get_sqlite_repository),
    composer: AnswerComposer = Depends(get_answer_composer),
    settings: Settings = Depends(get_settings),
) -> QAAnswer:
    """
    Answer a question from the most recent community posts.

    - **question**: Free-text question (required)
    """
    question = request.question if request else None
    if not question or not question.strip():
        raise QAError("Missing 'question'")

    rows = await repo.list_recent_posts(settings.qa_window_size)
    documents = [Document.model_validate(row) for row in rows]

    result = await run_in_threadpool(composer.answer, question, documents)

    logger.info(
        "QA: question='%s' window=%d references=%d",
        question[:50],
        len(documents),
        len(result.references),
    )
    return result
