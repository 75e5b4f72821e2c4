"""
Matching Domain - Lexical-semantic scoring and ranking.

This domain handles:
- Tokenization of mixed-script text
- Synonym-class expansion into semantic bags
- Overlap scoring
- Stable ranking of posts and communities
"""

from .bag import SemanticBagBuilder
from .contracts import BagBuilder, DocumentRanker
from .models import Document, ScoredResult, SemanticBag, Token
from .ranker import Ranker
from .registry import SynonymClass, SynonymRegistry
from .scorer import score, score_texts
from .selectors import community_text, post_text
from .tokenizer import is_unsegmented, tokenize

__all__ = [
    "BagBuilder",
    "DocumentRanker",
    "Token",
    "SemanticBag",
    "Document",
    "ScoredResult",
    "tokenize",
    "is_unsegmented",
    "SynonymClass",
    "SynonymRegistry",
    "SemanticBagBuilder",
    "score",
    "score_texts",
    "Ranker",
    "post_text",
    "community_text",
]
