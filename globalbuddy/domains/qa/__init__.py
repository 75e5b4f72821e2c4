"""
QA Domain - Community question answering.

Ranks the most recent posts against a question and summarizes the best
matches, falling back to the newest posts when nothing matches.
"""

from .composer import AnswerComposer
from .models import QAAnswer, QAReference

__all__ = [
    "AnswerComposer",
    "QAAnswer",
    "QAReference",
]
