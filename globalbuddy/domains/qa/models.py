"""
QA Models - Data types for question answering.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class QAReference(BaseModel):
    """A post cited by an answer."""

    id: str
    title: str
    score: float = Field(default=0.0, ge=0.0, le=1.0)


class QAAnswer(BaseModel):
    """Composed answer with the posts it was built from."""

    answer: str
    references: list[QAReference] = Field(default_factory=list)
