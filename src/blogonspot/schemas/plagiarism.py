"""Schemas for the similarity scorer and the originality assessment."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .common import APIModel


class ContentRequest(APIModel):
    """Text submitted for analysis.

    Typed loosely so that non-string input reaches the length check and gets
    its descriptive error message.
    """

    content: Any = None


class SimilarityMatchResponse(APIModel):
    """A published post sharing vocabulary with the submitted text."""

    id: int
    title: str
    author: int | None
    created_at: datetime
    similarity: float


class SimilarityReportResponse(APIModel):
    """Ranked similarity report."""

    score: int = Field(..., ge=0, le=100, description="Top similarity as a percentage")
    matches: list[SimilarityMatchResponse]
    total_compared: int


class OriginalityAssessmentResponse(BaseModel):
    """Model opinion on originality; keys stay snake_case as the model emits them."""

    originality_score: float
    likely_ai_generated: bool
    rationale: str

    model_config = ConfigDict(from_attributes=True)
