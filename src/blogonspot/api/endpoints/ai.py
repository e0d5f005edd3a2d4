# src/blogonspot/api/endpoints/ai.py
"""Similarity scoring, originality assessment and summarization endpoints."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from blogonspot.api.dependencies import SessionDep
from blogonspot.schemas.plagiarism import (
    ContentRequest,
    OriginalityAssessmentResponse,
    SimilarityMatchResponse,
    SimilarityReportResponse,
)
from blogonspot.schemas.summarize import SummarizeRequest, SummarizeResponse
from blogonspot.services import plagiarism
from blogonspot.services.ai import GenerativeAIClient, GenerativeAIError, get_ai_client
from blogonspot.services.errors import ServiceError, to_http_exception

logger = logging.getLogger(__name__)

plagiarism_router = APIRouter(prefix="/plagiarism", tags=["plagiarism"])
summarize_router = APIRouter(prefix="/summarize", tags=["summarize"])


def get_ai_client_dep() -> GenerativeAIClient:
    """Get the AI client for dependency injection."""
    return get_ai_client()


AIClientDep = Annotated[GenerativeAIClient, Depends(get_ai_client_dep)]


def _ai_http_exception(exc: GenerativeAIError) -> HTTPException:
    logger.warning("AI provider call failed: %s", exc.message)
    return HTTPException(status_code=exc.status_code, detail=exc.message)


@plagiarism_router.post("/check", response_model=SimilarityReportResponse)
async def check_plagiarism(payload: ContentRequest, db: SessionDep) -> SimilarityReportResponse:
    """Score the submitted text against recent published posts."""
    try:
        report = plagiarism.check_similarity(db, payload.content)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    return SimilarityReportResponse(
        score=report.score,
        matches=[SimilarityMatchResponse.model_validate(match) for match in report.matches],
        total_compared=report.total_compared,
    )


@plagiarism_router.post("/assess", response_model=OriginalityAssessmentResponse)
async def assess_originality(
    payload: ContentRequest, client: AIClientDep
) -> OriginalityAssessmentResponse:
    """Ask the AI provider for an originality opinion."""
    try:
        assessment = await client.assess_originality(payload.content)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    except GenerativeAIError as exc:
        raise _ai_http_exception(exc) from exc
    return OriginalityAssessmentResponse.model_validate(assessment)


@summarize_router.post("", response_model=SummarizeResponse)
async def summarize(payload: SummarizeRequest, client: AIClientDep) -> SummarizeResponse:
    """Summarize the submitted text in one or two sentences."""
    try:
        result = await client.summarize(payload.content)
    except ServiceError as exc:
        raise to_http_exception(exc) from exc
    except GenerativeAIError as exc:
        raise _ai_http_exception(exc) from exc
    return SummarizeResponse(summary=result.summary, model=result.model)
