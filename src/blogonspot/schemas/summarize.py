"""Schemas for the summarization endpoint."""

from typing import Any

from .common import APIModel


class SummarizeRequest(APIModel):
    """Text to summarize."""

    content: Any = None


class SummarizeResponse(APIModel):
    """Generated summary and the model that produced it."""

    summary: str
    model: str
