"""Generative AI client for summaries and originality assessments.

Talks to the Gemini REST `generateContent` endpoint over `httpx`, trying the
configured model names in order and falling through to the next one when the
provider reports the model as unknown.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

from blogonspot.core.settings import settings
from blogonspot.services.errors import ValidationFailedError

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404

SUMMARY_MIN_LENGTH = 10
SUMMARY_MAX_LENGTH = 10_000
ASSESS_MIN_LENGTH = 30
RATIONALE_MAX_LENGTH = 300

DEFAULT_ORIGINALITY_SCORE = 50
DEFAULT_RATIONALE = "Assessment generated."

SUMMARY_PROMPT = (
    "Summarize the following text in a concise manner (1-2 sentences maximum):\n\n{content}"
)
ASSESS_PROMPT = """You are an originality and plagiarism assessment assistant.
Analyze the following blog content and return a strict JSON with keys:
- originality_score: number (0-100, higher is more original)
- likely_ai_generated: boolean
- rationale: short string explaining the assessment (<= 300 chars)
If you are unsure, estimate conservatively.
Content:

{content}"""

_SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class GenerativeAIError(RuntimeError):
    """Base exception for failures talking to the AI provider."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AINotConfiguredError(GenerativeAIError):
    """Raised when no API key is configured."""


class AITimeoutError(GenerativeAIError):
    """Raised when the provider does not answer within the deadline."""

    status_code = 408


class AIInvalidKeyError(GenerativeAIError):
    """Raised when the provider rejects the configured key."""


class AIQuotaExceededError(GenerativeAIError):
    """Raised when the provider quota is exhausted."""

    status_code = 429


class AIPermissionDeniedError(GenerativeAIError):
    """Raised when the key lacks access to the requested model."""

    status_code = 403


def classify_provider_error(detail: str) -> GenerativeAIError:
    """Map a provider error description onto the matching exception."""
    if "timeout" in detail.lower():
        return AITimeoutError("Request timeout - API took too long to respond")
    if "API_KEY_INVALID" in detail:
        return AIInvalidKeyError("Invalid API key configuration")
    if "QUOTA_EXCEEDED" in detail or "RESOURCE_EXHAUSTED" in detail:
        return AIQuotaExceededError("API quota exceeded - try again later")
    if "PERMISSION_DENIED" in detail:
        return AIPermissionDeniedError("API access denied - check permissions")
    return GenerativeAIError(f"AI provider error: {detail}")


@dataclass(frozen=True)
class AISummary:
    """Summary text and the model that produced it."""

    summary: str
    model: str


@dataclass(frozen=True)
class OriginalityAssessment:
    """Model opinion on how original a piece of content is."""

    originality_score: float
    likely_ai_generated: bool
    rationale: str


def sanitize_summary_input(content: object) -> str:
    """Validate summary input and strip `<script>` blocks.

    Raises:
        ValidationFailedError: If the content is not a string of 10 to 10000
            characters after trimming.
    """
    if not isinstance(content, str) or not content:
        raise ValidationFailedError("Content is required and must be a string")
    trimmed = content.strip()
    if len(trimmed) < SUMMARY_MIN_LENGTH:
        raise ValidationFailedError("Content must be at least 10 characters long")
    if len(trimmed) > SUMMARY_MAX_LENGTH:
        raise ValidationFailedError("Content must be less than 10,000 characters")
    return _SCRIPT_BLOCK.sub("", trimmed)


def validate_assess_input(content: object) -> str:
    """Return `content` when it carries at least 30 non-blank characters."""
    if not isinstance(content, str) or len(content.strip()) < ASSESS_MIN_LENGTH:
        raise ValidationFailedError(
            "Content must be a non-empty string of at least 30 characters."
        )
    return content


def parse_assessment(text: str) -> OriginalityAssessment:
    """Parse a model reply into an assessment, tolerating loose output.

    Markdown code fences are stripped before parsing. A reply that is not a
    JSON object becomes a neutral score with the reply itself as rationale;
    individual fields of the wrong type fall back to their defaults.
    """
    cleaned = _CODE_FENCE.sub("", text.strip())
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        parsed = None
    if not isinstance(parsed, dict):
        parsed = {
            "originality_score": DEFAULT_ORIGINALITY_SCORE,
            "likely_ai_generated": False,
            "rationale": text[:RATIONALE_MAX_LENGTH],
        }

    score = parsed.get("originality_score")
    if isinstance(score, bool) or not isinstance(score, int | float):
        score = DEFAULT_ORIGINALITY_SCORE
    likely = parsed.get("likely_ai_generated")
    if not isinstance(likely, bool):
        likely = False
    rationale = parsed.get("rationale")
    if not isinstance(rationale, str):
        rationale = DEFAULT_RATIONALE

    return OriginalityAssessment(
        originality_score=score,
        likely_ai_generated=likely,
        rationale=rationale,
    )


def _extract_text(payload: dict[str, Any]) -> str:
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    error = body.get("error", {}) if isinstance(body, dict) else {}
    pieces = [str(error.get("status", "")), str(error.get("message", ""))]
    for detail in error.get("details", []) or []:
        if isinstance(detail, dict) and detail.get("reason"):
            pieces.append(str(detail["reason"]))
    return " ".join(piece for piece in pieces if piece) or f"HTTP {response.status_code}"


class GenerativeAIClient:
    """Async HTTP client wrapper for the generative AI provider."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        models: list[str] | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.base_url = (base_url or settings.ai_base_url).rstrip("/")
        self.models = list(models or settings.ai_models)
        self.timeout_seconds = timeout_seconds or settings.ai_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise AINotConfiguredError("API key not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=httpx.Timeout(self.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def generate(self, prompt: str) -> tuple[str, str]:
        """Send `prompt` to the first available model.

        Returns:
            The generated text and the name of the model that answered.

        Raises:
            GenerativeAIError: On provider errors, or when no configured
                model is available.
        """
        client = await self._ensure_client()
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        last_detail = "no models configured"
        for model in self.models:
            try:
                response = await client.post(
                    f"/models/{model}:generateContent",
                    params={"key": self.api_key},
                    json=body,
                )
            except httpx.TimeoutException as exc:
                raise AITimeoutError("Request timeout - API took too long to respond") from exc
            except httpx.HTTPError as exc:
                raise GenerativeAIError(f"AI provider request failed: {exc}") from exc

            if response.status_code == HTTP_NOT_FOUND:
                last_detail = _error_detail(response)
                logger.warning("Model %s not available: %s", model, last_detail)
                continue
            if response.is_error:
                raise classify_provider_error(_error_detail(response))

            try:
                payload = response.json()
            except ValueError as exc:
                logger.warning("Model %s returned a non-JSON body", model)
                raise GenerativeAIError("Invalid response from AI provider") from exc
            if not isinstance(payload, dict):
                raise GenerativeAIError("Invalid response from AI provider")
            return _extract_text(payload), model

        raise GenerativeAIError(f"No available models found. Last error: {last_detail}")

    async def summarize(self, content: str) -> AISummary:
        """Summarize `content` in one or two sentences."""
        sanitized = sanitize_summary_input(content)
        prompt = SUMMARY_PROMPT.format(content=sanitized)
        try:
            text, model = await asyncio.wait_for(self.generate(prompt), self.timeout_seconds)
        except TimeoutError as exc:
            raise AITimeoutError("Request timeout - API took too long to respond") from exc

        summary = text.strip()
        if not summary:
            raise GenerativeAIError("Empty summary received from API")
        logger.debug("Generated summary with %s", model)
        return AISummary(summary=summary, model=model)

    async def assess_originality(self, content: str) -> OriginalityAssessment:
        """Ask the model for an originality opinion on `content`."""
        validate_assess_input(content)
        prompt = ASSESS_PROMPT.format(content=content)
        try:
            text, _model = await asyncio.wait_for(self.generate(prompt), self.timeout_seconds)
        except TimeoutError as exc:
            raise AITimeoutError("Request timeout - API took too long to respond") from exc
        return parse_assessment(text)


class _AIClientSingleton:
    """Singleton wrapper for GenerativeAIClient."""

    _instance: GenerativeAIClient | None = None

    @classmethod
    def get_instance(cls) -> GenerativeAIClient:
        if cls._instance is None:
            cls._instance = GenerativeAIClient()
        return cls._instance


def get_ai_client() -> GenerativeAIClient:
    """Return a singleton AI client instance."""
    return _AIClientSingleton.get_instance()
