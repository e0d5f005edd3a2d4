# mypy: ignore-errors
"""Generative AI client and the summarize/assess endpoints."""

import asyncio
import json
from typing import Any

import httpx
import pytest
from fastapi import status

from blogonspot.api.endpoints import ai as ai_endpoints
from blogonspot.services.ai import (
    AIInvalidKeyError,
    AINotConfiguredError,
    AIPermissionDeniedError,
    AIQuotaExceededError,
    AITimeoutError,
    GenerativeAIClient,
    GenerativeAIError,
    classify_provider_error,
    parse_assessment,
    sanitize_summary_input,
)
from blogonspot.services.errors import ValidationFailedError

LONG_TEXT = "Composting turns kitchen scraps into dark, crumbly soil for the garden."


def gemini_reply(text: str) -> dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


def gemini_error(code: int, status_name: str, message: str, reason: str | None = None) -> httpx.Response:
    error: dict[str, Any] = {"code": code, "status": status_name, "message": message}
    if reason:
        error["details"] = [{"reason": reason}]
    return httpx.Response(code, json={"error": error})


def _client(handler, **kwargs) -> GenerativeAIClient:
    return GenerativeAIClient(
        api_key=kwargs.pop("api_key", "test-key"),
        base_url="https://ai.test/v1beta",
        models=kwargs.pop("models", ["model-a", "model-b"]),
        timeout_seconds=kwargs.pop("timeout_seconds", 5),
        transport=httpx.MockTransport(handler),
    )


class TestGenerate:
    async def test_falls_back_when_model_missing(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if "model-a" in request.url.path:
                return gemini_error(404, "NOT_FOUND", "models/model-a is not found")
            return httpx.Response(200, json=gemini_reply("hello"))

        client = _client(handler)
        text, model = await client.generate("prompt")
        await client.aclose()

        assert (text, model) == ("hello", "model-b")
        assert [request.url.path for request in seen] == [
            "/v1beta/models/model-a:generateContent",
            "/v1beta/models/model-b:generateContent",
        ]
        assert seen[0].url.params["key"] == "test-key"
        assert json.loads(seen[0].content) == {"contents": [{"parts": [{"text": "prompt"}]}]}

    async def test_all_models_missing(self):
        client = _client(lambda request: gemini_error(404, "NOT_FOUND", "gone"))
        with pytest.raises(GenerativeAIError) as exc_info:
            await client.generate("prompt")
        await client.aclose()
        assert exc_info.value.message.startswith("No available models found")

    @pytest.mark.parametrize(
        ("response", "error_type", "status_code"),
        [
            (
                gemini_error(400, "INVALID_ARGUMENT", "API key not valid.", "API_KEY_INVALID"),
                AIInvalidKeyError,
                500,
            ),
            (gemini_error(429, "RESOURCE_EXHAUSTED", "Quota exceeded."), AIQuotaExceededError, 429),
            (gemini_error(403, "PERMISSION_DENIED", "No access."), AIPermissionDeniedError, 403),
        ],
    )
    async def test_provider_errors_are_classified(self, response, error_type, status_code):
        client = _client(lambda request: response)
        with pytest.raises(error_type) as exc_info:
            await client.generate("prompt")
        await client.aclose()
        assert exc_info.value.status_code == status_code

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>gateway page</html>"),
            httpx.Response(200, json=["not", "an", "object"]),
        ],
    )
    async def test_malformed_success_body(self, response):
        client = _client(lambda request: response)
        with pytest.raises(GenerativeAIError) as exc_info:
            await client.generate("prompt")
        await client.aclose()
        assert type(exc_info.value) is GenerativeAIError
        assert exc_info.value.message == "Invalid response from AI provider"
        assert exc_info.value.status_code == 500

    async def test_not_configured(self):
        client = _client(lambda request: httpx.Response(200, json=gemini_reply("x")), api_key="")
        assert client.enabled is False
        with pytest.raises(AINotConfiguredError):
            await client.summarize(LONG_TEXT)

    async def test_summarize_times_out(self):
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, json=gemini_reply("late"))

        client = _client(slow, timeout_seconds=0.05)
        with pytest.raises(AITimeoutError) as exc_info:
            await client.summarize(LONG_TEXT)
        await client.aclose()
        assert exc_info.value.status_code == 408

    async def test_summarize_strips_scripts(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=gemini_reply("  A short summary.  "))

        client = _client(handler)
        result = await client.summarize(f"{LONG_TEXT}<script>alert('x')</script>")
        await client.aclose()

        assert result.summary == "A short summary."
        assert result.model == "model-a"
        prompt = json.loads(seen[0].content)["contents"][0]["parts"][0]["text"]
        assert "<script>" not in prompt
        assert LONG_TEXT in prompt

    async def test_empty_summary_is_an_error(self):
        client = _client(lambda request: httpx.Response(200, json=gemini_reply("   ")))
        with pytest.raises(GenerativeAIError) as exc_info:
            await client.summarize(LONG_TEXT)
        await client.aclose()
        assert exc_info.value.message == "Empty summary received from API"


def test_classify_provider_error_fallback():
    error = classify_provider_error("INTERNAL something broke")
    assert type(error) is GenerativeAIError
    assert error.status_code == 500
    assert isinstance(classify_provider_error("deadline: Timeout"), AITimeoutError)


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (None, "Content is required and must be a string"),
        (42, "Content is required and must be a string"),
        ("   short   ", "Content must be at least 10 characters long"),
        ("x" * 10_001, "Content must be less than 10,000 characters"),
    ],
)
def test_sanitize_summary_input_rejects(content, message):
    with pytest.raises(ValidationFailedError) as exc_info:
        sanitize_summary_input(content)
    assert exc_info.value.message == message


class TestParseAssessment:
    def test_fenced_json(self):
        reply = '```json\n{"originality_score": 82, "likely_ai_generated": true, "rationale": "Fresh."}\n```'
        assessment = parse_assessment(reply)
        assert assessment.originality_score == 82
        assert assessment.likely_ai_generated is True
        assert assessment.rationale == "Fresh."

    def test_free_text_reply(self):
        reply = "I think this is mostly original. " * 20
        assessment = parse_assessment(reply)
        assert assessment.originality_score == 50
        assert assessment.likely_ai_generated is False
        assert assessment.rationale == reply[:300]

    def test_wrong_field_types_use_defaults(self):
        assessment = parse_assessment(
            '{"originality_score": "high", "likely_ai_generated": "yes", "rationale": 7}'
        )
        assert assessment.originality_score == 50
        assert assessment.likely_ai_generated is False
        assert assessment.rationale == "Assessment generated."

    def test_boolean_score_is_rejected(self):
        assert parse_assessment('{"originality_score": true}').originality_score == 50


class TestEndpoints:
    def test_summarize(self, client, fake_ai_client, ai_responses):
        ai_responses.append(httpx.Response(200, json=gemini_reply("Compost is good.")))
        response = client.post("/api/summarize", json={"content": LONG_TEXT})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"summary": "Compost is good.", "model": "model-a"}

    def test_summarize_validation(self, client, fake_ai_client, ai_requests):
        response = client.post("/api/summarize", json={"content": "tiny"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Content must be at least 10 characters long"
        assert ai_requests == []

    def test_summarize_quota_error(self, client, fake_ai_client, ai_responses):
        ai_responses.append(gemini_error(429, "RESOURCE_EXHAUSTED", "Quota exceeded."))
        response = client.post("/api/summarize", json={"content": LONG_TEXT})
        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.json()["message"] == "API quota exceeded - try again later"

    def test_summarize_without_key(self, app, client):
        unconfigured = _client(lambda request: httpx.Response(500), api_key="")
        app.dependency_overrides[ai_endpoints.get_ai_client_dep] = lambda: unconfigured
        try:
            response = client.post("/api/summarize", json={"content": LONG_TEXT})
        finally:
            app.dependency_overrides.pop(ai_endpoints.get_ai_client_dep, None)
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["message"] == "API key not configured"

    def test_assess(self, client, fake_ai_client, ai_responses):
        ai_responses.append(
            httpx.Response(
                200,
                json=gemini_reply(
                    '{"originality_score": 73, "likely_ai_generated": false, "rationale": "Personal voice."}'
                ),
            )
        )
        response = client.post("/api/plagiarism/assess", json={"content": LONG_TEXT})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "originality_score": 73,
            "likely_ai_generated": False,
            "rationale": "Personal voice.",
        }

    def test_summarize_non_json_reply(self, client, fake_ai_client, ai_responses):
        ai_responses.append(httpx.Response(200, text="upstream hiccup"))
        response = client.post("/api/summarize", json={"content": LONG_TEXT})
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["message"] == "Invalid response from AI provider"

    def test_assess_validation(self, client, fake_ai_client):
        response = client.post("/api/plagiarism/assess", json={"content": "not enough"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == (
            "Content must be a non-empty string of at least 30 characters."
        )
