"""Tests for the Gemini verification service."""

from unittest.mock import AsyncMock

import pytest

from truthchain.models import GeminiConfig
from truthchain.verification.services.gemini_service import (
    GeminiVerificationService,
    _model_label,
    parse_verdict,
)


def _gemini_response(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


VERDICT_TEXT = (
    "Here is my assessment:\n```json\n"
    '{"isVerified": true, "confidenceScore": 87.6, "explanation": "  Well sourced claim.  "}\n```'
)


class TestParseVerdict:
    """Tests for extracting the JSON verdict from model output."""

    def test_parses_fenced_json(self):
        result = parse_verdict(VERDICT_TEXT, "Google Gemini 2.0 Flash")

        assert result.is_verified is True
        assert result.confidence_score == 88
        assert result.explanation == "Well sourced claim."
        assert result.ai_model_used == "Google Gemini 2.0 Flash"

    def test_confidence_is_clamped(self):
        result = parse_verdict('{"isVerified": false, "confidenceScore": 150, "explanation": "x"}', "m")

        assert result.confidence_score == 100

    def test_string_boolean_is_accepted(self):
        result = parse_verdict('{"isVerified": "true", "confidenceScore": "70", "explanation": "x"}', "m")

        assert result.is_verified is True
        assert result.confidence_score == 70

    def test_missing_json_raises(self):
        with pytest.raises(ValueError, match="Could not find JSON"):
            parse_verdict("I cannot help with that.", "m")

    def test_missing_fields_raise(self):
        with pytest.raises(ValueError, match="missing fields"):
            parse_verdict('{"isVerified": true}', "m")

    def test_invalid_confidence_raises(self):
        with pytest.raises(ValueError):
            parse_verdict('{"isVerified": true, "confidenceScore": "high", "explanation": "x"}', "m")


class TestModelLabel:
    def test_default_model(self):
        assert _model_label("gemini-2.0-flash") == "Google Gemini 2.0 Flash"

    def test_pro_model(self):
        assert _model_label("gemini-1.5-pro") == "Google Gemini 1.5 Pro"


class TestGeminiVerificationService:
    """Tests for request construction and error handling."""

    @pytest.fixture
    def service(self):
        service = GeminiVerificationService(GeminiConfig(api_key="test-key"))
        service._make_request = AsyncMock(return_value=_gemini_response(VERDICT_TEXT))
        return service

    def test_availability_follows_api_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)

        assert GeminiVerificationService(GeminiConfig(api_key="k")).is_available()
        assert not GeminiVerificationService(GeminiConfig()).is_available()
        assert not GeminiVerificationService(GeminiConfig(api_key="k", enabled=False)).is_available()

    def test_api_key_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")

        service = GeminiVerificationService(GeminiConfig())

        assert service.api_key == "env-key"
        assert service.is_available()

    @pytest.mark.asyncio
    async def test_verify_text_request(self, service):
        result = await service.verify_text("Water boils at 100 degrees Celsius at sea level.")

        assert result.confidence_score == 88
        assert result.ai_model_used == "Google Gemini 2.0 Flash"

        call = service._make_request.await_args
        assert call.args == ("POST", "models/gemini-2.0-flash:generateContent")
        assert call.kwargs["params"] == {"key": "test-key"}

        payload = call.kwargs["json"]
        prompt = payload["contents"][0]["parts"][0]["text"]
        assert 'Statement to verify: "Water boils at 100 degrees Celsius at sea level."' in prompt
        assert payload["generationConfig"] == {
            "temperature": 0.2,
            "topK": 40,
            "topP": 0.95,
            "maxOutputTokens": 1024,
        }

    @pytest.mark.asyncio
    async def test_verify_url_sets_source(self, service):
        result = await service.verify_url("https://example.com/article")

        assert result.source_url == "https://example.com/article"
        prompt = service._make_request.await_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert 'URL to verify: "https://example.com/article"' in prompt

    @pytest.mark.asyncio
    async def test_verify_image_sends_inline_data(self, service):
        await service.verify_image("data:image/png;base64,iVBORw0KGgo=")

        parts = service._make_request.await_args.kwargs["json"]["contents"][0]["parts"]
        assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "iVBORw0KGgo="}}

    @pytest.mark.asyncio
    async def test_unconfigured_service_raises(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        service = GeminiVerificationService(GeminiConfig())
        service._make_request = AsyncMock()

        with pytest.raises(RuntimeError, match="not configured"):
            await service.verify_text("anything")
        service._make_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_request_raises(self, service):
        service._make_request.return_value = None

        with pytest.raises(RuntimeError, match="request failed"):
            await service.verify_text("anything")

    @pytest.mark.asyncio
    async def test_unexpected_structure_raises(self, service):
        service._make_request.return_value = {"candidates": []}

        with pytest.raises(ValueError, match="Unexpected Gemini response"):
            await service.verify_text("anything")

    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self):
        async with GeminiVerificationService(GeminiConfig(api_key="k")) as service:
            assert service.session is not None
        assert service.session.closed
