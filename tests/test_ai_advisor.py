"""
Tests for the AI diagnosis client (HTTP calls mocked).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from autofix.services.ai_advisor import (
    DEFAULT_BASE_URL,
    EMPTY_REPLY_TEXT,
    AIAdvisorClient,
    build_diagnosis_prompt,
    extract_text,
)


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


@pytest.fixture
def advisor(monkeypatch) -> AIAdvisorClient:
    monkeypatch.delenv("GEMINI_BASE_URL", raising=False)
    return AIAdvisorClient(api_key="test-key", model="test-model")


def test_prompt_includes_vehicle_and_symptoms():
    prompt = build_diagnosis_prompt("  barulho ao frear ", "Fiat Uno 2012")

    assert "Veículo: Fiat Uno 2012" in prompt
    assert "Sintomas relatados: barulho ao frear" in prompt


def test_extract_text():
    payload = {"candidates": [{"content": {"parts": [{"text": "Pastilhas "}, {"text": "gastas"}]}}]}

    assert extract_text(payload) == "Pastilhas gastas"
    assert extract_text({}) == ""
    assert extract_text({"candidates": [{}]}) == ""


def test_missing_key_is_not_configured(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)

    assert not AIAdvisorClient().configured


def test_falls_back_to_api_key_env(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "legacy")

    assert AIAdvisorClient().api_key == "legacy"


@pytest.mark.asyncio
async def test_generate_diagnosis_posts_prompt(advisor):
    post = AsyncMock(return_value=_response(
        {"candidates": [{"content": {"parts": [{"text": "1. Disco empenado"}]}}]}
    ))

    with patch("autofix.services.ai_advisor.httpx.AsyncClient.post", new=post):
        text = await advisor.generate_diagnosis("vibração ao frear", "Honda Civic 2020")

    assert text == "1. Disco empenado"
    url = post.call_args.args[0]
    assert url == f"{DEFAULT_BASE_URL}/models/test-model:generateContent"
    assert post.call_args.kwargs["headers"]["x-goog-api-key"] == "test-key"
    sent = post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
    assert "Honda Civic 2020" in sent


@pytest.mark.asyncio
async def test_empty_reply_returns_fallback_text(advisor):
    post = AsyncMock(return_value=_response({"candidates": []}))

    with patch("autofix.services.ai_advisor.httpx.AsyncClient.post", new=post):
        text = await advisor.generate_diagnosis("ruído", "Gol")

    assert text == EMPTY_REPLY_TEXT


@pytest.mark.asyncio
async def test_http_errors_propagate(advisor):
    post = AsyncMock(side_effect=httpx.ConnectError("boom"))

    with patch("autofix.services.ai_advisor.httpx.AsyncClient.post", new=post):
        with pytest.raises(httpx.HTTPError):
            await advisor.generate_diagnosis("ruído", "Gol")


@pytest.mark.asyncio
async def test_missing_key_raises_value_error():
    client = AIAdvisorClient(api_key=None)
    client.api_key = None

    with pytest.raises(ValueError):
        await client.generate_diagnosis("ruído", "Gol")


@pytest.mark.asyncio
async def test_non_json_reply_is_http_error(advisor):
    request = httpx.Request("POST", f"{DEFAULT_BASE_URL}/models/test-model:generateContent")
    post = AsyncMock(return_value=httpx.Response(200, text="<html>gateway</html>", request=request))

    with patch("autofix.services.ai_advisor.httpx.AsyncClient.post", new=post):
        with pytest.raises(httpx.DecodingError):
            await advisor.generate_diagnosis("ruído", "Gol")
