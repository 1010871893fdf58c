"""Tests for the OpenAI-compatible oracle adapter and settings loading."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from gomer.config import load_settings
from gomer.oracle import OpenAIOracle, OracleTimeout, OracleTransportError, retry_budget

MESSAGES = [{"role": "user", "content": "your move"}]


def make_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_client(**create_kwargs):
    client = MagicMock()
    client.chat.completions.create = AsyncMock(**create_kwargs)
    return client


def request():
    return httpx.Request("POST", "http://oracle.test/v1/chat/completions")


class TestOpenAIOracle:
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self):
        client = make_client(return_value=make_response("  <xy>1,2</xy> nice \n"))
        oracle = OpenAIOracle(client, "deepseek-chat", timeout_s=5)

        assert await oracle.request_move(MESSAGES) == "<xy>1,2</xy> nice"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "deepseek-chat"
        assert kwargs["messages"] == MESSAGES
        assert kwargs["timeout"] == 5

    @pytest.mark.asyncio
    async def test_list_content_is_joined(self):
        content = [{"type": "text", "text": "<xy>3,3</xy>"}, SimpleNamespace(text="ok")]
        oracle = OpenAIOracle(make_client(return_value=make_response(content)), "m")
        assert await oracle.request_move(MESSAGES) == "<xy>3,3</xy>\nok"

    @pytest.mark.asyncio
    async def test_transport_error(self):
        client = make_client(side_effect=openai.APIConnectionError(request=request()))
        oracle = OpenAIOracle(client, "m", retries=0)
        with pytest.raises(OracleTransportError):
            await oracle.request_move(MESSAGES)

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = make_client(side_effect=openai.APITimeoutError(request=request()))
        oracle = OpenAIOracle(client, "m", retries=0)
        with pytest.raises(OracleTimeout):
            await oracle.request_move(MESSAGES)

    @pytest.mark.asyncio
    async def test_empty_response(self):
        oracle = OpenAIOracle(make_client(return_value=make_response("")), "m", retries=0)
        with pytest.raises(OracleTransportError):
            await oracle.request_move(MESSAGES)

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self):
        client = make_client(
            side_effect=[openai.APIConnectionError(request=request()), make_response("<xy>0,0</xy>")]
        )
        oracle = OpenAIOracle(client, "m", retries=1)
        assert await oracle.request_move(MESSAGES) == "<xy>0,0</xy>"
        assert client.chat.completions.create.await_count == 2

    def test_retry_budget_covers_every_attempt(self):
        assert retry_budget(0.2, 0) >= 0.2
        assert retry_budget(0.2, 2) >= 0.2 * 3 + 0.5 * 1.2 + 1.0 * 1.2
        assert retry_budget(30, 10) > 30 * 11

    def test_model_required(self):
        with pytest.raises(ValueError):
            OpenAIOracle(MagicMock(), "")


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "GOMER_LLM_API_KEY",
            "GOMER_LLM_BASE_URL",
            "GOMER_LLM_MODEL",
            "GOMER_ORACLE_TIMEOUT_S",
            "GOMER_ORACLE_RETRIES",
            "GOMER_BOARD_SIZE",
            "GOMER_WIN_LENGTH",
            "CORS_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.board_size == 15
        assert settings.win_length == 5
        assert settings.oracle_timeout_s == 30.0
        assert settings.llm_base_url is None
        assert settings.cors_origins == ["http://localhost:5173", "http://localhost:5174"]

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("GOMER_LLM_API_KEY", "sk-test")
        monkeypatch.setenv("GOMER_LLM_BASE_URL", "http://localhost:9999/v1")
        monkeypatch.setenv("GOMER_LLM_MODEL", "deepseek-r1")
        monkeypatch.setenv("GOMER_ORACLE_TIMEOUT_S", "2.5")
        monkeypatch.setenv("GOMER_ORACLE_RETRIES", "0")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
        settings = load_settings()
        assert settings.oracle_timeout_s == 2.5
        assert settings.oracle_retries == 0
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

        oracle = OpenAIOracle.from_settings(settings)
        assert oracle.model == "deepseek-r1"
        assert oracle.timeout_s == 2.5
        assert oracle.retries == 0
        assert str(oracle.client.base_url).startswith("http://localhost:9999/v1")
