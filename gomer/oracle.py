"""
Bot oracle adapter over an OpenAI-compatible chat-completions endpoint.

The game only needs ``request_move(messages) -> text``; which SDK or provider
answers is irrelevant to it. Transport failures are retried with jittered
backoff and surface as ``OracleTransportError`` / ``OracleTimeout``.
"""
from __future__ import annotations

import asyncio
import logging
import random
from typing import Dict, List, Optional, Protocol

import openai
from openai import AsyncOpenAI

from gomer.config import Settings

log = logging.getLogger("gomer.oracle")

BACKOFF_BASE_S = 0.5
BACKOFF_CAP_S = 10.0
DEADLINE_SLACK_S = 1.0


def retry_budget(timeout_s: float, retries: int) -> float:
    """Longest time a request can take: every attempt times out, every backoff is maximal."""
    backoff = sum(min(BACKOFF_BASE_S * (2 ** a) * 1.2, BACKOFF_CAP_S) for a in range(retries))
    return timeout_s * (retries + 1) + backoff + DEADLINE_SLACK_S


class OracleError(Exception):
    pass


class OracleTimeout(OracleError):
    pass


class OracleTransportError(OracleError):
    pass


class Oracle(Protocol):
    async def request_move(self, messages: List[Dict[str, str]]) -> str: ...


class OpenAIOracle:
    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        timeout_s: float = 30.0,
        retries: int = 2,
    ):
        if not model:
            raise ValueError("Model is required; set GOMER_LLM_MODEL.")
        self.client = client
        self.model = model
        self.timeout_s = timeout_s
        self.retries = retries

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIOracle:
        client = AsyncOpenAI(api_key=settings.llm_api_key, base_url=settings.llm_base_url)
        return cls(
            client,
            settings.llm_model,
            timeout_s=settings.oracle_timeout_s,
            retries=settings.oracle_retries,
        )

    async def request_move(self, messages: List[Dict[str, str]]) -> str:
        last_error: Optional[Exception] = None
        for attempt in range(self.retries + 1):
            try:
                rsp = await self.client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    timeout=self.timeout_s,
                )
                text = _extract_text(rsp)
                if text:
                    return text.strip()
                last_error = OracleTransportError("Empty response from oracle")
            except openai.OpenAIError as exc:
                last_error = exc
            if attempt < self.retries:
                sleep_s = BACKOFF_BASE_S * (2 ** attempt) * (0.8 + 0.4 * random.random())
                log.warning("Oracle attempt %d failed (%s), retrying in %.1fs", attempt + 1, last_error, sleep_s)
                await asyncio.sleep(min(sleep_s, BACKOFF_CAP_S))

        log.error("Oracle request failed after %d attempts: %s", self.retries + 1, last_error)
        if isinstance(last_error, openai.APITimeoutError):
            raise OracleTimeout(f"Oracle did not answer within {self.timeout_s:.0f}s") from last_error
        if isinstance(last_error, OracleTransportError):
            raise last_error
        raise OracleTransportError(str(last_error)) from last_error


def _extract_text(rsp) -> str:
    choices = getattr(rsp, "choices", None)
    if not choices:
        return ""
    content = getattr(choices[0].message, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for c in content:
            if isinstance(c, dict):
                if c.get("type") == "text" and isinstance(c.get("text"), str):
                    parts.append(c["text"])
            elif isinstance(getattr(c, "text", None), str):
                parts.append(c.text)
        return "\n".join(parts)
    return ""
