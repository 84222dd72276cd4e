"""Claude API wrapper with async support and tagged failure categories."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import anthropic

from resume_analyzer.config import API_KEY_ENV
from resume_analyzer.exceptions import ModelServiceError, RateLimitedError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


def _retry_after(exc: anthropic.APIStatusError) -> float | None:
    value = exc.response.headers.get("retry-after") if exc.response is not None else None
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class LLMClient:
    """Async Claude API client.

    Rate limiting surfaces as RateLimitedError, every other service failure
    as ModelServiceError. Retrying is left to the caller.
    """

    def __init__(self, api_key: str | None = None, timeout: float | None = None):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._api_key = api_key
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key or os.environ.get(API_KEY_ENV))

    async def _call_api(
        self,
        prompt: str,
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        messages = [{"role": "user", "content": prompt}]
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        try:
            return await self.client.messages.create(**kwargs)
        except anthropic.RateLimitError as exc:
            raise RateLimitedError(str(exc), retry_after=_retry_after(exc)) from exc
        except anthropic.APIStatusError as exc:
            raise ModelServiceError(str(exc), status=exc.status_code) from exc
        except anthropic.APIError as exc:
            raise ModelServiceError(str(exc)) from exc

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 2000,
    ) -> LLMResponse:
        """Send a prompt to Claude and return the text response with usage."""
        logger.debug("LLM call: model=%s, prompt=%d chars", model, len(prompt))
        try:
            message = await self._call_api(
                prompt=prompt,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except RateLimitedError:
            logger.warning("LLM call rate limited")
            raise
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        if not message.content:
            raise ModelServiceError("Empty response from model service")
        return LLMResponse(
            text=message.content[0].text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def check_credentials(self, model: str = DEFAULT_MODEL) -> str:
        """Send a minimal request to confirm the API key works."""
        response = await self.generate(
            "Say 'API key is working!' if you can read this.",
            model=model,
            max_tokens=10,
        )
        return response.text

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
