"""
AI gateway client for generated chat answers.

The gateway speaks the OpenAI chat completions API, so the openai SDK is
pointed at it with a custom base URL. Provider status codes are turned into
the typed errors in app.services.errors.
"""

import logging
from typing import Any, AsyncIterator, Protocol

import openai
from openai import AsyncOpenAI, AsyncStream

from app.config import Settings, get_settings
from app.services.errors import (
    GenerativeCapacityExceededError,
    GenerativeRateLimitedError,
    UnknownUpstreamError,
)
from app.utils.retry import with_retry

logger = logging.getLogger(__name__)


class ChatGenerator(Protocol):
    """Anything that can turn a system prompt and a message into text."""

    async def generate(self, system_prompt: str, message: str) -> str: ...


def _translate_status_error(e: openai.APIStatusError) -> Exception:
    if e.status_code == 429:
        logger.warning("AI gateway rate limited the request")
        return GenerativeRateLimitedError()
    if e.status_code == 402:
        logger.error("AI gateway reports payment required")
        return GenerativeCapacityExceededError()
    logger.error(f"AI gateway error {e.status_code}: {e.message}")
    return UnknownUpstreamError(detail=e.message, upstream_status=e.status_code)


class AIGatewayClient:
    """Thin async wrapper around the gateway's chat completions endpoint."""

    def __init__(self, settings: Settings | None = None, client: AsyncOpenAI | None = None):
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.ai_gateway_api_key:
                logger.error("AI_GATEWAY_API_KEY is not configured")
                raise UnknownUpstreamError(detail="AI gateway API key not configured")
            # SDK retries are off so provider 429s surface on the first response
            self._client = AsyncOpenAI(
                api_key=self.settings.ai_gateway_api_key,
                base_url=self.settings.ai_gateway_url,
                timeout=self.settings.ai_gateway_timeout,
                max_retries=0,
            )
        return self._client

    async def _create(self, **kwargs: Any):
        try:
            return await with_retry(
                self.client.chat.completions.create,
                max_attempts=3,
                base_delay=1.0,
                exceptions=(openai.APIConnectionError,),
                **kwargs,
            )
        except openai.APIStatusError as e:
            raise _translate_status_error(e) from e
        except openai.APIConnectionError as e:
            logger.error(f"AI gateway unreachable: {e}")
            raise UnknownUpstreamError(detail=str(e)) from e

    async def generate(self, system_prompt: str, message: str) -> str:
        """
        Get a single generated answer.

        Raises:
            GenerativeRateLimitedError: gateway returned 429
            GenerativeCapacityExceededError: gateway returned 402
            UnknownUpstreamError: anything else went wrong
        """
        response = await self._create(
            model=self.settings.wellness_chat_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": message},
            ],
        )
        if not response.choices or not response.choices[0].message.content:
            logger.error("AI gateway returned an empty completion")
            raise UnknownUpstreamError(detail="empty completion")
        return response.choices[0].message.content

    async def open_stream(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        max_tokens: int,
    ) -> AsyncStream:
        """Start a streamed completion. Errors are raised before any chunk is read."""
        return await self._create(
            model=self.settings.wellness_chat_model,
            messages=[{"role": "system", "content": system_prompt}, *messages],
            max_tokens=max_tokens,
            stream=True,
        )


async def iter_stream_text(stream: AsyncStream) -> AsyncIterator[str]:
    """Yield the text deltas of a streamed completion."""
    async for chunk in stream:
        choice = chunk.choices[0] if chunk.choices else None
        if choice and choice.delta and choice.delta.content:
            yield choice.delta.content


def get_ai_gateway() -> AIGatewayClient:
    """FastAPI dependency returning the AI gateway client."""
    return AIGatewayClient()
