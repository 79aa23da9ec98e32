"""Tests for the AI gateway client."""

import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from app.config import Settings
from app.services.errors import (
    GenerativeCapacityExceededError,
    GenerativeRateLimitedError,
    UnknownUpstreamError,
)
from app.services.providers.ai_gateway import AIGatewayClient, iter_stream_text

GATEWAY_URL = "https://gateway.test/v1/chat/completions"


def _status_error(status_code: int) -> openai.APIStatusError:
    request = httpx.Request("POST", GATEWAY_URL)
    response = httpx.Response(status_code, request=request)
    if status_code == 429:
        return openai.RateLimitError("rate limited", response=response, body=None)
    return openai.APIStatusError(f"status {status_code}", response=response, body=None)


def _completion(text: str | None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
    )


class StubCompletions:
    """Replays queued results for chat.completions.create."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _client(*results) -> tuple[AIGatewayClient, StubCompletions]:
    completions = StubCompletions(*results)
    stub = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    settings = Settings(ai_gateway_api_key="test-key", wellness_chat_model="test/model")
    return AIGatewayClient(settings=settings, client=stub), completions


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    async def _sleep(_delay):
        return None

    monkeypatch.setattr("app.utils.retry.asyncio.sleep", _sleep)


class TestGenerate:
    """Test single-shot completions."""

    def test_returns_text(self):
        gateway, completions = _client(_completion("Take a slow breath."))

        text = asyncio.run(gateway.generate("system", "I feel anxious"))

        assert text == "Take a slow breath."
        call = completions.calls[0]
        assert call["model"] == "test/model"
        assert call["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "I feel anxious"},
        ]

    def test_rate_limited(self):
        gateway, completions = _client(_status_error(429))

        with pytest.raises(GenerativeRateLimitedError):
            asyncio.run(gateway.generate("system", "hi"))
        # Provider 429 is not retried
        assert len(completions.calls) == 1

    def test_payment_required(self):
        gateway, _ = _client(_status_error(402))

        with pytest.raises(GenerativeCapacityExceededError):
            asyncio.run(gateway.generate("system", "hi"))

    def test_other_status_is_unknown(self):
        gateway, _ = _client(_status_error(503))

        with pytest.raises(UnknownUpstreamError) as exc:
            asyncio.run(gateway.generate("system", "hi"))
        assert exc.value.upstream_status == 503
        assert exc.value.message == UnknownUpstreamError.default_message

    def test_connection_errors_are_retried(self):
        request = httpx.Request("POST", GATEWAY_URL)
        gateway, completions = _client(
            openai.APIConnectionError(request=request),
            _completion("Recovered"),
        )

        assert asyncio.run(gateway.generate("system", "hi")) == "Recovered"
        assert len(completions.calls) == 2

    def test_connection_errors_give_up(self):
        request = httpx.Request("POST", GATEWAY_URL)
        gateway, completions = _client(
            *[openai.APIConnectionError(request=request) for _ in range(3)]
        )

        with pytest.raises(UnknownUpstreamError):
            asyncio.run(gateway.generate("system", "hi"))
        assert len(completions.calls) == 3

    def test_empty_completion(self):
        gateway, _ = _client(_completion(None))

        with pytest.raises(UnknownUpstreamError):
            asyncio.run(gateway.generate("system", "hi"))

    def test_missing_api_key(self):
        gateway = AIGatewayClient(settings=Settings(ai_gateway_api_key=None))

        with pytest.raises(UnknownUpstreamError):
            asyncio.run(gateway.generate("system", "hi"))


class TestStream:
    """Test streamed completions."""

    def test_open_stream_passes_history(self):
        gateway, completions = _client(object())

        asyncio.run(
            gateway.open_stream(
                "visitor system",
                [{"role": "user", "content": "What are PVCs?"}],
                max_tokens=500,
            )
        )

        call = completions.calls[0]
        assert call["stream"] is True
        assert call["max_tokens"] == 500
        assert call["messages"][0] == {"role": "system", "content": "visitor system"}
        assert call["messages"][1] == {"role": "user", "content": "What are PVCs?"}

    def test_iter_stream_text_skips_empty_deltas(self):
        async def chunks():
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content="Hi"))])
            yield SimpleNamespace(choices=[])
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=None))])
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content="!"))])

        async def collect():
            return [text async for text in iter_stream_text(chunks())]

        assert asyncio.run(collect()) == ["Hi", "!"]
