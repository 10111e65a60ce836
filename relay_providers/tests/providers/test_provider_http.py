"""End-to-end adapter tests over ``httpx.MockTransport``."""
from __future__ import annotations

import httpx
import pytest

from relay_providers.anthropic import AnthropicProvider
from relay_providers.base.errors import (
    ErrorCode,
    MissingCredentialError,
    ProviderError,
    ProviderHttpError,
    RetryableProviderError,
    StreamTerminationError,
)
from relay_providers.base.models import CompletionRequest, Message, TokenUsage
from relay_providers.base.resilience import RetryConfig
from relay_providers.base.streaming import StreamCompleted, StreamDelta
from relay_providers.gemini import GeminiProvider
from relay_providers.openai import OpenAIProvider
from relay_providers.tests.utils import RecordingTransport, respond_sequence, sse_body

NO_RETRY = RetryConfig(max_retries=0)


def _request(model: str) -> CompletionRequest:
    return CompletionRequest(model=model, messages=[Message.system("be brief"), Message.user("hi")])


async def _drain(provider, request):
    return [event async for event in provider.complete_stream(request)]


OPENAI_STREAM = sse_body(
    {"choices": [{"index": 0, "delta": {"role": "assistant", "content": "Hello"}}]},
    {"choices": [{"index": 0, "delta": {"content": " world"}}]},
    {"choices": [{"index": 0, "delta": {"content": "!"}, "finish_reason": "stop"}]},
    {"choices": [], "usage": {"prompt_tokens": 5, "completion_tokens": 3, "total_tokens": 8}},
)

ANTHROPIC_STREAM = sse_body(
    {"type": "message_start", "message": {"id": "msg_1", "usage": {"input_tokens": 5, "output_tokens": 1}}},
    {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
    {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Hello"}},
    {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": " world"}},
    {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "!"}},
    {"type": "content_block_stop", "index": 0},
    {"type": "message_delta", "delta": {"stop_reason": "end_turn"}, "usage": {"output_tokens": 3}},
    {"type": "message_stop"},
    done=False,
)

GEMINI_STREAM = sse_body(
    {"candidates": [{"content": {"role": "model", "parts": [{"text": "Hello"}]}}]},
    {"candidates": [{"content": {"role": "model", "parts": [{"text": " world"}]}}]},
    {
        "candidates": [{"content": {"role": "model", "parts": [{"text": "!"}]}, "finishReason": "STOP"}],
        "usageMetadata": {"promptTokenCount": 5, "candidatesTokenCount": 3, "totalTokenCount": 8},
    },
    done=False,
)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "provider_cls,model,body",
    [
        (OpenAIProvider, "gpt-4o", OPENAI_STREAM),
        (AnthropicProvider, "claude-sonnet-4-20250514", ANTHROPIC_STREAM),
        (GeminiProvider, "gemini-2.0-flash", GEMINI_STREAM),
    ],
)
async def test_streaming_yields_deltas_then_completion(api_keys, provider_cls, model, body):
    transport = RecordingTransport(lambda r: httpx.Response(200, content=body))
    async with provider_cls(transport=transport, retry_config=NO_RETRY) as provider:
        events = await _drain(provider, _request(model))
    assert events[:3] == [StreamDelta("Hello"), StreamDelta(" world"), StreamDelta("!")]
    assert len(events) == 4
    final = events[-1]
    assert isinstance(final, StreamCompleted)
    assert final.response.message.content == "Hello world!"
    assert final.response.finish_reason == "stop"
    assert final.response.usage == TokenUsage(5, 3, 8)
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_openai_request_shape(api_keys):
    transport = RecordingTransport(
        lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "ok"}, "finish_reason": "stop"}]})
    )
    async with OpenAIProvider(transport=transport, retry_config=NO_RETRY) as provider:
        resp = await provider.complete(_request("gpt-4o"))
    assert resp.message.content == "ok"
    sent = transport.requests[0]
    assert str(sent.url) == "https://api.openai.com/v1/chat/completions"
    assert sent.headers["authorization"] == "Bearer sk-openai"
    body = transport.json_body()
    assert body["model"] == "gpt-4o"
    assert body["messages"][0] == {"role": "system", "content": "be brief"}


@pytest.mark.asyncio
async def test_anthropic_request_shape(api_keys):
    transport = RecordingTransport(
        lambda r: httpx.Response(200, json={"content": [{"type": "text", "text": "ok"}], "stop_reason": "end_turn"})
    )
    async with AnthropicProvider(transport=transport, retry_config=NO_RETRY) as provider:
        await provider.complete(_request("claude-sonnet-4-20250514"))
    sent = transport.requests[0]
    assert str(sent.url) == "https://api.anthropic.com/v1/messages"
    assert sent.headers["x-api-key"] == "sk-anthropic"
    assert sent.headers["anthropic-version"] == "2023-06-01"
    body = transport.json_body()
    assert body["system"] == "be brief"
    assert body["max_tokens"] == 4096


@pytest.mark.asyncio
async def test_gemini_request_shape_and_alias_key(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
    transport = RecordingTransport(
        lambda r: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})
    )
    async with GeminiProvider(transport=transport, retry_config=NO_RETRY) as provider:
        await provider.complete(_request("gemini-2.0-flash"))
    sent = transport.requests[0]
    assert str(sent.url) == "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
    assert sent.headers["x-goog-api-key"] == "google-key"
    assert "key=" not in str(sent.url)
    assert transport.json_body()["systemInstruction"] == {"parts": [{"text": "be brief"}]}


@pytest.mark.asyncio
async def test_gemini_stream_endpoint(api_keys):
    transport = RecordingTransport(lambda r: httpx.Response(200, content=GEMINI_STREAM))
    async with GeminiProvider(transport=transport, retry_config=NO_RETRY) as provider:
        await _drain(provider, _request("gemini-2.0-flash"))
    url = transport.requests[0].url
    assert url.path.endswith("/models/gemini-2.0-flash:streamGenerateContent")
    assert url.params["alt"] == "sse"


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_cls", [OpenAIProvider, AnthropicProvider, GeminiProvider])
async def test_missing_credential_raises_before_any_request(provider_cls):
    transport = RecordingTransport(lambda r: httpx.Response(200, json={}))
    async with provider_cls(transport=transport, retry_config=NO_RETRY) as provider:
        with pytest.raises(MissingCredentialError):
            await provider.complete(_request("m"))
        with pytest.raises(MissingCredentialError):
            await _drain(provider, _request("m"))
    assert transport.requests == []


@pytest.mark.asyncio
async def test_custom_env_var_is_used(monkeypatch):
    monkeypatch.setenv("LOCAL_KEY", "local-secret")
    transport = RecordingTransport(lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]}))
    provider = OpenAIProvider(
        base_url="http://localhost:8000/v1/",
        api_key_env_var="LOCAL_KEY",
        transport=transport,
        retry_config=NO_RETRY,
        name="local",
    )
    async with provider:
        await provider.complete(_request("llama"))
    assert str(transport.requests[0].url) == "http://localhost:8000/v1/chat/completions"
    assert transport.requests[0].headers["authorization"] == "Bearer local-secret"
    assert provider.name == "local"


@pytest.mark.asyncio
async def test_anthropic_stream_error_event(api_keys):
    body = sse_body(
        {"type": "message_start", "message": {"id": "m"}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "par"}},
        {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
        done=False,
    )
    transport = RecordingTransport(lambda r: httpx.Response(200, content=body))
    seen = []
    async with AnthropicProvider(transport=transport, retry_config=NO_RETRY) as provider:
        with pytest.raises(ProviderError) as exc:
            async for event in provider.complete_stream(_request("claude")):
                seen.append(event)
    assert seen == [StreamDelta("par")]
    assert exc.value.code is ErrorCode.UNAVAILABLE


@pytest.mark.asyncio
async def test_retry_then_success(api_keys):
    transport = RecordingTransport(
        respond_sequence(
            httpx.Response(503, text="busy"),
            httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]}),
        )
    )
    config = RetryConfig(max_retries=2, initial_delay_seconds=0, max_delay_seconds=0)
    async with OpenAIProvider(transport=transport, retry_config=config) as provider:
        resp = await provider.complete(_request("gpt-4o"))
    assert resp.message.content == "ok"
    assert len(transport.requests) == 2


@pytest.mark.asyncio
async def test_persistent_rate_limit_surfaces_retryable_error(api_keys, fast_retry):
    transport = RecordingTransport(lambda r: httpx.Response(429, text="rate limited"))
    async with OpenAIProvider(transport=transport, retry_config=fast_retry) as provider:
        with pytest.raises(RetryableProviderError) as exc:
            await provider.complete(_request("gpt-4o"))
    assert len(transport.requests) == 3
    assert exc.value.status_code == 429


@pytest.mark.asyncio
async def test_client_error_is_not_retried(api_keys, fast_retry):
    transport = RecordingTransport(lambda r: httpx.Response(401, json={"error": "bad key"}))
    async with AnthropicProvider(transport=transport, retry_config=fast_retry) as provider:
        with pytest.raises(ProviderHttpError) as exc:
            await provider.complete(_request("claude"))
    assert len(transport.requests) == 1
    assert exc.value.code is ErrorCode.AUTH


@pytest.mark.asyncio
async def test_empty_stream_body_raises(api_keys):
    transport = RecordingTransport(lambda r: httpx.Response(200, content=b""))
    async with OpenAIProvider(transport=transport, retry_config=NO_RETRY) as provider:
        with pytest.raises(StreamTerminationError):
            await _drain(provider, _request("gpt-4o"))


@pytest.mark.asyncio
async def test_non_json_body_is_malformed(api_keys):
    transport = RecordingTransport(lambda r: httpx.Response(200, text="<html>oops</html>"))
    async with OpenAIProvider(transport=transport, retry_config=NO_RETRY) as provider:
        with pytest.raises(ProviderError) as exc:
            await provider.complete(_request("gpt-4o"))
    assert exc.value.code is ErrorCode.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_provider_defaults_fill_request(api_keys):
    transport = RecordingTransport(lambda r: httpx.Response(200, json={"choices": [{"message": {"content": "ok"}}]}))
    async with OpenAIProvider(transport=transport, retry_config=NO_RETRY, max_tokens=32, temperature=0.5) as provider:
        await provider.complete(_request("gpt-4o"))
    body = transport.json_body()
    assert body["max_tokens"] == 32
    assert body["temperature"] == 0.5
