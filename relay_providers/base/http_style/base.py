"""BaseHttpProvider: shared template for REST/SSE vendor adapters.

Purpose:
- Run the parts of a completion that are identical across vendors:
  credential lookup, request dispatch through the retry executor, JSON
  decoding, SSE streaming with a per-call accumulator, and structured
  logging. Vendors supply only translation.

External dependencies:
- ``httpx.AsyncClient`` for transport (injectable for tests).

Failure semantics:
- A missing credential raises ``MissingCredentialError`` before any network
  I/O, from ``complete`` and from the first step of ``complete_stream``.
- Every failure surfaces as a ``ProviderError`` subclass and is logged once
  (``chat.error`` / ``stream.error``); nothing is swallowed.

Timeout strategy:
- Non-streaming calls use the HTTP profile of ``get_timeout_config()``;
  streaming calls use the streaming profile (longer idle read window).
  A caller-supplied ``timeout`` overrides both.

Subclasses must implement:
- ``provider_name`` (class attribute), ``default_base_url``, ``default_model``
- ``endpoint(model, stream)``, ``auth_headers(api_key)``
- ``build_body(request, model, stream)``, ``parse_response(payload, model)``
- ``interpret_event(acc, payload, model)`` yielding text fragments
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, AsyncIterator, Dict, Iterable, Optional, Union

import httpx

from ...config.env import require_secret
from ..errors import MalformedResponseError, ProviderError, classify_exception
from ..http import create_async_client
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import CompletionRequest, CompletionResponse
from ..resilience.retry import DEFAULT_RETRY_CONFIG, RetryConfig, execute
from ..streaming import StreamAccumulator, StreamCompleted, StreamDelta, StreamEvent, iter_sse_payloads
from ..timeouts import get_timeout_config


class BaseHttpProvider:
    """Reusable base class for vendor adapters speaking JSON over HTTP.

    Parameters:
        api_key_env_var: Environment variable holding the credential. Defaults
            to the canonical variable for ``provider_name``.
        base_url: Vendor API root; defaults to ``default_base_url``.
        model: Model used when the request leaves ``model`` empty.
        max_tokens / temperature: Defaults applied when the request omits them.
        retry_config: Backoff policy for each HTTP exchange.
        timeout: Explicit timeout overriding ``get_timeout_config()``.
        client: Shared ``httpx.AsyncClient`` (caller keeps ownership).
        transport: Transport for a privately created client (tests).
        name: Display name; defaults to ``provider_name``.
    """

    provider_name: str = "unknown"
    default_base_url: str = ""
    default_model: Optional[str] = None

    def __init__(
        self,
        *,
        api_key_env_var: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout: Optional[Union[float, httpx.Timeout]] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        name: Optional[str] = None,
    ) -> None:
        self.api_key_env_var = api_key_env_var
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.model = model or self.default_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or create_async_client(timeout=timeout, transport=transport)
        self._name = name or self.provider_name
        self._logger = get_logger(f"providers.{self.provider_name}")

    # ----- Abstract surface -----
    def endpoint(self, model: str, *, stream: bool) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def auth_headers(self, api_key: str) -> Dict[str, str]:  # pragma: no cover - abstract
        raise NotImplementedError

    def build_body(self, request: CompletionRequest, model: str, *, stream: bool) -> Dict[str, Any]:  # pragma: no cover - abstract
        raise NotImplementedError

    def parse_response(self, payload: Any, model: str) -> CompletionResponse:  # pragma: no cover - abstract
        raise NotImplementedError

    def interpret_event(self, acc: StreamAccumulator, payload: Any, model: str) -> Iterable[str]:  # pragma: no cover - abstract
        raise NotImplementedError

    # ----- Capability & basic info -----
    @property
    def name(self) -> str:
        return self._name

    def supports_streaming(self) -> bool:
        return True

    async def aclose(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "BaseHttpProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # ----- Completion -----
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Perform a non-streaming completion.

        Raises:
            MissingCredentialError: Before any I/O when the key is absent.
            ProviderHttpError / RetryableProviderError: From the retry executor.
            MalformedResponseError: The vendor payload violated its contract.
        """
        model = self._resolve_model(request)
        ctx = LogContext(provider=self.name, model=model)
        self._log_start("chat.start", ctx, request)
        try:
            api_key = require_secret(self.provider_name, self.api_key_env_var, model=model)
            body = self._body_with_defaults(request, model, stream=False)
            url = self.endpoint(model, stream=False)
            headers = self._headers(api_key)
            timeout = self._request_timeout(streaming=False)

            async def _call() -> httpx.Response:
                return await self._client.post(url, json=body, headers=headers, timeout=timeout)

            response = await execute(_call, self.retry_config, provider=self.name, model=model)
            result = self.parse_response(self._decode_json(response, model), model)
        except ProviderError as exc:
            self._log_error("chat.error", ctx, exc)
            raise
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=True,
            tokens=result.usage,
            finish_reason=result.finish_reason,
            tool_calls=len(result.message.tool_calls or ()),
        )
        return result

    async def complete_stream(self, request: CompletionRequest) -> AsyncIterator[StreamEvent]:
        """Stream a completion: text deltas, then one ``StreamCompleted``.

        The HTTP response is closed when the stream finishes, fails, or the
        consumer closes the iterator early.
        """
        model = self._resolve_model(request)
        ctx = LogContext(provider=self.name, model=model)
        self._log_start("stream.start", ctx, request)
        emitted = False
        try:
            api_key = require_secret(self.provider_name, self.api_key_env_var, model=model)
            body = self._body_with_defaults(request, model, stream=True)
            http_request = self._client.build_request(
                "POST",
                self.endpoint(model, stream=True),
                json=body,
                headers=self._headers(api_key),
                timeout=self._request_timeout(streaming=True),
            )

            async def _call() -> httpx.Response:
                return await self._client.send(http_request, stream=True)

            response = await execute(_call, self.retry_config, provider=self.name, model=model)
            acc = StreamAccumulator()
            try:
                payloads = iter_sse_payloads(response.aiter_bytes(), provider=self.name, model=model)
                try:
                    async for payload in payloads:
                        for fragment in self.interpret_event(acc, payload, model):
                            emitted = True
                            yield StreamDelta(content=fragment)
                finally:
                    await payloads.aclose()
            except httpx.HTTPError as exc:
                raise ProviderError(
                    code=classify_exception(exc),
                    message=f"stream interrupted: {exc}",
                    provider=self.name,
                    model=model,
                    retryable=True,
                    raw=exc,
                ) from exc
            finally:
                await response.aclose()
            final = acc.build_response()
        except ProviderError as exc:
            self._log_error("stream.error", ctx, exc, emitted=emitted)
            raise
        normalized_log_event(
            self._logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            tokens=final.usage,
            finish_reason=final.finish_reason,
            tool_calls=len(final.message.tool_calls or ()),
        )
        yield StreamCompleted(response=final)

    # ----- helpers -----
    def _resolve_model(self, request: CompletionRequest) -> str:
        model = request.model or self.model
        if not model:
            raise ValueError(f"{self.name}: no model on the request and no default configured")
        return model

    def _body_with_defaults(self, request: CompletionRequest, model: str, *, stream: bool) -> Dict[str, Any]:
        changes: Dict[str, Any] = {}
        if request.max_tokens is None and self.max_tokens is not None:
            changes["max_tokens"] = self.max_tokens
        if request.temperature is None and self.temperature is not None:
            changes["temperature"] = self.temperature
        if changes:
            request = replace(request, **changes)
        return self.build_body(request, model, stream=stream)

    def _headers(self, api_key: str) -> Dict[str, str]:
        headers = {"content-type": "application/json"}
        headers.update(self.auth_headers(api_key))
        return headers

    def _request_timeout(self, *, streaming: bool) -> Union[float, httpx.Timeout]:
        if self._timeout is not None:
            return self._timeout
        return get_timeout_config().to_httpx(streaming=streaming)

    def _decode_json(self, response: httpx.Response, model: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponseError(
                f"response body is not JSON (status {response.status_code})",
                provider=self.name,
                model=model,
            ) from exc

    def _log_start(self, event: str, ctx: LogContext, request: CompletionRequest) -> None:
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="start",
            messages=len(request.messages),
            has_tools=bool(request.tools),
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )

    def _log_error(self, event: str, ctx: LogContext, exc: ProviderError, *, emitted: Optional[bool] = None) -> None:
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="error",
            error_code=exc.code.value,
            emitted=emitted,
            level=logging.ERROR,
            error=exc.message,
            retryable=exc.retryable,
        )


__all__ = ["BaseHttpProvider"]
