"""Ordered fallback across providers, driven by circuit-breaker health.

Purpose
-------
``FallbackProvider`` presents several adapters as one ``LLMProvider``. For
each request it orders the candidates, skips those whose circuit is open and
tries the rest in turn until one succeeds.

Ordering
--------
1. Entries whose ``models`` patterns match ``request.model`` (``*`` and ``?``
   wildcards, case-sensitive) come first, in configured order. Entries
   without patterns never match.
2. The remaining entries follow in configured order.
3. Candidates reported unavailable by the health tracker are dropped. If
   that leaves nothing, the first candidate of step 2's ordering is kept so
   a request is always attempted.

Failure semantics
-----------------
- Every attempt outcome is recorded in the shared tracker. A stream counts
  as a success once its ``StreamCompleted`` event is handed out.
- When every candidate failed, the last error is re-raised unchanged.
- Streaming falls through to the next candidate only while nothing has been
  yielded to the caller. Once a delta was emitted a failure propagates, so
  consumers never see output from two vendors spliced together.
- Cancellation (task cancel or ``aclose()``) is not a provider failure and
  is not recorded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from ..interfaces import LLMProvider, streaming_supported
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..errors import ErrorCode, ProviderError, classify_exception
from ..models import CompletionRequest, CompletionResponse
from ..streaming import StreamCompleted, StreamDelta, StreamEvent
from .health import ProviderHealthTracker

_logger = get_logger("providers.fallback")


@dataclass(frozen=True)
class ProviderEntry:
    """A provider plus the model patterns it is preferred for."""

    provider: LLMProvider
    models: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "models", tuple(self.models or ()))

    def matches(self, model: str) -> bool:
        return any(fnmatchcase(model, pattern) for pattern in self.models)


class FallbackProvider:
    """``LLMProvider`` that tries its entries in order until one succeeds.

    Parameters
    ----------
    entries: Sequence[ProviderEntry]
        Candidates in configured order. Must not be empty.
    health: Optional[ProviderHealthTracker]
        Shared tracker; a private one is created when omitted.

    Raises
    ------
    ValueError
        If ``entries`` is empty.
    """

    def __init__(self, entries: Sequence[ProviderEntry], health: Optional[ProviderHealthTracker] = None) -> None:
        if not entries:
            raise ValueError("FallbackProvider requires at least one provider entry")
        self.entries: List[ProviderEntry] = list(entries)
        self.health = health or ProviderHealthTracker()
        self._name = "fallback(" + ",".join(e.provider.name for e in self.entries) + ")"

    @property
    def name(self) -> str:
        return self._name

    def supports_streaming(self) -> bool:
        return True

    def order_providers(self, model: str) -> List[ProviderEntry]:
        """Return candidates for ``model``: matching first, then the rest."""
        matched = [e for e in self.entries if e.matches(model)]
        rest = [e for e in self.entries if not e.matches(model)]
        return matched + rest

    def _candidates(self, request: CompletionRequest) -> Tuple[List[ProviderEntry], bool]:
        """Ordered candidates and whether the health filter had to be overridden."""
        ordered = self.order_providers(request.model)
        available = [e for e in ordered if self.health.is_available(e.provider.name)]
        if available:
            return available, False
        return ordered[:1], True

    def _admit(self, entry: ProviderEntry, forced: bool, ctx: LogContext) -> bool:
        if forced or self.health.try_acquire(entry.provider.name):
            return True
        log_event(_logger, "fallback.skip", ctx, reason="circuit_open")
        return False

    def _record_failure(self, entry: ProviderEntry, exc: Exception, ctx: LogContext, attempt: int, emitted: bool) -> None:
        self.health.record_failure(entry.provider.name)
        normalized_log_event(
            _logger,
            "fallback.failure",
            ctx,
            phase="fallback",
            attempt=attempt,
            error_code=classify_exception(exc).value,
            emitted=emitted,
            level=logging.WARNING,
            error=str(exc),
        )

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        candidates, forced = self._candidates(request)
        last_error: Optional[Exception] = None
        for attempt, entry in enumerate(candidates, start=1):
            ctx = LogContext(provider=entry.provider.name, model=request.model)
            if not self._admit(entry, forced, ctx):
                continue
            log_event(_logger, "fallback.attempt", ctx, attempt=attempt)
            try:
                response = await entry.provider.complete(request)
            except Exception as exc:
                last_error = exc
                self._record_failure(entry, exc, ctx, attempt, emitted=False)
                continue
            except BaseException:
                self.health.release(entry.provider.name)
                raise
            self.health.record_success(entry.provider.name)
            return response
        raise self._exhausted(request, candidates, last_error)

    async def complete_stream(self, request: CompletionRequest) -> AsyncIterator[StreamEvent]:
        candidates, forced = self._candidates(request)
        last_error: Optional[Exception] = None
        for attempt, entry in enumerate(candidates, start=1):
            ctx = LogContext(provider=entry.provider.name, model=request.model)
            if not self._admit(entry, forced, ctx):
                continue
            log_event(_logger, "fallback.attempt", ctx, attempt=attempt, stream=True)
            emitted = False
            recorded = False
            inner = self._stream_entry(entry, request)
            try:
                async for event in inner:
                    emitted = True
                    if isinstance(event, StreamCompleted) and not recorded:
                        self.health.record_success(entry.provider.name)
                        recorded = True
                    yield event
            except Exception as exc:
                if recorded:
                    raise
                self._record_failure(entry, exc, ctx, attempt, emitted=emitted)
                if emitted:
                    raise
                last_error = exc
                continue
            except BaseException:
                if not recorded:
                    self.health.release(entry.provider.name)
                raise
            finally:
                await inner.aclose()
            if not recorded:
                self.health.record_success(entry.provider.name)
            return
        raise self._exhausted(request, candidates, last_error)

    @staticmethod
    async def _stream_entry(entry: ProviderEntry, request: CompletionRequest) -> AsyncIterator[StreamEvent]:
        provider = entry.provider
        if streaming_supported(provider):
            stream = provider.complete_stream(request)  # type: ignore[attr-defined]
            try:
                async for event in stream:
                    yield event
            finally:
                aclose = getattr(stream, "aclose", None)
                if aclose is not None:
                    await aclose()
            return
        response = await provider.complete(request)
        if response.message.content:
            yield StreamDelta(content=response.message.content)
        yield StreamCompleted(response=response)

    def _exhausted(self, request: CompletionRequest, candidates: List[ProviderEntry], last_error: Optional[Exception]) -> Exception:
        log_event(
            _logger,
            "fallback.exhausted",
            LogContext(provider=self.name, model=request.model),
            level=logging.ERROR,
            candidates=[e.provider.name for e in candidates],
        )
        if last_error is not None:
            return last_error
        return ProviderError(
            code=ErrorCode.UNAVAILABLE,
            message=f"no provider admitted the request for model {request.model!r}",
            provider=self.name,
            model=request.model,
        )


__all__ = ["ProviderEntry", "FallbackProvider"]
