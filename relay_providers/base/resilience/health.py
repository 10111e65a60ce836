"""Per-provider circuit-breaker health tracking.

State machine per provider name:

- ``closed`` -> ``open`` once ``failure_threshold`` consecutive failures are
  recorded;
- ``open`` -> ``half-open`` lazily, the first time availability is checked
  after ``recovery_time_seconds`` have elapsed since opening (no timers);
- ``half-open`` -> ``closed`` on a success, back to ``open`` on a failure
  (the recovery window restarts).

While half-open exactly one probe is admitted at a time: ``try_acquire``
hands out the probe and refuses further callers until the outcome is
recorded. Any success resets the consecutive failure count.

State is created lazily on first use and only removed by :meth:`reset`.
All mutation happens under a single ``threading.Lock``; the clock is
injectable for deterministic tests.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Optional

from ...config.defaults import HEALTH_DEFAULT_FAILURE_THRESHOLD, HEALTH_DEFAULT_RECOVERY_TIME_SECONDS
from ..logging import LogContext, get_logger, log_event

CircuitState = Literal["closed", "open", "half-open"]

_logger = get_logger("providers.health")


@dataclass(frozen=True)
class HealthConfig:
    failure_threshold: int = HEALTH_DEFAULT_FAILURE_THRESHOLD
    recovery_time_seconds: float = HEALTH_DEFAULT_RECOVERY_TIME_SECONDS

    def __post_init__(self) -> None:
        if self.failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if self.recovery_time_seconds < 0:
            raise ValueError("recovery_time_seconds must be >= 0")


@dataclass(frozen=True)
class ProviderHealthSnapshot:
    """Point-in-time copy of one provider's health record.

    Timestamps are values of the tracker's clock (monotonic seconds by
    default), ``None`` until the corresponding event happened.
    """

    provider_name: str
    state: CircuitState = "closed"
    consecutive_failures: int = 0
    total_requests: int = 0
    total_failures: int = 0
    last_failure_at: Optional[float] = None
    last_success_at: Optional[float] = None
    opened_at: Optional[float] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "provider_name": self.provider_name,
            "state": self.state,
            "consecutive_failures": self.consecutive_failures,
            "total_requests": self.total_requests,
            "total_failures": self.total_failures,
            "last_failure_at": self.last_failure_at,
            "last_success_at": self.last_success_at,
            "opened_at": self.opened_at,
        }


@dataclass
class _HealthRecord:
    state: CircuitState = "closed"
    consecutive_failures: int = 0
    total_requests: int = 0
    total_failures: int = 0
    last_failure_at: Optional[float] = None
    last_success_at: Optional[float] = None
    opened_at: Optional[float] = None
    probe_in_flight: bool = False


class ProviderHealthTracker:
    """Thread-safe circuit breaker keyed by provider name."""

    def __init__(self, config: HealthConfig | None = None, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.config = config or HealthConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._records: Dict[str, _HealthRecord] = {}

    def _record(self, name: str) -> _HealthRecord:
        rec = self._records.get(name)
        if rec is None:
            rec = self._records[name] = _HealthRecord()
        return rec

    def _maybe_half_open(self, name: str, rec: _HealthRecord) -> None:
        if rec.state != "open" or rec.opened_at is None:
            return
        if self._clock() - rec.opened_at >= self.config.recovery_time_seconds:
            rec.state = "half-open"
            rec.probe_in_flight = False
            log_event(_logger, "circuit.half_open", LogContext(provider=name))

    def is_available(self, name: str) -> bool:
        """Return True unless the circuit is open or a half-open probe is in flight.

        Performs the lazy open -> half-open transition. Does not claim the
        probe slot; use :meth:`try_acquire` before actually calling.
        """
        with self._lock:
            rec = self._record(name)
            self._maybe_half_open(name, rec)
            if rec.state == "open":
                return False
            if rec.state == "half-open":
                return not rec.probe_in_flight
            return True

    def try_acquire(self, name: str) -> bool:
        """Claim permission to call ``name``.

        Closed circuits always admit. A half-open circuit admits one caller
        and marks the probe in flight until an outcome is recorded.
        """
        with self._lock:
            rec = self._record(name)
            self._maybe_half_open(name, rec)
            if rec.state == "closed":
                return True
            if rec.state == "half-open" and not rec.probe_in_flight:
                rec.probe_in_flight = True
                return True
            return False

    def record_success(self, name: str) -> None:
        with self._lock:
            rec = self._record(name)
            rec.total_requests += 1
            rec.consecutive_failures = 0
            rec.last_success_at = self._clock()
            rec.probe_in_flight = False
            if rec.state != "closed":
                rec.state = "closed"
                rec.opened_at = None
                log_event(_logger, "circuit.closed", LogContext(provider=name))

    def record_failure(self, name: str) -> None:
        with self._lock:
            rec = self._record(name)
            now = self._clock()
            rec.total_requests += 1
            rec.total_failures += 1
            rec.consecutive_failures += 1
            rec.last_failure_at = now
            rec.probe_in_flight = False
            if rec.state == "half-open" or (
                rec.state == "closed" and rec.consecutive_failures >= self.config.failure_threshold
            ):
                rec.state = "open"
                rec.opened_at = now
                log_event(
                    _logger,
                    "circuit.open",
                    LogContext(provider=name),
                    level=logging.WARNING,
                    consecutive_failures=rec.consecutive_failures,
                )
            elif rec.state == "open":
                rec.opened_at = now

    def release(self, name: str) -> None:
        """Give back a half-open probe slot without recording an outcome."""
        with self._lock:
            rec = self._records.get(name)
            if rec is not None:
                rec.probe_in_flight = False

    def get_snapshot(self, name: str) -> ProviderHealthSnapshot:
        """Return a copy of ``name``'s record (created lazily, closed)."""
        with self._lock:
            rec = self._record(name)
            self._maybe_half_open(name, rec)
            return self._snapshot(name, rec)

    def get_all(self) -> List[ProviderHealthSnapshot]:
        with self._lock:
            out = []
            for name, rec in self._records.items():
                self._maybe_half_open(name, rec)
                out.append(self._snapshot(name, rec))
            return out

    def reset(self, name: str | None = None) -> None:
        """Drop one provider's record, or every record when ``name`` is None."""
        with self._lock:
            if name is None:
                self._records.clear()
            else:
                self._records.pop(name, None)

    @staticmethod
    def _snapshot(name: str, rec: _HealthRecord) -> ProviderHealthSnapshot:
        return ProviderHealthSnapshot(
            provider_name=name,
            state=rec.state,
            consecutive_failures=rec.consecutive_failures,
            total_requests=rec.total_requests,
            total_failures=rec.total_failures,
            last_failure_at=rec.last_failure_at,
            last_success_at=rec.last_success_at,
            opened_at=rec.opened_at,
        )


__all__ = [
    "CircuitState",
    "HealthConfig",
    "ProviderHealthSnapshot",
    "ProviderHealthTracker",
]
