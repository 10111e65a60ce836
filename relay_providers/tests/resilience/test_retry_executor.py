from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime

import httpx
import pytest

from relay_providers.base.errors import ErrorCode, ProviderHttpError, RetryableProviderError
from relay_providers.base.resilience.retry import RetryConfig, execute, parse_retry_after


class _Calls:
    """Counts exchanges served by a handler over a real ``AsyncClient``."""

    def __init__(self, handler):
        self.count = 0
        self._handler = handler
        self.client = httpx.AsyncClient(transport=httpx.MockTransport(self._serve))

    def _serve(self, request: httpx.Request) -> httpx.Response:
        self.count += 1
        return self._handler(request)

    async def __call__(self) -> httpx.Response:
        return await self.client.get("https://vendor.test/v1/x")


class _Sleeps(list):
    async def __call__(self, delay: float) -> None:
        self.append(delay)


def _config(**kwargs) -> RetryConfig:
    base = {"max_retries": 2, "initial_delay_seconds": 0.5, "max_delay_seconds": 4.0, "backoff_multiplier": 2.0}
    base.update(kwargs)
    return RetryConfig(**base)


@pytest.mark.asyncio
async def test_success_on_first_attempt():
    calls = _Calls(lambda r: httpx.Response(200, json={"ok": True}))
    sleeps = _Sleeps()
    response = await execute(calls, _config(), sleep=sleeps)
    assert response.json() == {"ok": True}  # nosec B101
    assert calls.count == 1  # nosec B101
    assert sleeps == []  # nosec B101


@pytest.mark.asyncio
@pytest.mark.parametrize("max_retries", [0, 1, 3])
async def test_persistent_429_makes_max_retries_plus_one_calls(max_retries):
    calls = _Calls(lambda r: httpx.Response(429, text="slow down"))
    with pytest.raises(RetryableProviderError) as exc:
        await execute(calls, _config(max_retries=max_retries), provider="openai", sleep=_Sleeps())
    assert calls.count == max_retries + 1  # nosec B101
    assert exc.value.status_code == 429  # nosec B101
    assert exc.value.response_body == "slow down"  # nosec B101
    assert exc.value.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert exc.value.attempts == max_retries + 1  # nosec B101


@pytest.mark.asyncio
async def test_non_retryable_status_fails_immediately():
    calls = _Calls(lambda r: httpx.Response(400, text="bad request"))
    with pytest.raises(ProviderHttpError) as exc:
        await execute(calls, _config(), sleep=_Sleeps())
    assert calls.count == 1  # nosec B101
    assert exc.value.status_code == 400  # nosec B101
    assert exc.value.code is ErrorCode.VALIDATION  # nosec B101
    assert "bad request" in exc.value.response_body  # nosec B101


@pytest.mark.asyncio
async def test_recovers_after_server_errors_with_backoff():
    statuses = iter([503, 500, 200])
    calls = _Calls(lambda r: httpx.Response(next(statuses), json={"n": 1}))
    sleeps = _Sleeps()
    response = await execute(calls, _config(), sleep=sleeps)
    assert response.status_code == 200  # nosec B101
    assert sleeps == [0.5, 1.0]  # nosec B101


@pytest.mark.asyncio
async def test_backoff_is_capped():
    calls = _Calls(lambda r: httpx.Response(502))
    sleeps = _Sleeps()
    with pytest.raises(RetryableProviderError):
        await execute(calls, _config(max_retries=5, max_delay_seconds=3.0), sleep=sleeps)
    assert sleeps == [0.5, 1.0, 2.0, 3.0, 3.0]  # nosec B101


@pytest.mark.asyncio
async def test_retry_after_header_overrides_and_is_capped():
    headers = iter([{"retry-after": "2"}, {"retry-after": "60"}, {}])
    calls = _Calls(lambda r: httpx.Response(429, headers=next(headers)))
    sleeps = _Sleeps()
    with pytest.raises(RetryableProviderError):
        await execute(calls, _config(), sleep=sleeps)
    assert sleeps == [2.0, 4.0]  # nosec B101


@pytest.mark.asyncio
async def test_transport_errors_are_retried_then_wrapped():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    calls = _Calls(handler)
    with pytest.raises(RetryableProviderError) as exc:
        await execute(calls, _config(max_retries=1), sleep=_Sleeps())
    assert calls.count == 2  # nosec B101
    assert exc.value.status_code is None  # nosec B101
    assert isinstance(exc.value.raw, httpx.ConnectError)  # nosec B101
    assert exc.value.code is ErrorCode.TRANSIENT  # nosec B101


@pytest.mark.asyncio
async def test_timeouts_classify_as_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(RetryableProviderError) as exc:
        await execute(_Calls(handler), _config(max_retries=0), sleep=_Sleeps())
    assert exc.value.code is ErrorCode.TIMEOUT  # nosec B101


@pytest.mark.asyncio
async def test_attempt_logger_receives_each_retry():
    seen = []

    def attempt_logger(**kwargs):
        seen.append(kwargs)

    calls = _Calls(lambda r: httpx.Response(500))
    with pytest.raises(RetryableProviderError):
        await execute(calls, _config(max_retries=2, attempt_logger=attempt_logger), sleep=_Sleeps())
    assert [s["attempt"] for s in seen] == [1, 2]  # nosec B101
    assert all(s["status_code"] == 500 and s["max_attempts"] == 3 for s in seen)  # nosec B101


def test_parse_retry_after_forms():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert parse_retry_after("3") == 3.0  # nosec B101
    assert parse_retry_after("0") is None  # nosec B101
    assert parse_retry_after("soon") is None  # nosec B101
    assert parse_retry_after(None) is None  # nosec B101
    later = format_datetime(now + timedelta(seconds=30), usegmt=True)
    assert parse_retry_after(later, now=now) == pytest.approx(30.0)  # nosec B101


def test_retry_config_validation():
    with pytest.raises(ValueError):
        RetryConfig(max_retries=-1)
    with pytest.raises(ValueError):
        RetryConfig(initial_delay_seconds=-0.1)
    assert RetryConfig(max_retries=2).max_attempts == 3  # nosec B101
