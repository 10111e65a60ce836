from __future__ import annotations

import asyncio

import httpx
import pytest

from relay_providers.base.errors import (
    ErrorCode,
    MalformedResponseError,
    MissingCredentialError,
    ProviderError,
    ProviderHttpError,
    RetryableProviderError,
    StreamBufferOverflowError,
    StreamTerminationError,
    classify_exception,
    code_for_status,
    is_retryable_status,
)


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.VALIDATION),
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (404, ErrorCode.NOT_FOUND),
        (429, ErrorCode.RATE_LIMIT),
        (500, ErrorCode.SERVER_ERROR),
        (503, ErrorCode.UNAVAILABLE),
        (599, ErrorCode.SERVER_ERROR),
        (418, ErrorCode.UNKNOWN),
    ],
)
def test_code_for_status(status, code):
    assert code_for_status(status) is code  # nosec B101


def test_retryable_statuses():
    assert is_retryable_status(429)  # nosec B101
    assert is_retryable_status(500)  # nosec B101
    assert is_retryable_status(599)  # nosec B101
    assert not is_retryable_status(400)  # nosec B101
    assert not is_retryable_status(404)  # nosec B101


def test_classify_exception_precedence():
    err = ProviderError(code=ErrorCode.CONFLICT, message="x")
    assert classify_exception(err) is ErrorCode.CONFLICT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSIENT  # nosec B101
    assert classify_exception(RuntimeError("boom")) is ErrorCode.UNKNOWN  # nosec B101


def test_classify_exception_reads_status_attribute():
    class _Err(Exception):
        status_code = 401

    assert classify_exception(_Err()) is ErrorCode.AUTH  # nosec B101


def test_every_error_is_a_provider_error():
    errors = [
        MissingCredentialError("OPENAI_API_KEY", provider="openai"),
        ProviderHttpError(400, "bad", code=ErrorCode.VALIDATION),
        RetryableProviderError("gave up", status_code=429, attempts=3),
        MalformedResponseError("no choices"),
        StreamTerminationError("empty"),
        StreamBufferOverflowError(1024),
    ]
    for err in errors:
        assert isinstance(err, ProviderError)  # nosec B101


def test_missing_credential_names_variable_and_is_not_retryable():
    err = MissingCredentialError("ANTHROPIC_API_KEY", provider="anthropic")
    assert err.env_var == "ANTHROPIC_API_KEY"  # nosec B101
    assert "ANTHROPIC_API_KEY" in err.message  # nosec B101
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert err.retryable is False  # nosec B101


def test_retryable_error_carries_last_condition():
    err = RetryableProviderError("gave up", code=ErrorCode.RATE_LIMIT, status_code=429, response_body="slow down", attempts=3, retry_after=2.0)
    assert err.retryable  # nosec B101
    assert (err.status_code, err.response_body, err.attempts, err.retry_after) == (429, "slow down", 3, 2.0)  # nosec B101


def test_overflow_is_a_termination_error():
    err = StreamBufferOverflowError(64, provider="openai")
    assert isinstance(err, StreamTerminationError)  # nosec B101
    assert err.limit == 64  # nosec B101
    assert err.code is ErrorCode.STREAM_TERMINATED  # nosec B101
