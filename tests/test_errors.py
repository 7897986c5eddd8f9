"""Tests for the error taxonomy."""

import pytest

from flashcardengine.models.errors import (
    ErrorCode,
    GenerationServiceError,
    OpenRouterAuthError,
    OpenRouterConfigError,
    OpenRouterError,
    OpenRouterNetworkError,
    OpenRouterQuotaError,
    OpenRouterRateLimitError,
    OpenRouterRequestError,
    OpenRouterResponseError,
    OpenRouterServerError,
    is_retryable,
)


def test_is_retryable_retryable_codes():
    """Rate limits, server errors and network failures are retryable."""
    assert is_retryable(ErrorCode.RATE_LIMITED) is True
    assert is_retryable(ErrorCode.SERVER_ERROR) is True
    assert is_retryable(ErrorCode.NETWORK_ERROR) is True
    assert is_retryable(ErrorCode.TIMEOUT) is True


@pytest.mark.parametrize(
    "code",
    [
        ErrorCode.CONFIG_ERROR,
        ErrorCode.UNAUTHORIZED,
        ErrorCode.FORBIDDEN,
        ErrorCode.QUOTA_EXCEEDED,
        ErrorCode.BAD_REQUEST,
        ErrorCode.MODEL_NOT_FOUND,
        ErrorCode.EMPTY_RESPONSE,
        ErrorCode.INVALID_JSON,
        ErrorCode.VALIDATION_FAILED,
        ErrorCode.UNKNOWN_ERROR,
    ],
)
def test_is_retryable_non_retryable_codes(code):
    assert is_retryable(code) is False


def test_all_errors_share_the_base_class():
    errors = [
        OpenRouterConfigError("missing key"),
        OpenRouterAuthError("bad key", ErrorCode.UNAUTHORIZED),
        OpenRouterRateLimitError("slow down", retry_after=5),
        OpenRouterQuotaError("no credits"),
        OpenRouterRequestError("bad", ErrorCode.BAD_REQUEST),
        OpenRouterResponseError("empty", ErrorCode.EMPTY_RESPONSE),
        OpenRouterServerError("boom"),
        OpenRouterNetworkError("down"),
    ]
    for error in errors:
        assert isinstance(error, OpenRouterError)
        assert isinstance(error.code, ErrorCode)
        assert str(error) == error.message


def test_default_codes():
    assert OpenRouterError("x").code == ErrorCode.UNKNOWN_ERROR
    assert OpenRouterConfigError("x").code == ErrorCode.CONFIG_ERROR
    assert OpenRouterQuotaError("x").code == ErrorCode.QUOTA_EXCEEDED
    assert OpenRouterServerError("x").code == ErrorCode.SERVER_ERROR
    assert OpenRouterNetworkError("x").code == ErrorCode.NETWORK_ERROR


def test_subclass_rejects_foreign_code():
    with pytest.raises(ValueError, match="cannot carry"):
        OpenRouterAuthError("x", ErrorCode.SERVER_ERROR)
    with pytest.raises(ValueError, match="cannot carry"):
        OpenRouterNetworkError("x", ErrorCode.RATE_LIMITED)


def test_subclass_without_default_requires_code():
    with pytest.raises(ValueError, match="explicit error code"):
        OpenRouterResponseError("x")
    with pytest.raises(ValueError, match="explicit error code"):
        OpenRouterAuthError("x")


def test_rate_limit_error_carries_retry_after():
    error = OpenRouterRateLimitError("Rate limit exceeded", retry_after=120)

    assert error.code == ErrorCode.RATE_LIMITED
    assert error.retry_after == 120
    assert error.retryable is True
    assert OpenRouterRateLimitError("Rate limit exceeded").retry_after == 60


def test_error_preserves_cause():
    cause = ConnectionResetError("reset by peer")
    error = OpenRouterNetworkError("Network error", ErrorCode.NETWORK_ERROR, cause=cause)

    assert error.cause is cause
    assert error.retryable is True


def test_to_dict_shape():
    error = OpenRouterQuotaError("Insufficient credits")
    assert error.to_dict() == {"error": {"code": "QUOTA_EXCEEDED", "message": "Insufficient credits"}}

    service_error = GenerationServiceError("Failed", "TIMEOUT")
    assert service_error.to_dict() == {"error": {"code": "TIMEOUT", "message": "Failed"}}
