"""Error code definitions and exception hierarchy for FlashcardEngine."""

from enum import Enum
from typing import Any, ClassVar


class ErrorCode(str, Enum):
    """Error category codes for chat-completion requests."""

    # Retryable errors (retryable=True)
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"

    # Not retryable errors (retryable=False)
    CONFIG_ERROR = "CONFIG_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    BAD_REQUEST = "BAD_REQUEST"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    INVALID_JSON = "INVALID_JSON"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


# Set of retryable error codes
RETRYABLE_ERRORS = {
    ErrorCode.RATE_LIMITED,
    ErrorCode.SERVER_ERROR,
    ErrorCode.NETWORK_ERROR,
    ErrorCode.TIMEOUT,
}


def is_retryable(code: ErrorCode) -> bool:
    """Check if an error code indicates a retryable error."""
    return code in RETRYABLE_ERRORS


class OpenRouterError(Exception):
    """Base exception for every failure raised by the OpenRouter client."""

    #: Codes a subclass is allowed to carry. Empty means any code.
    allowed_codes: ClassVar[frozenset[ErrorCode]] = frozenset()
    default_code: ClassVar[ErrorCode | None] = ErrorCode.UNKNOWN_ERROR

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        cause: BaseException | None = None,
    ):
        code = code or self.default_code
        if code is None:
            raise ValueError(f"{self.__class__.__name__} requires an explicit error code")
        if self.allowed_codes and code not in self.allowed_codes:
            raise ValueError(f"{self.__class__.__name__} cannot carry error code {code.value}")
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return is_retryable(self.code)

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Error body for HTTP layers that surface the code to clients."""
        return {"error": {"code": self.code.value, "message": self.message}}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value!r}, message={self.message!r})"


class OpenRouterConfigError(OpenRouterError):
    """Missing or invalid client configuration."""

    allowed_codes = frozenset({ErrorCode.CONFIG_ERROR})
    default_code = ErrorCode.CONFIG_ERROR

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message, ErrorCode.CONFIG_ERROR, cause)


class OpenRouterAuthError(OpenRouterError):
    """Invalid API key or forbidden access."""

    allowed_codes = frozenset({ErrorCode.UNAUTHORIZED, ErrorCode.FORBIDDEN})
    default_code = None


class OpenRouterRateLimitError(OpenRouterError):
    """Too many requests. ``retry_after`` is the provider's requested delay in seconds."""

    allowed_codes = frozenset({ErrorCode.RATE_LIMITED})
    default_code = ErrorCode.RATE_LIMITED

    def __init__(
        self,
        message: str,
        retry_after: int = 60,
        cause: BaseException | None = None,
    ):
        super().__init__(message, ErrorCode.RATE_LIMITED, cause)
        self.retry_after = retry_after


class OpenRouterQuotaError(OpenRouterError):
    """Insufficient credits."""

    allowed_codes = frozenset({ErrorCode.QUOTA_EXCEEDED})
    default_code = ErrorCode.QUOTA_EXCEEDED


class OpenRouterRequestError(OpenRouterError):
    """Invalid request parameters or unknown model."""

    allowed_codes = frozenset({ErrorCode.BAD_REQUEST, ErrorCode.MODEL_NOT_FOUND})
    default_code = ErrorCode.BAD_REQUEST


class OpenRouterResponseError(OpenRouterError):
    """Empty, non-JSON, or schema-violating response content."""

    allowed_codes = frozenset({
        ErrorCode.EMPTY_RESPONSE,
        ErrorCode.INVALID_JSON,
        ErrorCode.VALIDATION_FAILED,
    })
    default_code = None


class OpenRouterServerError(OpenRouterError):
    """5xx errors from the provider."""

    allowed_codes = frozenset({ErrorCode.SERVER_ERROR})
    default_code = ErrorCode.SERVER_ERROR


class OpenRouterNetworkError(OpenRouterError):
    """Connection failures and per-attempt timeouts."""

    allowed_codes = frozenset({ErrorCode.NETWORK_ERROR, ErrorCode.TIMEOUT})
    default_code = ErrorCode.NETWORK_ERROR


class GenerationErrorCode(str, Enum):
    """Codes the generation service records for failures outside the client taxonomy."""

    AI_GENERATION_FAILED = "AI_GENERATION_FAILED"
    GENERATION_PERSISTENCE_FAILED = "GENERATION_PERSISTENCE_FAILED"


class GenerationServiceError(Exception):
    """Raised by GenerationService after a failure has been written to the error log.

    ``code`` is the exact string persisted as ``error_code``.
    """

    def __init__(self, message: str, code: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.cause = cause

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {"error": {"code": self.code, "message": self.message}}
