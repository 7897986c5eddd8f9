"""OpenRouter chat-completion client with retry logic and structured-output validation."""

import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from flashcardengine.models.config import OpenRouterConfig
from flashcardengine.models.errors import (
    ErrorCode,
    OpenRouterAuthError,
    OpenRouterConfigError,
    OpenRouterError,
    OpenRouterNetworkError,
    OpenRouterQuotaError,
    OpenRouterRateLimitError,
    OpenRouterRequestError,
    OpenRouterResponseError,
    OpenRouterServerError,
)
from flashcardengine.models.requests import ChatCompletionRequest, ResponseSchema
from flashcardengine.models.responses import RawChatCompletion
from flashcardengine.services.retry_service import retry_with_backoff
from flashcardengine.utils.schema_utils import build_response_format

logger = logging.getLogger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60
SERVER_ERROR_STATUSES = {500, 502, 503}


def parse_retry_after(value: str | None) -> int:
    """Seconds from a ``retry-after`` header, falling back to 60 when absent or unparseable."""
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


class OpenRouterClient:
    """Client for structured chat completions against the OpenRouter API.

    Holds nothing but its immutable configuration; every call builds its own
    HTTP session, so concurrent calls never share retry state.
    """

    def __init__(
        self,
        config: OpenRouterConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (defaults to OpenRouterConfig.from_env())
            transport: Optional httpx transport, used by tests to fake the provider

        Raises:
            OpenRouterConfigError: If the API key is missing or empty, or an OPENROUTER_* variable is invalid
        """
        if config is None:
            try:
                config = OpenRouterConfig.from_env()
            except ValidationError as e:
                raise OpenRouterConfigError(f"Invalid OpenRouter environment configuration: {e}", cause=e) from e
        if not config.api_key or not config.api_key.strip():
            raise OpenRouterConfigError("API key is required")

        self._config = config
        self._transport = transport
        self._endpoint = f"{config.base_url.rstrip('/')}/chat/completions"

    @property
    def config(self) -> OpenRouterConfig:
        return self._config

    @property
    def default_model(self) -> str:
        return self._config.default_model

    async def chat_completion(self, request: ChatCompletionRequest) -> BaseModel:
        """
        Execute one structured completion and return the validated object.

        Args:
            request: Prompts, response schema and optional per-call overrides

        Returns:
            Instance of ``request.response_schema.output_type``

        Raises:
            OpenRouterError: Typed failure; see ErrorCode for the categories
        """
        payload = self.build_payload(request)
        logger.info(
            f"🤖 [OpenRouterClient] Requesting completion model={payload['model']} "
            f"schema={request.response_schema.name}"
        )

        try:
            raw = await retry_with_backoff(
                self._post_chat_completion,
                payload,
                max_attempts=self._config.max_retries,
                timeout_seconds=self._config.timeout_seconds,
            )
            result = self._parse_response(raw, request.response_schema)
        except OpenRouterError as e:
            logger.error(f"❌ [OpenRouterClient] Completion failed with {e.code.value}: {e.message}")
            raise

        if raw.usage is not None:
            logger.debug(
                f"📊 [OpenRouterClient] Usage prompt={raw.usage.prompt_tokens} "
                f"completion={raw.usage.completion_tokens} total={raw.usage.total_tokens}"
            )
        return result

    def build_payload(self, request: ChatCompletionRequest) -> dict[str, Any]:
        """Merge per-call overrides over the configured defaults."""
        return {
            "model": request.model or self._config.default_model,
            "messages": [message.model_dump() for message in request.messages()],
            "response_format": build_response_format(request.response_schema),
            "temperature": (
                request.temperature if request.temperature is not None else self._config.default_temperature
            ),
            "max_tokens": request.max_tokens or self._config.default_max_tokens,
        }

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
            "X-Title": self._config.app_title,
        }

    async def _post_chat_completion(self, payload: dict[str, Any]) -> RawChatCompletion:
        """
        Single HTTP attempt. Raises a classified OpenRouterError on any failure.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self._endpoint, headers=self._headers(), json=payload)
        except httpx.TimeoutException as e:
            raise OpenRouterNetworkError("Request timed out", ErrorCode.TIMEOUT, cause=e) from e
        except httpx.TransportError as e:
            raise OpenRouterNetworkError(
                f"Network error: {str(e) or e.__class__.__name__}",
                ErrorCode.NETWORK_ERROR,
                cause=e,
            ) from e

        if not response.is_success:
            raise self._classify_http_error(response)

        try:
            body = response.json()
        except ValueError as e:
            raise OpenRouterResponseError(
                "Response body is not valid JSON",
                ErrorCode.INVALID_JSON,
                cause=e,
            ) from e

        try:
            return RawChatCompletion.model_validate(body)
        except ValidationError as e:
            raise OpenRouterResponseError(
                "Response body does not match the chat completion format",
                ErrorCode.INVALID_JSON,
                cause=e,
            ) from e

    def _classify_http_error(self, response: httpx.Response) -> OpenRouterError:
        """Map a non-2xx response to the error taxonomy."""
        status = response.status_code
        error_message = self._extract_error_message(response)

        if status == 400:
            return OpenRouterRequestError(error_message, ErrorCode.BAD_REQUEST)
        if status == 401:
            return OpenRouterAuthError("Invalid API key", ErrorCode.UNAUTHORIZED)
        if status == 402:
            return OpenRouterQuotaError("Insufficient credits", ErrorCode.QUOTA_EXCEEDED)
        if status == 403:
            return OpenRouterAuthError("Access forbidden", ErrorCode.FORBIDDEN)
        if status == 404:
            return OpenRouterRequestError("Model not found", ErrorCode.MODEL_NOT_FOUND)
        if status == 429:
            return OpenRouterRateLimitError(
                "Rate limit exceeded",
                retry_after=parse_retry_after(response.headers.get("retry-after")),
            )
        if status in SERVER_ERROR_STATUSES:
            return OpenRouterServerError(f"Server error: {status}", ErrorCode.SERVER_ERROR)
        return OpenRouterError(f"HTTP error: {status} - {error_message}", ErrorCode.UNKNOWN_ERROR)

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> str:
        """Best-effort ``error.message`` from the body; never raises."""
        try:
            body = response.json()
        except ValueError:
            return "Unknown error"
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
            if isinstance(message, str) and message:
                return message
        return "Unknown error"

    @staticmethod
    def _parse_response(raw: RawChatCompletion, response_schema: ResponseSchema) -> BaseModel:
        content = raw.first_content()
        if not content:
            raise OpenRouterResponseError("Empty response content from API", ErrorCode.EMPTY_RESPONSE)

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise OpenRouterResponseError(
                "Failed to parse JSON response",
                ErrorCode.INVALID_JSON,
                cause=e,
            ) from e

        try:
            return response_schema.output_type.model_validate(parsed)
        except ValidationError as e:
            raise OpenRouterResponseError(
                f"Response validation failed: {e}",
                ErrorCode.VALIDATION_FAILED,
                cause=e,
            ) from e
