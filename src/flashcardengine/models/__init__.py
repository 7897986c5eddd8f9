"""Models package for FlashcardEngine."""

from flashcardengine.models.config import OpenRouterConfig
from flashcardengine.models.errors import (
    ErrorCode,
    GenerationErrorCode,
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
from flashcardengine.models.flashcards import (
    FLASHCARD_RESPONSE_SCHEMA,
    FlashcardDraft,
    FlashcardDraftSet,
    GenerationFlashcardProposal,
)
from flashcardengine.models.generation import (
    CreateGenerationCommand,
    CreateGenerationResponse,
    Generation,
    GenerationDetail,
    GenerationErrorLog,
    GenerationErrorLogListResponse,
    GenerationListQuery,
    GenerationListResponse,
)
from flashcardengine.models.requests import ChatCompletionRequest, ChatMessage, ResponseSchema, Role
from flashcardengine.models.responses import RawChatCompletion

__all__ = [
    "OpenRouterConfig",
    "ErrorCode",
    "GenerationErrorCode",
    "GenerationServiceError",
    "OpenRouterAuthError",
    "OpenRouterConfigError",
    "OpenRouterError",
    "OpenRouterNetworkError",
    "OpenRouterQuotaError",
    "OpenRouterRateLimitError",
    "OpenRouterRequestError",
    "OpenRouterResponseError",
    "OpenRouterServerError",
    "is_retryable",
    "FLASHCARD_RESPONSE_SCHEMA",
    "FlashcardDraft",
    "FlashcardDraftSet",
    "GenerationFlashcardProposal",
    "CreateGenerationCommand",
    "CreateGenerationResponse",
    "Generation",
    "GenerationDetail",
    "GenerationErrorLog",
    "GenerationErrorLogListResponse",
    "GenerationListQuery",
    "GenerationListResponse",
    "ChatCompletionRequest",
    "ChatMessage",
    "ResponseSchema",
    "Role",
    "RawChatCompletion",
]
