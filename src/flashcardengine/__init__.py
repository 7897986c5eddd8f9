"""10x-cards FlashcardEngine - AI flashcard generation core."""

from flashcardengine.interfaces import GenerationRepository
from flashcardengine.models.config import OpenRouterConfig
from flashcardengine.models.errors import (
    ErrorCode,
    GenerationErrorCode,
    GenerationServiceError,
    OpenRouterError,
    is_retryable,
)
from flashcardengine.models.flashcards import FLASHCARD_RESPONSE_SCHEMA, GenerationFlashcardProposal
from flashcardengine.models.generation import (
    CreateGenerationCommand,
    CreateGenerationResponse,
    GenerationListQuery,
)
from flashcardengine.models.requests import ChatCompletionRequest, ResponseSchema
from flashcardengine.services.generation_service import GenerationService
from flashcardengine.services.openrouter_client import OpenRouterClient
from flashcardengine.services.retry_service import calculate_backoff, retry_with_backoff
from flashcardengine.storage.database import create_db_and_tables, create_db_engine
from flashcardengine.storage.generation_repository import SQLModelGenerationRepository
from flashcardengine.utils.schema_utils import build_response_format, make_schema_strict

__version__ = "0.1.0"

__all__ = [
    # Interfaces
    "GenerationRepository",
    # Configuration
    "OpenRouterConfig",
    # Errors
    "ErrorCode",
    "GenerationErrorCode",
    "GenerationServiceError",
    "OpenRouterError",
    "is_retryable",
    # Request/response types
    "ChatCompletionRequest",
    "ResponseSchema",
    "CreateGenerationCommand",
    "CreateGenerationResponse",
    "GenerationListQuery",
    "GenerationFlashcardProposal",
    "FLASHCARD_RESPONSE_SCHEMA",
    # Services
    "GenerationService",
    "OpenRouterClient",
    # Storage
    "SQLModelGenerationRepository",
    "create_db_and_tables",
    "create_db_engine",
    # Utilities
    "build_response_format",
    "calculate_backoff",
    "make_schema_strict",
    "retry_with_backoff",
]
