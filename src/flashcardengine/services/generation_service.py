"""Generation service: turns source text into persisted flashcard proposals or a logged failure."""

import hashlib
import logging
from typing import Optional, cast

from flashcardengine.interfaces import GenerationRepository
from flashcardengine.models.errors import (
    GenerationErrorCode,
    GenerationServiceError,
    OpenRouterError,
)
from flashcardengine.models.flashcards import (
    FLASHCARD_RESPONSE_SCHEMA,
    MAX_BACK_LENGTH,
    MAX_FRONT_LENGTH,
    FlashcardDraftSet,
    GenerationFlashcardProposal,
)
from flashcardengine.models.generation import (
    MAX_ERROR_MESSAGE_LENGTH,
    CreateGenerationResponse,
    GenerationDetail,
    GenerationErrorLogEntry,
    GenerationErrorLogListResponse,
    GenerationListQuery,
    GenerationListResponse,
    GenerationSummary,
    Pagination,
)
from flashcardengine.models.requests import ChatCompletionRequest
from flashcardengine.services.openrouter_client import OpenRouterClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = f"""You are an assistant that writes study flashcards.
Read the text supplied by the user and create between 3 and 10 flashcards that cover its most important facts and concepts.
Rules:
- Each flashcard has a "front" (a question or prompt, at most {MAX_FRONT_LENGTH} characters) and a "back" (the answer, at most {MAX_BACK_LENGTH} characters).
- Write the flashcards in the same language as the source text.
- Each flashcard must be self-contained and test a single piece of knowledge.
- Do not invent information that is not present in the text.
Respond only with JSON of the form {{"flashcards": [{{"front": "...", "back": "..."}}]}}."""


def truncate_text(value: str, max_length: int) -> str:
    """Cut *value* to at most *max_length* characters, marking the cut with an ellipsis."""
    if len(value) <= max_length:
        return value
    return f"{value[: max_length - 3]}..."


def compute_source_text_hash(source_text: str) -> str:
    """MD5 fingerprint of the source text; error logs store this instead of the text."""
    return hashlib.md5(source_text.encode("utf-8")).hexdigest()


def extract_error_message(error: BaseException | None) -> str:
    """Most specific human-readable message for an error chain."""
    if isinstance(error, GenerationServiceError) and error.cause is not None:
        return extract_error_message(error.cause)
    if isinstance(error, OpenRouterError):
        return error.message
    if isinstance(error, BaseException):
        return str(error) or error.__class__.__name__
    return "Unknown error"


class GenerationService:
    """Orchestrates one AI generation: call the client, then persist a generation or an error log.

    Exactly one row is written per create_generation call: a generation on
    success, an error log on any failure.
    """

    def __init__(
        self,
        client: OpenRouterClient,
        repository: GenerationRepository,
        model: str | None = None,
    ):
        """
        Initialize generation service.

        Args:
            client: Structured chat-completion client
            repository: Persistence for generations and error logs
            model: Model to request (defaults to the client's default model)
        """
        self._client = client
        self._repository = repository
        self._model = model or client.default_model

    @property
    def model(self) -> str:
        return self._model

    async def create_generation(self, user_id: str, source_text: str) -> CreateGenerationResponse:
        """
        Generate flashcard proposals for *source_text* and record the outcome.

        Raises:
            GenerationServiceError: After the failure has been written to the error log.
                ``code`` matches the persisted ``error_code``.
        """
        try:
            request = ChatCompletionRequest(
                system_message=SYSTEM_PROMPT,
                user_message=source_text,
                response_schema=FLASHCARD_RESPONSE_SCHEMA,
                model=self._model,
            )
            result = await self._client.chat_completion(request)
        except Exception as e:
            error_code = e.code.value if isinstance(e, OpenRouterError) else GenerationErrorCode.AI_GENERATION_FAILED.value
            await self._log_generation_error(user_id, source_text, e, error_code)
            raise GenerationServiceError(
                "Failed to generate flashcard proposals",
                error_code,
                cause=e,
            ) from e

        drafts = cast(FlashcardDraftSet, result).flashcards
        proposals = [GenerationFlashcardProposal.from_draft(draft) for draft in drafts]

        try:
            generation_id = await self._repository.insert_generation(user_id, source_text, len(proposals))
        except Exception as e:
            error_code = GenerationErrorCode.GENERATION_PERSISTENCE_FAILED.value
            await self._log_generation_error(user_id, source_text, e, error_code)
            raise GenerationServiceError(
                "Failed to persist generation metadata",
                error_code,
                cause=e,
            ) from e

        logger.info(f"✅ [GenerationService] Generation {generation_id} created with {len(proposals)} proposals")
        return CreateGenerationResponse(
            generation_id=generation_id,
            flashcards_proposals=proposals,
            generated_count=len(proposals),
        )

    async def list_generations(self, user_id: str, query: GenerationListQuery) -> GenerationListResponse:
        rows, total = await self._repository.list_generations(
            user_id, query.offset, query.limit, ascending=query.order == "asc"
        )
        return GenerationListResponse(
            data=[GenerationSummary.model_validate(row, from_attributes=True) for row in rows],
            pagination=Pagination(page=query.page, limit=query.limit, total=total),
        )

    async def get_generation_detail(self, user_id: str, generation_id: str) -> Optional[GenerationDetail]:
        """Return the generation, or None when it is missing or owned by another user."""
        row = await self._repository.get_generation(user_id, generation_id)
        if row is None:
            return None
        return GenerationDetail.model_validate(row, from_attributes=True)

    async def list_generation_error_logs(
        self, user_id: str, query: GenerationListQuery
    ) -> GenerationErrorLogListResponse:
        rows, total = await self._repository.list_error_logs(
            user_id, query.offset, query.limit, ascending=query.order == "asc"
        )
        return GenerationErrorLogListResponse(
            data=[GenerationErrorLogEntry.model_validate(row, from_attributes=True) for row in rows],
            pagination=Pagination(page=query.page, limit=query.limit, total=total),
        )

    async def _log_generation_error(
        self,
        user_id: str,
        source_text: str,
        error: BaseException,
        error_code: str,
    ) -> None:
        """Write the diagnostic row. A failure here is reported but never replaces *error*."""
        error_message = truncate_text(extract_error_message(error), MAX_ERROR_MESSAGE_LENGTH)
        logger.error(f"❌ [GenerationService] Generation failed for user {user_id} with {error_code}: {error_message}")

        try:
            await self._repository.insert_error_log(
                user_id=user_id,
                error_code=error_code,
                error_message=error_message,
                model=self._model,
                source_text_hash=compute_source_text_hash(source_text),
                source_text_length=len(source_text),
            )
        except Exception:
            logger.exception("❌ [GenerationService] Failed to insert generation error log")
