"""Protocol interfaces for FlashcardEngine."""

from typing import Optional, Protocol, Sequence

from typing_extensions import runtime_checkable

from flashcardengine.models.generation import Generation, GenerationErrorLog


@runtime_checkable
class GenerationRepository(Protocol):
    """Persistence collaborator for generation records and generation error logs."""

    async def insert_generation(self, user_id: str, source_text: str, generated_count: int) -> str:
        """Insert a generation row and return its id."""
        ...

    async def insert_error_log(
        self,
        user_id: str,
        error_code: str,
        error_message: str,
        model: str,
        source_text_hash: str,
        source_text_length: int,
    ) -> None:
        """Insert one diagnostic row for a failed generation."""
        ...

    async def list_generations(
        self, user_id: str, offset: int, limit: int, ascending: bool
    ) -> tuple[Sequence[Generation], int]:
        """Return one page of the user's generations and the user's total count."""
        ...

    async def get_generation(self, user_id: str, generation_id: str) -> Optional[Generation]:
        """Return the generation if it exists and belongs to the user."""
        ...

    async def list_error_logs(
        self, user_id: str, offset: int, limit: int, ascending: bool
    ) -> tuple[Sequence[GenerationErrorLog], int]:
        """Return one page of the user's error logs and the user's total count."""
        ...
