"""Generation persistence models and service DTOs."""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field as PydanticField
from sqlmodel import Field, SQLModel

from flashcardengine.models.flashcards import GenerationFlashcardProposal

SOURCE_TEXT_MIN_LENGTH = 1000
SOURCE_TEXT_MAX_LENGTH = 10000
MAX_ERROR_MESSAGE_LENGTH = 500


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Generation(SQLModel, table=True):
    """One successful AI generation request."""

    __tablename__ = "generations"

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    source_text: str
    source_text_length: int = Field(ge=0)
    generated_count: int = Field(ge=0)
    # Mutated by the flashcard-acceptance flow, never by this package
    accepted_edited_count: int = Field(default=0, ge=0)
    accepted_unedited_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)


class GenerationErrorLog(SQLModel, table=True):
    """Diagnostic row for a failed generation. Never holds the source text itself."""

    __tablename__ = "generation_error_logs"

    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    error_code: str
    error_message: str = Field(max_length=MAX_ERROR_MESSAGE_LENGTH)
    model: str
    source_text_hash: str
    source_text_length: int = Field(ge=0)
    created_at: datetime = Field(default_factory=_utcnow, index=True)


class CreateGenerationCommand(BaseModel):
    """Request body accepted by the generation endpoint."""

    source_text: str = PydanticField(
        ...,
        min_length=SOURCE_TEXT_MIN_LENGTH,
        max_length=SOURCE_TEXT_MAX_LENGTH,
        description="Text the flashcards are generated from",
    )


class GenerationListQuery(BaseModel):
    """Pagination and ordering for generation and error-log listings."""

    page: int = PydanticField(1, ge=1)
    limit: int = PydanticField(10, ge=1, le=50)
    order: Literal["asc", "desc"] = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    page: int
    limit: int
    total: int


class CreateGenerationResponse(BaseModel):
    """Result of GenerationService.create_generation."""

    generation_id: str
    flashcards_proposals: list[GenerationFlashcardProposal]
    generated_count: int


class GenerationSummary(BaseModel):
    id: str
    generated_count: int
    accepted_edited_count: int
    accepted_unedited_count: int
    source_text_length: int
    created_at: datetime
    updated_at: datetime


class GenerationDetail(GenerationSummary):
    source_text: str


class GenerationErrorLogEntry(BaseModel):
    id: str
    model: str
    source_text_hash: str
    source_text_length: int
    error_code: str
    error_message: str
    created_at: datetime


class GenerationListResponse(BaseModel):
    data: list[GenerationSummary]
    pagination: Pagination


class GenerationErrorLogListResponse(BaseModel):
    data: list[GenerationErrorLogEntry]
    pagination: Pagination

