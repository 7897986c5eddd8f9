"""Flashcard structured-output schema and proposal models."""

from typing import Literal

from pydantic import BaseModel, Field

from flashcardengine.models.requests import ResponseSchema

MAX_FRONT_LENGTH = 200
MAX_BACK_LENGTH = 500
MIN_PROPOSALS = 1
MAX_PROPOSALS = 10


class FlashcardDraft(BaseModel):
    """One flashcard as returned by the model."""

    front: str = Field(..., min_length=1, max_length=MAX_FRONT_LENGTH, description="Question side")
    back: str = Field(..., min_length=1, max_length=MAX_BACK_LENGTH, description="Answer side")


class FlashcardDraftSet(BaseModel):
    """Root object of the structured output; strict JSON schema requires an object root."""

    flashcards: list[FlashcardDraft] = Field(
        ...,
        min_length=MIN_PROPOSALS,
        max_length=MAX_PROPOSALS,
        description="Generated flashcards",
    )


FLASHCARD_RESPONSE_SCHEMA = ResponseSchema(name="flashcard_proposals", output_type=FlashcardDraftSet)


class GenerationFlashcardProposal(BaseModel):
    """A proposal handed back to the caller for review before it becomes a flashcard."""

    front: str = Field(..., max_length=MAX_FRONT_LENGTH)
    back: str = Field(..., max_length=MAX_BACK_LENGTH)
    source: Literal["ai-full"] = "ai-full"

    @classmethod
    def from_draft(cls, draft: FlashcardDraft) -> "GenerationFlashcardProposal":
        return cls(front=draft.front, back=draft.back)
