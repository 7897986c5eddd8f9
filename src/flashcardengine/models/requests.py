"""Request models for FlashcardEngine."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Chat roles understood by the provider."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Single chat message."""

    role: Role
    content: str

    model_config = ConfigDict(frozen=True, use_enum_values=True)


class ResponseSchema(BaseModel):
    """Named pydantic model describing the structured JSON the provider must return."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^[a-zA-Z0-9_-]+$",
        description="Schema name sent as json_schema.name",
    )
    output_type: type[BaseModel] = Field(..., description="Model used to validate and parse the content")

    model_config = ConfigDict(frozen=True)


class ChatCompletionRequest(BaseModel):
    """One structured completion: a system prompt, a user prompt and an output schema.

    ``model``, ``temperature`` and ``max_tokens`` override the client defaults
    when set.
    """

    system_message: str = Field(..., description="System message for the AI")
    user_message: str = Field(..., min_length=1, description="User message/prompt")
    response_schema: ResponseSchema
    model: str | None = Field(None, min_length=1, description="Model override")
    temperature: float | None = Field(None, ge=0.0, le=2.0, description="Sampling temperature override (0.0-2.0)")
    max_tokens: int | None = Field(None, ge=1, description="Completion token limit override")

    model_config = ConfigDict(frozen=True)

    def messages(self) -> list[ChatMessage]:
        """The system message followed by the user message, always in that order."""
        return [
            ChatMessage(role=Role.SYSTEM, content=self.system_message),
            ChatMessage(role=Role.USER, content=self.user_message),
        ]
