"""Raw provider response models.

Every field is optional so that a malformed-but-JSON body is reported as an
empty response instead of a pydantic error.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ChoiceMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class Choice(BaseModel):
    index: int = 0
    message: Optional[ChoiceMessage] = None
    finish_reason: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class Usage(BaseModel):
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    model_config = ConfigDict(extra="allow")


class RawChatCompletion(BaseModel):
    """Body of a 2xx response from POST /chat/completions."""

    id: Optional[str] = None
    model: Optional[str] = None
    choices: list[Choice] = Field(default_factory=list)
    usage: Optional[Usage] = None

    model_config = ConfigDict(extra="allow")

    def first_content(self) -> Optional[str]:
        """Content of ``choices[0].message``, or None when any link is missing."""
        if not self.choices or self.choices[0].message is None:
            return None
        return self.choices[0].message.content
