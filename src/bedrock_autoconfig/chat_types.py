"""Provider-neutral chat types exchanged with chat models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, InstanceOf


class MessageType(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single conversational turn."""

    type: MessageType = Field(description="Author of the message")
    content: str

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(type=MessageType.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(type=MessageType.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(type=MessageType.ASSISTANT, content=content)


class Prompt(BaseModel):
    """Messages plus optional runtime options overriding the model defaults.

    ``options`` may be a pydantic model or a plain mapping; only fields the
    target model understands are used.
    """

    messages: list[Message] = Field(default_factory=list)
    options: InstanceOf[BaseModel] | dict[str, Any] | None = None

    @classmethod
    def from_text(
        cls, text: str, options: InstanceOf[BaseModel] | dict[str, Any] | None = None
    ) -> "Prompt":
        return cls(messages=[Message.user(text)], options=options)


class Generation(BaseModel):
    """One candidate completion."""

    text: str
    finish_reason: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class Usage(BaseModel):
    prompt_tokens: int = Field(default=0, ge=0)
    generation_tokens: int = Field(default=0, ge=0)

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.generation_tokens


class ChatResponse(BaseModel):
    """Generations returned by a chat model, in provider order."""

    generations: list[Generation] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def result(self) -> Generation | None:
        return self.generations[0] if self.generations else None
