"""Protocol definitions for the collaborators wired into the container."""

from __future__ import annotations

from typing import Protocol, TypeVar

from pydantic import BaseModel

from bedrock_autoconfig.chat_types import ChatResponse, Prompt
from bedrock_autoconfig.internal_models import AwsCredentials

ModelT = TypeVar("ModelT", bound=BaseModel)


class AwsCredentialsProviderProtocol(Protocol):
    """Supplies the AWS credentials used to sign Bedrock requests."""

    def resolve_credentials(self) -> AwsCredentials:
        """Return credentials.

        Raises:
            ConfigurationError: If no credentials can be resolved
        """
        ...


class AwsRegionProviderProtocol(Protocol):
    """Supplies the AWS region hosting the Bedrock endpoint."""

    def get_region(self) -> str:
        """Return the region name.

        Raises:
            ConfigurationError: If no region can be determined
        """
        ...


class ObjectMapperProtocol(Protocol):
    """Maps Bedrock payload models to and from JSON bytes."""

    def to_json(self, value: BaseModel) -> bytes: ...

    def from_json(self, data: bytes | str, model: type[ModelT]) -> ModelT: ...


class ChatModelProtocol(Protocol):
    """Chat-completion interface exposed to application code."""

    def call(self, prompt: Prompt | str) -> ChatResponse:
        """Run a chat completion synchronously."""
        ...

    async def acall(self, prompt: Prompt | str) -> ChatResponse:
        """Run a chat completion without blocking the event loop."""
        ...

