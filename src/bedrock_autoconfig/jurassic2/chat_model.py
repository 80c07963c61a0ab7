"""Chat model backed by the Jurassic-2 Bedrock API client."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from bedrock_autoconfig.chat_types import ChatResponse, Generation, Prompt, Usage
from bedrock_autoconfig.jurassic2.api import Ai21Jurassic2ChatBedrockApi
from bedrock_autoconfig.jurassic2.models import (
    Ai21Jurassic2ChatRequest,
    Ai21Jurassic2ChatResponse,
    Jurassic2ChatOptions,
)
from bedrock_autoconfig.logging_utils import create_logger
from bedrock_autoconfig.prompt_utils import messages_to_prompt
from bedrock_autoconfig.protocols import ChatModelProtocol

logger = create_logger("bedrock_autoconfig.jurassic2.chat_model")

# Field names and their camelCase wire aliases.
_OPTION_KEYS = frozenset(Jurassic2ChatOptions.model_fields) | frozenset(
    field.alias for field in Jurassic2ChatOptions.model_fields.values() if field.alias
)


def _as_options(options: BaseModel | dict[str, Any] | None) -> dict[str, Any]:
    """Reduce runtime options to the set Jurassic-2 understands, dropping unset values."""
    if options is None:
        return {}

    raw = options.model_dump(exclude_none=True) if isinstance(options, BaseModel) else options
    known = {
        key: value
        for key, value in raw.items()
        if key in _OPTION_KEYS and value is not None
    }
    return Jurassic2ChatOptions.model_validate(known).model_dump(exclude_none=True)


class BedrockAi21Jurassic2ChatModel(ChatModelProtocol):
    """Turns chat prompts into Jurassic-2 completion requests."""

    def __init__(
        self,
        chat_api: Ai21Jurassic2ChatBedrockApi,
        default_options: Jurassic2ChatOptions | None = None,
    ):
        self.chat_api = chat_api
        self.default_options = default_options or Jurassic2ChatOptions()

    def create_request(self, prompt: Prompt | str) -> Ai21Jurassic2ChatRequest:
        """Render the prompt and merge options; runtime values win over defaults."""
        if isinstance(prompt, str):
            prompt = Prompt.from_text(prompt)

        merged = {
            **self.default_options.model_dump(exclude_none=True),
            **_as_options(prompt.options),
        }
        return Ai21Jurassic2ChatRequest(prompt=messages_to_prompt(prompt.messages), **merged)

    def call(self, prompt: Prompt | str) -> ChatResponse:
        request = self.create_request(prompt)
        response = self.chat_api.chat_completion(request)
        return self._to_chat_response(response)

    async def acall(self, prompt: Prompt | str) -> ChatResponse:
        request = self.create_request(prompt)
        response = await self.chat_api.achat_completion(request)
        return self._to_chat_response(response)

    def _to_chat_response(self, response: Ai21Jurassic2ChatResponse) -> ChatResponse:
        generations = [
            Generation(
                text=completion.data.text,
                finish_reason=completion.finish_reason.reason if completion.finish_reason else None,
            )
            for completion in response.completions
        ]

        usage = Usage()
        metrics = response.invocation_metrics
        if metrics is not None:
            usage = Usage(
                prompt_tokens=metrics.input_token_count or 0,
                generation_tokens=metrics.output_token_count or 0,
            )

        logger.debug(
            "Jurassic-2 completion received",
            model_id=self.chat_api.model_id,
            generations=len(generations),
            total_tokens=usage.total_tokens,
        )

        return ChatResponse(
            generations=generations,
            usage=usage,
            metadata={"id": response.id, "model": self.chat_api.model_id},
        )
