"""Pydantic wire models for the AI21 Jurassic-2 models on Amazon Bedrock."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Ai21Jurassic2Model(StrEnum):
    """Jurassic-2 model identifiers accepted by Bedrock."""

    J2_MID_V1 = "ai21.j2-mid-v1"
    J2_ULTRA_V1 = "ai21.j2-ultra-v1"


class BedrockWireModel(BaseModel):
    """Base for payloads exchanged with Bedrock (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Penalty(BedrockWireModel):
    """Repetition penalty applied to generated tokens."""

    scale: float = Field(ge=0.0, description="Penalty strength")
    apply_to_whitespaces: bool | None = None
    apply_to_punctuations: bool | None = None
    apply_to_numbers: bool | None = None
    apply_to_stopwords: bool | None = None
    apply_to_emojis: bool | None = None


class Jurassic2ChatOptions(BedrockWireModel):
    """Generation parameters for Jurassic-2. Unset fields are omitted from requests."""

    temperature: float | None = Field(default=None, ge=0.0, le=1.0)
    top_p: float | None = Field(default=None, ge=0.0, le=1.0)
    max_tokens: int | None = Field(default=None, ge=0)
    min_tokens: int | None = Field(default=None, ge=0)
    num_results: int | None = Field(default=None, ge=1)
    stop_sequences: list[str] | None = None
    frequency_penalty: Penalty | None = None
    presence_penalty: Penalty | None = None
    count_penalty: Penalty | None = None


class Ai21Jurassic2ChatRequest(Jurassic2ChatOptions):
    """Body of an ``invoke_model`` call for Jurassic-2."""

    prompt: str = Field(description="Fully rendered text prompt")


class PromptTokens(BedrockWireModel):
    text: str | None = None
    tokens: list[dict[str, Any]] = Field(default_factory=list)


class CompletionData(BedrockWireModel):
    text: str
    tokens: list[dict[str, Any]] = Field(default_factory=list)


class FinishReason(BedrockWireModel):
    """Why generation stopped: "endoftext", "length" or "stop"."""

    reason: str
    length: int | None = None
    sequence: str | None = None


class Completion(BedrockWireModel):
    data: CompletionData
    finish_reason: FinishReason | None = None


class InvocationMetrics(BedrockWireModel):
    input_token_count: int | None = None
    output_token_count: int | None = None
    invocation_latency: int | None = None
    first_byte_latency: int | None = None


class Ai21Jurassic2ChatResponse(BedrockWireModel):
    """Body returned by ``invoke_model`` for Jurassic-2."""

    id: int | str | None = None
    prompt: PromptTokens | None = None
    completions: list[Completion] = Field(default_factory=list)
    invocation_metrics: InvocationMetrics | None = Field(
        default=None, alias="amazon-bedrock-invocationMetrics"
    )
