"""Conditional wiring of the Amazon Bedrock AI21 Jurassic-2 chat model into dishka containers."""

from bedrock_autoconfig.autoconfigure import (
    Jurassic2ChatAutoConfiguration,
    build_async_container,
    build_container,
)
from bedrock_autoconfig.chat_types import ChatResponse, Generation, Message, MessageType, Prompt
from bedrock_autoconfig.config import BedrockAwsConnectionSettings, Jurassic2ChatSettings
from bedrock_autoconfig.internal_models import AutoConfigurationReport, ConditionOutcome

__all__ = [
    "AutoConfigurationReport",
    "BedrockAwsConnectionSettings",
    "ChatResponse",
    "ConditionOutcome",
    "Generation",
    "Jurassic2ChatAutoConfiguration",
    "Jurassic2ChatSettings",
    "Message",
    "MessageType",
    "Prompt",
    "build_async_container",
    "build_container",
]
