"""Dishka factories for the Jurassic-2 API client and chat model."""

from __future__ import annotations

from dishka import Provider, Scope

from bedrock_autoconfig.config import BedrockAwsConnectionSettings, Jurassic2ChatSettings
from bedrock_autoconfig.jurassic2.api import Ai21Jurassic2ChatBedrockApi
from bedrock_autoconfig.jurassic2.chat_model import BedrockAi21Jurassic2ChatModel
from bedrock_autoconfig.logging_utils import create_logger
from bedrock_autoconfig.protocols import (
    AwsCredentialsProviderProtocol,
    AwsRegionProviderProtocol,
    ChatModelProtocol,
    ObjectMapperProtocol,
)

logger = create_logger("bedrock_autoconfig.di")


def provide_jurassic2_chat_api(
    credentials_provider: AwsCredentialsProviderProtocol,
    region_provider: AwsRegionProviderProtocol,
    chat_settings: Jurassic2ChatSettings,
    aws_settings: BedrockAwsConnectionSettings,
    object_mapper: ObjectMapperProtocol,
) -> Ai21Jurassic2ChatBedrockApi:
    """Provide the Bedrock API client for the configured Jurassic-2 model."""
    api = Ai21Jurassic2ChatBedrockApi(
        model_id=chat_settings.MODEL,
        credentials_provider=credentials_provider,
        region=region_provider.get_region(),
        object_mapper=object_mapper,
        timeout=aws_settings.timeout,
    )
    logger.info("Jurassic-2 Bedrock API client created", model_id=api.model_id, region=api.region)
    return api


def provide_jurassic2_chat_model(
    chat_api: Ai21Jurassic2ChatBedrockApi,
    chat_settings: Jurassic2ChatSettings,
) -> BedrockAi21Jurassic2ChatModel:
    """Provide the chat model wired to the container's single API client."""
    return BedrockAi21Jurassic2ChatModel(chat_api, default_options=chat_settings.OPTIONS)


class Jurassic2Provider(Provider):
    """Registers the Jurassic-2 objects that passed their registration conditions."""

    def __init__(
        self, *, provide_api: bool, provide_chat_model: bool, expose_protocol: bool = True
    ):
        super().__init__(scope=Scope.APP)
        if provide_api:
            self.provide(provide_jurassic2_chat_api, scope=Scope.APP)
        if provide_chat_model:
            self.provide(provide_jurassic2_chat_model, scope=Scope.APP)
            if expose_protocol:
                self.alias(BedrockAi21Jurassic2ChatModel, provides=ChatModelProtocol)
