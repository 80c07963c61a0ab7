"""Tests for conditional registration of the Jurassic-2 integration.

Containers are built from explicit settings so the behaviour does not depend
on the machine's AWS configuration.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any
from unittest.mock import MagicMock

import pytest
from dishka import Provider, Scope, provide
from dishka.exceptions import NoFactoryError

from bedrock_autoconfig.autoconfigure import (
    API_TARGET,
    CHAT_MODEL_TARGET,
    CONFIGURATION_TARGET,
    Jurassic2ChatAutoConfiguration,
    build_async_container,
    build_container,
    module_available,
    provided_types,
)
from bedrock_autoconfig.aws_connection import (
    DefaultCredentialsProvider,
    DefaultRegionProvider,
    StaticCredentialsProvider,
    StaticRegionProvider,
)
from bedrock_autoconfig.config import BedrockAwsConnectionSettings, Jurassic2ChatSettings
from bedrock_autoconfig.di import Jurassic2Provider
from bedrock_autoconfig.exceptions import ConfigurationError
from bedrock_autoconfig.internal_models import AutoConfigurationReport, AwsCredentials
from bedrock_autoconfig.jurassic2.api import Ai21Jurassic2ChatBedrockApi
from bedrock_autoconfig.jurassic2.chat_model import BedrockAi21Jurassic2ChatModel
from bedrock_autoconfig.jurassic2.models import Ai21Jurassic2Model
from bedrock_autoconfig.protocols import (
    AwsCredentialsProviderProtocol,
    AwsRegionProviderProtocol,
    ChatModelProtocol,
    ObjectMapperProtocol,
)


def host_credentials() -> StaticCredentialsProvider:
    return StaticCredentialsProvider(
        AwsCredentials(access_key_id="AKIDHOST", secret_access_key="host-secret")
    )


class TestModuleAvailable:
    def test_installed_module(self) -> None:
        assert module_available("boto3")

    def test_missing_module(self) -> None:
        assert not module_available("no_such_module_xyz")


class TestDisabled:
    """With ENABLED unset nothing from the integration is registered."""

    def test_nothing_registered_by_default(
        self, aws_settings: BedrockAwsConnectionSettings
    ) -> None:
        container = build_container(
            chat_settings=Jurassic2ChatSettings(), aws_settings=aws_settings
        )

        with pytest.raises(NoFactoryError):
            container.get(Ai21Jurassic2ChatBedrockApi)
        with pytest.raises(NoFactoryError):
            container.get(BedrockAi21Jurassic2ChatModel)

        report = container.get(AutoConfigurationReport)
        assert not report.activated
        assert report.outcomes[-1].condition == "on_property"
        assert not report.outcomes[-1].matched
        container.close()

    def test_disabled_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, aws_settings: BedrockAwsConnectionSettings
    ) -> None:
        monkeypatch.setenv("BEDROCK_JURASSIC2_CHAT_ENABLED", "false")

        container = build_container(aws_settings=aws_settings)

        with pytest.raises(NoFactoryError):
            container.get(BedrockAi21Jurassic2ChatModel)
        container.close()

    def test_disabled_leaves_context_untouched(
        self, aws_settings: BedrockAwsConnectionSettings
    ) -> None:
        auto = Jurassic2ChatAutoConfiguration(Jurassic2ChatSettings(), aws_settings)
        context: dict[Any, Any] = {}

        assert auto.configure(context) == []
        assert context == {}


class TestMissingModules:
    def test_missing_sdk_module_skips_everything(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        """The property condition is not even evaluated when the SDK is absent."""
        auto = Jurassic2ChatAutoConfiguration(
            chat_settings, aws_settings, required_modules=("boto3", "no_such_module_xyz")
        )
        context: dict[Any, Any] = {}

        assert auto.configure(context) == []
        assert context == {}
        assert [o.condition for o in auto.report.outcomes] == ["on_module"]
        assert "no_such_module_xyz" in auto.report.outcomes[0].message


class TestEnabled:
    def test_registers_api_and_chat_model(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        # Arrange / Act
        container = build_container(chat_settings=chat_settings, aws_settings=aws_settings)

        # Assert
        api = container.get(Ai21Jurassic2ChatBedrockApi)
        chat_model = container.get(BedrockAi21Jurassic2ChatModel)

        assert container.get(Ai21Jurassic2ChatBedrockApi) is api
        assert container.get(BedrockAi21Jurassic2ChatModel) is chat_model
        assert chat_model.chat_api is api
        assert container.get(ChatModelProtocol) is chat_model

        assert api.model_id == Ai21Jurassic2Model.J2_MID_V1
        assert api.region == "eu-central-1"
        assert api.timeout == timedelta(seconds=30)
        assert chat_model.default_options.temperature == 0.7
        assert chat_model.default_options.max_tokens == 500

        report = container.get(AutoConfigurationReport)
        assert report.registered == [API_TARGET, CHAT_MODEL_TARGET]
        assert all(o.matched for o in report.outcomes)
        container.close()

    def test_model_and_options_from_environment(
        self, monkeypatch: pytest.MonkeyPatch, aws_settings: BedrockAwsConnectionSettings
    ) -> None:
        monkeypatch.setenv("BEDROCK_JURASSIC2_CHAT_ENABLED", "true")
        monkeypatch.setenv("BEDROCK_JURASSIC2_CHAT_MODEL", Ai21Jurassic2Model.J2_ULTRA_V1.value)
        monkeypatch.setenv("BEDROCK_JURASSIC2_CHAT_OPTIONS__TEMPERATURE", "0.3")

        container = build_container(aws_settings=aws_settings)

        chat_model = container.get(BedrockAi21Jurassic2ChatModel)
        assert chat_model.chat_api.model_id == "ai21.j2-ultra-v1"
        assert chat_model.default_options.temperature == 0.3
        container.close()

    def test_settings_taken_from_context(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        container = build_container(
            context={
                Jurassic2ChatSettings: chat_settings,
                BedrockAwsConnectionSettings: aws_settings,
            }
        )

        assert container.get(Jurassic2ChatSettings) is chat_settings
        assert container.get(Ai21Jurassic2ChatBedrockApi).region == "eu-central-1"
        container.close()

    def test_default_object_mapper_registered(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        container = build_container(chat_settings=chat_settings, aws_settings=aws_settings)

        mapper = container.get(ObjectMapperProtocol)
        assert container.get(Ai21Jurassic2ChatBedrockApi).object_mapper is mapper
        container.close()


class TestMissingConnectionProviders:
    def test_no_credentials_fails_when_client_is_built(
        self, chat_settings: Jurassic2ChatSettings, empty_session_factory: MagicMock
    ) -> None:
        """Unresolvable credentials surface as a configuration error, not silence."""
        container = build_container(
            chat_settings=chat_settings,
            aws_settings=BedrockAwsConnectionSettings(),
            session_factory=empty_session_factory,
        )

        report = container.get(AutoConfigurationReport)
        assert report.registered == [API_TARGET, CHAT_MODEL_TARGET]
        assert isinstance(
            container.get(AwsCredentialsProviderProtocol), DefaultCredentialsProvider
        )

        with pytest.raises(ConfigurationError, match="default credential chain"):
            container.get(Ai21Jurassic2ChatBedrockApi)
        container.close()

    def test_no_region_fails_when_client_is_built(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
        empty_session_factory: MagicMock,
    ) -> None:
        no_region = aws_settings.model_copy(update={"REGION": ""})

        container = build_container(
            chat_settings=chat_settings,
            aws_settings=no_region,
            session_factory=empty_session_factory,
        )

        assert isinstance(container.get(AwsRegionProviderProtocol), DefaultRegionProvider)
        with pytest.raises(ConfigurationError, match="No AWS region"):
            container.get(BedrockAi21Jurassic2ChatModel)
        container.close()

    def test_credentials_from_host_provider_satisfy_condition(
        self, chat_settings: Jurassic2ChatSettings, empty_session_factory: MagicMock
    ) -> None:
        """Collaborators registered by host providers count like context objects."""
        # Arrange
        credentials = host_credentials()

        class HostProvider(Provider):
            @provide(scope=Scope.APP)
            def credentials_provider(self) -> AwsCredentialsProviderProtocol:
                return credentials

        # Act
        container = build_container(
            HostProvider(),
            chat_settings=chat_settings,
            aws_settings=BedrockAwsConnectionSettings(),
            session_factory=empty_session_factory,
        )

        # Assert
        outcome = container.get(AutoConfigurationReport).outcomes_for(API_TARGET)[-1]
        assert outcome.condition == "on_bean"
        assert outcome.matched
        assert container.get(AwsCredentialsProviderProtocol) is credentials
        assert container.get(Ai21Jurassic2ChatBedrockApi).region == "us-east-1"
        empty_session_factory.assert_not_called()
        container.close()

    def test_host_credentials_provider_satisfies_condition(
        self, chat_settings: Jurassic2ChatSettings, empty_session_factory: MagicMock
    ) -> None:
        """Host-supplied providers count even when settings have no static keys."""
        credentials = host_credentials()

        container = build_container(
            context={
                AwsCredentialsProviderProtocol: credentials,
                AwsRegionProviderProtocol: StaticRegionProvider("ap-southeast-2"),
            },
            chat_settings=chat_settings,
            aws_settings=BedrockAwsConnectionSettings(),
            session_factory=empty_session_factory,
        )

        api = container.get(Ai21Jurassic2ChatBedrockApi)
        assert api.region == "ap-southeast-2"
        assert container.get(AwsCredentialsProviderProtocol) is credentials
        empty_session_factory.assert_not_called()
        container.close()


class TestHostOverrides:
    def test_host_api_is_kept(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        """An API client in the context is reused by the automatic chat model."""
        host_api = MagicMock(spec=Ai21Jurassic2ChatBedrockApi)

        container = build_container(
            context={Ai21Jurassic2ChatBedrockApi: host_api},
            chat_settings=chat_settings,
            aws_settings=aws_settings,
        )

        assert container.get(Ai21Jurassic2ChatBedrockApi) is host_api
        assert container.get(BedrockAi21Jurassic2ChatModel).chat_api is host_api

        report = container.get(AutoConfigurationReport)
        assert report.registered == [CHAT_MODEL_TARGET]
        assert not report.outcomes_for(API_TARGET)[-1].matched
        container.close()

    def test_host_chat_model_is_kept(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        host_model = MagicMock(spec=BedrockAi21Jurassic2ChatModel)

        container = build_container(
            context={BedrockAi21Jurassic2ChatModel: host_model},
            chat_settings=chat_settings,
            aws_settings=aws_settings,
        )

        assert container.get(BedrockAi21Jurassic2ChatModel) is host_model
        assert isinstance(container.get(Ai21Jurassic2ChatBedrockApi), Ai21Jurassic2ChatBedrockApi)
        assert container.get(AutoConfigurationReport).registered == [API_TARGET]
        container.close()

    def test_host_chat_model_protocol_is_kept(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        other_model = MagicMock()

        container = build_container(
            context={ChatModelProtocol: other_model},
            chat_settings=chat_settings,
            aws_settings=aws_settings,
        )

        assert container.get(ChatModelProtocol) is other_model
        assert isinstance(
            container.get(BedrockAi21Jurassic2ChatModel), BedrockAi21Jurassic2ChatModel
        )
        container.close()

    def test_host_provider_chat_model_is_not_duplicated(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        """A chat model from a host provider suppresses the automatic one."""
        replacement = MagicMock(spec=BedrockAi21Jurassic2ChatModel)

        class HostProvider(Provider):
            @provide(scope=Scope.APP)
            def chat_model(self) -> BedrockAi21Jurassic2ChatModel:
                return replacement

        container = build_container(
            HostProvider(), chat_settings=chat_settings, aws_settings=aws_settings
        )

        assert container.get(BedrockAi21Jurassic2ChatModel) is replacement
        report = container.get(AutoConfigurationReport)
        assert report.registered == [API_TARGET]
        assert not report.outcomes_for(CHAT_MODEL_TARGET)[-1].matched
        with pytest.raises(NoFactoryError):
            container.get(ChatModelProtocol)
        container.close()

    def test_host_provider_api_is_reused(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        host_api = MagicMock(spec=Ai21Jurassic2ChatBedrockApi)
        def host_api_factory() -> Ai21Jurassic2ChatBedrockApi:
            return host_api

        provider = Provider(scope=Scope.APP)
        provider.provide(host_api_factory)

        container = build_container(
            provider, chat_settings=chat_settings, aws_settings=aws_settings
        )

        assert container.get(BedrockAi21Jurassic2ChatModel).chat_api is host_api
        assert container.get(AutoConfigurationReport).registered == [CHAT_MODEL_TARGET]
        container.close()


class TestProvidedTypes:
    def test_collects_factories_aliases_and_context_keys(self) -> None:
        provider = Jurassic2Provider(provide_api=True, provide_chat_model=True)
        provider.from_context(provides=Jurassic2ChatSettings, scope=Scope.APP)

        assert provided_types([provider]) == {
            Ai21Jurassic2ChatBedrockApi,
            BedrockAi21Jurassic2ChatModel,
            ChatModelProtocol,
            Jurassic2ChatSettings,
        }

    def test_jurassic2_provider_registers_only_requested_objects(self) -> None:
        provider = Jurassic2Provider(
            provide_api=False, provide_chat_model=True, expose_protocol=False
        )

        assert provided_types([provider]) == {BedrockAi21Jurassic2ChatModel}


class TestConfigurationTarget:
    def test_report_records_class_conditions(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
    ) -> None:
        auto = Jurassic2ChatAutoConfiguration(chat_settings, aws_settings)

        auto.configure({})

        conditions = [o.condition for o in auto.report.outcomes_for(CONFIGURATION_TARGET)]
        assert conditions == ["on_module", "on_property"]


@pytest.mark.asyncio
async def test_async_container_registers_chat_model(
    chat_settings: Jurassic2ChatSettings, aws_settings: BedrockAwsConnectionSettings
) -> None:
    container = build_async_container(chat_settings=chat_settings, aws_settings=aws_settings)

    chat_model = await container.get(ChatModelProtocol)
    api = await container.get(Ai21Jurassic2ChatBedrockApi)

    assert isinstance(chat_model, BedrockAi21Jurassic2ChatModel)
    assert chat_model.chat_api is api
    await container.close()
