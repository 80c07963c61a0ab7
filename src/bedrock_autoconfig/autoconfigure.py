"""Conditional registration of the Jurassic-2 chat integration into a dishka container.

Objects are registered only when the Bedrock SDK is importable, the
``ENABLED`` flag is set, and AWS credentials and region providers exist.
Anything the host already supplies, through the container context or its
own providers, is left alone.
"""

from __future__ import annotations

import importlib.util
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from typing import Any

from dishka import AsyncContainer, Container, Provider, Scope, make_async_container, make_container

from bedrock_autoconfig.config import BedrockAwsConnectionSettings, Jurassic2ChatSettings
from bedrock_autoconfig.internal_models import AutoConfigurationReport
from bedrock_autoconfig.json_mapper import PydanticJsonMapper
from bedrock_autoconfig.logging_utils import create_logger
from bedrock_autoconfig.protocols import (
    AwsCredentialsProviderProtocol,
    AwsRegionProviderProtocol,
    ChatModelProtocol,
    ObjectMapperProtocol,
)

logger = create_logger("bedrock_autoconfig.autoconfigure")

REQUIRED_MODULES: tuple[str, ...] = ("boto3", "botocore")

CONFIGURATION_TARGET = "Jurassic2ChatAutoConfiguration"
API_TARGET = "Ai21Jurassic2ChatBedrockApi"
CHAT_MODEL_TARGET = "BedrockAi21Jurassic2ChatModel"


def module_available(name: str) -> bool:
    """Return True when ``name`` can be imported without importing it."""
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False


def _type_name(key: Any) -> str:
    return getattr(key, "__name__", repr(key))


class Jurassic2ChatAutoConfiguration:
    """Decides which Jurassic-2 objects to register for a given container context."""

    def __init__(
        self,
        chat_settings: Jurassic2ChatSettings,
        aws_settings: BedrockAwsConnectionSettings,
        required_modules: Sequence[str] = REQUIRED_MODULES,
        session_factory: Callable[[], Any] | None = None,
    ):
        self.chat_settings = chat_settings
        self.aws_settings = aws_settings
        self.required_modules = tuple(required_modules)
        self.session_factory = session_factory
        self.report = AutoConfigurationReport()

    def configure(
        self, context: dict[Any, Any], provided: Collection[Any] = ()
    ) -> list[Provider]:
        """Evaluate every condition and return the providers to register.

        ``context`` holds the host-supplied objects keyed by type and
        ``provided`` the types the host providers resolve; both count as
        existing objects. ``context`` is updated in place with the AWS
        connection defaults, the object mapper and both settings objects
        when the integration is active.
        """
        self.report = AutoConfigurationReport()

        if not self._class_conditions_match():
            self._log_report()
            return []

        # These imports need the SDK modules checked above.
        from bedrock_autoconfig import aws_connection, di
        from bedrock_autoconfig.jurassic2.api import Ai21Jurassic2ChatBedrockApi
        from bedrock_autoconfig.jurassic2.chat_model import BedrockAi21Jurassic2ChatModel

        existing = set(context) | set(provided)
        connection_kwargs: dict[str, Any] = {"existing": existing}
        if self.session_factory is not None:
            connection_kwargs["session_factory"] = self.session_factory
        defaults = aws_connection.connection_defaults(self.aws_settings, **connection_kwargs)
        context.update(defaults)
        existing.update(defaults)

        if ObjectMapperProtocol not in existing:
            context[ObjectMapperProtocol] = PydanticJsonMapper()
        context[Jurassic2ChatSettings] = self.chat_settings
        context[BedrockAwsConnectionSettings] = self.aws_settings

        provide_api = self._on_missing(existing, Ai21Jurassic2ChatBedrockApi, API_TARGET)
        if provide_api:
            present = [
                key
                for key in (AwsCredentialsProviderProtocol, AwsRegionProviderProtocol)
                if key in existing
            ]
            provide_api = self.report.record(
                "on_bean",
                API_TARGET,
                len(present) == 2,
                "found credentials and region providers"
                if len(present) == 2
                else f"missing {self._missing_names(present)}",
            )

        provide_chat_model = self._on_missing(
            existing, BedrockAi21Jurassic2ChatModel, CHAT_MODEL_TARGET
        )
        if provide_chat_model:
            api_available = provide_api or Ai21Jurassic2ChatBedrockApi in existing
            provide_chat_model = self.report.record(
                "on_bean",
                CHAT_MODEL_TARGET,
                api_available,
                f"found {API_TARGET}" if api_available else f"no {API_TARGET} available",
            )

        providers: list[Provider] = []
        if provide_api or provide_chat_model:
            providers.append(
                di.Jurassic2Provider(
                    provide_api=provide_api,
                    provide_chat_model=provide_chat_model,
                    expose_protocol=ChatModelProtocol not in existing,
                )
            )
        if provide_api:
            self.report.registered.append(API_TARGET)
        if provide_chat_model:
            self.report.registered.append(CHAT_MODEL_TARGET)

        self._log_report()
        return providers

    def _class_conditions_match(self) -> bool:
        missing_modules = [name for name in self.required_modules if not module_available(name)]
        modules_ok = self.report.record(
            "on_module",
            CONFIGURATION_TARGET,
            not missing_modules,
            f"required modules present: {', '.join(self.required_modules)}"
            if not missing_modules
            else f"required modules not importable: {', '.join(missing_modules)}",
        )
        if not modules_ok:
            return False

        enabled = self.chat_settings.ENABLED
        return self.report.record(
            "on_property",
            CONFIGURATION_TARGET,
            enabled,
            "BEDROCK_JURASSIC2_CHAT_ENABLED is true"
            if enabled
            else "BEDROCK_JURASSIC2_CHAT_ENABLED is not true",
        )

    def _on_missing(self, existing: Collection[Any], key: type, target: str) -> bool:
        missing = key not in existing
        return self.report.record(
            "on_missing",
            target,
            missing,
            f"no existing {target}" if missing else f"host already supplies {target}",
        )

    @staticmethod
    def _missing_names(present: Iterable[Any]) -> str:
        required = (AwsCredentialsProviderProtocol, AwsRegionProviderProtocol)
        return ", ".join(_type_name(key) for key in required if key not in present)

    def _log_report(self) -> None:
        for outcome in self.report.outcomes:
            logger.debug(
                "Condition evaluated",
                condition=outcome.condition,
                target=outcome.target,
                matched=outcome.matched,
                detail=outcome.message,
            )
        if self.report.registered:
            logger.info("Jurassic-2 chat integration registered", objects=self.report.registered)
        else:
            logger.info("Jurassic-2 chat integration not registered")


def provided_types(providers: Iterable[Provider]) -> set[Any]:
    """Collect the types the given providers register, aliases and context keys included."""
    types: set[Any] = set()
    for provider in providers:
        for source in (*provider.factories, *provider.aliases, *provider.context_vars):
            types.add(source.provides.type_hint)
    return types


def context_provider(keys: Iterable[Any]) -> Provider:
    """Expose host-supplied context objects as APP-scoped dependencies."""
    provider = Provider(scope=Scope.APP)
    for key in keys:
        provider.from_context(provides=key, scope=Scope.APP)
    return provider


def _assemble(
    providers: Sequence[Provider],
    context: Mapping[Any, Any] | None,
    chat_settings: Jurassic2ChatSettings | None,
    aws_settings: BedrockAwsConnectionSettings | None,
    session_factory: Callable[[], Any] | None,
) -> tuple[list[Provider], dict[Any, Any]]:
    container_context: dict[Any, Any] = dict(context or {})

    if chat_settings is None:
        chat_settings = container_context.get(Jurassic2ChatSettings) or Jurassic2ChatSettings()
    if aws_settings is None:
        aws_settings = (
            container_context.get(BedrockAwsConnectionSettings) or BedrockAwsConnectionSettings()
        )

    auto_configuration = Jurassic2ChatAutoConfiguration(
        chat_settings, aws_settings, session_factory=session_factory
    )
    auto_providers = auto_configuration.configure(
        container_context, provided=provided_types(providers)
    )
    container_context[AutoConfigurationReport] = auto_configuration.report

    # Host providers go last so their registrations take precedence.
    all_providers = [context_provider(container_context), *auto_providers, *providers]
    return all_providers, container_context


def build_container(
    *providers: Provider,
    context: Mapping[Any, Any] | None = None,
    chat_settings: Jurassic2ChatSettings | None = None,
    aws_settings: BedrockAwsConnectionSettings | None = None,
    session_factory: Callable[[], Any] | None = None,
) -> Container:
    """Build a sync dishka container with the Jurassic-2 integration wired in when possible.

    Args:
        *providers: Host providers, registered after the automatic ones
        context: Host objects keyed by the type they should be resolved as
        chat_settings: Chat settings; loaded from the environment when omitted
        aws_settings: AWS connection settings; loaded from the environment when omitted
        session_factory: boto3 session factory used by the default AWS chains

    Returns:
        A container exposing the context objects, an ``AutoConfigurationReport``
        and, when every condition matched, the API client and chat model.
    """
    all_providers, container_context = _assemble(
        providers, context, chat_settings, aws_settings, session_factory
    )
    return make_container(*all_providers, context=container_context)


def build_async_container(
    *providers: Provider,
    context: Mapping[Any, Any] | None = None,
    chat_settings: Jurassic2ChatSettings | None = None,
    aws_settings: BedrockAwsConnectionSettings | None = None,
    session_factory: Callable[[], Any] | None = None,
) -> AsyncContainer:
    """Async counterpart of ``build_container`` for async hosts."""
    all_providers, container_context = _assemble(
        providers, context, chat_settings, aws_settings, session_factory
    )
    return make_async_container(*all_providers, context=container_context)
