"""AWS credential and region providers for Bedrock clients."""

from __future__ import annotations

from collections.abc import Collection
from typing import Any, Callable

import boto3
from botocore.exceptions import BotoCoreError

from bedrock_autoconfig.config import BedrockAwsConnectionSettings
from bedrock_autoconfig.exceptions import ConfigurationError
from bedrock_autoconfig.internal_models import AwsCredentials
from bedrock_autoconfig.logging_utils import create_logger
from bedrock_autoconfig.protocols import AwsCredentialsProviderProtocol, AwsRegionProviderProtocol

logger = create_logger("bedrock_autoconfig.aws_connection")


class StaticCredentialsProvider(AwsCredentialsProviderProtocol):
    """Always returns the credentials it was built with."""

    def __init__(self, credentials: AwsCredentials):
        self.credentials = credentials

    @classmethod
    def from_settings(cls, settings: BedrockAwsConnectionSettings) -> "StaticCredentialsProvider":
        if settings.ACCESS_KEY is None or settings.SECRET_KEY is None:
            raise ConfigurationError(
                "Static credentials require ACCESS_KEY and SECRET_KEY",
                details={"config_key": "BEDROCK_AWS_ACCESS_KEY"},
            )
        return cls(
            AwsCredentials(
                access_key_id=settings.ACCESS_KEY.get_secret_value(),
                secret_access_key=settings.SECRET_KEY,
                session_token=settings.SESSION_TOKEN,
            )
        )

    def resolve_credentials(self) -> AwsCredentials:
        return self.credentials


class DefaultCredentialsProvider(AwsCredentialsProviderProtocol):
    """Resolves credentials through the boto3 default chain.

    The chain covers environment variables, shared config files, SSO, and
    container or instance metadata. Credentials are re-read on every call so
    refreshed tokens are picked up.
    """

    def __init__(self, session_factory: Callable[[], Any] = boto3.session.Session):
        self.session_factory = session_factory

    def _lookup(self) -> Any:
        try:
            return self.session_factory().get_credentials()
        except BotoCoreError as e:
            logger.warning("AWS credential chain lookup failed", error=str(e))
            return None

    def is_available(self) -> bool:
        return self._lookup() is not None

    def resolve_credentials(self) -> AwsCredentials:
        credentials = self._lookup()
        if credentials is None:
            raise ConfigurationError(
                "No AWS credentials found in the default credential chain",
                details={"provider": "default_chain"},
            )

        frozen = credentials.get_frozen_credentials()
        return AwsCredentials(
            access_key_id=frozen.access_key,
            secret_access_key=frozen.secret_key,
            session_token=frozen.token,
        )


class StaticRegionProvider(AwsRegionProviderProtocol):
    def __init__(self, region: str):
        if not region:
            raise ConfigurationError("AWS region must not be empty", details={"region": region})
        self.region = region

    def get_region(self) -> str:
        return self.region


class DefaultRegionProvider(AwsRegionProviderProtocol):
    """Uses the region boto3 resolves from AWS_REGION / AWS_DEFAULT_REGION or config files."""

    def __init__(self, session_factory: Callable[[], Any] = boto3.session.Session):
        self.session_factory = session_factory

    def _lookup(self) -> str | None:
        try:
            return self.session_factory().region_name
        except BotoCoreError as e:
            logger.warning("AWS region chain lookup failed", error=str(e))
            return None

    def is_available(self) -> bool:
        return bool(self._lookup())

    def get_region(self) -> str:
        region = self._lookup()
        if not region:
            raise ConfigurationError(
                "No AWS region configured", details={"provider": "default_chain"}
            )
        return region


def connection_defaults(
    settings: BedrockAwsConnectionSettings,
    session_factory: Callable[[], Any] = boto3.session.Session,
    existing: Collection[Any] = (),
) -> dict[type, Any]:
    """Build the credentials and region providers implied by ``settings``.

    Static keys and a configured region win. Otherwise the boto3 default
    chains are registered without being consulted; a chain that resolves
    nothing raises ``ConfigurationError`` when the API client is built.
    Types listed in ``existing`` are skipped entirely.
    """
    providers: dict[type, Any] = {}

    if AwsCredentialsProviderProtocol not in existing:
        if settings.has_static_credentials:
            logger.debug("Using static AWS credentials from settings")
            providers[AwsCredentialsProviderProtocol] = StaticCredentialsProvider.from_settings(
                settings
            )
        else:
            logger.debug("Using AWS default credential chain")
            providers[AwsCredentialsProviderProtocol] = DefaultCredentialsProvider(
                session_factory
            )

    if AwsRegionProviderProtocol not in existing:
        if settings.REGION:
            providers[AwsRegionProviderProtocol] = StaticRegionProvider(settings.REGION)
        else:
            logger.debug("Using AWS default region chain")
            providers[AwsRegionProviderProtocol] = DefaultRegionProvider(session_factory)

    return providers
