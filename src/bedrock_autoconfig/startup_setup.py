"""Startup helpers for hosts that want the integration wired from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from dishka import AsyncContainer, Provider

from bedrock_autoconfig.autoconfigure import build_async_container
from bedrock_autoconfig.config import BedrockAwsConnectionSettings, Jurassic2ChatSettings
from bedrock_autoconfig.internal_models import AutoConfigurationReport
from bedrock_autoconfig.logging_utils import configure_logging, create_logger


async def initialize_container(
    *providers: Provider,
    context: Mapping[Any, Any] | None = None,
    app_name: str = "bedrock_autoconfig",
    log_level: str | None = None,
) -> AsyncContainer:
    """Configure logging, load settings from the environment and build the container."""
    configure_logging(app_name, log_level=log_level or os.getenv("LOG_LEVEL", "INFO"))
    logger = create_logger("bedrock_autoconfig.startup")

    logger.info(f"Starting {app_name} container initialization...")

    container = build_async_container(
        *providers,
        context=context,
        chat_settings=Jurassic2ChatSettings(),
        aws_settings=BedrockAwsConnectionSettings(),
    )

    report = await container.get(AutoConfigurationReport)
    logger.info(
        "Dependency injection container initialized",
        jurassic2_chat_active=report.activated,
        registered=report.registered,
    )
    return container
