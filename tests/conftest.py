from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from bedrock_autoconfig.config import BedrockAwsConnectionSettings, Jurassic2ChatSettings


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real BEDROCK_* variables and stray .env files out of settings."""
    for name in list(os.environ):
        if name.startswith(("BEDROCK_AWS_", "BEDROCK_JURASSIC2_CHAT_")):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def aws_settings() -> BedrockAwsConnectionSettings:
    """Provide AWS settings with static credentials."""
    return BedrockAwsConnectionSettings(
        REGION="eu-central-1",
        ACCESS_KEY="AKIDEXAMPLE",
        SECRET_KEY="wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY",
        TIMEOUT=30,
    )


@pytest.fixture
def chat_settings() -> Jurassic2ChatSettings:
    """Provide chat settings with the integration enabled."""
    return Jurassic2ChatSettings(ENABLED=True)


@pytest.fixture
def empty_session_factory() -> MagicMock:
    """Session factory whose default chains resolve neither credentials nor region."""
    session = MagicMock()
    session.get_credentials.return_value = None
    session.region_name = None
    return MagicMock(return_value=session)


@pytest.fixture
def completion_payload() -> dict[str, Any]:
    """Provide a Jurassic-2 invoke_model response body."""
    return {
        "id": 1234,
        "prompt": {"text": "Human: Hi\n\nAssistant:", "tokens": []},
        "completions": [
            {
                "data": {"text": " Hello there!", "tokens": []},
                "finishReason": {"reason": "endoftext"},
            },
            {
                "data": {"text": " Hi! How can I", "tokens": []},
                "finishReason": {"reason": "length", "length": 5},
            },
        ],
        "amazon-bedrock-invocationMetrics": {
            "inputTokenCount": 7,
            "outputTokenCount": 9,
            "invocationLatency": 512,
            "firstByteLatency": 480,
        },
    }

