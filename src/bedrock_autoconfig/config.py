"""Configuration settings for the Bedrock Jurassic-2 chat integration."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bedrock_autoconfig.jurassic2.models import Ai21Jurassic2Model, Jurassic2ChatOptions


class BedrockAwsConnectionSettings(BaseSettings):
    """AWS connection shared by every Bedrock client."""

    REGION: str = Field(default="us-east-1", description="AWS region hosting Bedrock")
    ACCESS_KEY: Optional[SecretStr] = Field(
        default=None, description="Static access key id; falls back to the default chain"
    )
    SECRET_KEY: Optional[SecretStr] = Field(
        default=None, description="Static secret access key paired with ACCESS_KEY"
    )
    SESSION_TOKEN: Optional[SecretStr] = Field(
        default=None, description="Optional session token for temporary credentials"
    )
    TIMEOUT: int = Field(default=300, gt=0, description="Read timeout in seconds")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="BEDROCK_AWS_",
    )

    @model_validator(mode="after")
    def validate_static_key_pair(self) -> "BedrockAwsConnectionSettings":
        """Static credentials need both halves of the key pair."""
        if (self.ACCESS_KEY is None) != (self.SECRET_KEY is None):
            raise ValueError("ACCESS_KEY and SECRET_KEY must be set together")
        return self

    @property
    def has_static_credentials(self) -> bool:
        return self.ACCESS_KEY is not None and self.SECRET_KEY is not None

    @property
    def timeout(self) -> timedelta:
        return timedelta(seconds=self.TIMEOUT)


def _default_chat_options() -> Jurassic2ChatOptions:
    return Jurassic2ChatOptions(temperature=0.7, max_tokens=500)


class Jurassic2ChatSettings(BaseSettings):
    """Settings controlling whether and how the Jurassic-2 chat model is wired."""

    ENABLED: bool = Field(
        default=False, description="Register the Jurassic-2 API client and chat model"
    )
    MODEL: str = Field(
        default=Ai21Jurassic2Model.J2_MID_V1.value,
        description="Bedrock model id used for every request",
    )
    OPTIONS: Jurassic2ChatOptions = Field(
        default_factory=_default_chat_options,
        description="Default generation options; runtime prompt options take precedence",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="BEDROCK_JURASSIC2_CHAT_",
        env_nested_delimiter="__",
    )
