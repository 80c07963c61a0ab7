"""Exceptions raised while wiring and calling the Bedrock chat integration."""

from __future__ import annotations

from typing import Any

from bedrock_autoconfig.error_enums import ErrorCode


class BedrockAutoconfigError(Exception):
    """Base exception for the Bedrock chat integration."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(BedrockAutoconfigError):
    """Raised when a collaborator cannot be built from the given configuration."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ModelNotFoundError(BedrockAutoconfigError):
    """Raised when Bedrock does not know the requested model."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details)


class BedrockRateLimitError(BedrockAutoconfigError):
    """Raised when Bedrock throttles the request."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.RATE_LIMIT, details)


class BedrockAuthenticationError(BedrockAutoconfigError):
    """Raised when Bedrock rejects the caller's credentials."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.AUTHENTICATION_ERROR, details)


class BedrockInvalidRequestError(BedrockAutoconfigError):
    """Raised when Bedrock rejects the request body."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.INVALID_REQUEST, details)


class BedrockConnectionError(BedrockAutoconfigError):
    """Raised when the Bedrock endpoint cannot be reached or times out."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.CONNECTION_ERROR,
    ):
        super().__init__(message, error_code, details)


class BedrockServiceError(BedrockAutoconfigError):
    """Raised for any other Bedrock service failure."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.EXTERNAL_SERVICE_ERROR, details)


class ResponseParsingError(BedrockAutoconfigError):
    """Raised when a payload cannot be mapped to or from JSON."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.PARSING_ERROR, details)
