"""Bedrock runtime client for the AI21 Jurassic-2 completion models."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any, NoReturn

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from bedrock_autoconfig.error_enums import ErrorCode
from bedrock_autoconfig.exceptions import (
    BedrockAuthenticationError,
    BedrockConnectionError,
    BedrockInvalidRequestError,
    BedrockRateLimitError,
    BedrockServiceError,
    ModelNotFoundError,
)
from bedrock_autoconfig.jurassic2.models import Ai21Jurassic2ChatRequest, Ai21Jurassic2ChatResponse
from bedrock_autoconfig.logging_utils import create_logger
from bedrock_autoconfig.protocols import AwsCredentialsProviderProtocol, ObjectMapperProtocol

logger = create_logger("bedrock_autoconfig.jurassic2.api")

CONTENT_TYPE = "application/json"

_AUTH_ERROR_CODES = {
    "AccessDeniedException",
    "UnrecognizedClientException",
    "InvalidSignatureException",
    "ExpiredTokenException",
}


class Ai21Jurassic2ChatBedrockApi:
    """Issues ``invoke_model`` calls against a single Jurassic-2 model id."""

    def __init__(
        self,
        model_id: str,
        credentials_provider: AwsCredentialsProviderProtocol,
        region: str,
        object_mapper: ObjectMapperProtocol,
        timeout: timedelta,
    ):
        """Initialize the Bedrock runtime client.

        Args:
            model_id: Bedrock model id, e.g. "ai21.j2-mid-v1"
            credentials_provider: Source of AWS credentials
            region: AWS region hosting the model
            object_mapper: JSON mapper for request and response bodies
            timeout: Read timeout for a single invocation

        Raises:
            ConfigurationError: If the credentials provider cannot resolve credentials
        """
        self.model_id = model_id
        self.region = region
        self.object_mapper = object_mapper
        self.timeout = timeout

        credentials = credentials_provider.resolve_credentials()
        session = boto3.session.Session(
            aws_access_key_id=credentials.access_key_id,
            aws_secret_access_key=credentials.secret_access_key.get_secret_value(),
            aws_session_token=(
                credentials.session_token.get_secret_value()
                if credentials.session_token is not None
                else None
            ),
            region_name=region,
        )
        self.client = session.client(
            "bedrock-runtime",
            config=Config(read_timeout=timeout.total_seconds()),
        )

        logger.debug("Bedrock runtime client created", model_id=model_id, region=region)

    def chat_completion(self, request: Ai21Jurassic2ChatRequest) -> Ai21Jurassic2ChatResponse:
        """Invoke the model and return the parsed completion.

        Raises:
            BedrockAutoconfigError: Subclass matching the Bedrock failure
        """
        body = self.object_mapper.to_json(request)

        try:
            response = self.client.invoke_model(
                modelId=self.model_id,
                body=body,
                contentType=CONTENT_TYPE,
                accept=CONTENT_TYPE,
            )
        except ClientError as e:
            self._raise_for_client_error(e)
        except (ConnectTimeoutError, ReadTimeoutError) as e:
            raise BedrockConnectionError(
                f"Bedrock request timed out: {e}",
                details={
                    "model_id": self.model_id,
                    "timeout_seconds": self.timeout.total_seconds(),
                },
                error_code=ErrorCode.TIMEOUT,
            ) from e
        except EndpointConnectionError as e:
            raise BedrockConnectionError(
                f"Could not reach Bedrock endpoint: {e}",
                details={"model_id": self.model_id, "region": self.region},
            ) from e
        except BotoCoreError as e:
            raise BedrockServiceError(
                f"Bedrock client failure: {e}", details={"model_id": self.model_id}
            ) from e

        payload = response["body"].read()
        return self.object_mapper.from_json(payload, Ai21Jurassic2ChatResponse)

    async def achat_completion(
        self, request: Ai21Jurassic2ChatRequest
    ) -> Ai21Jurassic2ChatResponse:
        """Async variant of ``chat_completion``; the SDK call runs in a worker thread."""
        return await asyncio.to_thread(self.chat_completion, request)

    def _raise_for_client_error(self, error: ClientError) -> NoReturn:
        error_info: dict[str, Any] = error.response.get("Error", {})
        code = error_info.get("Code", "Unknown")
        message = error_info.get("Message", str(error))
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        details = {"model_id": self.model_id, "aws_error_code": code, "status_code": status}

        logger.warning(
            "Bedrock invoke_model failed",
            model_id=self.model_id,
            aws_error_code=code,
            status_code=status,
        )

        if code == "ThrottlingException" or status == 429:
            raise BedrockRateLimitError(
                f"Bedrock throttled the request: {message}", details
            ) from error
        if code in _AUTH_ERROR_CODES or status in (401, 403):
            raise BedrockAuthenticationError(
                f"Bedrock rejected credentials: {message}", details
            ) from error
        if code == "ResourceNotFoundException":
            raise ModelNotFoundError(
                f"Model {self.model_id} not found: {message}", details
            ) from error
        if code == "ValidationException":
            raise BedrockInvalidRequestError(
                f"Bedrock rejected the request: {message}", details
            ) from error
        raise BedrockServiceError(f"Bedrock error {code}: {message}", details) from error
