"""JSON object mapper for Bedrock payloads backed by pydantic."""

from __future__ import annotations

from pydantic import BaseModel, ValidationError

from bedrock_autoconfig.exceptions import ResponseParsingError
from bedrock_autoconfig.protocols import ModelT


class PydanticJsonMapper:
    """Serialises payload models by alias, dropping unset (None) fields."""

    def __init__(self, exclude_none: bool = True):
        self.exclude_none = exclude_none

    def to_json(self, value: BaseModel) -> bytes:
        return value.model_dump_json(by_alias=True, exclude_none=self.exclude_none).encode("utf-8")

    def from_json(self, data: bytes | str, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate_json(data)
        except ValidationError as e:
            raise ResponseParsingError(
                f"Failed to parse {model.__name__} payload: {e.error_count()} error(s)",
                details={"model": model.__name__, "errors": e.errors(include_url=False)},
            ) from e
