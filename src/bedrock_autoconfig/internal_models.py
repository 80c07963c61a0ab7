"""Internal Pydantic models for AWS connection and auto-configuration state."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class AwsCredentials(BaseModel):
    """Resolved AWS credentials."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str = Field(min_length=1)
    secret_access_key: SecretStr
    session_token: SecretStr | None = None


class ConditionOutcome(BaseModel):
    """Result of evaluating a single registration condition."""

    model_config = ConfigDict(frozen=True)

    condition: str = Field(description="Condition name, e.g. 'on_property'")
    target: str = Field(description="What the condition guards")
    matched: bool
    message: str


class AutoConfigurationReport(BaseModel):
    """Every condition evaluated and every object registered during wiring."""

    outcomes: list[ConditionOutcome] = Field(default_factory=list)
    registered: list[str] = Field(default_factory=list)

    def record(self, condition: str, target: str, matched: bool, message: str) -> bool:
        self.outcomes.append(
            ConditionOutcome(condition=condition, target=target, matched=matched, message=message)
        )
        return matched

    def outcomes_for(self, target: str) -> list[ConditionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.target == target]

    @property
    def activated(self) -> bool:
        return bool(self.registered)
