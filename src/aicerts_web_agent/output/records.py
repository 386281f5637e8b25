"""Records persisted for each browser session."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


def iso_timestamp(value: datetime) -> str:
    """Format ``value`` as UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class StartRecord(BaseModel):
    """Written once the session is live, before the agent finishes."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    instruction: str
    session_id: str
    session_live_url: str
    started_at: datetime

    @field_serializer("started_at")
    def _serialize_started_at(self, value: datetime) -> str:
        return iso_timestamp(value)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ResultRecord(BaseModel):
    """Agent result fields plus the completion timestamp."""

    model_config = ConfigDict(frozen=True)

    agent_result: dict[str, Any] = Field(default_factory=dict)
    completed_at: datetime

    def to_payload(self) -> dict[str, Any]:
        # Agent fields go first; ``completedAt`` wins on collision.
        return {**self.agent_result, "completedAt": iso_timestamp(self.completed_at)}


__all__ = ["ResultRecord", "StartRecord", "iso_timestamp"]
