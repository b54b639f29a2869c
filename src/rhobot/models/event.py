"""
Event domain model.

An Event is the only record the bot persists. Its id is the id of the chat
message hosting the event, so it is assigned by the chat layer rather than
generated here.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_iso8601(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware datetime.

    Timestamps without an offset are interpreted as UTC.

    Raises:
        ValueError: If the value is not ISO-8601 compatible
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_iso8601(value: str) -> bool:
    try:
        parse_iso8601(value)
    except ValueError:
        return False
    return True


class Event(BaseModel):
    """Core Event domain model."""

    model_config = ConfigDict(frozen=True)

    id: Annotated[str, Field(
        min_length=1,
        description='Identifier of the chat message hosting the event',
        examples=['1092837465019283746']
    )]

    title: Annotated[str, Field(
        min_length=1,
        description='Event title',
        examples=['Friday raid night']
    )]

    start_time: Annotated[str, Field(
        description='ISO-8601 timestamp when the event starts',
        examples=['2025-01-01T20:00:00Z']
    )]

    created_by: Annotated[str, Field(
        description='Display name of the user who created the event',
        examples=['rho']
    )]

    created: Annotated[str, Field(
        description='ISO-8601 timestamp when the event was created'
    )]

    max_participants: Annotated[Optional[int], Field(
        default=None,
        ge=0,
        description='Maximum number of participants'
    )] = None

    setup: Annotated[Optional[str], Field(
        default=None,
        description='Free-text instructions to set up the game for the event'
    )] = None

    @field_validator('start_time', 'created')
    @classmethod
    def validate_timestamp(cls, v: str) -> str:
        """Validate that timestamps are ISO-8601 compatible."""
        if not is_iso8601(v):
            raise ValueError(f'Invalid ISO-8601 timestamp: {v}')
        return v

    @field_validator('setup')
    @classmethod
    def normalize_setup(cls, v: Optional[str]) -> Optional[str]:
        """An empty setup text is the same as no setup."""
        return v or None

    @property
    def starts_at(self) -> datetime:
        return parse_iso8601(self.start_time)

    @property
    def created_at(self) -> datetime:
        return parse_iso8601(self.created)

    def starts_after(self, moment: datetime) -> bool:
        """Check whether the event starts strictly after the given moment."""
        return self.starts_at > moment
