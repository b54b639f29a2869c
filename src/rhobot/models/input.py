"""
Input models for validated event commands.

The command parser produces loose option values; once validation has passed
they are converted into these models before reaching the event service.
"""

from typing import Annotated

from pydantic import BaseModel, Field


class CreateEventRequest(BaseModel):
    """Request model for creating a new event."""

    title: Annotated[str, Field(
        min_length=1,
        description='Event title',
        examples=['Friday raid night']
    )]

    start_time: Annotated[str, Field(
        description='ISO-8601 timestamp when the event starts',
        examples=['2025-01-01T20:00:00Z']
    )]

    max_participants: Annotated[int | None, Field(
        default=None,
        ge=0,
        description='Maximum number of participants',
        examples=[6]
    )] = None

    setup: Annotated[str | None, Field(
        default=None,
        description='Free-text setup instructions',
        examples=['Join the voice channel and load map two']
    )] = None


class DeleteEventRequest(BaseModel):
    """Request model for deleting an event."""

    id: Annotated[str, Field(
        min_length=1,
        description='Identifier of the event to delete',
        examples=['1092837465019283746']
    )]
