"""
Rhobot Models Package

This package contains all Pydantic models used throughout the bot,
including the Event domain model, validated command inputs, and chat
message content.
"""

from .event import Event, is_iso8601, parse_iso8601
from .input import CreateEventRequest, DeleteEventRequest
from .output import Content, EmbedField, MessageContent

__all__ = [
    # Domain models
    "Event",
    "parse_iso8601",
    "is_iso8601",

    # Input models
    "CreateEventRequest",
    "DeleteEventRequest",

    # Output models
    "Content",
    "EmbedField",
    "MessageContent",
]
