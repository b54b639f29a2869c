"""
Rhobot event scheduling.

Lets users of a group chat create, list and delete scheduled events that are
stored in DynamoDB and shown as chat messages:

- handlers: chat entry point, formatting and configuration
- logic: command parsing and event lifecycle
- dal: DynamoDB data access
- models: data models
"""

__version__ = "1.0.0"

from rhobot.models.event import Event
from rhobot.models.input import CreateEventRequest, DeleteEventRequest
from rhobot.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "Event",
    "CreateEventRequest",
    "DeleteEventRequest",
    "logger",
    "tracer",
    "metrics",
]
