"""
Business Logic Layer Module.

This module contains the command parsing and event lifecycle logic of the
bot. It sits between the chat handlers and the data access layer:

- command_parser: turns chat tokens into validated event requests
- event_service: runs the create, list and delete flows
"""

from rhobot.logic.command_parser import (
    ParsedOptions,
    parse_create_event_params,
    parse_delete_event_params,
    parse_options,
)
from rhobot.logic.event_service import EventService

__all__ = [
    "ParsedOptions",
    "parse_options",
    "parse_create_event_params",
    "parse_delete_event_params",
    "EventService",
]
