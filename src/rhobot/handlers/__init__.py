"""
Chat Handlers Module.

This module contains the chat entry points of the bot and the pieces they
share: the chat collaborator protocols, message formatting, configuration,
error types and observability.
"""

from rhobot.handlers.utils.observability import logger, tracer, metrics
from rhobot.handlers.event_command import EventCommand, build_event_command

__all__ = [
    "logger",
    "tracer",
    "metrics",
    "EventCommand",
    "build_event_command",
]
