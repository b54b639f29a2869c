"""
Message content for event commands.

Builds the cards and replies the event service hands to the chat layer.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

from rhobot.handlers.chat import ChatChannel
from rhobot.handlers.utils.errors import BaseServiceError
from rhobot.handlers.utils.observability import logger
from rhobot.models.event import Event, parse_iso8601
from rhobot.models.output import MessageContent

EVENT_LINK_BASE = 'https://discordapp.com/channels'

JOIN_REACTIONS = ('✅', '🚫')

_RELATIVE_UNITS = (
    ('year', timedelta(days=365)),
    ('month', timedelta(days=30)),
    ('week', timedelta(weeks=1)),
    ('day', timedelta(days=1)),
    ('hour', timedelta(hours=1)),
    ('minute', timedelta(minutes=1)),
)


def resolve_timezone(name: str) -> tzinfo:
    """Look up an IANA timezone name."""
    if name.upper() == 'UTC':
        return timezone.utc
    return ZoneInfo(name)


def format_date(value: str, timezone_name: str = 'UTC') -> str:
    """Render an ISO-8601 timestamp as e.g. ``20:00 Wednesday 2025-01-01 UTC``."""
    moment = parse_iso8601(value).astimezone(resolve_timezone(timezone_name))
    return f"{moment.strftime('%H:%M %A %Y-%m-%d')} {timezone_name}"


def format_relative(moment: datetime, now: datetime) -> str:
    """Describe a moment relative to now using its largest whole unit, e.g. ``in 3 days``."""
    delta = moment - now
    magnitude = abs(delta)

    count, unit = int(magnitude.total_seconds()), 'second'
    for name, length in _RELATIVE_UNITS:
        if magnitude >= length:
            count, unit = magnitude // length, name
            break

    label = f"{count} {unit}{'' if count == 1 else 's'}"
    return f'{label} ago' if delta < timedelta(0) else f'in {label}'


def event_link(channel: ChatChannel, event: Event) -> str:
    guild = channel.guild_id or '@me'
    return f'{EVENT_LINK_BASE}/{guild}/{channel.id}/{event.id}'


def format_event(event: Event, timezone_name: str = 'UTC') -> MessageContent:
    """Format the card hosting an event."""
    try:
        content = (
            MessageContent(title=f'Event: {event.title}', footer=f'id: {event.id}')
            .add_field('Start time', format_date(event.start_time, timezone_name))
            .add_field('Create time', format_date(event.created, timezone_name))
            .add_field('Created by', event.created_by)
        )

        if event.max_participants is not None:
            content.add_field('Max participants', str(event.max_participants))
        if event.setup:
            content.add_field('Setup: ', event.setup)
        return content
    except Exception as e:
        logger.exception('Error formatting event', extra={'event_id': event.id})
        return MessageContent(
            title='Error formatting event',
            description='If this persists, please reach out to the bot admin.',
        ).add_field('Error', str(e))


def format_loading() -> MessageContent:
    return MessageContent(
        title='Creating new event...',
        footer='Details will update once the event has been created.',
    )


def format_deleted() -> MessageContent:
    return MessageContent(
        title='Event: 🗑️',
        footer='This event has been deleted.',
    )


def format_event_list(
    channel: ChatChannel,
    title: str,
    events: Sequence[Event],
    now: Optional[datetime] = None,
) -> MessageContent:
    """Format a set of events, each linking back to its own card."""
    now = now or datetime.now(timezone.utc)

    content = MessageContent(title=title)
    for event in events:
        relative_start = format_relative(event.starts_at, now)
        content.add_field(event.title, f'Starts {relative_start} - [link to event]({event_link(channel, event)})')

    content.footer = (
        'Event details can be found on the original post. Follow the links to get there.'
        if events
        else 'No upcoming events found.'
    )
    return content


def format_errors(errors: List[str]) -> str:
    lines = '\n'.join(f'- {error}' for error in errors)
    return f'Invalid parameters:\n{lines}'


def describe_error(error: Exception) -> str:
    """Text shown to users for a failed operation."""
    if isinstance(error, BaseServiceError):
        return error.user_message
    return str(error) or type(error).__name__
