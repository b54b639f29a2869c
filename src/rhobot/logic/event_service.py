"""
Business Logic Layer for event management.

The event service runs the three user-facing flows (create, list, delete):
parse and validate the command, persist through the event repository, and
present the outcome in the chat. It is the only place where failures are
turned into user-visible text.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import MetricUnit

from rhobot.dal import EventDalHandler
from rhobot.dal.event_repository import EventNotFoundError
from rhobot.handlers.chat import CommandInvocation
from rhobot.handlers.formatting import (
    JOIN_REACTIONS,
    describe_error,
    format_deleted,
    format_errors,
    format_event,
    format_event_list,
    format_loading,
)
from rhobot.handlers.utils.errors import BaseServiceError, log_error_metrics
from rhobot.handlers.utils.observability import logger as default_logger
from rhobot.handlers.utils.observability import metrics
from rhobot.logic.command_parser import (
    parse_create_event_params,
    parse_delete_event_params,
    to_create_request,
    to_delete_request,
)
from rhobot.models.event import Event


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EventService:
    """Orchestrates the event lifecycle for chat commands."""

    def __init__(
        self,
        repository: EventDalHandler,
        timezone_name: str = 'UTC',
        clock: Callable[[], datetime] = utc_now,
        logger: Logger = default_logger,
    ):
        """
        Initialize event service.

        Args:
            repository: Event data access
            timezone_name: IANA timezone used to display event times
            clock: Source of the current UTC instant
            logger: Structured logger
        """
        self.repository = repository
        self.timezone_name = timezone_name
        self.clock = clock
        self.logger = logger

    def _record_failure(self, operation: str, error: BaseServiceError) -> None:
        log_error_metrics(error, self.logger)
        metrics.add_metric(name='EventCommandFailed', unit=MetricUnit.Count, value=1)
        self.logger.info(f'Event {operation} failed', extra={'error_code': error.error_code})

    async def create_event(self, invocation: CommandInvocation, parameters: Sequence[str]) -> Optional[Event]:
        """
        Create a new event hosted on a fresh chat message.

        Returns:
            The confirmed event, or None if the event could not be created
        """
        options = parse_create_event_params(parameters)
        if not options.is_valid:
            self.logger.info('Rejected create parameters', extra={'errors': options.errors})
            await invocation.reply(format_errors(options.errors))
            return None

        request = to_create_request(options)
        channel = invocation.channel

        # The event message's id doubles as the event id so it can be referenced later
        event_message = await channel.send(format_loading())
        event = Event(
            id=event_message.id,
            title=request.title,
            start_time=request.start_time,
            created_by=invocation.author_name,
            created=self.clock().isoformat(),
            max_participants=request.max_participants,
            setup=request.setup,
        )

        try:
            await self.repository.create(channel.id, event)
            confirmed = await self.repository.read(channel.id, event.id)
        except BaseServiceError as e:
            self._record_failure('create', e)
            await event_message.edit(f'[ERROR] Unable to create new event {event.id}: {describe_error(e)}')
            return None

        await event_message.edit(format_event(confirmed, self.timezone_name))
        for emoji in JOIN_REACTIONS:
            await event_message.add_reaction(emoji)

        metrics.add_metric(name='EventsCreated', unit=MetricUnit.Count, value=1)
        self.logger.info('Event created', extra={'channel': channel.id, 'event_id': confirmed.id})
        return confirmed

    async def list_events(self, invocation: CommandInvocation, parameters: Sequence[str] = ()) -> List[Event]:
        """
        Show events in the channel that have not started yet.

        Returns:
            The upcoming events, in store order
        """
        channel = invocation.channel
        now = self.clock()

        try:
            events = await self.repository.list(channel.id)
        except BaseServiceError as e:
            self._record_failure('list', e)
            await invocation.reply(f'Issue reading upcoming events: {describe_error(e)}')
            return []

        upcoming = [event for event in events if event.starts_after(now)]
        await channel.send(format_event_list(channel, 'Upcoming events', upcoming, now))

        metrics.add_metric(name='EventsListed', unit=MetricUnit.Count, value=1)
        self.logger.info('Events listed', extra={
            'channel': channel.id,
            'total': len(events),
            'upcoming': len(upcoming),
        })
        return upcoming

    async def delete_event(self, invocation: CommandInvocation, parameters: Sequence[str]) -> bool:
        """
        Delete an event and mark its message as deleted.

        The record is removed before the message is updated; if the update
        fails the record stays deleted.

        Returns:
            True if the event was deleted
        """
        options = parse_delete_event_params(parameters)
        if not options.is_valid:
            self.logger.info('Rejected delete parameters', extra={'errors': options.errors})
            await invocation.reply(format_errors(options.errors))
            return False

        event_id = to_delete_request(options).id
        channel = invocation.channel

        try:
            event_message = await channel.fetch_message(event_id)
            if event_message is None:
                raise EventNotFoundError(event_id)
            await self.repository.delete(channel.id, event_id)
        except BaseServiceError as e:
            self._record_failure('delete', e)
            await invocation.reply(f'[ERROR] Unable to delete event {event_id}: {describe_error(e)}')
            return False

        await event_message.edit(format_deleted())
        await event_message.clear_reactions()
        await invocation.reply(f'Event {event_id} has been successfully deleted.')

        metrics.add_metric(name='EventsDeleted', unit=MetricUnit.Count, value=1)
        self.logger.info('Event deleted', extra={'channel': channel.id, 'event_id': event_id})
        return True
