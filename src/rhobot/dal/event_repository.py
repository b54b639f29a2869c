"""
Event persistence on top of the generic DynamoDB handler.

Every operation is scoped to a single chat channel; the channel is part of the
partition key so one channel can never read another channel's events.
"""

from typing import List

from rhobot.dal import BaseDalHandler
from rhobot.dal.dynamodb_handler import DynamoDBHandler
from rhobot.dal.event_codec import decode_event, encode_event
from rhobot.handlers.utils.errors import MalformedRecordError, NotFoundError
from rhobot.handlers.utils.observability import logger, tracer
from rhobot.models.event import Event

EVENT_RECORD_TYPE = 'event'


class EventNotFoundError(NotFoundError):
    """Raised when an event does not exist in a channel."""

    def __init__(self, event_id: str):
        super().__init__(resource_type='Event', resource_id=event_id)


class EventRepository(BaseDalHandler):
    """DynamoDB-backed event data access."""

    def __init__(self, store: DynamoDBHandler) -> None:
        super().__init__(store.table_name)
        self.store = store

    @tracer.capture_method
    async def create(self, channel: str, event: Event) -> str:
        """
        Save an event, overwriting any event with the same id.

        Returns:
            The id of the committed record
        """
        await self.store.put_item(channel, EVENT_RECORD_TYPE, encode_event(event))

        logger.info('Event stored', extra={'channel': channel, 'event_id': event.id})
        tracer.put_annotation('event_created', event.id)
        return event.id

    @tracer.capture_method
    async def read(self, channel: str, event_id: str) -> Event:
        """
        Read an event.

        Raises:
            EventNotFoundError: If the event does not exist
            MalformedRecordError: If the stored item is not a valid event
        """
        item = await self.store.get_item(channel, EVENT_RECORD_TYPE, event_id)
        if not item:
            logger.info(f'Event not found: {event_id}', extra={'channel': channel})
            raise EventNotFoundError(event_id)

        try:
            return decode_event(item)
        except MalformedRecordError as e:
            logger.error(f'Failed to decode event {event_id}', extra={'channel': channel, 'error': e.message})
            raise

    @tracer.capture_method
    async def list(self, channel: str) -> List[Event]:
        """
        Read all events in a channel, in store order.

        A single malformed record fails the whole call.

        Raises:
            MalformedRecordError: If any stored item is not a valid event
        """
        items = await self.store.query_by_type(channel, EVENT_RECORD_TYPE)

        events = []
        for item in items:
            try:
                events.append(decode_event(item))
            except MalformedRecordError as e:
                logger.error('Failed to decode event while listing', extra={'channel': channel, 'error': e.message})
                raise

        logger.info(f'Retrieved {len(events)} events', extra={'channel': channel})
        tracer.put_annotation('events_listed', len(events))
        return events

    @tracer.capture_method
    async def delete(self, channel: str, event_id: str) -> None:
        """Delete an event. Deleting an event that does not exist is a no-op."""
        await self.store.delete_item(channel, EVENT_RECORD_TYPE, event_id)

        logger.info('Event deleted', extra={'channel': channel, 'event_id': event_id})
        tracer.put_annotation('event_deleted', event_id)
