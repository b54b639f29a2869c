"""
Data Access Layer (DAL) for Rhobot events.

This module provides the data access layer interfaces and the factory used to
build the DynamoDB-backed event repository.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from rhobot.models.event import Event


@runtime_checkable
class EventDalHandler(Protocol):
    """Protocol defining the event data access interface."""

    async def create(self, channel: str, event: Event) -> str:
        """Save an event and return its id."""
        ...

    async def read(self, channel: str, event_id: str) -> Event:
        """Read a single event."""
        ...

    async def list(self, channel: str) -> List[Event]:
        """Read all events in a channel."""
        ...

    async def delete(self, channel: str, event_id: str) -> None:
        """Delete an event."""
        ...


class BaseDalHandler(ABC):
    """Abstract base class for event data access implementations."""

    def __init__(self, table_name: str) -> None:
        """
        Initialize the DAL handler.

        Args:
            table_name: Name of the database table
        """
        self.table_name = table_name

    @abstractmethod
    async def create(self, channel: str, event: Event) -> str:
        pass

    @abstractmethod
    async def read(self, channel: str, event_id: str) -> Event:
        pass

    @abstractmethod
    async def list(self, channel: str) -> List[Event]:
        pass

    @abstractmethod
    async def delete(self, channel: str, event_id: str) -> None:
        pass


def get_dal_handler(
    table_name: str,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> EventDalHandler:
    """
    Factory function to get the event DAL handler.

    Args:
        table_name: Name of the DynamoDB table
        region_name: AWS region the table is in
        endpoint_url: DynamoDB endpoint URL (for local testing)

    Returns:
        DAL handler instance
    """
    # Import here to avoid circular imports
    from rhobot.dal.dynamodb_handler import DynamoDBHandler
    from rhobot.dal.event_repository import EventRepository

    store = DynamoDBHandler(table_name, region_name=region_name, endpoint_url=endpoint_url)
    return EventRepository(store)


__all__ = [
    'EventDalHandler',
    'BaseDalHandler',
    'get_dal_handler'
]
