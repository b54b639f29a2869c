"""
Pytest configuration and shared fixtures for the Rhobot event bot.

This module provides common test fixtures and configuration used across
unit and integration tests: an in-memory DynamoDB table, an in-memory event
repository, and fake chat objects.
"""

import os

# Powertools reads its configuration when the shared instances are created
os.environ.update({
    "AWS_DEFAULT_REGION": "us-east-1",
    "AWS_ACCESS_KEY_ID": "test",
    "AWS_SECRET_ACCESS_KEY": "test",
    "TABLE_NAME": "test-events-table",
    "POWERTOOLS_SERVICE_NAME": "test-rhobot",
    "POWERTOOLS_METRICS_NAMESPACE": "TestRhobot",
    "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    "LOG_LEVEL": "DEBUG",
})

import itertools
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import boto3
import pytest
from moto import mock_aws

from rhobot.dal.dynamodb_handler import DynamoDBHandler
from rhobot.dal.event_repository import EventNotFoundError, EventRepository
from rhobot.handlers.utils.errors import BaseServiceError
from rhobot.handlers.utils.observability import metrics
from rhobot.models.event import Event
from rhobot.models.output import Content

TABLE_NAME = "test-events-table"

# Fixed "now" used by every test that needs a clock
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# DynamoDB fixtures
@pytest.fixture
def dynamodb_table():
    """Create a mock DynamoDB table with the Rhobot key schema."""
    with mock_aws():
        client = boto3.client("dynamodb", region_name="us-east-1")
        client.create_table(
            TableName=TABLE_NAME,
            KeySchema=[
                {"AttributeName": "type", "KeyType": "HASH"},
                {"AttributeName": "uuid", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "type", "AttributeType": "S"},
                {"AttributeName": "uuid", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        client.get_waiter("table_exists").wait(TableName=TABLE_NAME)
        yield client


@pytest.fixture
def store(dynamodb_table) -> DynamoDBHandler:
    return DynamoDBHandler(TABLE_NAME, region_name="us-east-1")


@pytest.fixture
def event_repository(store) -> EventRepository:
    return EventRepository(store)


# Sample data fixtures
def make_event(**overrides) -> Event:
    """Build an event with sensible defaults."""
    params = {
        "id": "1000",
        "title": "Raid night",
        "start_time": "2025-06-02T20:00:00+00:00",
        "created_by": "rho",
        "created": "2025-06-01T10:00:00+00:00",
    }
    params.update(overrides)
    return Event(**params)


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_event() -> Event:
    return make_event(max_participants=6, setup="join voice chat")


# In-memory event repository
class InMemoryEventRepository:
    """Event repository keeping records in a dict, with failure injection."""

    def __init__(self):
        self.records: Dict[Tuple[str, str], Event] = {}
        self.writes = 0
        self.failures: Dict[str, BaseServiceError] = {}

    def fail(self, operation: str, error: BaseServiceError) -> None:
        self.failures[operation] = error

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]

    async def create(self, channel: str, event: Event) -> str:
        self._maybe_fail("create")
        self.writes += 1
        self.records[(channel, event.id)] = event
        return event.id

    async def read(self, channel: str, event_id: str) -> Event:
        self._maybe_fail("read")
        try:
            return self.records[(channel, event_id)]
        except KeyError:
            raise EventNotFoundError(event_id)

    async def list(self, channel: str) -> List[Event]:
        self._maybe_fail("list")
        return [event for (event_channel, _), event in self.records.items() if event_channel == channel]

    async def delete(self, channel: str, event_id: str) -> None:
        self._maybe_fail("delete")
        self.writes += 1
        self.records.pop((channel, event_id), None)


@pytest.fixture
def memory_repository() -> InMemoryEventRepository:
    return InMemoryEventRepository()


# Fake chat objects
class FakeMessage:
    def __init__(self, message_id: str, content: Content):
        self.id = message_id
        self.initial_content = content
        self.content = content
        self.edits: List[Content] = []
        self.reactions: List[str] = []
        self.fail_edits = False

    async def edit(self, content: Content) -> None:
        if self.fail_edits:
            raise RuntimeError("message edit rejected")
        self.edits.append(content)
        self.content = content

    async def add_reaction(self, emoji: str) -> None:
        self.reactions.append(emoji)

    async def clear_reactions(self) -> None:
        self.reactions.clear()


class FakeChannel:
    def __init__(self, channel_id: str = "chan-1", guild_id: Optional[str] = "guild-1"):
        self.id = channel_id
        self.guild_id = guild_id
        self.messages: Dict[str, FakeMessage] = {}
        self.sent: List[FakeMessage] = []
        self._ids = itertools.count(1000)

    async def send(self, content: Content) -> FakeMessage:
        message = FakeMessage(str(next(self._ids)), content)
        self.messages[message.id] = message
        self.sent.append(message)
        return message

    async def fetch_message(self, message_id: str) -> Optional[FakeMessage]:
        return self.messages.get(message_id)


class FakeInvocation:
    def __init__(self, channel: FakeChannel, author_name: str = "rho"):
        self.channel = channel
        self.author_name = author_name
        self.replies: List[Content] = []

    async def reply(self, content: Content) -> None:
        self.replies.append(content)


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def channel_factory():
    return FakeChannel


@pytest.fixture
def invocation_factory():
    return FakeInvocation


@pytest.fixture
def invocation(channel) -> FakeInvocation:
    return FakeInvocation(channel)


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Drop metrics buffered by the previous test."""
    metrics.clear_metrics()
    yield
    metrics.clear_metrics()
