"""
Integration tests for the Data Access Layer (DAL).

This module tests the DynamoDB handler and the event repository against a
DynamoDB table mocked with moto.
"""

import pytest

from rhobot.dal import EventDalHandler, get_dal_handler
from rhobot.dal.dynamodb_handler import DynamoDBHandler, item_key, partition_key
from rhobot.dal.event_repository import EVENT_RECORD_TYPE, EventNotFoundError, EventRepository
from rhobot.handlers.utils.errors import MalformedRecordError, StoreError


class TestPartitionKey:
    def test_concatenation(self):
        assert partition_key("chan-1", "event") == "chan-1event"

    def test_item_key(self):
        assert item_key("chan-1", "event", "42") == {
            "type": {"S": "chan-1event"},
            "uuid": {"S": "42"},
        }


class TestDynamoDBHandler:
    """Integration tests for the generic DynamoDB handler."""

    @pytest.mark.asyncio
    async def test_put_and_get_item(self, store, dynamodb_table):
        written = await store.put_item("chan-1", "note", {"uuid": {"S": "a"}, "Body": {"S": "hello"}})

        assert written["type"] == {"S": "chan-1note"}

        item = await store.get_item("chan-1", "note", "a")
        assert item == {"type": {"S": "chan-1note"}, "uuid": {"S": "a"}, "Body": {"S": "hello"}}

    @pytest.mark.asyncio
    async def test_get_missing_item(self, store):
        assert await store.get_item("chan-1", "note", "missing") is None

    @pytest.mark.asyncio
    async def test_put_overwrites_whole_item(self, store):
        await store.put_item("chan-1", "note", {"uuid": {"S": "a"}, "Body": {"S": "hello"}, "Extra": {"S": "x"}})
        await store.put_item("chan-1", "note", {"uuid": {"S": "a"}, "Body": {"S": "bye"}})

        item = await store.get_item("chan-1", "note", "a")
        assert item["Body"] == {"S": "bye"}
        assert "Extra" not in item

    @pytest.mark.asyncio
    async def test_query_by_type_is_scoped(self, store):
        await store.put_item("chan-1", "note", {"uuid": {"S": "a"}})
        await store.put_item("chan-1", "note", {"uuid": {"S": "b"}})
        await store.put_item("chan-1", "poll", {"uuid": {"S": "c"}})
        await store.put_item("chan-2", "note", {"uuid": {"S": "d"}})

        items = await store.query_by_type("chan-1", "note")

        assert sorted(item["uuid"]["S"] for item in items) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_query_empty_partition(self, store):
        assert await store.query_by_type("chan-1", "note") == []

    @pytest.mark.asyncio
    async def test_query_follows_pagination(self):
        client = PagedQueryClient([
            {"Items": [{"uuid": {"S": "a"}}], "LastEvaluatedKey": {"uuid": {"S": "a"}}},
            {"Items": [{"uuid": {"S": "b"}}], "LastEvaluatedKey": {"uuid": {"S": "b"}}},
            {"Items": [{"uuid": {"S": "c"}}]},
        ])
        store = DynamoDBHandler("test-events-table", client=client)

        items = await store.query_by_type("chan-1", "note")

        assert [item["uuid"]["S"] for item in items] == ["a", "b", "c"]
        assert [call.get("ExclusiveStartKey") for call in client.calls] == [
            None,
            {"uuid": {"S": "a"}},
            {"uuid": {"S": "b"}},
        ]
        assert all(call["TableName"] == "test-events-table" for call in client.calls)

    @pytest.mark.asyncio
    async def test_delete_item(self, store):
        await store.put_item("chan-1", "note", {"uuid": {"S": "a"}})

        await store.delete_item("chan-1", "note", "a")

        assert await store.get_item("chan-1", "note", "a") is None

    @pytest.mark.asyncio
    async def test_delete_missing_item_is_noop(self, store):
        await store.delete_item("chan-1", "note", "missing")

    @pytest.mark.asyncio
    async def test_missing_table_raises_store_error(self, dynamodb_table):
        store = DynamoDBHandler("no-such-table", region_name="us-east-1")

        with pytest.raises(StoreError) as exc_info:
            await store.get_item("chan-1", "note", "a")

        assert exc_info.value.error_code == "DYNAMODB_ResourceNotFoundException"
        assert exc_info.value.operation == "GetItem"
        assert exc_info.value.cause is not None


class TestEventRepository:
    """Integration tests for the event repository."""

    def test_factory_builds_repository(self, dynamodb_table):
        repository = get_dal_handler("test-events-table", region_name="us-east-1")

        assert isinstance(repository, EventRepository)
        assert isinstance(repository, EventDalHandler)

    @pytest.mark.asyncio
    async def test_create_and_read(self, event_repository, sample_event):
        event_id = await event_repository.create("chan-1", sample_event)

        assert event_id == sample_event.id
        assert await event_repository.read("chan-1", event_id) == sample_event

    @pytest.mark.asyncio
    async def test_stored_item_layout(self, event_repository, store, sample_event):
        await event_repository.create("chan-1", sample_event)

        item = await store.get_item("chan-1", EVENT_RECORD_TYPE, sample_event.id)
        assert item["type"] == {"S": "chan-1event"}
        assert item["MaxParticipants"] == {"N": "6"}

    @pytest.mark.asyncio
    async def test_read_missing_event(self, event_repository):
        with pytest.raises(EventNotFoundError):
            await event_repository.read("chan-1", "missing")

    @pytest.mark.asyncio
    async def test_read_malformed_event(self, event_repository, store):
        await store.put_item("chan-1", EVENT_RECORD_TYPE, {"uuid": {"S": "bad"}, "Title": {"S": "No times"}})

        with pytest.raises(MalformedRecordError):
            await event_repository.read("chan-1", "bad")

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_channel(self, event_repository, event_factory):
        first = event_factory(id="1")
        second = event_factory(id="2", title="Second")
        await event_repository.create("chan-1", first)
        await event_repository.create("chan-1", second)
        await event_repository.create("chan-2", event_factory(id="3", title="Elsewhere"))

        events = await event_repository.list("chan-1")

        assert sorted(events, key=lambda event: event.id) == [first, second]
        assert [event.id for event in await event_repository.list("chan-2")] == ["3"]
        assert await event_repository.list("chan-3") == []

    @pytest.mark.asyncio
    async def test_same_id_in_two_channels(self, event_repository, event_factory):
        await event_repository.create("chan-1", event_factory(title="One"))
        await event_repository.create("chan-2", event_factory(title="Two"))

        assert (await event_repository.read("chan-1", "1000")).title == "One"
        assert (await event_repository.read("chan-2", "1000")).title == "Two"

    @pytest.mark.asyncio
    async def test_list_fails_on_malformed_record(self, event_repository, store, sample_event):
        await event_repository.create("chan-1", sample_event)
        await store.put_item("chan-1", EVENT_RECORD_TYPE, {"uuid": {"S": "bad"}})

        with pytest.raises(MalformedRecordError):
            await event_repository.list("chan-1")

    @pytest.mark.asyncio
    async def test_create_overwrites(self, event_repository, event_factory):
        await event_repository.create("chan-1", event_factory(title="Before"))
        await event_repository.create("chan-1", event_factory(title="After"))

        assert (await event_repository.read("chan-1", "1000")).title == "After"

    @pytest.mark.asyncio
    async def test_delete(self, event_repository, sample_event):
        await event_repository.create("chan-1", sample_event)

        await event_repository.delete("chan-1", sample_event.id)

        with pytest.raises(EventNotFoundError):
            await event_repository.read("chan-1", sample_event.id)

    @pytest.mark.asyncio
    async def test_delete_missing_event(self, event_repository):
        await event_repository.delete("chan-1", "missing")

    @pytest.mark.asyncio
    async def test_delete_in_other_channel_keeps_event(self, event_repository, sample_event):
        await event_repository.create("chan-1", sample_event)

        await event_repository.delete("chan-2", sample_event.id)

        assert await event_repository.read("chan-1", sample_event.id) == sample_event


class PagedQueryClient:
    """Stand-in DynamoDB client returning canned query pages."""

    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = []

    def query(self, **kwargs):
        self.calls.append(dict(kwargs))
        return self.pages.pop(0)
