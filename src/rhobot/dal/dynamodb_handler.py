"""
Generic DynamoDB access for the Rhobot table format.

The table has a deliberately generic layout:

- partition key ``type``: the chat channel id concatenated with a record type
- sort key ``uuid``: the record id

Access never crosses chat channels, single-item access is by record type and
uuid, and multi-item access lists every record of one type in a channel. Keying
on users is not needed, so it is not part of the key.

Callers must not choose channel/type values whose concatenation collides with
a different pair; this is not checked.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from rhobot.handlers.utils.errors import StoreError
from rhobot.handlers.utils.observability import logger

PARTITION_KEY_ATTRIBUTE = 'type'
SORT_KEY_ATTRIBUTE = 'uuid'

T = TypeVar('T')


def partition_key(channel: str, record_type: str) -> str:
    """Build the partition key value for records of a type in a channel."""
    return f'{channel}{record_type}'


def partition_key_attribute(channel: str, record_type: str) -> Dict[str, Dict[str, str]]:
    return {PARTITION_KEY_ATTRIBUTE: {'S': partition_key(channel, record_type)}}


def item_key(channel: str, record_type: str, uuid: str) -> Dict[str, Dict[str, str]]:
    return {
        **partition_key_attribute(channel, record_type),
        SORT_KEY_ATTRIBUTE: {'S': uuid},
    }


class DynamoDBHandler:
    """Thin async wrapper around the low-level DynamoDB client."""

    def __init__(
        self,
        table_name: str,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
            client: Preconfigured low-level DynamoDB client
        """
        self.table_name = table_name
        self.region_name = region_name

        if client is None:
            client_kwargs: Dict[str, Any] = {
                # Failures surface to the caller unchanged, no retries here
                'config': Config(retries={'max_attempts': 1, 'mode': 'standard'}),
            }
            if region_name:
                client_kwargs['region_name'] = region_name
            if endpoint_url:
                client_kwargs['endpoint_url'] = endpoint_url
            client = boto3.client('dynamodb', **client_kwargs)

        self.client = client

        logger.info("DynamoDB handler initialized", extra={
            "table_name": table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    async def _call(self, operation: str, func: Callable[..., T], **kwargs: Any) -> T:
        """Run a blocking client call in a worker thread, translating failures into StoreError."""
        try:
            return await asyncio.to_thread(func, TableName=self.table_name, **kwargs)
        except ClientError as e:
            error_code = e.response['Error']['Code']
            error_message = e.response['Error'].get('Message', str(e))

            logger.error(f"DynamoDB {operation} error", extra={
                "error_code": error_code,
                "error_message": error_message,
                "table_name": self.table_name,
                "operation": operation,
            })
            raise StoreError(
                message=f"DynamoDB {operation} failed ({error_code}): {error_message}",
                operation=operation,
                table_name=self.table_name,
                error_code=f"DYNAMODB_{error_code}",
                cause=e,
            ) from e
        except BotoCoreError as e:
            logger.error(f"DynamoDB connection error during {operation}", extra={
                "error": str(e),
                "table_name": self.table_name,
                "operation": operation,
            })
            raise StoreError(
                message=f"Database connection error during {operation}: {e}",
                operation=operation,
                table_name=self.table_name,
                error_code="DATABASE_CONNECTION_ERROR",
                cause=e,
            ) from e

    async def query_by_type(self, channel: str, record_type: str) -> List[Dict[str, Any]]:
        """
        Get all records of a type in a channel.

        Follows pagination until the whole partition has been read.

        Args:
            channel: Chat channel id
            record_type: Database record type

        Returns:
            Raw DynamoDB items, empty if there are none

        Raises:
            StoreError: If a DynamoDB call fails
        """
        query_kwargs: Dict[str, Any] = {
            # "type" is a DynamoDB reserved word
            'KeyConditionExpression': '#pk = :pk',
            'ExpressionAttributeNames': {'#pk': PARTITION_KEY_ATTRIBUTE},
            'ExpressionAttributeValues': {':pk': {'S': partition_key(channel, record_type)}},
        }

        items: List[Dict[str, Any]] = []
        while True:
            response = await self._call('Query', self.client.query, **query_kwargs)
            items.extend(response.get('Items', []))

            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                break
            query_kwargs['ExclusiveStartKey'] = last_key

        logger.debug("Records queried", extra={
            "table_name": self.table_name,
            "partition_key": partition_key(channel, record_type),
            "item_count": len(items),
        })
        return items

    async def get_item(self, channel: str, record_type: str, uuid: str) -> Optional[Dict[str, Any]]:
        """
        Get a single record.

        Returns:
            The raw DynamoDB item, or None if it does not exist

        Raises:
            StoreError: If the DynamoDB call fails
        """
        response = await self._call(
            'GetItem',
            self.client.get_item,
            Key=item_key(channel, record_type, uuid),
        )
        return response.get('Item')

    async def put_item(self, channel: str, record_type: str, attributes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create or fully overwrite a record.

        Args:
            channel: Chat channel id
            record_type: Database record type
            attributes: Non-partition-key item attributes, including the ``uuid`` sort key

        Returns:
            The item as written

        Raises:
            StoreError: If the DynamoDB call fails
        """
        item = {
            **attributes,
            **partition_key_attribute(channel, record_type),
        }
        await self._call('PutItem', self.client.put_item, Item=item)

        logger.info("Item stored", extra={
            "table_name": self.table_name,
            "partition_key": partition_key(channel, record_type),
            "item_id": item.get(SORT_KEY_ATTRIBUTE, {}).get('S', 'unknown'),
        })
        return item

    async def delete_item(self, channel: str, record_type: str, uuid: str) -> None:
        """
        Delete a record.

        Deleting a record that does not exist is a no-op.

        Raises:
            StoreError: If the DynamoDB call fails
        """
        await self._call(
            'DeleteItem',
            self.client.delete_item,
            Key=item_key(channel, record_type, uuid),
        )

        logger.info("Item deleted", extra={
            "table_name": self.table_name,
            "partition_key": partition_key(channel, record_type),
            "item_id": uuid,
        })
