"""DynamoDB metadata store for poster records.

Table key: `id`. Global secondary index (POSTER_OWNER_INDEX): partition key
`owner_id`, sort key `match_date`, projection ALL.
"""

import logging
from typing import Any, Iterator

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from .. import config
from ..errors import IndexUnavailable, StorageUnavailable

logger = logging.getLogger(__name__)

# Codes DynamoDB returns when the index is missing or still being built
INDEX_ERROR_CODES = {"ValidationException", "ResourceNotFoundException"}


class DynamoMetadataStore:
    """Poster metadata documents (references only, never image bytes)."""

    def __init__(
        self,
        table_name: str = config.POSTER_TABLE,
        index_name: str = config.POSTER_OWNER_INDEX,
        table=None,
    ):
        self.index_name = index_name
        if table is None:
            table = boto3.resource("dynamodb", region_name=config.AWS_REGION).Table(table_name)
        self.table = table

    def put(self, item: dict[str, Any]) -> None:
        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            raise StorageUnavailable(f"Failed to save poster {item.get('id')}: {e}") from e

    def get(self, poster_id: str) -> dict[str, Any] | None:
        try:
            response = self.table.get_item(Key={"id": poster_id})
        except (ClientError, BotoCoreError) as e:
            raise StorageUnavailable(f"Failed to read poster {poster_id}: {e}") from e
        return response.get("Item")

    def delete(self, poster_id: str) -> bool:
        """Delete a document. Returns False when it did not exist."""
        try:
            response = self.table.delete_item(Key={"id": poster_id}, ReturnValues="ALL_OLD")
        except (ClientError, BotoCoreError) as e:
            raise StorageUnavailable(f"Failed to delete poster {poster_id}: {e}") from e
        return "Attributes" in response

    def query_owner(self, owner_id: str, min_match_date: str) -> list[dict[str, Any]]:
        """Owner's documents with match_date >= min_match_date, via the index.

        Raises:
            IndexUnavailable: the index is missing or not queryable
        """
        kwargs: dict[str, Any] = {
            "IndexName": self.index_name,
            "KeyConditionExpression": Key("owner_id").eq(owner_id) & Key("match_date").gte(min_match_date),
        }
        items = []
        try:
            while True:
                response = self.table.query(**kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    return items
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in INDEX_ERROR_CODES:
                raise IndexUnavailable(f"Index {self.index_name} unavailable: {code}") from e
            raise StorageUnavailable(f"Gallery query failed: {e}") from e
        except BotoCoreError as e:
            raise StorageUnavailable(f"Gallery query failed: {e}") from e

    def scan(self) -> Iterator[dict[str, Any]]:
        """Every document in the table (paginated)."""
        kwargs: dict[str, Any] = {}
        try:
            while True:
                response = self.table.scan(**kwargs)
                yield from response.get("Items", [])
                if "LastEvaluatedKey" not in response:
                    return
                kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except (ClientError, BotoCoreError) as e:
            raise StorageUnavailable(f"Gallery scan failed: {e}") from e
