from decimal import Decimal
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from wrestlequest.models.outcome import ProgressSnapshot
from wrestlequest.models.user import UserProgress
from wrestlequest.storage.base import StorageBackend, StorageError

logger = logging.getLogger(__name__)


def _convert_floats(obj):
    """Recursively convert floats to Decimal for DynamoDB."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_floats(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_floats(i) for i in obj]
    return obj


def _convert_decimals(obj):
    """Recursively convert Decimals back to float/int."""
    if isinstance(obj, Decimal):
        if obj == int(obj):
            return int(obj)
        return float(obj)
    if isinstance(obj, dict):
        return {k: _convert_decimals(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_decimals(i) for i in obj]
    return obj


class DynamoLocalStorage(StorageBackend):
    """UserProgress documents in one DynamoDB table: {user_id, revision, document}.

    Writes bump revision atomically with ADD, so revision is the change token
    for every client of the table. Changes made by other clients reach local
    listeners through poll().
    """

    def __init__(
        self,
        endpoint_url: str = "http://localhost:8000",
        region: str = "us-east-1",
        table_name: str = "UserProgress",
    ):
        super().__init__()
        self._resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id="local",
            aws_secret_access_key="local",
        )
        self._table_name = table_name
        self._seen: dict[str, int] = {}
        self._ensure_table()

    def _ensure_table(self):
        existing = {t.name for t in self._resource.tables.all()}
        if self._table_name in existing:
            return
        self._resource.create_table(
            TableName=self._table_name,
            KeySchema=[{"AttributeName": "user_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "user_id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        logger.info("Created DynamoDB table %s", self._table_name)

    def _table(self):
        return self._resource.Table(self._table_name)

    def get_snapshot(self, user_id: str) -> ProgressSnapshot:
        try:
            resp = self._table().get_item(Key={"user_id": user_id}, ConsistentRead=True)
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"read failed for {user_id}: {e}", user_id=user_id) from e
        item = resp.get("Item")
        if not item:
            return ProgressSnapshot(user_id=user_id, revision=0)
        item = _convert_decimals(item)
        return ProgressSnapshot(
            user_id=user_id,
            revision=item.get("revision", 0),
            document=item.get("document"),
        )

    def save_user_progress(self, user_id: str, progress: UserProgress) -> int:
        document = self._to_document(progress)
        try:
            resp = self._table().update_item(
                Key={"user_id": user_id},
                UpdateExpression="SET #doc = :doc ADD #rev :one",
                ExpressionAttributeNames={"#doc": "document", "#rev": "revision"},
                ExpressionAttributeValues={":doc": _convert_floats(document), ":one": 1},
                ReturnValues="UPDATED_NEW",
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"write failed for {user_id}: {e}", user_id=user_id) from e

        revision = int(resp["Attributes"]["revision"])
        self._seen[user_id] = revision
        self._notify(ProgressSnapshot(user_id=user_id, revision=revision, document=document))
        return revision

    def poll(self, user_id: str) -> bool:
        """Re-read a document and notify listeners if another writer changed it."""
        snapshot = self.get_snapshot(user_id)
        if snapshot.revision <= self._seen.get(user_id, 0):
            return False
        self._seen[user_id] = snapshot.revision
        logger.debug("poll: %s moved to revision %d", user_id, snapshot.revision)
        self._notify(snapshot)
        return True
