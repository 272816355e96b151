"""DynamoDB-backed delivery record store for multi-instance deployments.

Table Schema:
    PK: recipient_key (String, normalized email)
    Attributes: delivered (Bool), attempts (Number), created_at, last_attempt_at,
               delivered_at, last_error (String), metadata (Map of String),
               claim_owner (String), claim_expires_at (Number, epoch seconds)

Concurrency is handled with conditional writes: records are created with
``attribute_not_exists``, claims require an undelivered record below the
attempt ceiling with no live claim, and updates after a send require the
caller to still own the claim. Attempt counts use ``ADD`` so concurrent
increments never lose updates.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, NoReturn, Optional

from infrastructure.clients.aws import DynamoDBClient
from infrastructure.logging import get_module_logger
from infrastructure.notifications.errors import DeliveryStoreError
from infrastructure.notifications.models import DeliveryRecord
from infrastructure.operations import OperationResult

logger = get_module_logger()

_RELEASE_CLAIM = " REMOVE claim_owner, claim_expires_at"


class DynamoDBDeliveryRecordStore:
    """DynamoDB implementation of DeliveryRecordStore.

    Args:
        client: DynamoDBClient used for all table operations
        table_name: DynamoDB table name
    """

    def __init__(self, client: DynamoDBClient, table_name: str) -> None:
        self._client = client
        self.table_name = table_name

        logger.info("dynamodb_delivery_store_initialized", table_name=table_name)

    def find(self, recipient_key: str) -> Optional[DeliveryRecord]:
        result = self._client.get_item(
            self.table_name,
            Key=_key(recipient_key),
            ConsistentRead=True,
        )
        if not result.is_success:
            self._raise("find", recipient_key, result)

        item = result.data.get("Item") if result.data else None
        return _item_to_record(item) if item else None

    def create_or_attempt(
        self, recipient_key: str, metadata: Optional[Dict[str, str]] = None
    ) -> DeliveryRecord:
        now = datetime.now(timezone.utc)
        item = {
            "recipient_key": {"S": recipient_key},
            "delivered": {"BOOL": False},
            "attempts": {"N": "0"},
            "created_at": {"S": now.isoformat()},
            "metadata": {"M": {k: {"S": str(v)} for k, v in (metadata or {}).items()}},
        }
        result = self._client.put_item(
            self.table_name,
            Item=item,
            ConditionExpression="attribute_not_exists(recipient_key)",
        )

        if result.is_success:
            logger.debug("delivery_record_created", recipient_key=recipient_key)
            return _item_to_record(item)

        if not result.is_conflict:
            self._raise("create", recipient_key, result)

        # Record already exists
        record = self.find(recipient_key)
        if record is None:
            raise DeliveryStoreError(
                f"Delivery record {recipient_key} vanished after conditional create"
            )
        return record

    def claim(
        self, record: DeliveryRecord, owner: str, lease_seconds: int, max_attempts: int
    ) -> Optional[DeliveryRecord]:
        now = int(time.time())
        result = self._client.update_item(
            self.table_name,
            Key=_key(record.recipient_key),
            UpdateExpression="SET claim_owner = :owner, claim_expires_at = :expires",
            ConditionExpression=(
                "attribute_exists(recipient_key) AND delivered = :false AND "
                "attempts < :max AND "
                "(attribute_not_exists(claim_owner) OR claim_owner = :owner "
                "OR claim_expires_at < :now)"
            ),
            ExpressionAttributeValues={
                ":owner": {"S": owner},
                ":expires": {"N": str(now + lease_seconds)},
                ":now": {"N": str(now)},
                ":max": {"N": str(max_attempts)},
                ":false": {"BOOL": False},
            },
            ReturnValues="ALL_NEW",
        )

        if result.is_success:
            logger.debug(
                "delivery_record_claimed",
                recipient_key=record.recipient_key,
                owner=owner,
            )
            return _item_to_record(result.data["Attributes"])

        if result.is_conflict:
            logger.debug(
                "delivery_claim_rejected",
                recipient_key=record.recipient_key,
                owner=owner,
            )
            return None

        self._raise("claim", record.recipient_key, result)

    def mark_attempt_failed(
        self, record: DeliveryRecord, owner: str, error_message: str, attempts: int = 1
    ) -> DeliveryRecord:
        now = datetime.now(timezone.utc).isoformat()
        result = self._client.update_item(
            self.table_name,
            Key=_key(record.recipient_key),
            UpdateExpression=(
                "SET last_attempt_at = :now, last_error = :error ADD attempts :n"
                + _RELEASE_CLAIM
            ),
            ConditionExpression="claim_owner = :owner",
            ExpressionAttributeValues={
                ":now": {"S": now},
                ":error": {"S": error_message},
                ":n": {"N": str(attempts)},
                ":owner": {"S": owner},
            },
            ReturnValues="ALL_NEW",
        )
        if not result.is_success:
            self._raise("mark_attempt_failed", record.recipient_key, result)
        return _item_to_record(result.data["Attributes"])

    def mark_delivered(
        self, record: DeliveryRecord, owner: str, attempts: int = 1
    ) -> DeliveryRecord:
        now = datetime.now(timezone.utc).isoformat()
        result = self._client.update_item(
            self.table_name,
            Key=_key(record.recipient_key),
            UpdateExpression=(
                "SET delivered = :true, last_attempt_at = :now, delivered_at = :now "
                "ADD attempts :n" + _RELEASE_CLAIM
            ),
            ConditionExpression="delivered = :false AND claim_owner = :owner",
            ExpressionAttributeValues={
                ":true": {"BOOL": True},
                ":false": {"BOOL": False},
                ":now": {"S": now},
                ":n": {"N": str(attempts)},
                ":owner": {"S": owner},
            },
            ReturnValues="ALL_NEW",
        )
        if not result.is_success:
            self._raise("mark_delivered", record.recipient_key, result)
        return _item_to_record(result.data["Attributes"])

    def health_check(self) -> OperationResult:
        return self._client.describe_table(self.table_name)

    def _raise(
        self, operation: str, recipient_key: str, result: OperationResult
    ) -> NoReturn:
        logger.error(
            "dynamodb_delivery_store_failed",
            operation=operation,
            recipient_key=recipient_key,
            error=result.message,
            error_code=result.error_code,
        )
        raise DeliveryStoreError(
            f"Delivery record {operation} failed for {recipient_key}",
            detail=result.message,
            error_code=result.error_code,
        )


def _key(recipient_key: str) -> Dict[str, Any]:
    return {"recipient_key": {"S": recipient_key}}


def _parse_time(attr: Optional[Dict[str, str]]) -> Optional[datetime]:
    if not attr or "S" not in attr:
        return None
    return datetime.fromisoformat(attr["S"])


def _item_to_record(item: Dict[str, Any]) -> DeliveryRecord:
    """Convert a DynamoDB item (type-descriptor format) to a DeliveryRecord."""
    claim_expires = item.get("claim_expires_at")
    metadata = item.get("metadata", {}).get("M", {})
    return DeliveryRecord(
        recipient_key=item["recipient_key"]["S"],
        delivered=item.get("delivered", {}).get("BOOL", False),
        attempts=int(item.get("attempts", {}).get("N", 0)),
        last_attempt_at=_parse_time(item.get("last_attempt_at")),
        last_error=item.get("last_error", {}).get("S"),
        delivered_at=_parse_time(item.get("delivered_at")),
        created_at=_parse_time(item.get("created_at")),
        metadata={k: v.get("S", "") for k, v in metadata.items()},
        claim_owner=item.get("claim_owner", {}).get("S"),
        claim_expires_at=(
            datetime.fromtimestamp(int(claim_expires["N"]), tz=timezone.utc)
            if claim_expires
            else None
        ),
    )
