"""DynamoDB client for AWS operations.

Provides access to the DynamoDB item operations used by the delivery record
store, with consistent error handling and OperationResult return types.
"""

from typing import Any, Dict

import structlog

from infrastructure.clients.aws.executor import execute_aws_api_call
from infrastructure.clients.aws.session_provider import SessionProvider
from infrastructure.operations.result import OperationResult

logger = structlog.get_logger()


class DynamoDBClient:
    """Client for DynamoDB operations.

    All methods return OperationResult. A failed ``ConditionExpression``
    surfaces as ``OperationStatus.CONFLICT``.

    Args:
        session_provider: SessionProvider instance for credential/config management
    """

    def __init__(self, session_provider: SessionProvider) -> None:
        self._session_provider = session_provider
        self._service_name = "dynamodb"

    def _call(self, method: str, **kwargs) -> OperationResult:
        client_kwargs = self._session_provider.build_client_kwargs(
            service_name=self._service_name
        )
        return execute_aws_api_call(
            self._service_name, method, **client_kwargs, **kwargs
        )

    def get_item(
        self, table_name: str, Key: Dict[str, Any], **kwargs
    ) -> OperationResult:
        """Get an item from DynamoDB.

        Args:
            table_name: Name of the DynamoDB table
            Key: Primary key of the item (e.g., {"email": {"S": "a@x.com"}})
            **kwargs: Additional get_item parameters (ConsistentRead, etc.)

        Returns:
            OperationResult whose data is the raw response; ``Item`` is absent
            when the key does not exist
        """
        return self._call("get_item", TableName=table_name, Key=Key, **kwargs)

    def put_item(
        self, table_name: str, Item: Dict[str, Any], **kwargs
    ) -> OperationResult:
        """Put an item into DynamoDB.

        Args:
            table_name: Name of the DynamoDB table
            Item: Item to store (DynamoDB format with type descriptors)
            **kwargs: Additional put_item parameters (ConditionExpression, etc.)
        """
        return self._call("put_item", TableName=table_name, Item=Item, **kwargs)

    def update_item(
        self, table_name: str, Key: Dict[str, Any], **kwargs
    ) -> OperationResult:
        """Update an item in DynamoDB.

        Args:
            table_name: Name of the DynamoDB table
            Key: Primary key of the item
            **kwargs: UpdateExpression, ConditionExpression, ReturnValues, etc.
        """
        return self._call("update_item", TableName=table_name, Key=Key, **kwargs)

    def describe_table(self, table_name: str) -> OperationResult:
        """Describe a table; used as a cheap reachability check."""
        client_kwargs = self._session_provider.build_client_kwargs(
            service_name=self._service_name
        )
        return execute_aws_api_call(
            self._service_name,
            "describe_table",
            max_retries=0,
            TableName=table_name,
            **client_kwargs,
        )
