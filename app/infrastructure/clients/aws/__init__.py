"""AWS client package.

Exports the boto3 helpers and the DynamoDB client used by the delivery
record store.
"""

from infrastructure.clients.aws.dynamodb import DynamoDBClient
from infrastructure.clients.aws.executor import execute_aws_api_call, get_boto3_client
from infrastructure.clients.aws.session_provider import SessionProvider

__all__ = [
    "DynamoDBClient",
    "SessionProvider",
    "execute_aws_api_call",
    "get_boto3_client",
]
