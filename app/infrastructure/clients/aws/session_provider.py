"""Session provider for AWS client operations.

Centralizes boto3 session configuration: region, endpoint override
(LocalStack, DynamoDB Local) and per-service role assumption.
"""

from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger()


class SessionProvider:
    """Provider for AWS session configuration and credential handling.

    Args:
        region: AWS region for all clients (e.g., 'ca-central-1')
        service_role_map: Optional mapping of service name to role ARN
        endpoint_url: Custom endpoint URL (for testing/LocalStack)
    """

    def __init__(
        self,
        region: Optional[str] = None,
        service_role_map: Optional[dict[str, str]] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.region = region
        self.service_role_map = service_role_map
        self.endpoint_url = endpoint_url

    def get_role_arn_for_service(self, service_name: str) -> Optional[str]:
        """Get the role ARN to assume for the given AWS service, if any."""
        if self.service_role_map and service_name in self.service_role_map:
            return self.service_role_map[service_name]
        return None

    def build_client_kwargs(
        self,
        service_name: Optional[str] = None,
        role_arn: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build session and client configuration kwargs for boto3.

        Resolves the role ARN from the service_role_map when service_name is
        provided and role_arn is not explicitly given.

        Returns:
            Dict with session_config, client_config, and role_arn for
            passing to execute_aws_api_call
        """
        if role_arn is None and service_name:
            role_arn = self.get_role_arn_for_service(service_name)

        session_config = {}
        client_config = {}

        if self.region:
            session_config["region_name"] = self.region
            client_config["region_name"] = self.region

        if self.endpoint_url:
            client_config["endpoint_url"] = self.endpoint_url

        logger.debug(
            "built_client_kwargs",
            service_name=service_name,
            session_config=session_config,
            client_config=client_config,
        )
        return {
            "session_config": session_config or None,
            "client_config": client_config or None,
            "role_arn": role_arn,
        }
