"""Base AWS client utilities for infrastructure clients.

Provides `get_boto3_client` for the SES and SNS notification providers.
This module intentionally avoids reading settings at import time and accepts
configuration via parameters.
"""

from typing import Any, Dict, Optional

import boto3  # type: ignore
from botocore.client import BaseClient  # type: ignore
from botocore.config import Config  # type: ignore
import structlog

logger = structlog.get_logger()

# Retries are owned by the dispatcher's provider fallback, keep SDK retries low.
DEFAULT_CLIENT_CONFIG = Config(retries={"max_attempts": 2, "mode": "standard"})


def get_boto3_client(
    service_name: str,
    session_config: Optional[Dict[str, Any]] = None,
    client_config: Optional[Dict[str, Any]] = None,
) -> BaseClient:
    """Create a boto3 client for the given service.

    Args:
        service_name: AWS service name (e.g., 'sesv2', 'sns')
        session_config: Optional boto3 session kwargs (e.g., region_name)
        client_config: Optional client kwargs (e.g., endpoint_url)

    Returns:
        botocore client instance
    """
    session_config = session_config or {}
    client_config = dict(client_config or {})
    client_config.setdefault("config", DEFAULT_CLIENT_CONFIG)

    session = boto3.Session(**session_config)
    logger.debug(
        "creating_boto3_client",
        service=service_name,
        region=session_config.get("region_name"),
        endpoint_url=client_config.get("endpoint_url"),
    )
    return session.client(service_name, **client_config)
