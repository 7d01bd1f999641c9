"""Infrastructure AWS clients public API.

The notification providers receive ready-made boto3 clients, built here from
``settings.aws``:

    from infrastructure.clients.aws import get_boto3_client

    ses = get_boto3_client(
        "sesv2",
        session_config=settings.aws.session_config(),
        client_config=settings.aws.client_config(),
    )
"""

from infrastructure.clients.aws.client import get_boto3_client

__all__ = ["get_boto3_client"]
