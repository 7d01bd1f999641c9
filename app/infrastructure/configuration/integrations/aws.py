"""AWS integration settings."""

from typing import Optional

from pydantic import Field

from infrastructure.configuration.base import IntegrationSettings


class AwsSettings(IntegrationSettings):
    """AWS configuration settings for the SES and SNS providers.

    Environment Variables:
        AWS_REGION: AWS region for SES/SNS clients (default: ca-central-1)
        AWS_ENDPOINT_URL: Optional endpoint override (LocalStack, VPC endpoint)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()

        region = settings.aws.AWS_REGION
        ```
    """

    AWS_REGION: str = Field(default="ca-central-1", alias="AWS_REGION")
    AWS_ENDPOINT_URL: Optional[str] = Field(default=None, alias="AWS_ENDPOINT_URL")

    def session_config(self) -> dict[str, str]:
        """Keyword arguments for the boto3 session."""
        return {"region_name": self.AWS_REGION}

    def client_config(self) -> dict[str, str]:
        """Keyword arguments for boto3 client construction."""
        if self.AWS_ENDPOINT_URL:
            return {"endpoint_url": self.AWS_ENDPOINT_URL}
        return {}
