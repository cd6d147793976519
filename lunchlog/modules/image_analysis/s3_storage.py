import boto3
from botocore.exceptions import (
    ClientError, ConnectionClosedError, ConnectTimeoutError, EndpointConnectionError, ReadTimeoutError
)
from lunchlog.config.settings import Settings
from lunchlog.core.retry import RetryPolicy
from typing import Optional
import logging

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (EndpointConnectionError, ConnectionClosedError, ConnectTimeoutError, ReadTimeoutError)


class S3Storage:
    def __init__(self, settings: Settings, retry: Optional[RetryPolicy] = None):
        if not all([settings.aws_access_key_id, settings.aws_secret_access_key, settings.s3_bucket_name]):
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name
        self.region = settings.aws_region
        self.public_base_url = settings.s3_public_base_url
        self.retry = retry or RetryPolicy.from_settings(settings, retry_on=TRANSIENT_ERRORS)

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def upload_file(self, file_content: bytes, key: str, content_type: str) -> str:
        """Upload file to S3 and return its durable URL"""
        try:
            self.retry.call(
                self.s3_client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=file_content,
                ContentType=content_type
            )
            return self.public_url(key)
        except (ClientError, *TRANSIENT_ERRORS) as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise

