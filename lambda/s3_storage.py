import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from transform_errors import ProcessingError

logger = logging.getLogger(__name__)


class S3Storage:
    """get/put capability over an S3 client, the only storage the transformer sees."""

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_config(cls, config):
        kwargs = {}
        if config.s3_endpoint_url:
            kwargs['endpoint_url'] = config.s3_endpoint_url
        if config.region_name:
            kwargs['region_name'] = config.region_name
        return cls(boto3.client('s3', **kwargs))

    def get(self, bucket, key) -> bytes:
        logger.info(f"Downloading s3://{bucket}/{key}")
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            raise ProcessingError(f"Failed to read s3://{bucket}/{key}: {e}")

    def put(self, bucket, key, data, content_type):
        logger.info(f"Uploading {len(data)} bytes to s3://{bucket}/{key}")
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        except (ClientError, BotoCoreError) as e:
            raise ProcessingError(f"Failed to write s3://{bucket}/{key}: {e}")
