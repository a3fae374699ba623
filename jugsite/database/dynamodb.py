import logging
import os
from typing import Optional

import boto3
from botocore.exceptions import NoCredentialsError

from jugsite.config import SiteSettings, get_settings

logger = logging.getLogger(__name__)


def get_db_connection(settings: Optional[SiteSettings] = None):
    """DynamoDB resource for the configured endpoint; credentials come from the AWS_* variables"""
    settings = settings or get_settings()
    try:
        return boto3.resource(
            "dynamodb",
            endpoint_url=settings.dynamodb_endpoint_url,
            region_name=settings.aws_region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "fake"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "fake"),
        )
    except NoCredentialsError:
        logger.error("No AWS credentials available for DynamoDB")
        return None
