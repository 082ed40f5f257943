"""
DynamoDB client construction and table provisioning.

``get_client`` builds a low-level ``boto3`` client from the
application settings.  ``init_table`` creates the meditations table
with the key layout the store expects: a string partition key ``pk``
(the owner) and a string sort key ``sk`` (``"<name>/<id>"``), billed
on demand.  Provisioning is a one-time setup step; the application
only runs it at startup when ``DYNAMODB_CREATE_TABLE`` is enabled.
"""

import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import ClientError

from .config import settings

logger = logging.getLogger(__name__)


def get_client(region_name: Optional[str] = None, endpoint_url: Optional[str] = None) -> Any:
    """Create a DynamoDB client.

    Arguments default to ``settings.aws_region`` and
    ``settings.dynamodb_endpoint_url``.  Credentials are resolved by
    boto3's usual chain (environment, shared config, instance role).
    """
    return boto3.client(
        "dynamodb",
        region_name=settings.aws_region if region_name is None else region_name,
        endpoint_url=(settings.dynamodb_endpoint_url if endpoint_url is None else endpoint_url) or None,
    )


def init_table(client: Any, table_name: Optional[str] = None) -> bool:
    """Create the meditations table if it does not exist.

    Returns ``True`` if the table was created and ``False`` if it
    already existed.  Waits until a new table is active.
    """
    table_name = table_name or settings.dynamodb_table
    try:
        client.create_table(
            TableName=table_name,
            AttributeDefinitions=[
                {"AttributeName": "pk", "AttributeType": "S"},
                {"AttributeName": "sk", "AttributeType": "S"},
            ],
            KeySchema=[
                {"AttributeName": "pk", "KeyType": "HASH"},
                {"AttributeName": "sk", "KeyType": "RANGE"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
    except ClientError as exc:
        if exc.response.get("Error", {}).get("Code") == "ResourceInUseException":
            logger.info("DynamoDB table %s already exists", table_name)
            return False
        raise
    client.get_waiter("table_exists").wait(TableName=table_name)
    logger.info("Created DynamoDB table %s", table_name)
    return True
