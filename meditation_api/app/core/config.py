"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields, so the
API starts with the in-memory store and no AWS access.  In a
production deployment set ``STORE_BACKEND=dynamodb`` and the
``DYNAMODB_*`` / ``AWS_REGION`` variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Meditation API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Which storage backend to use: ``memory`` (default) keeps records in
    # process memory and loses them on restart; ``dynamodb`` stores them in
    # the table named by ``dynamodb_table``.
    store_backend: str = os.getenv("STORE_BACKEND", "memory")

    dynamodb_table: str = os.getenv("DYNAMODB_TABLE", "meditations")
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")

    # Point the client at DynamoDB Local or another compatible endpoint.
    # Empty means the regular AWS endpoint for ``aws_region``.
    dynamodb_endpoint_url: str = os.getenv("DYNAMODB_ENDPOINT_URL", "")

    # Create the table at startup if it does not exist.  Intended for local
    # development; production tables are provisioned separately.
    dynamodb_create_table: bool = _env_flag("DYNAMODB_CREATE_TABLE", "false")

    # Rename records with a single DynamoDB transaction.  Disable only for
    # endpoints that do not support TransactWriteItems.
    dynamodb_transactions: bool = _env_flag("DYNAMODB_TRANSACTIONS", "true")

    app_host: str = os.getenv("APP_HOST", "0.0.0.0")
    app_port: int = int(os.getenv("APP_PORT", "8000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Field defaults are read
# when this module is first imported, so environment variables must be
# set before that happens.
settings = Settings()
