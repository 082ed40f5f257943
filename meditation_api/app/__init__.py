"""
Application package initializer.

The package is split into ``core`` (settings, logging, DynamoDB
bootstrap, request dependencies), ``schemas`` (pydantic models),
``storage`` (the store interface and its backends), ``services``
(business logic) and ``api`` (versioned routers).
"""

from .main import app  # noqa: F401
