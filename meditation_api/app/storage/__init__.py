"""
Storage backends for meditation records.

``MeditationStore`` defines the contract; ``InMemoryMeditationStore``
keeps records in process memory and ``DynamoDBMeditationStore`` keeps
them in a DynamoDB table.  The application chooses one at start-up
(see ``app.main.build_store``).
"""

from .base import MeditationStore
from .dynamodb import DynamoDBMeditationStore
from .errors import NotFoundError, ReadFailureError, StoreError, WriteFailureError
from .memory import InMemoryMeditationStore

__all__ = [
    "MeditationStore",
    "InMemoryMeditationStore",
    "DynamoDBMeditationStore",
    "StoreError",
    "NotFoundError",
    "WriteFailureError",
    "ReadFailureError",
]
