"""Business logic services."""

from app.services.local_store import LocalStore
from app.services.sync_client import SyncClient
from app.services.training_log_service import TrainingLogService

__all__ = [
    "LocalStore",
    "SyncClient",
    "TrainingLogService",
]
