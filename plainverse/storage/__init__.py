"""
Checkpoint storage for plainverse.
"""

from .base import CheckpointStore
from .local import JsonCheckpointStore
from .factory import create_checkpoint_store
from .exceptions import StorageError, StorageBackendError

__all__ = [
    'CheckpointStore',
    'JsonCheckpointStore',
    'create_checkpoint_store',
    'StorageError',
    'StorageBackendError',
]
