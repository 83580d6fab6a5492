"""
Checkpoint store factory.
"""

from typing import Optional

from plainverse.core.corpus_loader import PathLike
from .base import CheckpointStore
from .local import JsonCheckpointStore
from .exceptions import StorageBackendError


def create_checkpoint_store(path: Optional[PathLike] = None) -> CheckpointStore:
    """
    Create the checkpoint store based on configuration.

    Args:
        path: Checkpoint location (default: paths.checkpoint from settings)

    Returns:
        Configured checkpoint store

    Raises:
        StorageBackendError: If the backend type is unknown
    """
    from plainverse import settings

    backend_type = settings.get_storage_backend()

    if backend_type == "local":
        return JsonCheckpointStore(path or settings.get_checkpoint_path())

    raise StorageBackendError(f"Unknown storage backend: {backend_type}")
