"""
Checkpoint storage exceptions.
"""


class StorageError(Exception):
    """Base storage error."""
    pass


class StorageBackendError(StorageError):
    """Unknown or misconfigured storage backend."""
    pass
