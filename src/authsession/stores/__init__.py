"""
Session stores.

- base:      abstract store contract
- ephemeral: in-memory store
- file:      JSON file store with external change detection
"""

from authsession.errors import ConfigurationError
from authsession.stores.base import BaseStore
from authsession.stores.ephemeral import EphemeralStore
from authsession.stores.file import FileStore


def create_store(config) -> BaseStore:
    """Build the store selected by ``config.store_backend``."""
    backend = config.store_backend
    if backend == "file":
        return FileStore(config.store_path, poll_interval=config.poll_interval)
    if backend == "ephemeral":
        return EphemeralStore()
    raise ConfigurationError(f"Unknown store backend: {backend!r}")


__all__ = ["BaseStore", "EphemeralStore", "FileStore", "create_store"]
