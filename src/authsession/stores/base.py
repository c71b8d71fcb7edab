"""
Base class for session stores.

A store persists the session record between process restarts and reports
changes made to its medium by someone else (another process or tab sharing
the same storage) by triggering ``SESSION_UPDATED`` with the new record.
Its own ``persist``/``clear`` calls never trigger that event.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from authsession.events import Evented


class BaseStore(Evented, ABC):
    """Abstract store. Concrete stores implement persist/restore/clear."""

    @abstractmethod
    def persist(self, data: Mapping[str, Any]) -> None:
        """Replace the persisted record with ``data``."""
        pass

    @abstractmethod
    def restore(self) -> dict[str, Any]:
        """
        Read the persisted record.

        Returns:
            A new dict; empty when nothing is persisted.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the persisted record."""
        pass

    async def start(self) -> None:
        """Begin watching the medium for external changes."""
        return None

    async def stop(self) -> None:
        """Stop watching the medium."""
        return None
