"""
In-memory store. Nothing survives the process; useful for tests and for
applications that must not keep credentials on disk.
"""

import copy
from typing import Any, Mapping

from authsession.events import SESSION_UPDATED
from authsession.stores.base import BaseStore


class EphemeralStore(BaseStore):
    def __init__(self):
        self._data: dict[str, Any] = {}

    def persist(self, data: Mapping[str, Any]) -> None:
        self._data = copy.deepcopy(dict(data))

    def restore(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def clear(self) -> None:
        self._data = {}

    async def simulate_external_change(self, data: Mapping[str, Any]) -> None:
        """Replace the record as another context would, and notify listeners."""
        self.persist(data)
        await self.emit(SESSION_UPDATED, self.restore())
