"""
JSON file store.

The record lives in a single JSON file. Several processes may share the
file; each ``FileStore`` polls it while started and reports changes it did
not make itself, so a login or logout in one process is picked up by the
others.
"""

import asyncio
import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from authsession.errors import StoreError
from authsession.events import SESSION_UPDATED
from authsession.logger import get_logger
from authsession.stores.base import BaseStore

logger = get_logger(__name__)


class FileStore(BaseStore):
    """
    Persists the session record to ``path``.

    A missing, empty, unparseable or non-object file reads as an empty
    record.
    """

    def __init__(self, path: Union[str, Path], poll_interval: float = 1.0):
        """
        Args:
            path: Location of the JSON file; parent directories are created
                  on first write.
            poll_interval: Seconds between checks for external changes.
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self.path = Path(path).expanduser()
        self.poll_interval = poll_interval
        self._snapshot: dict[str, Any] = {}
        self._task: Optional[asyncio.Task] = None
        self._running = False

    # --- Store contract ---

    def persist(self, data: Mapping[str, Any]) -> None:
        data = dict(data)
        try:
            payload = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Session record is not JSON serializable: {e}", path=str(self.path)) from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Failed to write session record: {e}", path=str(self.path)) from e

        self._snapshot = json.loads(payload)
        logger.debug(f"Persisted session record to {self.path}")

    def restore(self) -> dict[str, Any]:
        return self._read()

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreError(f"Failed to clear session record: {e}", path=str(self.path)) from e
        self._snapshot = {}
        logger.debug(f"Cleared session record at {self.path}")

    def _read(self) -> dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Could not read session record {self.path}: {e}")
            return {}

        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring corrupt session record at {self.path}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring session record at {self.path}: not a JSON object")
            return {}
        return data

    # --- Watching ---

    @property
    def watching(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start polling the file for external changes."""
        if self._running:
            return
        self._snapshot = self._read()
        self._running = True
        self._task = asyncio.create_task(self._watch_loop())
        logger.info(f"Watching {self.path} every {self.poll_interval}s")

    async def stop(self) -> None:
        """Stop polling."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def check_for_changes(self) -> bool:
        """
        Compare the file with the last known record and notify listeners
        if someone else changed it.

        Returns:
            True if a change was detected.
        """
        current = self._read()
        if current == self._snapshot:
            return False

        self._snapshot = current
        logger.debug(f"Detected external change to {self.path}")
        await self.emit(SESSION_UPDATED, copy.deepcopy(current))
        return True

    async def _watch_loop(self) -> None:
        while self._running:
            try:
                await self.check_for_changes()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Session store watch error: {e}")

            try:
                await asyncio.sleep(self.poll_interval)
            except asyncio.CancelledError:
                break
