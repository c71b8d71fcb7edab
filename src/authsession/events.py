"""
Minimal publish/subscribe mixin shared by authenticators, stores and the
session itself.

Handlers may be plain callables or coroutine functions. ``emit`` awaits
coroutine handlers in subscription order; ``trigger`` is fire-and-forget and
schedules them as tasks on the running loop.
"""

import asyncio
import inspect
from typing import Any, Callable

from authsession.logger import get_logger

logger = get_logger(__name__)

# Carries a new properties mapping (authenticator refresh, external store write)
SESSION_UPDATED = "session-updated"
# Fired by the session whenever is_authenticated or content changes
STATE_CHANGED = "state-changed"

Handler = Callable[..., Any]


class Evented:
    """Mixin providing on/off/trigger/emit."""

    def _listeners(self) -> dict[str, list[Handler]]:
        # Lazily created so subclasses need not call super().__init__()
        try:
            return self.__dict__["_event_listeners"]
        except KeyError:
            listeners: dict[str, list[Handler]] = {}
            self.__dict__["_event_listeners"] = listeners
            return listeners

    def on(self, event: str, handler: Handler) -> None:
        """Subscribe ``handler`` to ``event``. Subscribing twice is a no-op."""
        handlers = self._listeners().setdefault(event, [])
        if handler not in handlers:
            handlers.append(handler)

    def off(self, event: str, handler: Handler | None = None) -> None:
        """Unsubscribe one handler, or every handler of ``event``."""
        listeners = self._listeners()
        if handler is None:
            listeners.pop(event, None)
            return

        handlers = listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            listeners.pop(event, None)

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners().get(event))

    def listener_count(self, event: str) -> int:
        return len(self._listeners().get(event, []))

    async def emit(self, event: str, *args: Any) -> None:
        """Deliver ``event`` to every handler, awaiting coroutine handlers."""
        for handler in list(self._listeners().get(event, [])):
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Handler for '{event}' on {type(self).__name__} failed: {e}")

    def trigger(self, event: str, *args: Any) -> list[asyncio.Task]:
        """
        Deliver ``event`` without waiting for coroutine handlers.

        Returns:
            Tasks created for coroutine handlers.

        Raises:
            RuntimeError: If a coroutine handler is subscribed but no event
                          loop is running.
        """
        tasks = []
        for handler in list(self._listeners().get(event, [])):
            try:
                result = handler(*args)
            except Exception as e:
                logger.error(f"Handler for '{event}' on {type(self).__name__} failed: {e}")
                continue

            if inspect.iscoroutine(result):
                try:
                    loop = asyncio.get_running_loop()
                except RuntimeError:
                    result.close()
                    raise RuntimeError(
                        f"Cannot trigger '{event}': coroutine handler needs a running event loop"
                    )
                tasks.append(loop.create_task(result))
        return tasks
