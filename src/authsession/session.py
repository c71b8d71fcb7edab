"""
The session: current authentication state plus the properties resolved by
the authenticator.

The session restores itself from its store on start, authenticates through
an authenticator, invalidates through the authenticator it is bound to, and
reacts to two asynchronous notifications:

- the store reporting an external change (another process logged in/out)
- the bound authenticator reporting new properties (e.g. a refreshed token)

All state-mutating transitions are serialized by one lock; requests arriving
while another transition is in flight wait their turn.
"""

import asyncio
import functools
from typing import Any, Mapping, Optional

from authsession.authenticators.base import BaseAuthenticator
from authsession.authenticators.registry import (
    AuthenticatorRegistry,
    authenticator_identifier,
)
from authsession.errors import UnresolvableAuthenticator
from authsession.events import SESSION_UPDATED, STATE_CHANGED, Evented
from authsession.logger import get_logger
from authsession.models import SessionRecord, SessionSnapshot
from authsession.stores.base import BaseStore

logger = get_logger(__name__)


def _as_content(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"Authenticator must resolve with a mapping, got {type(value).__name__}")
    return dict(value)


class Session(Evented):
    """
    Authentication state of an application.

    Invariant: ``is_authenticated``, ``authenticator`` and ``content`` change
    together; the session is authenticated iff both of the others are set.
    """

    def __init__(self, store: BaseStore, resolver: AuthenticatorRegistry):
        self._store = store
        self._resolver = resolver

        self._is_authenticated = False
        self._authenticator: Optional[BaseAuthenticator] = None
        self._content: Optional[dict[str, Any]] = None

        # The one authenticator whose updates we listen to, and our listener
        self._bound: Optional[BaseAuthenticator] = None
        self._bound_listener = None

        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()
        self._started = False

        # Opaque slot for routing layers (where to go after login)
        self.attempted_transition: Any = None

    @classmethod
    async def create(cls, store: BaseStore, resolver: AuthenticatorRegistry) -> "Session":
        """Construct and start a session."""
        session = cls(store, resolver)
        await session.start()
        return session

    async def __aenter__(self) -> "Session":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # --- Read-only state ---

    @property
    def is_authenticated(self) -> bool:
        return self._is_authenticated

    @property
    def authenticator(self) -> Optional[BaseAuthenticator]:
        return self._authenticator

    @property
    def content(self) -> Optional[dict[str, Any]]:
        return dict(self._content) if self._content is not None else None

    @property
    def store(self) -> BaseStore:
        return self._store

    @property
    def resolver(self) -> AuthenticatorRegistry:
        return self._resolver

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_authenticated=self._is_authenticated,
            authenticator=(
                self._identifier_for(self._authenticator) if self._authenticator is not None else None
            ),
            content=self.content,
        )

    def get(self, key: str, default: Any = None) -> Any:
        if self._content is None:
            return default
        return self._content.get(key, default)

    def __getitem__(self, key: str) -> Any:
        if self._content is None:
            raise KeyError(key)
        return self._content[key]

    def __contains__(self, key: object) -> bool:
        return self._content is not None and key in self._content

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not regular attributes
        if name.startswith("_"):
            raise AttributeError(name)
        content = self.__dict__.get("_content")
        if content is not None and name in content:
            return content[name]
        raise AttributeError(f"{type(self).__name__} has no attribute or content property '{name}'")

    # --- Lifecycle ---

    async def start(self) -> None:
        """Restore from the store and start listening for external changes."""
        if self._started:
            return
        self._started = True
        self._store.on(SESSION_UPDATED, self._on_store_updated)

        async with self._lock:
            await self._restore_from(self._store.restore(), source="startup")

        await self._store.start()

    async def close(self) -> None:
        """Stop listening to the store and the bound authenticator."""
        if not self._started:
            return
        self._started = False
        await self._store.stop()
        self._store.off(SESSION_UPDATED, self._on_store_updated)
        self._unbind()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait until all notification work scheduled so far has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # --- Explicit transitions ---

    async def authenticate(
        self, authenticator: BaseAuthenticator, options: Optional[Mapping[str, Any]] = None
    ) -> None:
        """
        Authenticate with ``authenticator``.

        Any error the authenticator raises leaves the session
        unauthenticated and is re-raised unchanged.
        """
        options = dict(options or {})
        async with self._lock:
            try:
                content = _as_content(await authenticator.authenticate(options))
            except Exception as e:
                logger.warning(f"Authentication with {type(authenticator).__name__} failed: {e}")
                self._clear()
                raise

            self._setup(authenticator, content)
            logger.info(
                f"Session authenticated by {type(authenticator).__name__} "
                f"(properties: {sorted(content)})"
            )

    async def invalidate(self) -> None:
        """
        Invalidate through the bound authenticator.

        If the authenticator raises, invalidation is cancelled: the session
        stays authenticated and the error is re-raised unchanged. Calling
        this while unauthenticated is a no-op.
        """
        async with self._lock:
            if not self._is_authenticated:
                logger.debug("invalidate() called on an unauthenticated session; nothing to do")
                self._clear_store()
                return

            authenticator = self._authenticator
            try:
                await authenticator.invalidate(dict(self._content))
            except Exception as e:
                logger.warning(
                    f"{type(authenticator).__name__} rejected invalidation; "
                    f"session stays authenticated: {e}"
                )
                raise

            self._unbind()
            self._clear()
            logger.info("Session invalidated")

    # --- Notifications ---

    # Listeners schedule work and return at once; emitters may fire while a
    # transition holds the lock.
    def _on_store_updated(self, data: Mapping[str, Any]) -> None:
        self._schedule(self._apply_store_update(dict(data or {})))

    def _on_authenticator_updated(self, authenticator: BaseAuthenticator, content: Any) -> None:
        self._schedule(self._apply_authenticator_update(authenticator, content))

    def _schedule(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._track(task)
        return task

    def _track(self, task: asyncio.Task) -> None:
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _notify_state_changed(self) -> None:
        for task in self.trigger(STATE_CHANGED, self.snapshot()):
            self._track(task)

    async def _apply_store_update(self, data: dict[str, Any]) -> None:
        async with self._lock:
            if not self._started:
                logger.debug("Ignoring store change on a closed session")
                return
            try:
                await self._restore_from(data, source="store change")
            except Exception as e:
                logger.error(f"Failed to apply external store change: {e}")

    async def _apply_authenticator_update(self, authenticator: BaseAuthenticator, content: Any) -> None:
        async with self._lock:
            if not self._started:
                logger.debug("Ignoring authenticator update on a closed session")
                return
            if authenticator is not self._authenticator or authenticator is not self._bound:
                logger.debug(f"Dropping update from unbound {type(authenticator).__name__}")
                return
            try:
                self._setup(authenticator, _as_content(content))
            except Exception as e:
                logger.error(f"Failed to apply update from {type(authenticator).__name__}: {e}")
                return
            logger.debug(f"Session properties updated by {type(authenticator).__name__}")

    # --- Internal transitions (callers hold the lock) ---

    async def _restore_from(self, data: Mapping[str, Any], source: str) -> bool:
        record = SessionRecord.from_data(data)
        if record is None:
            if data:
                logger.warning(f"Discarding session record without a valid authenticator ({source})")
            self._clear()
            return False

        try:
            authenticator = self._resolver.lookup(record.authenticator)
        except Exception as e:
            logger.warning(f"Cannot restore session ({source}): lookup of {record.authenticator!r} failed: {e}")
            self._clear()
            return False

        if authenticator is None:
            logger.warning(f"Cannot restore session ({source}): {UnresolvableAuthenticator(record.authenticator)}")
            self._clear()
            return False

        try:
            content = _as_content(await authenticator.restore(record.content()))
        except Exception as e:
            logger.info(f"Session restore via {type(authenticator).__name__} failed ({source}): {e}")
            self._clear()
            return False

        self._setup(authenticator, content)
        logger.info(f"Session restored by {type(authenticator).__name__} ({source})")
        return True

    def _setup(self, authenticator: BaseAuthenticator, content: dict[str, Any]) -> None:
        changed = (
            not self._is_authenticated
            or self._authenticator is not authenticator
            or self._content != content
        )
        self._is_authenticated = True
        self._authenticator = authenticator
        self._content = content
        self._bind(authenticator)

        record = SessionRecord.build(self._identifier_for(authenticator), content)
        try:
            # Clear first so keys from a previous authenticator's content never linger
            self._store.clear()
            self._store.persist(record.to_data())
        except Exception as e:
            logger.error(f"Session is authenticated but could not be persisted: {e}")

        if changed:
            self._notify_state_changed()

    def _clear(self) -> None:
        changed = self._is_authenticated
        self._is_authenticated = False
        self._authenticator = None
        self._content = None
        self._unbind()
        self._clear_store()

        if changed:
            self._notify_state_changed()

    def _clear_store(self) -> None:
        try:
            self._store.clear()
        except Exception as e:
            logger.error(f"Could not clear persisted session: {e}")

    def _bind(self, authenticator: BaseAuthenticator) -> None:
        if self._bound is authenticator:
            return
        self._unbind()
        listener = functools.partial(self._on_authenticator_updated, authenticator)
        authenticator.on(SESSION_UPDATED, listener)
        self._bound = authenticator
        self._bound_listener = listener

    def _unbind(self) -> None:
        if self._bound is not None:
            self._bound.off(SESSION_UPDATED, self._bound_listener)
        self._bound = None
        self._bound_listener = None

    def _identifier_for(self, authenticator: BaseAuthenticator) -> str:
        identifier_for = getattr(self._resolver, "identifier_for", None)
        if callable(identifier_for):
            return identifier_for(authenticator)
        return authenticator_identifier(authenticator)
