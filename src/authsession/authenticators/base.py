"""
Base class for authenticators.

An authenticator acquires the properties that make up a session: it might
post credentials to a server and receive an access token, or validate a
token issued by an external provider. Whatever it resolves with is stored
by the session and persisted so the session can be restored later.

The defaults are fail-closed: ``restore`` and ``authenticate`` always fail,
``invalidate`` always succeeds without side effects. Subclasses override
the parts their exchange needs.

Authenticators may emit ``SESSION_UPDATED`` with new properties at any time
(e.g. after refreshing a token); the session listens while the
authenticator is bound to it.
"""

from typing import Any, ClassVar, Mapping, Optional

from authsession.errors import AuthenticationFailed, RestoreFailed
from authsession.events import SESSION_UPDATED, Evented


class BaseAuthenticator(Evented):
    """
    Starting point for custom authenticators.

    Set ``authenticator_id`` to give a subclass a stable identifier in the
    persisted record; otherwise the dotted class path is used, which breaks
    restoration if the class is later moved or renamed.
    """

    authenticator_id: ClassVar[Optional[str]] = None

    @classmethod
    def identifier(cls) -> str:
        return cls.authenticator_id or f"{cls.__module__}.{cls.__qualname__}"

    async def restore(self, properties: Mapping[str, Any]) -> dict[str, Any]:
        """
        Restore a session from previously persisted properties.

        Called when the session starts and when the store reports an
        external change. Returning a mapping authenticates the session with
        it; most implementations validate and return ``properties``.

        Raises:
            RestoreFailed: Always, in the base implementation.
        """
        raise RestoreFailed(f"{type(self).__name__} cannot restore sessions")

    async def authenticate(self, options: Mapping[str, Any]) -> dict[str, Any]:
        """
        Authenticate with caller-supplied ``options`` (credentials, provider
        tokens, ...).

        Raises:
            AuthenticationFailed: Always, in the base implementation.
        """
        raise AuthenticationFailed(f"{type(self).__name__} cannot authenticate")

    async def invalidate(self, content: Mapping[str, Any]) -> None:
        """
        Tear down the session, e.g. revoke a token server-side.

        Raising from here cancels invalidation and the session stays
        authenticated.
        """
        return None

    async def notify_updated(self, content: Mapping[str, Any]) -> None:
        """Tell the bound session its properties changed."""
        await self.emit(SESSION_UPDATED, dict(content))
