"""
Exceptions raised by authsession.

Errors produced by user authenticators are never wrapped: the session
re-raises them unchanged to whoever called ``authenticate``/``invalidate``.
The classes here are what the base implementations raise.
"""

from typing import Optional


class AuthSessionError(Exception):
    """Base class for all authsession errors."""


class AuthenticationFailed(AuthSessionError):
    """An authenticator rejected the credentials it was given."""


class RestoreFailed(AuthSessionError):
    """Persisted properties could not be turned back into a session."""


class UnresolvableAuthenticator(RestoreFailed):
    """A persisted authenticator identifier does not resolve to an instance."""

    def __init__(self, identifier: object):
        super().__init__(f"No authenticator registered for {identifier!r}")
        self.identifier = identifier


class InvalidationRejected(AuthSessionError):
    """An authenticator refused to tear down the session."""


class StoreError(AuthSessionError):
    """A store could not read or write its backing medium."""

    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ConfigurationError(AuthSessionError):
    """Invalid configuration value."""
