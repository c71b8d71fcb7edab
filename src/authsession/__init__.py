"""
authsession: client-side authentication state.

- session:        the session state machine
- authenticators: base authenticator and identifier registry
- stores:         persistence for session properties
- events:         publish/subscribe mixin
"""

from authsession.authenticators import (
    AuthenticatorRegistry,
    BaseAuthenticator,
    authenticator_identifier,
)
from authsession.errors import (
    AuthenticationFailed,
    AuthSessionError,
    ConfigurationError,
    InvalidationRejected,
    RestoreFailed,
    StoreError,
    UnresolvableAuthenticator,
)
from authsession.events import SESSION_UPDATED, STATE_CHANGED, Evented
from authsession.models import AUTHENTICATOR_KEY, SessionRecord, SessionSnapshot
from authsession.session import Session
from authsession.stores import BaseStore, EphemeralStore, FileStore, create_store

__version__ = "0.1.0"

__all__ = [
    "AUTHENTICATOR_KEY",
    "AuthSessionError",
    "AuthenticationFailed",
    "AuthenticatorRegistry",
    "BaseAuthenticator",
    "BaseStore",
    "ConfigurationError",
    "EphemeralStore",
    "Evented",
    "FileStore",
    "InvalidationRejected",
    "RestoreFailed",
    "SESSION_UPDATED",
    "STATE_CHANGED",
    "Session",
    "SessionRecord",
    "SessionSnapshot",
    "StoreError",
    "UnresolvableAuthenticator",
    "authenticator_identifier",
    "create_store",
]
