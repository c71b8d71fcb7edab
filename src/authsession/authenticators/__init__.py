"""
Authenticators and the registry that resolves them by identifier.
"""

from authsession.authenticators.base import BaseAuthenticator
from authsession.authenticators.registry import (
    AuthenticatorRegistry,
    authenticator_identifier,
)

__all__ = [
    "AuthenticatorRegistry",
    "BaseAuthenticator",
    "authenticator_identifier",
]
