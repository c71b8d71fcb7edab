"""
Registry resolving persisted authenticator identifiers to instances.
"""

from typing import Any, Callable, Optional

from authsession.errors import UnresolvableAuthenticator
from authsession.logger import get_logger

logger = get_logger(__name__)

AuthenticatorFactory = Callable[[], Any]


def authenticator_identifier(authenticator: Any) -> str:
    """Identifier of an authenticator's concrete type."""
    identifier = getattr(authenticator, "identifier", None)
    if callable(identifier):
        return identifier()
    cls = type(authenticator)
    return f"{cls.__module__}.{cls.__qualname__}"


class AuthenticatorRegistry:
    """
    Maps identifiers to authenticator instances.

    One instance per identifier: factories run on first lookup and the
    result is cached.
    """

    def __init__(self):
        self._instances: dict[str, Any] = {}
        self._factories: dict[str, AuthenticatorFactory] = {}

    def register(self, authenticator: Any, name: Optional[str] = None) -> str:
        """
        Register an authenticator instance.

        Args:
            authenticator: The instance to register.
            name: Identifier to register under; defaults to the
                  authenticator's own identifier.

        Returns:
            The identifier used.
        """
        name = name or authenticator_identifier(authenticator)
        if name in self._instances or name in self._factories:
            logger.warning(f"Replacing authenticator registered as '{name}'")
        self._factories.pop(name, None)
        self._instances[name] = authenticator
        logger.debug(f"Registered authenticator '{name}'")
        return name

    def register_factory(self, name: str, factory: AuthenticatorFactory) -> None:
        """Register a factory building the authenticator on first lookup."""
        if name in self._instances or name in self._factories:
            logger.warning(f"Replacing authenticator registered as '{name}'")
        self._instances.pop(name, None)
        self._factories[name] = factory

    def unregister(self, name: str) -> bool:
        found = self._instances.pop(name, None) is not None
        found = self._factories.pop(name, None) is not None or found
        if not found:
            logger.warning(f"Attempted to unregister unknown authenticator: {name}")
        return found

    def lookup(self, identifier: Any) -> Optional[Any]:
        """
        Resolve an identifier, typically read from persisted data.

        Returns:
            The authenticator, or None for anything unresolvable (including
            non-string or empty identifiers).
        """
        if not isinstance(identifier, str) or not identifier:
            return None

        if identifier in self._instances:
            return self._instances[identifier]

        factory = self._factories.get(identifier)
        if factory is None:
            return None

        authenticator = factory()
        self._instances[identifier] = authenticator
        del self._factories[identifier]
        logger.debug(f"Built authenticator '{identifier}' from factory")
        return authenticator

    def resolve(self, identifier: Any) -> Any:
        """Like lookup, but raises UnresolvableAuthenticator."""
        authenticator = self.lookup(identifier)
        if authenticator is None:
            raise UnresolvableAuthenticator(identifier)
        return authenticator

    def identifier_for(self, authenticator: Any) -> str:
        """The name ``authenticator`` is registered under, if any."""
        for name, instance in self._instances.items():
            if instance is authenticator:
                return name
        return authenticator_identifier(authenticator)

    def names(self) -> list[str]:
        return sorted({*self._instances, *self._factories})

    def __contains__(self, name: object) -> bool:
        return name in self._instances or name in self._factories

    def __len__(self) -> int:
        return len(self._instances) + len(self._factories)
