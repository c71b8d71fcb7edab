"""Shared pytest fixtures and test doubles."""

import asyncio

import pytest

from authsession.authenticators.base import BaseAuthenticator
from authsession.authenticators.registry import AuthenticatorRegistry
from authsession.stores.ephemeral import EphemeralStore


class MockAuthenticator(BaseAuthenticator):
    """Scriptable authenticator that records every call."""

    authenticator_id = "mock"

    def __init__(self):
        self.restore_result = None  # None echoes the given properties
        self.restore_error = None
        self.authenticate_result = {"token": "secret"}
        self.authenticate_error = None
        self.invalidate_error = None
        self.gate = None  # asyncio.Event that authenticate() waits on

        self.restore_calls = []
        self.authenticate_calls = []
        self.invalidate_calls = []

    async def restore(self, properties):
        self.restore_calls.append(dict(properties))
        if self.restore_error:
            raise self.restore_error
        if self.restore_result is None:
            return dict(properties)
        return dict(self.restore_result)

    async def authenticate(self, options):
        self.authenticate_calls.append(dict(options))
        if self.gate is not None:
            await self.gate.wait()
        if self.authenticate_error:
            raise self.authenticate_error
        return dict(self.authenticate_result)

    async def invalidate(self, content):
        self.invalidate_calls.append(dict(content))
        if self.invalidate_error:
            raise self.invalidate_error


class OtherAuthenticator(MockAuthenticator):
    authenticator_id = "other"


@pytest.fixture
def store():
    return EphemeralStore()


@pytest.fixture
def authenticator():
    return MockAuthenticator()


@pytest.fixture
def other_authenticator():
    return OtherAuthenticator()


@pytest.fixture
def registry(authenticator, other_authenticator):
    registry = AuthenticatorRegistry()
    registry.register(authenticator)
    registry.register(other_authenticator)
    return registry


async def wait_for(predicate, timeout: float = 2.0):
    """Poll ``predicate`` until it is true or ``timeout`` elapses."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)
