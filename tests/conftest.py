# tests/conftest.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from bearer_auth.authenticators import (
    AuthenticatorSettings,
    BearerTokenAuthenticatorService,
    InMemoryAuthenticatorStore,
    LoginInfo,
)
from bearer_auth.util.clock import Clock
from bearer_auth.util.id_generator import IDGenerator

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current = self.current + timedelta(seconds=seconds)


class CountingIDGenerator(IDGenerator):
    """Deterministic IDs: token-0001, token-0002, ..."""

    def __init__(self, prefix: str = "token"):
        self.prefix = prefix
        self.count = 0

    async def generate(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count:04d}"


class FailingIDGenerator(IDGenerator):
    async def generate(self) -> str:
        raise OSError("random source unavailable")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def id_generator() -> CountingIDGenerator:
    return CountingIDGenerator()


@pytest.fixture
def store(clock) -> InMemoryAuthenticatorStore:
    return InMemoryAuthenticatorStore(clock=clock)


@pytest.fixture
def authenticator_settings() -> AuthenticatorSettings:
    return AuthenticatorSettings(
        header_name="X-Auth-Token",
        authenticator_idle_timeout=timedelta(seconds=1800),
        authenticator_expiry=timedelta(seconds=43200),
    )


@pytest.fixture
def service(authenticator_settings, store, id_generator, clock) -> BearerTokenAuthenticatorService:
    return BearerTokenAuthenticatorService(authenticator_settings, store, id_generator, clock)


@pytest.fixture
def login_info() -> LoginInfo:
    return LoginInfo(provider_id="credentials", provider_key="alice@example.com")


def make_service(
    store,
    clock: Optional[Clock] = None,
    id_generator: Optional[IDGenerator] = None,
    **settings_changes,
) -> BearerTokenAuthenticatorService:
    """Build a service around the given store with optional settings overrides."""
    return BearerTokenAuthenticatorService(
        AuthenticatorSettings().copy_with(**settings_changes),
        store,
        id_generator or CountingIDGenerator(),
        clock or FixedClock(),
    )
