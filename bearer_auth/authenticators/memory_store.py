# bearer_auth/authenticators/memory_store.py
import asyncio
import logging
from typing import Dict, Optional

from ..util.clock import Clock, SystemClock
from .errors import DuplicateAuthenticatorError
from .models import BearerTokenAuthenticator, shorten_id
from .storage_interfaces import AbstractAuthenticatorStore

logger = logging.getLogger(__name__)


class InMemoryAuthenticatorStore(AbstractAuthenticatorStore):
    """
    Process-local authenticator store backed by a dictionary.

    Suitable for a single node and for tests. Entries past their absolute
    expiration date are dropped when looked up, and all of them are swept
    whenever a new authenticator is added.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self._authenticators: Dict[str, BearerTokenAuthenticator] = {}
        self._lock = asyncio.Lock()
        self._clock = clock or SystemClock()

    async def initialize(self) -> None:
        logger.info("InMemoryAuthenticatorStore initialized.")

    async def teardown(self) -> None:
        async with self._lock:
            self._authenticators.clear()
        logger.info("InMemoryAuthenticatorStore teardown, all authenticators dropped.")

    def _sweep_expired(self) -> int:
        """Drop every expired entry. The caller must hold the lock."""
        now = self._clock.now()
        expired = [key for key, value in self._authenticators.items() if value.is_expired(now)]
        for key in expired:
            del self._authenticators[key]
        return len(expired)

    async def find(self, authenticator_id: str) -> Optional[BearerTokenAuthenticator]:
        authenticator = self._authenticators.get(authenticator_id)
        if authenticator is None:
            return None
        if authenticator.is_expired(self._clock.now()):
            async with self._lock:
                self._authenticators.pop(authenticator_id, None)
            logger.debug(f"Reaped expired authenticator {shorten_id(authenticator_id)}.")
            return None
        return authenticator

    async def add(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        async with self._lock:
            reaped = self._sweep_expired()
            if reaped:
                logger.debug(f"Swept {reaped} expired authenticators.")
            if authenticator.id in self._authenticators:
                raise DuplicateAuthenticatorError(authenticator.id)
            self._authenticators[authenticator.id] = authenticator
        logger.debug(f"Added authenticator {shorten_id(authenticator.id)}")
        return authenticator

    async def update(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        async with self._lock:
            self._authenticators[authenticator.id] = authenticator
        logger.debug(f"Updated authenticator {shorten_id(authenticator.id)}")
        return authenticator

    async def remove(self, authenticator_id: str) -> None:
        async with self._lock:
            removed = self._authenticators.pop(authenticator_id, None)
        if removed is not None:
            logger.debug(f"Removed authenticator {shorten_id(authenticator_id)}")
        else:
            logger.debug(f"No authenticator to remove for {shorten_id(authenticator_id)}")
