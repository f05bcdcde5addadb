# bearer_auth/authenticators/storage_interfaces.py
from abc import ABC, abstractmethod
from typing import Optional

from .models import BearerTokenAuthenticator


class AbstractAuthenticatorStore(ABC):
    """
    Abstract base class defining the interface for authenticator persistence.

    Entries are keyed by authenticator ID. Implementations must never change the
    ID of an authenticator on write, must raise `DuplicateAuthenticatorError` from
    `add` when the ID is already taken, and must return None from `find` for an
    unknown ID. Concurrent requests bearing the same token are not serialized by
    the service; a store shared by several nodes has to handle that itself.
    """

    @abstractmethod
    async def find(self, authenticator_id: str) -> Optional[BearerTokenAuthenticator]:
        """Retrieve the authenticator stored under the given ID."""
        pass

    @abstractmethod
    async def add(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        """Store a new authenticator and return the stored value."""
        pass

    @abstractmethod
    async def update(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        """Overwrite the stored authenticator with the same ID and return the stored value."""
        pass

    @abstractmethod
    async def remove(self, authenticator_id: str) -> None:
        """Remove the authenticator with the given ID. Unknown IDs are ignored."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the storage backend."""
        pass

    @abstractmethod
    async def teardown(self) -> None:
        """Clean up storage resources."""
        pass
