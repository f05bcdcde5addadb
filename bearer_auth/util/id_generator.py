# bearer_auth/util/id_generator.py
import asyncio
import logging
import secrets
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class IDGenerator(ABC):
    """Protocol defining the interface for authenticator ID generation."""

    @abstractmethod
    async def generate(self) -> str:
        """Generate a new unique, unguessable identifier."""
        pass


class SecureRandomIDGenerator(IDGenerator):
    """
    Generates IDs from the operating system's cryptographically secure random source.

    The IDs are the hex encoding of `size_in_bytes` random bytes, so a generated ID
    is twice as long as the configured byte length. Reading the random source may
    block, so the bytes are drawn in a worker thread.
    """

    def __init__(self, size_in_bytes: int = 128):
        if size_in_bytes < 16:
            raise ValueError("SecureRandomIDGenerator requires at least 16 bytes of entropy.")
        self.size_in_bytes = size_in_bytes

    async def generate(self) -> str:
        new_id = await asyncio.to_thread(secrets.token_hex, self.size_in_bytes)
        logger.debug(f"Generated new authenticator ID: {new_id[:10]}...")
        return new_id
