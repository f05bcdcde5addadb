# bearer_auth/storage.py
import logging
from typing import Optional

from .settings import settings as bearer_auth_settings
from .authenticators.storage_interfaces import AbstractAuthenticatorStore
from .authenticators.memory_store import InMemoryAuthenticatorStore
from .authenticators.redis_store import RedisAuthenticatorStore
from .authenticators.sqlite_store import SQLiteAuthenticatorStore
from .util.clock import Clock

logger = logging.getLogger(__name__)

# Global singleton instance management
_authenticator_store_instance: Optional[AbstractAuthenticatorStore] = None


def build_authenticator_store(storage_backend: str, clock: Optional[Clock] = None) -> AbstractAuthenticatorStore:
    """
    Construct an uninitialized store for the given backend name.

    The clock decides when stored authenticators count as expired. Pass the clock
    the service uses so both agree on expiry.
    """
    if storage_backend == "memory":
        return InMemoryAuthenticatorStore(clock=clock)
    if storage_backend == "redis":
        return RedisAuthenticatorStore(
            host=bearer_auth_settings.redis_host,
            port=bearer_auth_settings.redis_port,
            db=bearer_auth_settings.redis_db,
            password=bearer_auth_settings.redis_password,
            clock=clock,
        )
    if storage_backend == "sqlite":
        return SQLiteAuthenticatorStore(db_path=bearer_auth_settings.sqlite_db_path, clock=clock)
    raise ValueError(f"Unsupported storage_backend for authenticators: {storage_backend}")


async def get_authenticator_store(clock: Optional[Clock] = None) -> AbstractAuthenticatorStore:
    """
    Factory function to get the configured authenticator store instance.

    Returns an initialized singleton based on the storage_backend setting. The
    clock is only used when the singleton is first created.
    """
    global _authenticator_store_instance

    if _authenticator_store_instance is None:
        store = build_authenticator_store(bearer_auth_settings.storage_backend, clock)
        logger.info(f"Using {type(store).__name__} for bearer token authenticators.")
        await store.initialize()
        _authenticator_store_instance = store

    return _authenticator_store_instance


async def close_authenticator_store() -> None:
    """Tear down the singleton store, if one was created."""
    global _authenticator_store_instance

    if _authenticator_store_instance is not None:
        await _authenticator_store_instance.teardown()
        _authenticator_store_instance = None
