# bearer_auth/authenticators/redis_store.py
import logging
import math
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError

from ..util.clock import Clock, SystemClock
from .errors import AuthenticatorStoreError, DuplicateAuthenticatorError
from .models import BearerTokenAuthenticator, shorten_id
from .storage_interfaces import AbstractAuthenticatorStore

logger = logging.getLogger(__name__)


class RedisAuthenticatorStore(AbstractAuthenticatorStore):
    """
    Redis-based authenticator store with automatic expiration.

    Each authenticator is stored as JSON under its own key. The key TTL is the time
    left until the authenticator's absolute expiration date, so Redis reaps expired
    entries and `find` returns None for them.
    """

    KEY_PREFIX: str = "bearer_auth:authenticator:"

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        clock: Optional[Clock] = None,
        redis_client: Optional[aioredis.Redis] = None,
    ):
        self._connection_params: Dict[str, Any] = {
            "host": host,
            "port": port,
            "db": db,
            "decode_responses": False,
        }
        if password:
            self._connection_params["password"] = password
        self._clock = clock or SystemClock()
        self._redis_client: Optional[aioredis.Redis] = redis_client

    async def initialize(self) -> None:
        """Establish Redis connection with configured parameters."""
        if self._redis_client:
            logger.debug("RedisAuthenticatorStore: client already set, skipping connect.")
            return

        logger.info(
            f"RedisAuthenticatorStore: connecting to Redis at {self._connection_params['host']}:"
            f"{self._connection_params['port']}, DB: {self._connection_params['db']}"
        )
        try:
            self._redis_client = aioredis.Redis(**self._connection_params)
            await self._redis_client.ping()
            logger.info("RedisAuthenticatorStore: Successfully connected to Redis.")
        except Exception as e:
            logger.error(f"RedisAuthenticatorStore: Failed to connect: {e}", exc_info=True)
            self._redis_client = None
            raise

    async def teardown(self) -> None:
        """Clean up Redis connection."""
        if self._redis_client:
            await self._redis_client.aclose()
            self._redis_client = None
            logger.info("RedisAuthenticatorStore: Connection closed.")

    def _get_client(self) -> aioredis.Redis:
        """Get initialized Redis client or raise error if not ready."""
        if not self._redis_client:
            raise RuntimeError("RedisAuthenticatorStore not initialized. Call initialize() first.")
        return self._redis_client

    def _get_key(self, authenticator_id: str) -> str:
        return f"{self.KEY_PREFIX}{authenticator_id}"

    def _ttl_seconds(self, authenticator: BearerTokenAuthenticator) -> int:
        remaining = (authenticator.expiration_date - self._clock.now()).total_seconds()
        # Redis rejects non-positive expirations
        return max(1, math.ceil(remaining))

    async def find(self, authenticator_id: str) -> Optional[BearerTokenAuthenticator]:
        client = self._get_client()
        data_bytes = await client.get(self._get_key(authenticator_id))
        if not data_bytes:
            return None
        try:
            return BearerTokenAuthenticator.model_validate_json(data_bytes.decode("utf-8"))
        except ValidationError as e:
            logger.error(f"Error deserializing authenticator {shorten_id(authenticator_id)}: {e}")
            raise AuthenticatorStoreError(
                f"Stored authenticator {shorten_id(authenticator_id)} is corrupt."
            ) from e

    async def add(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        client = self._get_client()
        created = await client.set(
            self._get_key(authenticator.id),
            authenticator.model_dump_json().encode("utf-8"),
            ex=self._ttl_seconds(authenticator),
            nx=True,
        )
        if not created:
            raise DuplicateAuthenticatorError(authenticator.id)
        logger.debug(f"Added authenticator {shorten_id(authenticator.id)} to Redis.")
        return authenticator

    async def update(self, authenticator: BearerTokenAuthenticator) -> BearerTokenAuthenticator:
        client = self._get_client()
        await client.set(
            self._get_key(authenticator.id),
            authenticator.model_dump_json().encode("utf-8"),
            ex=self._ttl_seconds(authenticator),
        )
        logger.debug(f"Updated authenticator {shorten_id(authenticator.id)} in Redis.")
        return authenticator

    async def remove(self, authenticator_id: str) -> None:
        client = self._get_client()
        deleted_count = await client.delete(self._get_key(authenticator_id))
        if deleted_count > 0:
            logger.debug(f"Removed authenticator {shorten_id(authenticator_id)} from Redis.")
        else:
            logger.debug(f"No authenticator to remove for {shorten_id(authenticator_id)} in Redis.")
