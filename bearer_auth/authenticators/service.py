# bearer_auth/authenticators/service.py
import logging
from typing import Callable, Optional

from ..http import AuthenticatorResult, RequestHeader, Result
from ..util.clock import Clock
from ..util.id_generator import IDGenerator
from .errors import (
    CREATE_ERROR,
    DISCARD_ERROR,
    INIT_ERROR,
    RENEW_ERROR,
    RETRIEVE_ERROR,
    UPDATE_ERROR,
    AuthenticatorCreationError,
    AuthenticatorDiscardingError,
    AuthenticatorInitializationError,
    AuthenticatorRenewalError,
    AuthenticatorRetrievalError,
    AuthenticatorStoreError,
    AuthenticatorUpdateError,
)
from .models import BearerTokenAuthenticator, LoginInfo, Touched, TouchResult, Unchanged, shorten_id
from .settings import AuthenticatorSettings
from .storage_interfaces import AbstractAuthenticatorStore

logger = logging.getLogger(__name__)


class BearerTokenAuthenticatorService:
    """
    The service that handles the bearer token authenticator.

    A token travels in a configurable request header and maps to an authenticator
    kept in a backing store. Deciding and persisting are separate steps: `create`
    and `touch` only compute values, while `init`, `update`, `renew` and `discard`
    are the only operations that write to the store.

    Every failure of an operation is re-raised as the operation's own error class,
    chained to its cause. Nothing is retried here.
    """

    ID = "bearer-token-authenticator"

    def __init__(
        self,
        settings: AuthenticatorSettings,
        store: AbstractAuthenticatorStore,
        id_generator: IDGenerator,
        clock: Clock,
    ):
        if not isinstance(store, AbstractAuthenticatorStore):
            raise TypeError("BearerTokenAuthenticatorService requires an instance of AbstractAuthenticatorStore.")
        self.settings = settings
        self.store = store
        self.id_generator = id_generator
        self.clock = clock

    def with_settings(
        self, f: Callable[[AuthenticatorSettings], AuthenticatorSettings]
    ) -> "BearerTokenAuthenticatorService":
        """Return a new service whose settings are `f(settings)`, sharing store, ID generator and clock."""
        return BearerTokenAuthenticatorService(f(self.settings), self.store, self.id_generator, self.clock)

    async def create(self, login_info: LoginInfo) -> BearerTokenAuthenticator:
        """Create a new, not yet persisted authenticator for the given login info."""
        try:
            authenticator_id = await self.id_generator.generate()
            now = self.clock.now()
            authenticator = BearerTokenAuthenticator(
                id=authenticator_id,
                login_info=login_info,
                last_used_date=now,
                expiration_date=now + self.settings.authenticator_expiry,
                idle_timeout=self.settings.authenticator_idle_timeout,
            )
        except Exception as e:
            message = CREATE_ERROR.format(self.ID, login_info)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorCreationError(message) from e

        logger.debug(f"Created authenticator {shorten_id(authenticator.id)} for {login_info}.")
        return authenticator

    async def retrieve(self, request: RequestHeader) -> Optional[BearerTokenAuthenticator]:
        """
        Retrieve the authenticator for the token found in the request.

        A request without the token header is not an error, nor is a token the store
        doesn't know. Both yield None; the store is not consulted in the first case.
        """
        try:
            token = request.header(self.settings.header_name)
            if token is None:
                logger.debug(f"No '{self.settings.header_name}' header in request to {request.path}.")
                return None
            return await self.store.find(token)
        except Exception as e:
            message = RETRIEVE_ERROR.format(self.ID)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorRetrievalError(message) from e

    async def init(self, authenticator: BearerTokenAuthenticator) -> str:
        """Persist a new authenticator and return its token value."""
        try:
            stored = await self.store.add(authenticator)
            if stored.id != authenticator.id:
                raise AuthenticatorStoreError(
                    f"Store {type(self.store).__name__} changed the authenticator ID on add."
                )
        except Exception as e:
            message = INIT_ERROR.format(self.ID, authenticator)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorInitializationError(message) from e

        logger.info(f"Initialized authenticator {shorten_id(stored.id)} for {stored.login_info}.")
        return stored.id

    async def embed(self, token: str, result: Result) -> AuthenticatorResult:
        """Add a header with the token as value to the result."""
        return AuthenticatorResult.of(result.with_headers((self.settings.header_name, token)))

    def embed_into_request(self, token: str, request: RequestHeader) -> RequestHeader:
        """Return a copy of the request carrying the token header. The given request is unchanged."""
        return request.with_header(self.settings.header_name, token)

    def touch(self, authenticator: BearerTokenAuthenticator) -> TouchResult:
        """
        Mark the authenticator as used now.

        Only authenticators with sliding expiration change; for those the result is
        `Touched` and must be persisted with `update`. Otherwise it is `Unchanged`.
        """
        if authenticator.idle_timeout is not None:
            return Touched(authenticator=authenticator.model_copy(update={"last_used_date": self.clock.now()}))
        return Unchanged(authenticator=authenticator)

    async def update(self, authenticator: BearerTokenAuthenticator, result: Result) -> AuthenticatorResult:
        """
        Write the authenticator back to the backing store.

        The token itself never changes on a touch, so the result needn't carry it again.
        """
        try:
            await self.store.update(authenticator)
        except Exception as e:
            message = UPDATE_ERROR.format(self.ID, authenticator)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorUpdateError(message) from e
        return AuthenticatorResult.of(result)

    async def renew(self, authenticator: BearerTokenAuthenticator) -> str:
        """
        Revoke the authenticator and issue a new one for the same login info.

        The old token is unusable as soon as it has been removed from the store, even
        if creating the new authenticator fails afterwards. The new token is not
        embedded anywhere; use `renew_result` for that.
        """
        try:
            await self.store.remove(authenticator.id)
            logger.info(f"Revoked authenticator {shorten_id(authenticator.id)} for renewal.")
            return await self.init(await self.create(authenticator.login_info))
        except Exception as e:
            message = RENEW_ERROR.format(self.ID, authenticator)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorRenewalError(message) from e

    async def renew_result(self, authenticator: BearerTokenAuthenticator, result: Result) -> AuthenticatorResult:
        """Renew the authenticator and replace the token header in the result with the new token."""
        try:
            token = await self.renew(authenticator)
            return await self.embed(token, result)
        except AuthenticatorRenewalError:
            raise
        except Exception as e:
            message = RENEW_ERROR.format(self.ID, authenticator)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorRenewalError(message) from e

    async def discard(self, authenticator: BearerTokenAuthenticator, result: Result) -> AuthenticatorResult:
        """
        Remove the authenticator from the backing store.

        The result is returned as is; telling the client to drop the token is up to the caller.
        """
        try:
            await self.store.remove(authenticator.id)
        except Exception as e:
            message = DISCARD_ERROR.format(self.ID, authenticator)
            logger.error(f"{message}: {e}", exc_info=True)
            raise AuthenticatorDiscardingError(message) from e

        logger.info(f"Discarded authenticator {shorten_id(authenticator.id)} for {authenticator.login_info}.")
        return AuthenticatorResult.of(result)

    async def authenticate(self, request: RequestHeader) -> Optional[BearerTokenAuthenticator]:
        """
        Retrieve, validate and touch the authenticator of a request in one go.

        Returns None when the request carries no token, an unknown token or an
        authenticator that is no longer valid. A touched authenticator is written
        back before it is returned.
        """
        authenticator = await self.retrieve(request)
        if authenticator is None:
            return None

        if not authenticator.is_valid(self.clock.now()):
            logger.info(f"Authenticator {shorten_id(authenticator.id)} is expired or timed out.")
            return None

        touched = self.touch(authenticator)
        if touched.needs_update:
            await self.update(touched.authenticator, Result())
        return touched.authenticator
