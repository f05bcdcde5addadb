# bearer_auth/dependencies.py
import logging

from .authenticators.service import BearerTokenAuthenticatorService
from .settings import settings
from .storage import get_authenticator_store
from .util.clock import Clock, SystemClock
from .util.id_generator import SecureRandomIDGenerator

logger = logging.getLogger(__name__)

# Shared by the service and the store so both judge expiry by the same time
authenticator_clock: Clock = SystemClock()


async def get_authenticator_service() -> BearerTokenAuthenticatorService:
    """
    Provides the bearer token authenticator service wired to the configured store,
    a secure random ID generator and the shared clock.
    """
    return BearerTokenAuthenticatorService(
        settings=settings.authenticator_settings(),
        store=await get_authenticator_store(authenticator_clock),
        id_generator=SecureRandomIDGenerator(settings.id_generator_bytes_length),
        clock=authenticator_clock,
    )
