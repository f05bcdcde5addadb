# bearer_auth/web/dependencies.py
import logging
import secrets
from typing import Optional, Annotated
from fastapi import Request as FastAPIRequest, HTTPException, status, Header, Depends

from ..authenticators.models import BearerTokenAuthenticator
from ..authenticators.service import BearerTokenAuthenticatorService
from ..dependencies import get_authenticator_service
from ..http import RequestHeader
from ..settings import settings

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE_ID = "bearer_auth.not.authenticated"


async def verify_host_app_secret(
    x_host_app_secret: Annotated[Optional[str], Header(alias="X-Host-App-Secret")] = None
) -> str:
    """
    Validates the host application secret from the X-Host-App-Secret header.

    Only a host application that has already established the user's identity may
    have tokens issued. Uses constant-time comparison to prevent timing attacks.
    """
    if not settings.host_app_registration_secret:
        logger.error("HOST_APP_REGISTRATION_SECRET is not configured on the server. Cannot issue tokens.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Token issuance is not configured correctly (server-side)."
        )

    if not x_host_app_secret:
        logger.warning("Host App Auth: X-Host-App-Secret header missing.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized: X-Host-App-Secret header missing.",
        )

    if not secrets.compare_digest(x_host_app_secret, settings.host_app_registration_secret):
        logger.warning("Host App Auth: Invalid X-Host-App-Secret provided.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Invalid X-Host-App-Secret.",
        )

    return x_host_app_secret


async def require_authenticator(
    request: FastAPIRequest,
    service: Annotated[BearerTokenAuthenticatorService, Depends(get_authenticator_service)],
) -> BearerTokenAuthenticator:
    """
    Authenticates a request by its bearer token header.

    The authenticator is retrieved, checked for expiry and idle timeout, and
    touched. Any request without a currently valid authenticator gets a 401.
    """
    authenticator = await service.authenticate(RequestHeader.from_starlette(request))
    if authenticator is None:
        logger.warning(f"Bearer Auth: No valid authenticator for {request.method} {request.url.path}.")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message_id": NOT_AUTHENTICATED_MESSAGE_ID, "message": "Not authenticated."},
            headers={"WWW-Authenticate": f'Bearer realm="{settings.app_name}"'},
        )
    return authenticator
