# bearer_auth/web/error_handlers.py
import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from ..authenticators.errors import AuthenticatorError

logger = logging.getLogger(__name__)


async def authenticator_error_handler(request: Request, exc: AuthenticatorError) -> JSONResponse:
    """Turn a failed authenticator operation into a 500 response. The cause was logged by the service."""
    logger.error(f"Authenticator operation failed for {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": exc.message},
    )
