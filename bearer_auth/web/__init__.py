# bearer_auth/web/__init__.py
"""FastAPI binding of the bearer token authenticator service."""

from .dependencies import (
    get_authenticator_service,
    require_authenticator,
    verify_host_app_secret,
)
from .endpoints import auth_router
from .error_handlers import authenticator_error_handler

__all__ = [
    "get_authenticator_service",
    "require_authenticator",
    "verify_host_app_secret",
    "auth_router",
    "authenticator_error_handler",
]
