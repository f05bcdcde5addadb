# bearer_auth/authenticators/__init__.py
"""
Bearer token authenticators.

This package holds the authenticator entity with its expiration logic, the
service driving its lifecycle, the error taxonomy and the backing store
interface together with its in-memory, Redis and SQLite implementations.
"""

from .models import (
    LoginInfo,
    BearerTokenAuthenticator,
    Touched,
    Unchanged,
    TouchResult,
)

from .settings import AuthenticatorSettings

from .errors import (
    AuthenticatorError,
    AuthenticatorCreationError,
    AuthenticatorRetrievalError,
    AuthenticatorInitializationError,
    AuthenticatorUpdateError,
    AuthenticatorRenewalError,
    AuthenticatorDiscardingError,
    AuthenticatorStoreError,
    DuplicateAuthenticatorError,
)

from .storage_interfaces import AbstractAuthenticatorStore
from .memory_store import InMemoryAuthenticatorStore
from .redis_store import RedisAuthenticatorStore
from .sqlite_store import SQLiteAuthenticatorStore

from .service import BearerTokenAuthenticatorService

__all__ = [
    # Data models
    "LoginInfo",
    "BearerTokenAuthenticator",
    "Touched",
    "Unchanged",
    "TouchResult",
    "AuthenticatorSettings",

    # Exception classes
    "AuthenticatorError",
    "AuthenticatorCreationError",
    "AuthenticatorRetrievalError",
    "AuthenticatorInitializationError",
    "AuthenticatorUpdateError",
    "AuthenticatorRenewalError",
    "AuthenticatorDiscardingError",
    "AuthenticatorStoreError",
    "DuplicateAuthenticatorError",

    # Storage
    "AbstractAuthenticatorStore",
    "InMemoryAuthenticatorStore",
    "RedisAuthenticatorStore",
    "SQLiteAuthenticatorStore",

    # Service
    "BearerTokenAuthenticatorService",
]
