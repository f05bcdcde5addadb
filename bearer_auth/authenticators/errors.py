# bearer_auth/authenticators/errors.py
"""
Errors raised by the authenticator service and its backing stores.

Every lifecycle operation of the service has its own error class. The service
catches any failure at the operation boundary and raises the matching error
chained to the original cause (`raise ... from e`), so the cause is always
available as `__cause__`. A token that cannot be found is not an error.
"""

from .models import shorten_id

# Message templates; the first placeholder is the authenticator type ID
CREATE_ERROR = "[{}] Could not create authenticator for login info: {}"
RETRIEVE_ERROR = "[{}] Could not retrieve authenticator"
INIT_ERROR = "[{}] Could not init authenticator: {}"
UPDATE_ERROR = "[{}] Could not update authenticator: {}"
RENEW_ERROR = "[{}] Could not renew authenticator: {}"
DISCARD_ERROR = "[{}] Could not discard authenticator: {}"


class AuthenticatorError(Exception):
    """Base class for all authenticator lifecycle errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticatorCreationError(AuthenticatorError):
    """Raised when an authenticator could not be created, e.g. because ID generation failed."""


class AuthenticatorRetrievalError(AuthenticatorError):
    """Raised when the backing store could not be queried for the token in a request."""


class AuthenticatorInitializationError(AuthenticatorError):
    """Raised when a new authenticator could not be written to the backing store."""


class AuthenticatorUpdateError(AuthenticatorError):
    """Raised when a touched authenticator could not be written back to the backing store."""


class AuthenticatorRenewalError(AuthenticatorError):
    """
    Raised when an authenticator could not be renewed.

    If the old authenticator was already removed when the failure happened, the
    session is gone and the client has to authenticate again.
    """


class AuthenticatorDiscardingError(AuthenticatorError):
    """Raised when an authenticator could not be removed from the backing store."""


class AuthenticatorStoreError(Exception):
    """Base class for faults reported by a backing store implementation."""


class DuplicateAuthenticatorError(AuthenticatorStoreError):
    """Raised by `add` when an authenticator with the same ID is already stored."""

    def __init__(self, authenticator_id: str):
        self.authenticator_id = authenticator_id
        super().__init__(f"An authenticator with ID {shorten_id(authenticator_id)} already exists.")
