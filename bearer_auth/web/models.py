# bearer_auth/web/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..authenticators.models import BearerTokenAuthenticator


class TokenIssueRequest(BaseModel):
    """Request model for issuing a token to an identity the host application has already verified."""
    provider_id: str = Field(description="The provider that authenticated the identity, e.g. 'credentials'.")
    provider_key: str = Field(description="The identity's unique key within that provider.")


class TokenResponse(BaseModel):
    """Response model carrying a freshly issued bearer token."""
    token: str = Field(description="The bearer token; send it back in the configured header.")
    expires_at: datetime = Field(description="Absolute expiration date of the token.")
    message: str = "Token issued successfully."


class AuthenticatorView(BaseModel):
    """Public view of an authenticator. The token itself is never echoed back."""
    provider_id: str
    provider_key: str
    last_used_date: datetime
    expiration_date: datetime
    idle_timeout_seconds: Optional[int] = None

    @classmethod
    def from_domain(cls, authenticator: BearerTokenAuthenticator) -> "AuthenticatorView":
        idle_timeout = authenticator.idle_timeout
        return cls(
            provider_id=authenticator.login_info.provider_id,
            provider_key=authenticator.login_info.provider_key,
            last_used_date=authenticator.last_used_date,
            expiration_date=authenticator.expiration_date,
            idle_timeout_seconds=int(idle_timeout.total_seconds()) if idle_timeout is not None else None,
        )
