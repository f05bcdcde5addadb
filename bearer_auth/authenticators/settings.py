# bearer_auth/authenticators/settings.py
from datetime import timedelta
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthenticatorSettings(BaseModel):
    """
    The settings for the bearer token authenticator.

    Instances are immutable. Use `copy_with` to derive a changed configuration,
    e.g. from a function passed to `BearerTokenAuthenticatorService.with_settings`.
    """

    model_config = ConfigDict(frozen=True)

    header_name: str = Field(
        default="X-Auth-Token",
        description="The name of the header in which the token will be transferred."
    )
    authenticator_idle_timeout: Optional[timedelta] = Field(
        default=timedelta(minutes=30),
        gt=timedelta(0),
        description="The time an authenticator can be idle before it timed out. None disables it."
    )
    authenticator_expiry: timedelta = Field(
        default=timedelta(hours=12),
        gt=timedelta(0),
        description="The absolute expiry of the authenticator, counted from creation."
    )

    def copy_with(self, **changes: Any) -> "AuthenticatorSettings":
        """Return a new, validated settings value with the given fields replaced."""
        return self.model_validate({**self.model_dump(), **changes})
