# bearer_auth/authenticators/models.py
from datetime import datetime, timedelta
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def shorten_id(authenticator_id: str) -> str:
    """Return a log-safe prefix of an authenticator ID; the full value is a bearer credential."""
    return f"{authenticator_id[:10]}..."


class LoginInfo(BaseModel):
    """Links an identity to the provider that authenticated it. Owned by the identity subsystem."""

    model_config = ConfigDict(frozen=True)

    provider_id: str = Field(description="The ID of the provider that authenticated the identity.")
    provider_key: str = Field(description="A unique key identifying the identity within the provider.")

    def __str__(self) -> str:
        return f"{self.provider_id}:{self.provider_key}"


class BearerTokenAuthenticator(BaseModel):
    """
    An authenticator that is transported as a bearer token in a request header and
    mapped to this record in a server-side backing store.

    The authenticator supports sliding window expiration: it times out when it was
    not used for longer than `idle_timeout`. Independently of that it expires at
    `expiration_date`, which is fixed at creation; touching never extends it.

    Instances are immutable. State changes produce a new value via `model_copy`.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="The authenticator ID, which is also the token value sent to the client.")
    login_info: LoginInfo
    last_used_date: datetime
    expiration_date: datetime
    idle_timeout: Optional[timedelta] = Field(
        default=None,
        description="How long the authenticator may stay unused. None disables sliding expiration."
    )

    def is_expired(self, now: datetime) -> bool:
        """Absolute timeout since creation. An expiration date equal to `now` counts as expired."""
        return self.expiration_date <= now

    def is_timed_out(self, now: datetime) -> bool:
        """True if sliding expiration is active and the authenticator was idle for too long."""
        return self.idle_timeout is not None and self.last_used_date + self.idle_timeout <= now

    def is_valid(self, now: datetime) -> bool:
        return not self.is_expired(now) and not self.is_timed_out(now)

    def __str__(self) -> str:
        return (
            f"BearerTokenAuthenticator(id={shorten_id(self.id)}, login_info={self.login_info}, "
            f"last_used_date={self.last_used_date.isoformat()}, "
            f"expiration_date={self.expiration_date.isoformat()}, idle_timeout={self.idle_timeout})"
        )

    __repr__ = __str__


class Touched(BaseModel):
    """The authenticator was touched and its new state must be persisted."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["touched"] = "touched"
    authenticator: BearerTokenAuthenticator

    @property
    def needs_update(self) -> bool:
        return True


class Unchanged(BaseModel):
    """Touching had no effect; there is nothing to persist."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unchanged"] = "unchanged"
    authenticator: BearerTokenAuthenticator

    @property
    def needs_update(self) -> bool:
        return False


TouchResult = Union[Touched, Unchanged]
