# bearer_auth/http.py
"""
Immutable transport values the authenticator service works on.

The service never mutates a request or a response. Embedding a token produces a
new value with the header replaced, so a request object shared with other code
is never changed under its holder. Helpers convert from and to Starlette objects.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict
from starlette.requests import Request as StarletteRequest
from starlette.responses import Response as StarletteResponse

Headers = Tuple[Tuple[str, str], ...]


def _replace_header(headers: Headers, name: str, value: str) -> Headers:
    lowered = name.lower()
    kept = tuple((k, v) for k, v in headers if k.lower() != lowered)
    return kept + ((name, value),)


class RequestHeader(BaseModel):
    """The parts of an inbound request the authenticator service needs."""

    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    path: str = "/"
    headers: Headers = ()

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup. Returns the first value or None."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def with_header(self, name: str, value: str) -> "RequestHeader":
        """Return a copy in which every header called `name` is replaced by one with `value`."""
        return self.model_copy(update={"headers": _replace_header(self.headers, name, value)})

    @classmethod
    def from_starlette(cls, request: StarletteRequest) -> "RequestHeader":
        return cls(
            method=request.method,
            path=request.url.path,
            headers=tuple(request.headers.items()),
        )


class Result(BaseModel):
    """An outbound response value."""

    model_config = ConfigDict(frozen=True)

    status_code: int = 200
    headers: Headers = ()
    body: bytes = b""
    media_type: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None

    def with_headers(self, *headers: Tuple[str, str]) -> "Result":
        """Return a copy with the given headers set, replacing existing ones of the same name."""
        new_headers = self.headers
        for name, value in headers:
            new_headers = _replace_header(new_headers, name, value)
        return self.model_copy(update={"headers": new_headers})

    def to_starlette(self) -> StarletteResponse:
        return StarletteResponse(
            content=self.body,
            status_code=self.status_code,
            headers=dict(self.headers),
            media_type=self.media_type,
        )


class AuthenticatorResult(Result):
    """A result that has passed through the authenticator service."""

    @classmethod
    def of(cls, result: Result) -> "AuthenticatorResult":
        if isinstance(result, AuthenticatorResult):
            return result
        return cls(**result.model_dump())
