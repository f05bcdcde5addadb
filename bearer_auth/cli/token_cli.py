# bearer_auth/cli/token_cli.py
import asyncio
import json
import typer
from typing import Annotated, Optional

from ..authenticators.errors import AuthenticatorError
from ..authenticators.models import BearerTokenAuthenticator, LoginInfo
from ..authenticators.service import BearerTokenAuthenticatorService
from ..dependencies import get_authenticator_service
from ..http import RequestHeader, Result
from ..settings import settings
from ..storage import close_authenticator_store

app = typer.Typer(
    name="token",
    help="Issue, inspect and revoke bearer tokens in the configured store.",
    no_args_is_help=True
)


def _warn_if_memory_backend() -> None:
    if settings.storage_backend == "memory":
        typer.secho(
            "CLI: Warning - STORAGE_BACKEND is 'memory'; tokens only live as long as this command.",
            fg=typer.colors.YELLOW
        )


def _run(coro):
    """Run a coroutine against the configured store and always close the store afterwards."""
    async def runner():
        try:
            return await coro
        finally:
            await close_authenticator_store()

    try:
        return asyncio.run(runner())
    except AuthenticatorError as e:
        typer.secho(f"CLI: Error - {e.message}", fg=typer.colors.RED)
        raise typer.Exit(code=1)


async def _find(service: BearerTokenAuthenticatorService, token: str) -> Optional[BearerTokenAuthenticator]:
    request = service.embed_into_request(token, RequestHeader())
    return await service.retrieve(request)


@app.command("issue")
def issue_token(
    provider_id: Annotated[str, typer.Argument(help="The provider that authenticated the identity.")],
    provider_key: Annotated[str, typer.Argument(help="The identity's key within that provider.")],
):
    """Create and store a new authenticator and print its token."""
    _warn_if_memory_backend()

    async def issue() -> BearerTokenAuthenticator:
        service = await get_authenticator_service()
        authenticator = await service.create(LoginInfo(provider_id=provider_id, provider_key=provider_key))
        await service.init(authenticator)
        return authenticator

    authenticator = _run(issue())
    typer.echo(authenticator.id)
    typer.secho(f"CLI: Expires at {authenticator.expiration_date.isoformat()}", fg=typer.colors.GREEN, err=True)


@app.command("show")
def show_token(
    token: Annotated[str, typer.Argument(help="The bearer token to look up.")],
):
    """Print the stored authenticator for a token and whether it is currently valid."""
    async def show():
        service = await get_authenticator_service()
        authenticator = await _find(service, token)
        return authenticator, (authenticator.is_valid(service.clock.now()) if authenticator else False)

    authenticator, valid = _run(show())
    if authenticator is None:
        typer.secho("CLI: Token not found.", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    data = authenticator.model_dump(mode="json", exclude={"id"})
    data["valid"] = valid
    typer.echo(json.dumps(data, indent=2))


@app.command("revoke")
def revoke_token(
    token: Annotated[str, typer.Argument(help="The bearer token to revoke.")],
):
    """Remove the authenticator for a token from the store."""
    async def revoke() -> bool:
        service = await get_authenticator_service()
        authenticator = await _find(service, token)
        if authenticator is None:
            return False
        await service.discard(authenticator, Result())
        return True

    if not _run(revoke()):
        typer.secho("CLI: Token not found.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho("CLI: Token revoked.", fg=typer.colors.GREEN)
