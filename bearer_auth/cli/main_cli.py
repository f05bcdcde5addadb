# bearer_auth/cli/main_cli.py
import typer
import uvicorn
from . import token_cli
from ..settings import settings

# Main CLI application with help enabled when no arguments are provided
app = typer.Typer(
    name="bearer-auth",
    help="Bearer Auth Command Line Interface.",
    no_args_is_help=True
)

app.add_typer(token_cli.app, name="token")


@app.callback()
def main_callback():
    """
    Bearer Auth main CLI application.
    Use 'bearer-auth token --help' for token commands.
    """
    pass


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind to."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
):
    """Run the HTTP API with uvicorn."""
    uvicorn.run(
        "bearer_auth.main:app",
        host=host,
        port=port,
        log_level="debug" if settings.debug_mode else settings.log_level.lower(),
        reload=reload
    )


def cli_entry_point():
    """Entry point function for console script registration in pyproject.toml"""
    app()


if __name__ == "__main__":
    cli_entry_point()
