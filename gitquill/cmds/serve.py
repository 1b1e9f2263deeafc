"""Run the HTTP API."""

import typer
import uvicorn
from rich.console import Console

from ..server import create_app
from ..utils.client_factory import get_settings_from_context
from ..app import handle_exceptions

console = Console()


@handle_exceptions
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development)"),
) -> None:
    """Run the HTTP API for the browser editor.

    Configuration is validated before the server starts.

    Examples:
        gitquill serve --host 0.0.0.0 --port 8080
    """
    settings = get_settings_from_context(ctx)
    console.print(f"[blue]Serving {settings.repository} ({settings.branch}) on http://{host}:{port}[/blue]")

    # log_config=None keeps the RichHandler set up by the CLI
    if reload:
        # The reloader imports the app itself; settings are read again from the environment
        uvicorn.run("gitquill.server:create_app", factory=True, host=host, port=port, reload=True, log_config=None)
    else:
        uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
