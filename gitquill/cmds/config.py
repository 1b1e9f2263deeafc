"""Configuration commands for the gitquill CLI.

Settings come from a TOML file and environment variables; these commands show
the merged result and check it against GitHub.
"""

import typer
from rich.console import Console

from ..utils.client_factory import get_client_from_context, get_settings_from_context
from ..app import handle_exceptions

app = typer.Typer()
console = Console()


@app.command()
@handle_exceptions
def show(ctx: typer.Context) -> None:
    """Show the effective configuration with secrets masked.

    Examples:
        # Show configuration
        gitquill config show

        # Use a specific file
        gitquill --config ./gitquill.toml config show
    """
    settings = get_settings_from_context(ctx)
    formatter = ctx.obj["output_formatter"]
    data = settings.masked_dump()

    if formatter.determine_format(ctx.obj["output_format"]) == "table":
        formatter.render_table(
            [{"setting": key, "value": value} for key, value in data.items()],
            columns=["setting", "value"],
            title="Configuration",
        )
    else:
        formatter.render(data, format=ctx.obj["output_format"])


@app.command()
@handle_exceptions
def check(ctx: typer.Context) -> None:
    """Validate configuration and test access to the repository.

    Examples:
        # Validate in CI/CD
        gitquill config check
    """
    settings = get_settings_from_context(ctx)
    console.print("[green]✓[/green] Configuration is valid")

    console.print(f"[blue]Testing access to {settings.repository}...[/blue]")
    client = get_client_from_context(ctx)
    if not client.test_connection():
        console.print("[red]✗[/red] Cannot reach the repository. Check the token and repository name.")
        raise typer.Exit(1)

    console.print("[green]✓[/green] Repository is reachable")
    entries = client.list_directory(settings.posts_path)
    posts = [entry for entry in entries if entry.is_markdown_file]
    console.print(f"  Posts in {settings.posts_path}: {len(posts)}")
