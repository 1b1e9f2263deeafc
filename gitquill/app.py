"""Main Typer application for the gitquill CLI.

This module contains the main Typer app instance and registers all command
groups. It provides the entry point for the CLI and handles global options
like the configuration file, debug mode and output formatting.
"""

import sys
from functools import wraps
from pathlib import Path
from typing import Optional

import click
import typer
from rich.console import Console

from . import __version__
from .exceptions import GitQuillError, ConfigError
from .render import OutputFormatter
from .utils.exceptions import format_error_for_user
from .utils.log import configure_logging

# Create main Typer app
app = typer.Typer(
    name="gitquill",
    help="Commit Markdown posts to a GitHub-backed static site",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Global state for shared objects
console = Console()
output_formatter = OutputFormatter(console)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"gitquill {__version__}")
        raise typer.Exit()


# Global options
@app.callback()
def main(
    ctx: typer.Context,
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file (default: ~/.gitquill/config.toml)",
        envvar="GITQUILL_CONFIG",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format (table, json, yaml)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """gitquill - a headless CMS that commits Markdown posts to GitHub.

    Examples:
        # Run the HTTP API for the browser editor
        gitquill serve --port 8000

        # List the newest posts
        gitquill posts list

        # Create a post from a file
        gitquill posts create --title "My Post" --file post.md --tag notes
    """
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["output_format"] = output_format
    ctx.obj["config_file"] = config_file
    ctx.obj["console"] = console
    ctx.obj["output_formatter"] = output_formatter

    configure_logging(debug)

    if debug:
        console.print("[dim]Debug mode enabled[/dim]")
        if config_file:
            console.print(f"[dim]Using configuration file: {config_file}[/dim]")


def handle_exceptions(func):
    """Decorator to handle common exceptions in commands."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GitQuillError as e:
            ctx = click.get_current_context()
            debug = ctx.obj.get("debug", False) if ctx.obj else False
            error_msg = format_error_for_user(e, debug)
            console.print(f"[red]{error_msg}[/red]")
            if not debug and not isinstance(e, ConfigError):
                console.print("[dim]Use --debug for more details[/dim]")
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(130)
    return wrapper


_registered = False


def register_commands() -> None:
    """Register all command groups with the main app."""
    global _registered
    if _registered:
        return

    from .cmds import posts_app, images_app, guestbook_app, config_app, serve

    app.add_typer(posts_app, name="posts", help="Create, update, read and list posts")
    app.add_typer(images_app, name="images", help="Upload images")
    app.add_typer(guestbook_app, name="guestbook", help="Guestbook entries")
    app.add_typer(config_app, name="config", help="Inspect configuration")
    app.command(name="serve", help="Run the HTTP API")(serve)
    _registered = True


# Command modules import handle_exceptions from here, so registration is deferred
def cli() -> None:
    """Entry point for the CLI."""
    register_commands()

    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    cli()
