"""Service factory for CLI commands.

Commands share one lazily loaded ``Settings`` per invocation, kept on the Typer
context, and build their GitHub client and services from it.
"""

from typing import Any, Tuple

import typer

from ..client import GitHubClient
from ..config import Settings, load_settings
from ..guestbook import GuestbookService
from ..posts import PostService


def get_settings_from_context(ctx: typer.Context) -> Settings:
    """Load settings once per invocation.

    Raises:
        ConfigError: If configuration is invalid or missing
    """
    obj = ctx.ensure_object(dict)
    settings = obj.get("settings")
    if settings is None:
        settings = load_settings(obj.get("config_file"))
        obj["settings"] = settings
    return settings


def get_client_from_context(ctx: typer.Context) -> GitHubClient:
    """Build a GitHub client from the context settings, reusing it within a command."""
    obj = ctx.ensure_object(dict)
    client = obj.get("client")
    if client is None:
        client = GitHubClient.from_settings(get_settings_from_context(ctx))
        obj["client"] = client
    return client


def get_post_service_and_formatter(ctx: typer.Context) -> Tuple[PostService, Any]:
    """Get a post service and the output formatter from context."""
    service = PostService(get_settings_from_context(ctx), client=get_client_from_context(ctx))
    return service, ctx.obj["output_formatter"]


def get_guestbook_service(ctx: typer.Context) -> GuestbookService:
    return GuestbookService(get_settings_from_context(ctx), client=get_client_from_context(ctx))
