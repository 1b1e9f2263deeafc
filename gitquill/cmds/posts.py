"""Post commands for the gitquill CLI.

This module provides commands for listing, reading, creating and updating
Markdown posts in the content repository. Writes go through the same service
as the HTTP API, so the operator's password is checked the same way.
"""

import base64
from pathlib import Path
from typing import Optional, List

import typer
from rich.console import Console
from rich.panel import Panel

from ..exceptions import ValidationError
from ..models.post import PostRequest
from ..utils.client_factory import get_post_service_and_formatter, get_settings_from_context
from ..app import handle_exceptions

app = typer.Typer()
console = Console()


def read_content(content: Optional[str], file: Optional[Path]) -> Optional[str]:
    """Post body from --content or --file; the two are exclusive."""
    if content and file:
        raise ValidationError("Use either --content or --file, not both")
    if file:
        if not file.is_file():
            raise ValidationError(f"File not found: {file}")
        return file.read_text(encoding="utf-8")
    return content


def encode_image(image: Path) -> str:
    """Base64 payload for an image file, as the editor would send it."""
    if not image.is_file():
        raise ValidationError(f"Image not found: {image}")
    return base64.b64encode(image.read_bytes()).decode("ascii")


def image_fields(
    image: Optional[Path],
    image_path: Optional[str],
    shortcode: Optional[str],
) -> dict:
    if not image:
        return {}
    return {
        "image_data": encode_image(image),
        "image_name": image.name,
        "image_path": image_path,
        "shortcode_template": shortcode,
    }


def print_save_result(ctx: typer.Context, formatter, result) -> None:
    data = result.model_dump(by_alias=True, exclude_none=True)
    if formatter.determine_format(ctx.obj["output_format"]) == "table":
        console.print(f"[green]✓[/green] {result.message}")
        console.print(f"  Path: {result.path}")
        console.print(f"  SHA: {result.sha}")
        if result.url:
            console.print(f"  URL: {result.url}")
        if result.image_name:
            console.print(f"  Image: {result.image_name}")
    else:
        formatter.render(data, format=ctx.obj["output_format"])


@app.command("list")
@handle_exceptions
def list_posts(
    ctx: typer.Context,
    page: int = typer.Option(1, "--page", min=1, help="Page number"),
    per_page: Optional[int] = typer.Option(None, "--per-page", min=1, help="Number of posts per page"),
    directory: Optional[str] = typer.Option(None, "--dir", help="Directory to list instead of the posts directory"),
) -> None:
    """List posts, newest first.

    Examples:
        # First page of posts
        gitquill posts list

        # Second page, 10 per page
        gitquill posts list --page 2 --per-page 10
    """
    service, formatter = get_post_service_and_formatter(ctx)
    listing = service.list_posts(page=page, per_page=per_page, directory=directory)

    if formatter.determine_format(ctx.obj["output_format"]) == "table":
        formatter.render_table(
            [post.model_dump() for post in listing.posts],
            columns=["name", "path", "url"],
            title=f"Posts ({len(listing.posts)} items)",
        )
        console.print(f"\n[dim]Page {listing.current_page} of {listing.total_pages}[/dim]")
    else:
        formatter.render(listing.model_dump(by_alias=True), format=ctx.obj["output_format"])


@app.command()
@handle_exceptions
def get(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Post path in the repository"),
) -> None:
    """Show a post with its front-matter and version token.

    Examples:
        # Show a post
        gitquill posts get content/posts/2024-01-15-hello.md

        # Machine readable, e.g. to feed the sha into an update
        gitquill -o json posts get content/posts/2024-01-15-hello.md
    """
    service, formatter = get_post_service_and_formatter(ctx)
    post = service.get_post(path)

    if formatter.determine_format(ctx.obj["output_format"]) == "table":
        formatter.render_table(
            post.model_dump(exclude={"body"}),
            columns=["path", "sha", "title", "date", "lastmod", "tags", "author", "website"],
            title="Post",
        )
        console.print(Panel(post.body or "[dim](empty)[/dim]", title="Body"))
    else:
        formatter.render(post.model_dump(), format=ctx.obj["output_format"])


@app.command()
@handle_exceptions
def create(
    ctx: typer.Context,
    title: Optional[str] = typer.Option(None, "--title", help="Post title (derived from the body if omitted)"),
    content: Optional[str] = typer.Option(None, "--content", help="Markdown body"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read the body from a file"),
    tags: Optional[List[str]] = typer.Option(None, "--tag", help="Tag (can be repeated)"),
    date: Optional[str] = typer.Option(None, "--date", help="Post date (ISO 8601, defaults to now)"),
    image: Optional[Path] = typer.Option(None, "--image", help="Image file to attach"),
    image_path: Optional[str] = typer.Option(None, "--image-path", help="Repository directory for the image"),
    shortcode: Optional[str] = typer.Option(None, "--shortcode", help="Shortcode template containing {filename}"),
) -> None:
    """Create a new post.

    Examples:
        # Create from a file
        gitquill posts create --title "My Post" --file post.md --tag notes

        # Create with an image above the body
        gitquill posts create --title "Trip" --content "Photos." \\
            --image ./beach.jpg --image-path static/images \\
            --shortcode '{{< figure src="/images/{filename}" >}}'
    """
    service, formatter = get_post_service_and_formatter(ctx)
    settings = get_settings_from_context(ctx)

    request = PostRequest(
        content=read_content(content, file),
        password=settings.post_password,
        title=title,
        tags=tags or [],
        client_iso_date=date,
        **image_fields(image, image_path, shortcode),
    )
    result = service.save_post(request)
    print_save_result(ctx, formatter, result)


@app.command()
@handle_exceptions
def update(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Post path in the repository"),
    sha: Optional[str] = typer.Option(None, "--sha", help="Version token the edit is based on (current if omitted)"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    content: Optional[str] = typer.Option(None, "--content", help="New Markdown body"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read the new body from a file"),
    tags: Optional[List[str]] = typer.Option(None, "--tag", help="Replace tags (can be repeated)"),
    image: Optional[Path] = typer.Option(None, "--image", help="Image file to attach"),
    image_path: Optional[str] = typer.Option(None, "--image-path", help="Repository directory for the image"),
    shortcode: Optional[str] = typer.Option(None, "--shortcode", help="Shortcode template containing {filename}"),
) -> None:
    """Update an existing post.

    Fields that are not given keep their stored values. Passing --sha makes
    the update fail if the post changed since that version.

    Examples:
        # Replace the body, keep title, tags and date
        gitquill posts update content/posts/2024-01-15-hello.md --file hello.md

        # Only succeed if nobody else edited the post
        gitquill posts update content/posts/2024-01-15-hello.md --sha 3d21ec5 --tag notes
    """
    service, formatter = get_post_service_and_formatter(ctx)
    settings = get_settings_from_context(ctx)

    current = service.get_post(path)
    body = read_content(content, file)

    request = PostRequest(
        content=body if body is not None else current.body,
        password=settings.post_password,
        title=title or current.title,
        path=current.path,
        sha=sha or current.sha,
        tags=tags or current.tags,
        client_iso_date=current.date,
        **image_fields(image, image_path, shortcode),
    )
    result = service.save_post(request)
    print_save_result(ctx, formatter, result)
