"""Image commands for the gitquill CLI.

Uploads an image file to the content repository under a unique,
timestamped name.
"""

from pathlib import Path
import mimetypes

import typer
from rich.console import Console

from ..exceptions import ValidationError
from ..images import upload_image
from ..models.image import ImageUploadRequest
from ..utils.client_factory import get_client_from_context, get_settings_from_context
from ..app import handle_exceptions
from .posts import encode_image

app = typer.Typer()
console = Console()


def validate_image_file(file_path: Path) -> None:
    """Validate that the file looks like an image."""
    if not file_path.exists():
        raise ValidationError(f"File not found: {file_path}")

    if not file_path.is_file():
        raise ValidationError(f"Not a file: {file_path}")

    if not file_path.suffix:
        raise ValidationError(f"Image file needs an extension: {file_path.name}")

    mime_type, _ = mimetypes.guess_type(str(file_path))
    if mime_type and not mime_type.startswith("image/"):
        raise ValidationError(f"File is not an image: {mime_type}")


@app.command()
@handle_exceptions
def upload(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Image file to upload"),
    path: str = typer.Option(..., "--path", help="Repository directory to store the image in"),
) -> None:
    """Upload an image.

    Examples:
        # Upload into static/images
        gitquill images upload ./photo.jpg --path static/images

        # Print the result as JSON
        gitquill -o json images upload ./photo.jpg --path static/images
    """
    validate_image_file(file)

    settings = get_settings_from_context(ctx)
    formatter = ctx.obj["output_formatter"]

    request = ImageUploadRequest(
        password=settings.post_password,
        image_data=encode_image(file),
        image_name=file.name,
        image_path=path,
    )
    result = upload_image(request, settings, client=get_client_from_context(ctx))

    if formatter.determine_format(ctx.obj["output_format"]) == "table":
        console.print(f"[green]✓[/green] {result.message}")
        console.print(f"  Name: {result.unique_image_name}")
        console.print(f"  Path: {result.path}")
        if result.url:
            console.print(f"  URL: {result.url}")
    else:
        formatter.render(result.model_dump(by_alias=True, exclude_none=True), format=ctx.obj["output_format"])
