"""Guestbook commands for the gitquill CLI."""

import random
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt

from ..models.guestbook import GuestbookEntryRequest
from ..utils.client_factory import get_guestbook_service
from ..app import handle_exceptions
from .posts import encode_image, read_content

app = typer.Typer()
console = Console()


@app.command()
@handle_exceptions
def sign(
    ctx: typer.Context,
    content: Optional[str] = typer.Option(None, "--content", help="Entry text"),
    file: Optional[Path] = typer.Option(None, "--file", help="Read the entry text from a file"),
    name: Optional[str] = typer.Option(None, "--name", help="Author name"),
    website: Optional[str] = typer.Option(None, "--website", help="Author website"),
    image: Optional[Path] = typer.Option(None, "--image", help="Image file to attach"),
) -> None:
    """Sign the guestbook.

    Asks the same arithmetic question visitors answer on the site.

    Examples:
        gitquill guestbook sign --content "Lovely blog!" --name Ada
    """
    service = get_guestbook_service(ctx)

    num1, num2 = random.randint(1, 9), random.randint(1, 9)
    answer = Prompt.ask(f"What is {num1} + {num2}?", console=console)

    request = GuestbookEntryRequest(
        content=read_content(content, file),
        num1=num1,
        num2=num2,
        verification=answer,
        name=name,
        website=website,
        image_data=encode_image(image) if image else None,
        image_name=image.name if image else None,
    )
    result = service.sign(request)

    console.print(f"[green]✓[/green] {result.message}")
    console.print(f"  Path: {result.path}")
