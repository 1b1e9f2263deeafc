"""Command modules for the gitquill CLI.

This module exports all command groups (Typer apps) that can be registered
with the main application.
"""

from .posts import app as posts_app
from .images import app as images_app
from .guestbook import app as guestbook_app
from .config import app as config_app
from .serve import serve

__all__ = [
    "posts_app",
    "images_app",
    "guestbook_app",
    "config_app",
    "serve",
]
