"""gitquill package.

A headless CMS that commits Markdown posts, images and guestbook entries to a
GitHub repository through the Contents API. Provides an HTTP API for a
browser editor and a command-line tool for operators.
"""

__version__ = "0.1.0"
__description__ = "Headless CMS that commits Markdown posts to GitHub"

# Re-export main classes for convenience
from .client import GitHubClient
from .config import Settings, load_settings
from .posts import PostService
from .guestbook import GuestbookService
from .render import OutputFormatter
from .utils.retry import RetryManager
from .exceptions import (
    GitQuillError,
    ConfigError,
    ValidationError,
    AuthenticationError,
    CaptchaError,
    MaxRetriesExceededError,
    APIError,
    NotFoundError,
    VersionConflictError,
    PathCollisionError,
)

__all__ = [
    "__version__",
    "__description__",
    "GitHubClient",
    "Settings",
    "load_settings",
    "PostService",
    "GuestbookService",
    "OutputFormatter",
    "RetryManager",
    "GitQuillError",
    "ConfigError",
    "ValidationError",
    "AuthenticationError",
    "CaptchaError",
    "MaxRetriesExceededError",
    "APIError",
    "NotFoundError",
    "VersionConflictError",
    "PathCollisionError",
]
