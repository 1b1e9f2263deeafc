"""Slug and file path helpers.

New posts are stored as ``<directory>/<YYYY-MM-DD>-<slug>[-<suffix>].md``. The
optional suffix is taken from the current millisecond timestamp; it makes
collisions unlikely without a lookup but does not rule them out, a real
collision is still reported by GitHub and surfaces as a PathCollisionError.
"""

import re
import time
from datetime import date as date_type, datetime, timezone
from typing import Optional, Tuple, Union

MAX_SLUG_LENGTH = 50
SYNTHETIC_TITLE_WORDS = 5

_WHITESPACE = re.compile(r"\s+")
_INVALID = re.compile(r"[^a-z0-9_-]+")
_HYPHENS = re.compile(r"-{2,}")


def timestamp_millis(now: Optional[datetime] = None) -> int:
    if now is None:
        return time.time_ns() // 1_000_000
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    # Integer seconds plus milliseconds; float milliseconds can round down
    return int(now.replace(microsecond=0).timestamp()) * 1000 + now.microsecond // 1000


def slugify(text: Optional[str]) -> str:
    """Turn arbitrary text into a lowercase, hyphenated, URL-safe slug.

    The result only contains ``[a-z0-9-]``, never starts, ends or doubles a
    hyphen and is at most 50 characters long, so ``slugify`` is idempotent.
    """
    if not text:
        return ""

    s = str(text).lower().strip()
    s = _WHITESPACE.sub("-", s)
    s = _INVALID.sub("", s)
    s = s.replace("_", "-")
    s = _HYPHENS.sub("-", s).strip("-")
    return s[:MAX_SLUG_LENGTH].rstrip("-")


def synthetic_title(body: str) -> str:
    """Title made of the first few words of the body, for untitled posts."""
    words = body.split()[:SYNTHETIC_TITLE_WORDS]
    return " ".join(words) + "..."


def build_slug(title: Optional[str], body: str, now: Optional[datetime] = None) -> Tuple[str, str]:
    """Derive the display title and slug of a post.

    Args:
        title: Title supplied by the author, may be empty
        body: Markdown body, used when the title is missing
        now: Clock override for the timestamp fallback

    Returns:
        Tuple of (display title, slug). When nothing sluggable remains the
        slug is the current millisecond timestamp.
    """
    display_title = title.strip() if title and title.strip() else synthetic_title(body)
    slug = slugify(display_title) or str(timestamp_millis(now))
    return display_title, slug


def unique_suffix(now: Optional[datetime] = None) -> str:
    """Short numeric suffix from the millisecond clock."""
    return str(timestamp_millis(now))[-6:]


def build_file_path(
    date: Union[datetime, date_type, str],
    slug: str,
    directory: str,
    suffix: Optional[str] = None,
) -> str:
    """Build the repository path of a post.

    Args:
        date: Post date; only the calendar day is used
        slug: Post slug
        directory: Repository directory, surrounding slashes are ignored
        suffix: Optional collision-avoidance suffix

    Returns:
        Repository-relative path such as ``posts/2024-01-15-my-first-post.md``
    """
    if isinstance(date, (datetime, date_type)):
        day = date.strftime("%Y-%m-%d")
    else:
        day = str(date)[:10]

    name = f"{day}-{slug}"
    if suffix:
        name = f"{name}-{suffix}"

    directory = directory.strip("/")
    return f"{directory}/{name}.md" if directory else f"{name}.md"
