"""Front-matter serialization.

Posts are Markdown files with a small YAML header::

    ---
    title: "My First Post"
    tags: ["notes", "python"]
    date: "2024-01-15T10:30:00+05:30"
    lastmod: "2024-01-15T10:30:00+05:30"
    ---

    Hello world

String values are written as double-quoted scalars with JSON escaping, which
YAML reads back unchanged. Timestamps always carry an explicit UTC offset;
server-generated ones use the deployment's canonical offset rather than UTC so
authored dates stay legible in that timezone.
"""

import json
import re
from datetime import date as date_type, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import yaml

from .models.post import FrontMatter, ParsedPost

_BLOCK = re.compile(r"\A---\r?\n(.+?)\r?\n---\r?\n", re.DOTALL)
_TITLE = re.compile(r'^title:\s*"((?:[^"\\]|\\.)*)"', re.MULTILINE)
_DATE = re.compile(r'^date:\s*"?([^"\r\n]+)"?', re.MULTILINE)
_LASTMOD = re.compile(r'^lastmod:\s*"?([^"\r\n]+)"?', re.MULTILINE)
_TAGS = re.compile(r"^tags:\s*\[(.*)\]", re.MULTILINE)

# Code points YAML folds as line breaks or refuses as non-printable
_UNSAFE = re.compile("[\x7f-\x9f\u2028\u2029\ud800-\udfff\ufeff\ufffe\uffff]")


def _quote(value: str) -> str:
    quoted = json.dumps(value, ensure_ascii=False)
    return _UNSAFE.sub(lambda m: "\\u%04x" % ord(m.group()), quoted)


def serialize(meta: FrontMatter, body: str) -> str:
    """Render front-matter followed by the Markdown body.

    The title line is always written when a title is set; ``tags`` is left out
    when there are none, as are ``lastmod``, ``author`` and ``website`` when
    unset.
    """
    lines = ["---"]
    if meta.title is not None:
        lines.append(f"title: {_quote(meta.title)}")
    if meta.author:
        lines.append(f"author: {_quote(meta.author)}")
    if meta.website:
        lines.append(f"website: {_quote(meta.website)}")
    if meta.tags:
        lines.append(f"tags: [{', '.join(_quote(tag) for tag in meta.tags)}]")
    if meta.date:
        lines.append(f"date: {_quote(meta.date)}")
    if meta.lastmod:
        lines.append(f"lastmod: {_quote(meta.lastmod)}")
    lines.append("---")

    return "\n".join(lines) + "\n\n" + body


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (datetime, date_type)):
        return value.isoformat()
    return str(value)


def _as_tags(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    return [str(tag) for tag in value]


def _scan_tags(value: str) -> List[str]:
    tags = []
    for item in value.split(","):
        item = item.strip()
        if len(item) >= 2 and item[0] == item[-1] and item[0] in "\"'":
            item = _unescape(item[1:-1]) if item[0] == '"' else item[1:-1]
        if item:
            tags.append(item)
    return tags


def _unescape(value: str) -> str:
    try:
        return json.loads(f'"{value}"')
    except ValueError:
        return value


def _scan_block(block: str) -> Dict[str, Any]:
    """Pick the known keys out of a header that is not valid YAML."""
    fields: Dict[str, Any] = {}

    title = _TITLE.search(block)
    if title:
        fields["title"] = _unescape(title.group(1))
    date = _DATE.search(block)
    if date:
        fields["date"] = date.group(1).strip()
    lastmod = _LASTMOD.search(block)
    if lastmod:
        fields["lastmod"] = lastmod.group(1).strip()
    tags = _TAGS.search(block)
    if tags:
        fields["tags"] = _scan_tags(tags.group(1))

    return fields


def _load_block(block: str) -> Dict[str, Any]:
    # BaseLoader keeps every scalar a string, so dates come back as written
    try:
        data = yaml.load(block, Loader=yaml.BaseLoader)
    except yaml.YAMLError:
        return _scan_block(block)

    if not isinstance(data, dict):
        return _scan_block(block)
    return data


def parse(text: str) -> ParsedPost:
    """Split a stored post into front-matter fields and body.

    Never fails: text without a front-matter block comes back as an untitled
    post whose body is the whole text.
    """
    match = _BLOCK.match(text)
    if not match:
        return ParsedPost(title="", body=text)

    body = text[match.end():]
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]

    fields = _load_block(match.group(1))
    return ParsedPost(
        title=_as_text(fields.get("title")) or "",
        date=_as_text(fields.get("date")),
        lastmod=_as_text(fields.get("lastmod")),
        tags=_as_tags(fields.get("tags")),
        author=_as_text(fields.get("author")),
        website=_as_text(fields.get("website")),
        body=body,
    )


def canonical_timezone(offset_minutes: int) -> timezone:
    return timezone(timedelta(minutes=offset_minutes))


def now_in_offset(offset_minutes: int, now: Optional[datetime] = None) -> datetime:
    """Current time expressed in the canonical timezone.

    Args:
        offset_minutes: UTC offset of the deployment's timezone
        now: Clock override; naive values are taken as UTC
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(canonical_timezone(offset_minutes)).replace(microsecond=0)


def parse_timestamp(
    value: Optional[str],
    offset_minutes: int,
    now: Optional[datetime] = None,
) -> datetime:
    """Parse a client timestamp, falling back to the current time.

    Naive timestamps are interpreted in the canonical timezone; anything that
    is not ISO-8601 is replaced by ``now_in_offset``.
    """
    if value and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=canonical_timezone(offset_minutes))
            return parsed.replace(microsecond=0)

    return now_in_offset(offset_minutes, now)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with seconds precision and an explicit offset."""
    return value.isoformat(timespec="seconds")


def normalize_timestamp(
    value: Optional[str],
    offset_minutes: int,
    now: Optional[datetime] = None,
) -> str:
    return format_timestamp(parse_timestamp(value, offset_minutes, now))
