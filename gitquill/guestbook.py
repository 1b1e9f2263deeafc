"""Guestbook entries.

The same write path as posts, simplified: no password, no updates, no title.
Visitors answer an arithmetic question instead, and every entry gets a
timestamp suffix in its filename since many entries share a date.
"""

import logging
from datetime import datetime
from typing import Optional

from .client import GitHubClient
from .config import Settings
from .exceptions import ValidationError
from .frontmatter import format_timestamp, now_in_offset, serialize
from .images import ImageUploader, split_image_name
from .models.guestbook import GuestbookEntryRequest, GuestbookResult
from .models.post import FrontMatter
from .slug import build_file_path, timestamp_millis, unique_suffix
from .utils.auth import verify_captcha

logger = logging.getLogger(__name__)

GUESTBOOK_TAG = "guestbook"


def guest_image_name(name: str, now: Optional[datetime] = None) -> str:
    """``<ms-timestamp>-guest.<ext>``; visitor file names are not reused."""
    _, extension = split_image_name(name)
    return f"{timestamp_millis(now)}-guest.{extension}"


class GuestbookService:
    """Commits guestbook entries to the configured guestbook directory."""

    def __init__(self, settings: Settings, client: Optional[GitHubClient] = None) -> None:
        self.settings = settings
        self.client = client or GitHubClient.from_settings(settings)
        self.images = ImageUploader(self.client)

    def sign(self, request: GuestbookEntryRequest, now: Optional[datetime] = None) -> GuestbookResult:
        """Validate and commit one entry.

        Raises:
            ValidationError: If the content is missing
            CaptchaError: If the verification answer is wrong
            APIError: GitHub failure
        """
        if not request.content or not request.content.strip():
            raise ValidationError("Content is required.")

        verify_captcha(request.num1, request.num2, request.verification)

        body = request.content
        if request.image_data and request.image_name:
            directory = self.settings.guestbook_image_path
            image = self.images.upload(
                request.image_data,
                request.image_name,
                directory,
                unique_name=guest_image_name(request.image_name, now),
            )
            body = f'{{{{< img src="/{directory}/{image.unique_image_name}" >}}}}\n\n{body}'

        date = now_in_offset(self.settings.timezone_offset_minutes, now)
        path = build_file_path(date, GUESTBOOK_TAG, self.settings.guestbook_post_path, unique_suffix(now))

        meta = FrontMatter(
            date=format_timestamp(date),
            tags=[GUESTBOOK_TAG],
            author=request.name.strip() if request.name else None,
            website=request.website.strip() if request.website else None,
        )
        result = self.client.write_file(path, serialize(meta, body), "feat: new guestbook entry")
        logger.info("Guestbook entry committed at %s", result.path)

        return GuestbookResult(path=result.path, url=result.url)
