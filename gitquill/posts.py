"""Post operations: save (create or update), read and list.

``PostService.save_post`` is the one operation with real sequencing. A request
goes through these steps, each depending on the previous one:

1. validate input and the shared password
2. upload the optional image and prefix its shortcode to the body
3. when updating after an image upload, re-read the post's version token
4. build the path and the front-matter
5. commit the file, sending the version token on updates
6. translate stale-token and path-collision failures for the user

Nothing is rolled back: if the post write fails after the image upload, the
image stays in the repository.
"""

import logging
import math
import time
from datetime import datetime
from typing import Any, Optional

from .client import GitHubClient
from .config import Settings
from .exceptions import (
    APIError,
    MaxRetriesExceededError,
    NotFoundError,
    PathCollisionError,
    ValidationError,
    VersionConflictError,
)
from .frontmatter import format_timestamp, normalize_timestamp, parse, parse_timestamp, serialize
from .images import IMAGE_PLACEHOLDER, ImageUploader, render_shortcode
from .models.post import FrontMatter, PostDocument, PostListing, PostRequest, PostSummary, SaveResult
from .slug import build_file_path, build_slug, unique_suffix
from .utils.auth import verify_password
from .utils.retry import RetryManager

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "This post was changed since you opened it. Refresh the post and try again."
COLLISION_MESSAGE = "A post with this filename already exists. Choose a different title."


def parse_page(value: Any) -> int:
    """Page number from a query parameter; anything unusable means page 1."""
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


class PostService:
    """Create, update, read and list Markdown posts in the content repository."""

    def __init__(self, settings: Settings, client: Optional[GitHubClient] = None) -> None:
        """Initialize the service.

        Args:
            settings: Deployment settings
            client: GitHub client; built from the settings when omitted
        """
        self.settings = settings
        self.client = client or GitHubClient.from_settings(settings)
        self.images = ImageUploader(self.client)

    def save_post(self, request: PostRequest, now: Optional[datetime] = None) -> SaveResult:
        """Create a new post or update an existing one.

        Args:
            request: Editor request; ``path`` plus ``sha`` marks an update
            now: Clock override

        Returns:
            The committed post. ``created`` tells 201 from 200.

        Raises:
            ValidationError: Missing content, password or image fields
            AuthenticationError: Wrong password
            VersionConflictError: The post changed since the editor loaded it
            PathCollisionError: A new post's path is already taken
            APIError: Any other GitHub failure, message kept verbatim
        """
        if not request.content or not request.password:
            raise ValidationError("Content and password are required.")

        verify_password(request.password, self.settings.post_password)

        if bool(request.path) != bool(request.sha):
            raise ValidationError("Updating a post requires both its path and sha.")

        is_update = request.is_update
        body = request.content
        sha = request.sha
        image_name = None

        if request.image_data:
            if not request.image_path or not request.shortcode_template:
                raise ValidationError("Image path and shortcode template are required when attaching an image.")
            if not request.image_name:
                raise ValidationError("Image name is required when attaching an image.")
            if IMAGE_PLACEHOLDER not in request.shortcode_template:
                raise ValidationError(f"Shortcode template must contain {IMAGE_PLACEHOLDER}")

            image = self.images.upload(request.image_data, request.image_name, request.image_path, now=now)
            image_name = image.unique_image_name
            body = f"{render_shortcode(request.shortcode_template, image_name)}\n\n{body}"

            # The image is its own commit; never write with a token older than it
            if is_update:
                sha = self.refetch_sha(request.path, request.sha, image.commit_sha)

        offset = self.settings.timezone_offset_minutes
        date = parse_timestamp(request.client_iso_date, offset, now)
        lastmod = normalize_timestamp(request.client_lastmod, offset, now)
        title, slug = build_slug(request.title, request.content, now)

        if is_update:
            path = request.path.strip("/")
        else:
            suffix = unique_suffix(now) if self.settings.collision_suffix else None
            path = build_file_path(date, slug, self.settings.posts_path, suffix)

        meta = FrontMatter(title=title, tags=request.tags, date=format_timestamp(date), lastmod=lastmod)
        text = serialize(meta, body)
        message = f"feat: update post '{title}'" if is_update else f"feat: add new post '{title}'"

        try:
            result = self.client.write_file(path, text, message, sha=sha if is_update else None)
        except VersionConflictError as e:
            logger.warning("Stale sha for %s: %s", path, e.message)
            raise VersionConflictError(CONFLICT_MESSAGE, status_code=409, response_data=e.response_data) from e
        except PathCollisionError as e:
            logger.warning("Path already exists: %s", path)
            raise PathCollisionError(COLLISION_MESSAGE, status_code=422, response_data=e.response_data) from e

        return SaveResult(
            message="File updated successfully!" if is_update else "File created successfully!",
            url=result.url,
            path=result.path,
            sha=result.sha,
            created=not is_update,
            image_name=image_name,
        )

    def refetch_sha(self, path: str, expected_sha: str, commit_sha: Optional[str]) -> str:
        """Re-read a post's version token after an image commit.

        Waits ``refetch_delay`` seconds, then reads the post as of the image
        commit, polling while GitHub does not know that commit yet. Image
        commits leave the post's blob untouched, so a token that differs from
        the one the editor loaded means someone else changed the post.

        Args:
            path: Post path
            expected_sha: Token the editor loaded the post with
            commit_sha: Commit created by the image upload

        Returns:
            The current token, not older than the image commit

        Raises:
            VersionConflictError: If the post changed since the editor loaded it
            NotFoundError: If the post cannot be read at the image commit
        """
        if self.settings.refetch_delay:
            logger.info("Waiting %.1fs before re-reading %s", self.settings.refetch_delay, path)
            time.sleep(self.settings.refetch_delay)

        ref = commit_sha or self.settings.branch
        poller = RetryManager(
            max_retries=self.settings.refetch_attempts - 1,
            base_delay=1.0,
            max_delay=5.0,
            retry_on=(NotFoundError,),
        )

        try:
            current = poller.execute_with_retry(lambda: self.client.read_file(path, ref=ref))
        except MaxRetriesExceededError as e:
            raise NotFoundError(
                f"Could not re-read {path} after the image upload.",
                status_code=404,
                response_data={"attempts": e.attempts},
            ) from e

        if current.sha != expected_sha:
            logger.warning("Token for %s moved from %s to %s", path, expected_sha, current.sha)
            raise VersionConflictError(CONFLICT_MESSAGE, status_code=409)

        return current.sha

    def get_post(self, path: Optional[str]) -> PostDocument:
        """Read one post for editing.

        Raises:
            ValidationError: If no path is given
            APIError: GitHub failure, e.g. NotFoundError for a missing file
        """
        if not path or not path.strip():
            raise ValidationError("File path is required.")

        try:
            file = self.client.read_file(path.strip())
        except APIError as e:
            raise type(e)(
                f"Failed to fetch file content: {e.message}",
                status_code=e.status_code,
                response_data=e.response_data,
            ) from e

        parsed = parse(file.content)
        return PostDocument(**parsed.model_dump(), sha=file.sha, path=file.path)

    def list_posts(
        self,
        page: int = 1,
        per_page: Optional[int] = None,
        directory: Optional[str] = None,
    ) -> PostListing:
        """List Markdown posts, newest first.

        Filenames start with the post date, so sorting names in reverse gives
        reverse chronological order. A missing directory is an empty listing.

        Args:
            page: 1-based page number
            per_page: Page size; defaults to the configured size
            directory: Directory to list; defaults to the posts directory
        """
        per_page = per_page or self.settings.per_page
        if per_page < 1:
            raise ValidationError("per_page must be at least 1")
        page = parse_page(page)

        try:
            entries = self.client.list_directory(directory or self.settings.posts_path)
        except APIError as e:
            logger.error("Listing failed: %s", e.message)
            raise type(e)(
                f"Failed to fetch from GitHub: {e.message}",
                status_code=e.status_code,
                response_data=e.response_data,
            ) from e

        posts = sorted((e for e in entries if e.is_markdown_file), key=lambda e: e.name, reverse=True)
        start = (page - 1) * per_page

        return PostListing(
            posts=[PostSummary(name=e.name, path=e.path, url=e.url) for e in posts[start:start + per_page]],
            total_pages=math.ceil(len(posts) / per_page),
            current_page=page,
        )
