"""Image uploads.

Images are write-once assets committed next to the posts that embed them.
Each upload gets a timestamp-prefixed name so uploads never overwrite each
other and never need a version token.
"""

import base64
import binascii
import logging
from datetime import datetime
from typing import Optional

from .client import GitHubClient
from .config import Settings
from .exceptions import ValidationError
from .models.image import ImageUploadRequest, ImageUploadResult
from .slug import slugify, timestamp_millis
from .utils.auth import verify_password

logger = logging.getLogger(__name__)

# Replaced by the generated file name in shortcode templates
IMAGE_PLACEHOLDER = "{filename}"


def decode_image_data(data: str) -> bytes:
    """Decode base64 image data, with or without a ``data:...;base64,`` prefix."""
    payload = data.split(";base64,")[-1].strip()
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Image data is not valid base64.")

    if not content:
        raise ValidationError("Image data is empty.")
    return content


def split_image_name(name: str) -> tuple[str, str]:
    """Split an image file name into stem and lowercase extension."""
    stem, dot, extension = name.strip().rpartition(".")
    if not dot or not stem or not extension:
        raise ValidationError(f"Image name must include a file extension: {name}")
    return stem, extension.lower()


def unique_image_name(name: str, now: Optional[datetime] = None) -> str:
    """``<ms-timestamp>-<slugified stem>.<ext>``, e.g. ``1705300000000-cat.png``."""
    stem, extension = split_image_name(name)
    return f"{timestamp_millis(now)}-{slugify(stem) or 'untitled'}.{extension}"


def render_shortcode(template: str, image_name: str) -> str:
    """Fill the image name into a shortcode template."""
    if IMAGE_PLACEHOLDER not in template:
        raise ValidationError(f"Shortcode template must contain {IMAGE_PLACEHOLDER}")
    return template.replace(IMAGE_PLACEHOLDER, image_name)


class ImageUploader:
    """Commits image assets through the GitHub client."""

    def __init__(self, client: GitHubClient) -> None:
        self.client = client

    def upload(
        self,
        image_data: str,
        image_name: str,
        directory: str,
        unique_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ImageUploadResult:
        """Upload one image.

        Args:
            image_data: Base64 image bytes, optionally as a data URL
            image_name: Original file name, used for the stem and extension
            directory: Repository directory to store the image in
            unique_name: Pre-computed file name; generated when omitted
            now: Clock override for name generation

        Returns:
            The committed asset, including the commit SHA
        """
        directory = (directory or "").strip().strip("/")
        if not directory:
            raise ValidationError("Image path is required.")

        content = decode_image_data(image_data)
        name = unique_name or unique_image_name(image_name, now)
        result = self.client.write_file(f"{directory}/{name}", content, f"feat: add image {name}")
        logger.info("Uploaded image %s (%d bytes)", result.path, len(content))

        return ImageUploadResult(
            unique_image_name=name,
            path=result.path,
            url=result.url,
            commit_sha=result.commit_sha,
        )


def upload_image(
    request: ImageUploadRequest,
    settings: Settings,
    client: Optional[GitHubClient] = None,
) -> ImageUploadResult:
    """Handle a standalone image upload from the editor.

    Raises:
        AuthenticationError: If the password is wrong
        ValidationError: If image data, name or path is missing
    """
    verify_password(request.password, settings.post_password)

    if not request.image_data or not request.image_name or not request.image_path:
        raise ValidationError("Image data, name, and path are required.")

    uploader = ImageUploader(client or GitHubClient.from_settings(settings))
    return uploader.upload(request.image_data, request.image_name, request.image_path)
