"""Data models for gitquill.

This package contains Pydantic models for posts, images, guestbook entries
and the GitHub Contents API responses the gateway returns.
"""

from .post import (
    FrontMatter,
    ParsedPost,
    PostDocument,
    PostRequest,
    SaveResult,
    PostSummary,
    PostListing,
)
from .content import ContentFile, DirectoryEntry, WriteResult
from .image import ImageUploadRequest, ImageUploadResult
from .guestbook import GuestbookEntryRequest, GuestbookResult


__all__ = [
    # Posts
    "FrontMatter",
    "ParsedPost",
    "PostDocument",
    "PostRequest",
    "SaveResult",
    "PostSummary",
    "PostListing",

    # GitHub contents
    "ContentFile",
    "DirectoryEntry",
    "WriteResult",

    # Images and guestbook
    "ImageUploadRequest",
    "ImageUploadResult",
    "GuestbookEntryRequest",
    "GuestbookResult",
]
