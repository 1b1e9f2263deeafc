"""Post models for gitquill."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrontMatter(BaseModel):
    """Metadata header of a Markdown post."""

    title: Optional[str] = None
    date: Optional[str] = None
    tags: List[str] = []
    lastmod: Optional[str] = None
    author: Optional[str] = None
    website: Optional[str] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        """Tags are a set: strip, drop empties and duplicates, sort."""
        return sorted({str(tag).strip() for tag in v if str(tag).strip()})


class ParsedPost(FrontMatter):
    """Front-matter plus the Markdown body that follows it."""

    body: str = ""


class PostDocument(ParsedPost):
    """A stored post together with its version token."""

    sha: str
    path: str


class PostRequest(BaseModel):
    """Create/update request as posted by the editor.

    An update is signalled by supplying both ``path`` and ``sha``.
    """

    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = None
    password: Optional[str] = None
    title: Optional[str] = None
    path: Optional[str] = None
    sha: Optional[str] = None
    tags: List[str] = []
    client_iso_date: Optional[str] = None
    client_lastmod: Optional[str] = None
    image_data: Optional[str] = Field(default=None, alias="imageData")
    image_name: Optional[str] = Field(default=None, alias="imageName")
    image_path: Optional[str] = Field(default=None, alias="imagePath")
    shortcode_template: Optional[str] = Field(default=None, alias="shortcodeTemplate")

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v: Union[str, List[str], None]) -> List[str]:
        """Accept a comma separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [tag.strip() for tag in v.split(",") if tag.strip()]
        return v

    @property
    def is_update(self) -> bool:
        return bool(self.path and self.sha)


class SaveResult(BaseModel):
    """Outcome of a successful post write."""

    message: str
    url: Optional[str] = None
    path: str
    sha: str
    created: bool = Field(default=True, exclude=True)
    image_name: Optional[str] = Field(default=None, serialization_alias="imageName")


class PostSummary(BaseModel):
    """One entry of a post listing."""

    name: str
    path: str
    url: Optional[str] = None


class PostListing(BaseModel):
    """A page of posts, newest first."""

    posts: List[PostSummary] = []
    total_pages: int = Field(default=0, serialization_alias="totalPages")
    current_page: int = Field(default=1, serialization_alias="currentPage")
