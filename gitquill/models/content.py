"""GitHub Contents API models."""

from typing import Optional

from pydantic import BaseModel


class ContentFile(BaseModel):
    """A file read from the repository, content already decoded."""

    path: str
    content: str
    sha: str
    html_url: Optional[str] = None


class DirectoryEntry(BaseModel):
    """One item of a directory listing."""

    name: str
    path: str
    type: str
    url: Optional[str] = None  # html_url of the entry

    @property
    def is_markdown_file(self) -> bool:
        return self.type == "file" and self.name.endswith(".md")


class WriteResult(BaseModel):
    """Result of a create or update commit."""

    path: str
    sha: str  # new version token of the file
    url: Optional[str] = None
    commit_sha: Optional[str] = None
