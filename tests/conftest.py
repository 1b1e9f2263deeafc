"""Shared fixtures.

``FakeGitHub`` stands in for ``GitHubClient``: an in-memory branch with the
same version-token rules as the Contents API, so service tests can exercise
conflicts and collisions without HTTP.
"""

import hashlib
from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import pytest

from gitquill.config import Settings
from gitquill.exceptions import NotFoundError, PathCollisionError, ValidationError, VersionConflictError
from gitquill.models.content import ContentFile, DirectoryEntry, WriteResult


def blob_sha(content: bytes) -> str:
    """Git blob id, as GitHub reports it for file contents."""
    return hashlib.sha1(b"blob %d\0" % len(content) + content).hexdigest()


class FakeGitHub:
    """In-memory repository branch."""

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.commits: List[dict] = []
        self.reads: List[dict] = []
        # Reads to answer with 404 before the file becomes visible
        self.pending_not_found = 0

    def seed(self, path: str, content: Union[str, bytes]) -> str:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[path] = content
        return blob_sha(content)

    def text(self, path: str) -> str:
        return self.files[path].decode("utf-8")

    def sha_of(self, path: str) -> str:
        return blob_sha(self.files[path])

    def read_file(self, path: str, ref: Optional[str] = None) -> ContentFile:
        self.reads.append({"path": path, "ref": ref})
        if self.pending_not_found:
            self.pending_not_found -= 1
            raise NotFoundError("Not Found", status_code=404)
        if path not in self.files:
            raise NotFoundError("Not Found", status_code=404)
        return ContentFile(
            path=path,
            content=self.files[path].decode("utf-8"),
            sha=blob_sha(self.files[path]),
            html_url=f"https://github.com/octo/site/blob/main/{path}",
        )

    def write_file(
        self,
        path: str,
        content: Union[str, bytes],
        message: str,
        branch: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> WriteResult:
        if isinstance(content, str):
            content = content.encode("utf-8")

        if path in self.files:
            if not sha:
                raise PathCollisionError(
                    'Invalid request.\n\n"sha" wasn\'t supplied.', status_code=422
                )
            if sha != blob_sha(self.files[path]):
                raise VersionConflictError(f"{path} does not match {sha}", status_code=409)
        elif sha:
            raise VersionConflictError(f"{path} does not match {sha}", status_code=409)

        self.files[path] = content
        commit_sha = hashlib.sha1(f"commit {len(self.commits)}".encode()).hexdigest()
        self.commits.append({"path": path, "message": message, "sha": sha, "commit": commit_sha})

        return WriteResult(
            path=path,
            sha=blob_sha(content),
            url=f"https://github.com/octo/site/blob/main/{path}",
            commit_sha=commit_sha,
        )

    def list_directory(self, path: str, ref: Optional[str] = None) -> List[DirectoryEntry]:
        prefix = path.strip("/") + "/"
        if path.strip("/") in self.files:
            raise ValidationError(f"Not a directory: {path}")

        entries = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix):]
            name, _, tail = rest.partition("/")
            entries[name] = DirectoryEntry(
                name=name,
                path=prefix + name,
                type="dir" if tail else "file",
                url=f"https://github.com/octo/site/blob/main/{prefix}{name}",
            )
        return list(entries.values())

    def get_repository(self) -> dict:
        return {"full_name": "octo/site", "default_branch": "main"}

    def test_connection(self) -> bool:
        return True


@pytest.fixture
def settings():
    """Settings for a test repository; no refetch wait."""
    return Settings(
        github_token="ghp_test",
        repo_owner="octo",
        repo_name="site",
        branch="main",
        posts_path="content/posts",
        post_password="s3cret",
        refetch_delay=0,
        refetch_attempts=3,
    )


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def fixed_now():
    """2024-01-15 04:30:00.123 UTC, i.e. 10:00 at +05:30 (ms 1705293000123)."""
    return datetime(2024, 1, 15, 4, 30, 0, 123000, tzinfo=timezone.utc)
