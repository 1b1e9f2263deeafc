"""GitHub Contents API client.

This module is the only place that talks to GitHub. It wraps the three
Contents API operations the CMS needs (read a file, write a file, list a
directory) and converts HTTP failures into the exceptions the request handlers
know how to answer.
"""

import base64
import logging
import re
from typing import Dict, List, Any, Optional, Union
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from . import __version__
from .config import Settings
from .exceptions import (
    APIError,
    NotFoundError,
    PathCollisionError,
    ValidationError,
    VersionConflictError,
)
from .models.content import ContentFile, DirectoryEntry, WriteResult

logger = logging.getLogger(__name__)

# GitHub answers a create over an existing file with 422 and this message
_SHA_NOT_SUPPLIED = re.compile(r"\"?sha\"?\s+wasn'?t\s+supplied", re.IGNORECASE)


class GitHubClient:
    """Client for one repository and branch of the GitHub Contents API."""

    def __init__(
        self,
        token: str,
        repository: str,
        branch: str,
        api_url: str = "https://api.github.com",
        timeout: int = 30,
        committer: Optional[Dict[str, str]] = None,
    ) -> None:
        """Initialize GitHub API client.

        Args:
            token: GitHub token with contents access
            repository: Repository in ``owner/name`` form
            branch: Branch to read from and commit to
            api_url: REST API base URL
            timeout: Request timeout in seconds
            committer: Optional ``{"name", "email"}`` commit identity
        """
        if not token:
            raise ValueError("A GitHub token is required")
        if "/" not in repository:
            raise ValueError("Repository must be given as owner/name")

        self.repository = repository
        self.branch = branch
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.committer = committer

        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": f"gitquill/{__version__}",
        })
        self._configure_session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubClient":
        """Create a client for the repository named in the settings."""
        return cls(
            token=settings.github_token,
            repository=settings.repository,
            branch=settings.branch,
            api_url=settings.api_url,
            timeout=settings.timeout,
            committer=settings.committer(),
        )

    def _configure_session(self) -> None:
        """Configure the requests session with connection pooling only."""
        # Failures are reported to the caller, never retried here
        adapter = HTTPAdapter(max_retries=Retry(total=0), pool_connections=10, pool_maxsize=20)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _contents_url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.repository}/contents/{quote(path.strip('/'), safe='/')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method=method, url=url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise APIError(f"Failed to reach GitHub: {e}")

        logger.debug("Response status: %s", response.status_code)
        return response

    @staticmethod
    def _error_data(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _handle_response(
        self,
        response: requests.Response,
        write: bool = False,
        sha: Optional[str] = None,
    ) -> Any:
        """Handle API response and convert errors to appropriate exceptions.

        Args:
            response: Response object
            write: Whether the request was a file write
            sha: Version token sent with the write, if any

        Returns:
            Parsed JSON response

        Raises:
            APIError: For various HTTP error conditions
        """
        if response.ok:
            return response.json()

        error_data = self._error_data(response)
        message = error_data.get("message") or response.reason or f"HTTP {response.status_code}"
        status_code = response.status_code

        if status_code == 404:
            raise NotFoundError(message, status_code=status_code, response_data=error_data)
        if write and status_code == 409:
            raise VersionConflictError(message, status_code=status_code, response_data=error_data)
        if write and status_code == 422 and not sha and _SHA_NOT_SUPPLIED.search(message):
            raise PathCollisionError(message, status_code=status_code, response_data=error_data)

        raise APIError(message, status_code=status_code, response_data=error_data)

    def read_file(self, path: str, ref: Optional[str] = None) -> ContentFile:
        """Read and decode one file.

        Args:
            path: Repository-relative file path
            ref: Branch, tag or commit SHA; defaults to the configured branch

        Returns:
            The decoded file with its version token

        Raises:
            NotFoundError: If the file does not exist at ``ref``
        """
        response = self._request("GET", self._contents_url(path), params={"ref": ref or self.branch})
        data = self._handle_response(response)

        if isinstance(data, list) or data.get("type") != "file":
            raise ValidationError(f"Not a file: {path}")

        raw = base64.b64decode(data.get("content") or "")
        return ContentFile(
            path=data["path"],
            content=raw.decode("utf-8", errors="replace"),
            sha=data["sha"],
            html_url=data.get("html_url"),
        )

    def write_file(
        self,
        path: str,
        content: Union[str, bytes],
        message: str,
        branch: Optional[str] = None,
        sha: Optional[str] = None,
    ) -> WriteResult:
        """Create or update one file in a single commit.

        Args:
            path: Repository-relative file path
            content: Text (UTF-8 encoded) or raw bytes
            message: Commit message
            branch: Target branch; defaults to the configured branch
            sha: Version token of the file being replaced. Omit to create.

        Returns:
            The new version token and URLs

        Raises:
            VersionConflictError: If ``sha`` is stale
            PathCollisionError: If a create hits an existing file
        """
        if isinstance(content, str):
            content = content.encode("utf-8")

        payload: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": branch or self.branch,
        }
        if sha:
            payload["sha"] = sha
        if self.committer:
            payload["committer"] = self.committer

        response = self._request("PUT", self._contents_url(path), json=payload)
        data = self._handle_response(response, write=True, sha=sha)

        file_data = data.get("content") or {}
        commit_data = data.get("commit") or {}
        logger.info("Committed %s (%s)", path, "update" if sha else "create")

        return WriteResult(
            path=file_data.get("path", path.strip("/")),
            sha=file_data["sha"],
            url=file_data.get("html_url"),
            commit_sha=commit_data.get("sha"),
        )

    def list_directory(self, path: str, ref: Optional[str] = None) -> List[DirectoryEntry]:
        """List a directory.

        A directory that does not exist yet is an empty directory.

        Args:
            path: Repository-relative directory path
            ref: Branch, tag or commit SHA; defaults to the configured branch

        Returns:
            Entries as returned by GitHub, unsorted
        """
        response = self._request("GET", self._contents_url(path), params={"ref": ref or self.branch})
        try:
            data = self._handle_response(response)
        except NotFoundError:
            return []

        if not isinstance(data, list):
            raise ValidationError(f"Not a directory: {path}")

        return [
            DirectoryEntry(
                name=item["name"],
                path=item["path"],
                type=item.get("type", "file"),
                url=item.get("html_url"),
            )
            for item in data
        ]

    def get_repository(self) -> Dict[str, Any]:
        """Get repository metadata."""
        response = self._request("GET", f"{self.api_url}/repos/{self.repository}")
        return self._handle_response(response)

    def test_connection(self) -> bool:
        """Test that the token can see the repository.

        Returns:
            True if connection is successful
        """
        try:
            self.get_repository()
            return True
        except APIError as e:
            logger.warning("Connection test failed: %s", e.message)
            return False
