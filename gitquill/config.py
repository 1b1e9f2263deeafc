"""Configuration management for gitquill.

This module provides the immutable deployment settings shared by every request
handler and CLI command. Settings are read once, from an optional TOML file
and from environment variables (environment wins), and validated up front so a
misconfigured deployment fails fast with a ConfigError.
"""

import os
import tomllib
from pathlib import Path
from typing import Dict, List, Optional, Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigError


DEFAULT_CONFIG_FILE = Path.home() / ".gitquill" / "config.toml"

# Environment variable -> settings field
ENV_VARS: Dict[str, str] = {
    "GITHUB_TOKEN": "github_token",
    "GITHUB_REPO_OWNER": "repo_owner",
    "GITHUB_REPO_NAME": "repo_name",
    "GITHUB_REPO_BRANCH": "branch",
    "GITHUB_REPO_PATH": "posts_path",
    "POST_PASSWORD": "post_password",
    "GUESTBOOK_POST_PATH": "guestbook_post_path",
    "GUESTBOOK_IMAGE_PATH": "guestbook_image_path",
    "GITQUILL_API_URL": "api_url",
    "GITQUILL_TIMEZONE_OFFSET": "timezone_offset_minutes",
    "GITQUILL_PER_PAGE": "per_page",
    "GITQUILL_TIMEOUT": "timeout",
    "GITQUILL_REFETCH_DELAY": "refetch_delay",
    "GITQUILL_REFETCH_ATTEMPTS": "refetch_attempts",
    "GITQUILL_COLLISION_SUFFIX": "collision_suffix",
    "GITQUILL_COMMITTER_NAME": "committer_name",
    "GITQUILL_COMMITTER_EMAIL": "committer_email",
}

REQUIRED_FIELDS = ("github_token", "repo_owner", "repo_name", "branch", "posts_path", "post_password")

SECRET_FIELDS = ("github_token", "post_password")


class Settings(BaseModel):
    """Deployment settings for one content repository."""

    model_config = ConfigDict(frozen=True)

    github_token: str = Field(..., description="GitHub token with contents write access")
    repo_owner: str = Field(..., description="Owner of the content repository")
    repo_name: str = Field(..., description="Name of the content repository")
    branch: str = Field(..., description="Branch posts are committed to")
    posts_path: str = Field(..., description="Directory holding Markdown posts")
    post_password: str = Field(..., description="Shared secret required to write posts")
    api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    guestbook_post_path: str = Field(default="content/guestbook", description="Directory for guestbook entries")
    guestbook_image_path: str = Field(default="assets/guestbook-images", description="Directory for guestbook images")
    timezone_offset_minutes: int = Field(default=330, description="Canonical UTC offset for server timestamps")
    per_page: int = Field(default=20, description="Posts per listing page")
    timeout: int = Field(default=30, description="Request timeout in seconds")
    refetch_delay: float = Field(default=3.0, description="Seconds to wait before re-reading a token after an image commit")
    refetch_attempts: int = Field(default=5, description="Read attempts when re-reading a token")
    collision_suffix: bool = Field(default=False, description="Append a timestamp suffix to new post filenames")
    committer_name: Optional[str] = Field(default=None, description="Commit author name")
    committer_email: Optional[str] = Field(default=None, description="Commit author email")

    @field_validator("github_token", "repo_owner", "repo_name", "branch", "post_password")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty required values."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("posts_path", "guestbook_post_path", "guestbook_image_path")
    @classmethod
    def validate_directory(cls, v: str) -> str:
        """Normalize repository directories to have no surrounding slashes."""
        v = v.strip().strip("/")
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("timezone_offset_minutes")
    @classmethod
    def validate_offset(cls, v: int) -> int:
        """Validate the UTC offset."""
        if not -14 * 60 <= v <= 14 * 60:
            raise ValueError("Timezone offset must be within +/-14 hours")
        return v

    @field_validator("per_page")
    @classmethod
    def validate_per_page(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("per_page must be greater than 0")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout value."""
        if v <= 0:
            raise ValueError("Timeout must be greater than 0")
        if v > 300:  # 5 minutes max
            raise ValueError("Timeout cannot exceed 300 seconds")
        return v

    @field_validator("refetch_delay")
    @classmethod
    def validate_refetch_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Refetch delay cannot be negative")
        return v

    @field_validator("refetch_attempts")
    @classmethod
    def validate_refetch_attempts(cls, v: int) -> int:
        """Validate refetch attempts value."""
        if v < 1:
            raise ValueError("Refetch attempts must be at least 1")
        if v > 10:
            raise ValueError("Refetch attempts cannot exceed 10")
        return v

    @property
    def repository(self) -> str:
        """Repository in ``owner/name`` form."""
        return f"{self.repo_owner}/{self.repo_name}"

    def committer(self) -> Optional[Dict[str, str]]:
        """Committer identity for the Contents API, if configured."""
        if self.committer_name and self.committer_email:
            return {"name": self.committer_name, "email": self.committer_email}
        return None

    def masked_dump(self) -> Dict[str, Any]:
        """Convert settings to a dictionary with secrets masked."""
        data = self.model_dump()
        for name in SECRET_FIELDS:
            data[name] = "[set]" if data.get(name) else "[not set]"
        return data


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load configuration file {config_file}: {e}")

    # Allow either top-level keys or a [gitquill] table
    return dict(data.get("gitquill", data))


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for var, field in ENV_VARS.items():
        value = environ.get(var)
        if value is not None and value != "":
            values[field] = value
    return values


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load and validate settings.

    Args:
        config_file: TOML file to read. Defaults to ``GITQUILL_CONFIG`` or
            ``~/.gitquill/config.toml`` when that file exists.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Validated, immutable settings

    Raises:
        ConfigError: If required values are missing or invalid
    """
    environ = os.environ if environ is None else environ

    values: Dict[str, Any] = {}
    if config_file is None and environ.get("GITQUILL_CONFIG"):
        config_file = Path(environ["GITQUILL_CONFIG"])
    if config_file is not None:
        values.update(_read_config_file(config_file))
    elif DEFAULT_CONFIG_FILE.exists():
        values.update(_read_config_file(DEFAULT_CONFIG_FILE))

    values.update(_read_environment(environ))

    missing = missing_fields(values)
    if missing:
        raise ConfigError(
            f"Missing required configuration: {', '.join(missing)}",
            details={"missing": missing},
        )

    try:
        return Settings(**values)
    except ValidationError as e:
        problems = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        raise ConfigError(f"Invalid configuration: {'; '.join(problems)}", details={"errors": problems})


def missing_fields(values: Mapping[str, Any]) -> List[str]:
    """Return the environment variable names of required settings that are unset."""
    env_names = {field: var for var, field in ENV_VARS.items()}
    return [env_names[field] for field in REQUIRED_FIELDS if not values.get(field)]
