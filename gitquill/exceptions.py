"""Exception classes for gitquill.

This module defines custom exception classes used throughout the application
for proper error handling and user feedback. Every exception carries the HTTP
status code the request handlers answer with.
"""

from typing import Optional, Dict, Any


class GitQuillError(Exception):
    """Base exception class for all gitquill errors."""

    http_status: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(GitQuillError):
    """Exception raised when deployment configuration is missing or invalid."""
    pass


class ValidationError(GitQuillError):
    """Exception raised for missing or malformed input."""

    http_status = 400


class AuthenticationError(GitQuillError):
    """Exception raised when the shared post password does not match."""

    http_status = 401


class CaptchaError(AuthenticationError):
    """Exception raised when the guestbook verification answer is wrong."""

    http_status = 400


class MaxRetriesExceededError(GitQuillError):
    """Exception raised when maximum retry attempts are exceeded."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_exception: Optional[Exception] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            attempts: Number of attempts made
            last_exception: The last exception that caused the failure
        """
        super().__init__(message)
        self.attempts = attempts
        self.last_exception = last_exception


class APIError(GitQuillError):
    """Base exception for GitHub API errors.

    The message is the upstream ``message`` field, kept verbatim so it can be
    surfaced to the user.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code returned by GitHub
            response_data: Raw response data from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data or {}

    @property
    def http_status(self) -> int:
        # No upstream status means GitHub was never reached
        return self.status_code or 502


class NotFoundError(APIError):
    """Exception raised for 404 Not Found errors."""
    pass


class VersionConflictError(APIError):
    """Exception raised when the supplied version token (SHA) is stale."""
    pass


class PathCollisionError(APIError):
    """Exception raised when a file already exists at a path believed to be new."""
    pass
