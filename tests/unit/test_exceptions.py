"""Unit tests for exception status codes and user-facing messages."""

import pytest

from gitquill.exceptions import (
    APIError,
    AuthenticationError,
    CaptchaError,
    ConfigError,
    NotFoundError,
    PathCollisionError,
    ValidationError,
    VersionConflictError,
)
from gitquill.utils.exceptions import (
    CONFIG_ERROR_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    format_error_for_user,
    public_message,
    status_for,
)


class TestStatusCodes:
    """Test cases for the HTTP status of each error."""

    @pytest.mark.parametrize(
        "error,status",
        [
            (ValidationError("x"), 400),
            (AuthenticationError("x"), 401),
            (CaptchaError("x"), 400),
            (ConfigError("x"), 500),
            (APIError("x"), 502),
            (APIError("x", status_code=403), 403),
            (NotFoundError("x", status_code=404), 404),
            (VersionConflictError("x", status_code=409), 409),
            (PathCollisionError("x", status_code=422), 422),
            (RuntimeError("x"), 500),
        ],
    )
    def test_status_for(self, error, status):
        """Test the status code mapping."""
        assert status_for(error) == status


class TestPublicMessage:
    """Test cases for messages returned to HTTP clients."""

    def test_upstream_message_is_verbatim(self):
        """Test that GitHub's message is passed through."""
        assert public_message(APIError("Bad credentials", status_code=401)) == "Bad credentials"

    def test_config_error_is_generic(self):
        """Test that configuration details are not exposed."""
        assert public_message(ConfigError("Missing GITHUB_TOKEN")) == CONFIG_ERROR_MESSAGE

    def test_unexpected_error_is_generic(self):
        """Test that unexpected errors are not exposed."""
        assert public_message(KeyError("secret")) == INTERNAL_ERROR_MESSAGE


class TestFormatErrorForUser:
    """Test cases for CLI error messages."""

    def test_config_error_with_missing_values(self):
        """Test the hint for missing configuration."""
        error = ConfigError("Missing required configuration: GITHUB_TOKEN", details={"missing": ["GITHUB_TOKEN"]})
        message = format_error_for_user(error)

        assert message.startswith("Configuration error: Missing required configuration: GITHUB_TOKEN")
        assert "config.toml" in message

    def test_api_error_debug_details(self):
        """Test that response data is only shown in debug mode."""
        error = APIError("Not Found", status_code=404, response_data={"documentation_url": "https://docs"})

        assert "documentation_url" not in format_error_for_user(error)
        assert "documentation_url" in format_error_for_user(error, debug=True)
        assert "Status code: 404" in format_error_for_user(error)

    def test_generic_errors(self):
        """Test plain gitquill and unexpected errors."""
        assert format_error_for_user(ValidationError("bad input")) == "Error: bad input"
        assert "Type: ValueError" in format_error_for_user(ValueError("boom"), debug=True)
