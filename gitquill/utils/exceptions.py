"""Error presentation helpers.

This module turns gitquill exceptions into the short messages shown to users,
both by the HTTP handlers (``public_message``/``status_for``) and by the CLI
(``format_error_for_user``).
"""

from ..exceptions import (
    GitQuillError,
    APIError,
    ConfigError,
)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred."
CONFIG_ERROR_MESSAGE = "Server configuration error."


def status_for(error: Exception) -> int:
    """HTTP status code a request handler answers an error with."""
    if isinstance(error, GitQuillError):
        return error.http_status
    return 500


def public_message(error: Exception) -> str:
    """Message safe to return to an HTTP client.

    Configuration problems and unexpected errors are logged in full by the
    caller but answered with a generic message.
    """
    if isinstance(error, ConfigError):
        return CONFIG_ERROR_MESSAGE
    if isinstance(error, GitQuillError):
        return error.message
    return INTERNAL_ERROR_MESSAGE


def format_error_for_user(error: Exception, debug: bool = False) -> str:
    """Format an error message for user display.

    Args:
        error: The exception to format
        debug: Whether to include debug information

    Returns:
        Formatted error message
    """
    if isinstance(error, ConfigError):
        message = f"Configuration error: {error.message}"
        if error.details.get("missing"):
            message += "\nSet the missing environment variables or add them to ~/.gitquill/config.toml"
        return message

    # For API errors, show status code and response data if available
    if isinstance(error, APIError):
        message = f"GitHub error: {error.message}"
        if error.status_code:
            message += f"\nStatus code: {error.status_code}"
        if error.response_data and debug:
            message += f"\nResponse: {error.response_data}"
        return message

    if isinstance(error, GitQuillError):
        return f"Error: {error.message}"

    # Default formatting
    if debug:
        return f"Error: {str(error)}\nType: {type(error).__name__}"
    else:
        return f"Error: {str(error)}"
