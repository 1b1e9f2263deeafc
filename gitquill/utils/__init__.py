"""Utility modules for gitquill.

This package contains helpers for request authorization, retry logic, error
presentation and logging setup.
"""

from .auth import verify_password, verify_captcha
from .retry import RetryManager

__all__ = [
    "verify_password",
    "verify_captcha",
    "RetryManager",
]
