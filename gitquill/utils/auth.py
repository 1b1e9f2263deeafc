"""Request authorization checks.

Writing posts and uploading images is gated by one shared password; the
guestbook is gated by a small arithmetic question instead.
"""

import hmac
from typing import Optional

from ..exceptions import AuthenticationError, CaptchaError


def verify_password(supplied: Optional[str], expected: str) -> None:
    """Check the shared post password in constant time.

    Raises:
        AuthenticationError: If the password is missing or wrong
    """
    if not supplied or not expected:
        raise AuthenticationError("Unauthorized: Invalid password.")

    if not hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8")):
        raise AuthenticationError("Unauthorized: Invalid password.")


def verify_captcha(num1: Optional[int], num2: Optional[int], answer: Optional[str]) -> None:
    """Check the answer to "what is num1 plus num2?".

    Raises:
        CaptchaError: If any part is missing or the sum does not match
    """
    if num1 is None or num2 is None or answer is None:
        raise CaptchaError("Incorrect answer to the verification question.")

    try:
        value = int(answer.strip())
    except ValueError:
        raise CaptchaError("Incorrect answer to the verification question.")

    if value != num1 + num2:
        raise CaptchaError("Incorrect answer to the verification question.")
