"""Unit tests for utils/auth.py module."""

import pytest

from gitquill.exceptions import AuthenticationError, CaptchaError
from gitquill.utils.auth import verify_captcha, verify_password


class TestVerifyPassword:
    """Test cases for the shared password check."""

    def test_correct_password(self):
        """Test that the right password passes."""
        verify_password("s3cret", "s3cret")

    @pytest.mark.parametrize("supplied", ["wrong", "", None, "s3cret ", "S3CRET"])
    def test_wrong_password(self, supplied):
        """Test near misses and missing values."""
        with pytest.raises(AuthenticationError, match="Unauthorized: Invalid password.") as exc_info:
            verify_password(supplied, "s3cret")

        assert exc_info.value.http_status == 401

    def test_unset_expected_password_never_matches(self):
        """Test that an empty configured password rejects everything."""
        with pytest.raises(AuthenticationError):
            verify_password("", "")

    def test_non_ascii_password(self):
        """Test passwords outside ASCII."""
        verify_password("pässwört", "pässwört")
        with pytest.raises(AuthenticationError):
            verify_password("passwort", "pässwört")


class TestVerifyCaptcha:
    """Test cases for the arithmetic question."""

    @pytest.mark.parametrize("answer", ["8", " 8 ", "08"])
    def test_correct_answer(self, answer):
        """Test accepted spellings of the right answer."""
        verify_captcha(5, 3, answer)

    @pytest.mark.parametrize(
        "num1,num2,answer",
        [
            (5, 3, "7"),
            (5, 3, "eight"),
            (5, 3, ""),
            (5, 3, None),
            (None, 3, "3"),
            (5, None, "5"),
        ],
    )
    def test_wrong_answer(self, num1, num2, answer):
        """Test wrong, unparseable and missing parts."""
        with pytest.raises(CaptchaError, match="Incorrect answer to the verification question.") as exc_info:
            verify_captcha(num1, num2, answer)

        assert exc_info.value.http_status == 400
