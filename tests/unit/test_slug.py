"""Unit tests for slug.py module.

Tests slug generation, synthetic titles and post path construction.
"""

import time
from datetime import date, datetime, timezone, timedelta

import pytest

from gitquill.frontmatter import format_timestamp, now_in_offset
from gitquill.slug import (
    MAX_SLUG_LENGTH,
    build_file_path,
    build_slug,
    slugify,
    synthetic_title,
    timestamp_millis,
    unique_suffix,
)


class TestSlugify:
    """Test cases for slugify."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("My First Post", "my-first-post"),
            ("Hello, World!", "hello-world"),
            ("  spaced   out  ", "spaced-out"),
            ("snake_case_title", "snake-case-title"),
            ("--dashes--everywhere--", "dashes-everywhere"),
            ("Crème brûlée", "crme-brle"),
            ("2024 in review", "2024-in-review"),
        ],
    )
    def test_slugify_examples(self, text, expected):
        """Test slugify on representative titles."""
        assert slugify(text) == expected

    def test_slugify_empty_inputs(self):
        """Test that empty and unsluggable inputs give an empty slug."""
        assert slugify("") == ""
        assert slugify(None) == ""
        assert slugify("!!!") == ""
        assert slugify("日本語") == ""

    def test_slugify_truncates_without_trailing_hyphen(self):
        """Test that long slugs are cut to the maximum and not left ending in a hyphen."""
        text = "a" * 49 + " tail words"
        slug = slugify(text)

        assert len(slug) <= MAX_SLUG_LENGTH
        assert slug == "a" * 49
        assert not slug.endswith("-")

    def test_slugify_is_idempotent(self):
        """Test that slugifying a slug changes nothing."""
        for text in ["My First Post", "A_b  C!!d", "x" * 80, " -Lead and trail- "]:
            once = slugify(text)
            assert slugify(once) == once


class TestBuildSlug:
    """Test cases for title and slug derivation."""

    def test_build_slug_uses_title(self):
        """Test that a given title is kept and slugified."""
        assert build_slug("My First Post", "body") == ("My First Post", "my-first-post")

    def test_build_slug_strips_title(self):
        """Test that surrounding whitespace is removed from the title."""
        title, slug = build_slug("  Trimmed  ", "body")
        assert title == "Trimmed"
        assert slug == "trimmed"

    def test_build_slug_synthesizes_title_from_body(self):
        """Test that an empty title is replaced by the first words of the body."""
        title, slug = build_slug("", "One two three four five six seven")

        assert title == "One two three four five..."
        assert slug == "one-two-three-four-five"

    def test_build_slug_falls_back_to_timestamp(self):
        """Test that a title without sluggable characters gives a timestamp slug."""
        now = datetime(2024, 1, 15, 4, 30, 0, 123000, tzinfo=timezone.utc)
        title, slug = build_slug("???", "body", now=now)

        assert title == "???"
        assert slug == "1705293000123"


class TestHelpers:
    """Test cases for timestamps, titles and paths."""

    def test_synthetic_title_short_body(self):
        """Test a body with fewer than five words."""
        assert synthetic_title("Just two") == "Just two..."

    def test_timestamp_millis(self):
        """Test millisecond timestamps from a fixed clock."""
        now = datetime(2024, 1, 15, 4, 30, 0, 123456, tzinfo=timezone.utc)
        assert timestamp_millis(now) == 1705293000123

    def test_timestamp_millis_naive_clock_is_utc(self, monkeypatch):
        """Test that a naive clock is read as UTC, like the post date."""
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        time.tzset()
        try:
            naive = datetime(2024, 1, 15, 4, 30, 0, 123456)
            assert timestamp_millis(naive) == 1705293000123
            assert format_timestamp(now_in_offset(330, naive)) == "2024-01-15T10:00:00+05:30"
        finally:
            monkeypatch.undo()
            time.tzset()

    def test_unique_suffix_is_last_six_digits(self):
        """Test the collision suffix."""
        now = datetime(2024, 1, 15, 4, 30, 0, 123000, tzinfo=timezone.utc)
        assert unique_suffix(now) == "000123"

    def test_build_file_path(self):
        """Test the standard post path."""
        assert build_file_path(date(2024, 1, 15), "my-first-post", "posts") == "posts/2024-01-15-my-first-post.md"

    def test_build_file_path_uses_date_in_its_own_offset(self):
        """Test that the calendar day comes from the datetime as given."""
        late = datetime(2024, 1, 15, 23, 30, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert build_file_path(late, "late", "/content/posts/") == "content/posts/2024-01-15-late.md"

    def test_build_file_path_with_suffix_and_string_date(self):
        """Test suffixes and ISO string dates."""
        path = build_file_path("2024-01-15T10:00:00+05:30", "guestbook", "guestbook", suffix="000123")
        assert path == "guestbook/2024-01-15-guestbook-000123.md"

    def test_build_file_path_without_directory(self):
        """Test a path at the repository root."""
        assert build_file_path(date(2024, 1, 15), "root", "") == "2024-01-15-root.md"
