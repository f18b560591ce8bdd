"""
Tests for utility helper functions.
"""

import logging
import pytest
from datetime import datetime, timedelta, timezone

from judicial_analytics.utils.helpers import (
    validate_date,
    sanitize_text,
    strip_markup,
    setup_logger,
    is_fresh,
    round_half_up,
    clamp,
    chunk_list,
    dedupe,
    to_iso,
)


class TestValidateDate:
    """Tests for validate_date function."""

    def test_validate_date_with_string(self):
        """Test date validation with string input."""
        result = validate_date("2023-01-15")
        assert result == datetime(2023, 1, 15)

    def test_validate_date_with_datetime(self):
        """Test date validation with datetime input."""
        date = datetime(2023, 1, 15)
        result = validate_date(date)
        assert result == date

    def test_validate_date_with_none(self):
        """Test date validation with None input."""
        result = validate_date(None)
        assert result is None

    def test_validate_date_with_invalid_string(self):
        """Test date validation with invalid string."""
        with pytest.raises(ValueError):
            validate_date("invalid-date")

    def test_validate_date_with_iso_timestamp(self):
        """Test that timezone-aware timestamps keep their offset."""
        result = validate_date("2024-03-01T12:30:00+00:00")
        assert result.tzinfo is not None
        assert result.hour == 12


class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_sanitize_basic_text(self):
        """Test basic text sanitization."""
        result = sanitize_text("  Hello World  ")
        assert result == "Hello World"

    def test_sanitize_empty_text(self):
        """Test sanitization of empty text."""
        result = sanitize_text("")
        assert result == ""

    def test_sanitize_none_text(self):
        """Test sanitization of None."""
        result = sanitize_text(None)
        assert result == ""

    def test_sanitize_entities_and_whitespace(self):
        """Test entity replacement and whitespace collapsing."""
        result = sanitize_text("Smith&nbsp;v.\n\n  Jones &amp; Co.")
        assert result == "Smith v. Jones & Co."

    def test_sanitize_curly_quotes(self):
        """Test normalisation of typographic quotes."""
        result = sanitize_text("“Affirmed,” the court’s order")
        assert result == "\"Affirmed,\" the court's order"


class TestStripMarkup:
    """Tests for strip_markup function."""

    def test_strip_markup_removes_tags(self):
        """Test that tags are removed and text is kept."""
        html = "<html><body><h1>Opinion</h1><p>The judgment is <b>reversed</b>.</p></body></html>"
        result = strip_markup(html)
        assert "<" not in result
        assert "Opinion" in result
        assert "reversed" in result

    def test_strip_markup_empty(self):
        """Test stripping empty markup."""
        assert strip_markup("") == ""
        assert strip_markup(None) == ""


class TestRounding:
    """Tests for round_half_up and clamp."""

    def test_round_half_up(self):
        """Test that halves always round up."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(66.6666) == 67
        assert round_half_up(72.4) == 72

    def test_clamp(self):
        """Test clamping into a range."""
        assert clamp(120, 0, 100) == 100
        assert clamp(-3, 0, 100) == 0
        assert clamp(42, 0, 100) == 42


class TestIsFresh:
    """Tests for is_fresh function."""

    def test_recent_timestamp_is_fresh(self):
        """Test that a timestamp younger than the limit is fresh."""
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        created = to_iso(now - timedelta(hours=23))
        assert is_fresh(created, 24, now=now)

    def test_old_timestamp_is_stale(self):
        """Test that a timestamp at or beyond the limit is stale."""
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert not is_fresh(to_iso(now - timedelta(hours=24)), 24, now=now)
        assert not is_fresh(to_iso(now - timedelta(days=8)), 168, now=now)

    def test_naive_timestamp_is_treated_as_utc(self):
        """Test that naive timestamps are compared as UTC."""
        now = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert is_fresh("2025-06-01T10:00:00", 24, now=now)

    def test_missing_or_invalid_timestamp(self):
        """Test that missing or unparseable timestamps are never fresh."""
        assert not is_fresh(None, 24)
        assert not is_fresh("not a date", 24)


class TestCollections:
    """Tests for chunk_list and dedupe."""

    def test_chunk_list(self):
        """Test chunking into fixed-size batches."""
        assert chunk_list(list(range(5)), 2) == [[0, 1], [2, 3], [4]]
        assert chunk_list([], 100) == []

    def test_chunk_list_invalid_size(self):
        """Test that a non-positive chunk size is rejected."""
        with pytest.raises(ValueError):
            chunk_list([1, 2], 0)

    def test_dedupe(self):
        """Test order-preserving deduplication."""
        assert dedupe(["a", "b", "a", "", "c", None, "b"]) == ["a", "b", "c"]


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger(self):
        """Test logger setup."""
        logger = setup_logger("test_logger")
        assert logger.name == "test_logger"
        assert len(logger.handlers) == 1

    def test_setup_logger_does_not_duplicate_handlers(self):
        """Test that repeated setup keeps a single handler."""
        setup_logger("test_logger_repeat")
        logger = setup_logger("test_logger_repeat", level=logging.DEBUG)
        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
