"""
Helper functions for the judicial analytics engine.
"""

import re
import math
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Union
from bs4 import BeautifulSoup, FeatureNotFound
from dateutil import parser as date_parser


def validate_date(date_input: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Validate and convert date input to datetime object.

    Args:
        date_input: Date as string, datetime object, or None

    Returns:
        datetime object or None if invalid

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_input is None:
        return None

    if isinstance(date_input, datetime):
        return date_input

    if isinstance(date_input, str):
        try:
            return date_parser.parse(date_input)
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"Invalid date format: {date_input}") from e

    raise ValueError(f"Unsupported date type: {type(date_input)}")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render a datetime as an ISO-8601 string, assuming UTC when naive."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def is_fresh(
    created_at: Union[str, datetime, None],
    max_age_hours: float,
    now: Optional[datetime] = None,
) -> bool:
    """
    Check whether a timestamp is younger than the given age.

    Args:
        created_at: Creation timestamp (ISO string or datetime)
        max_age_hours: Maximum accepted age in hours
        now: Reference time (defaults to the current UTC time)

    Returns:
        True if the timestamp parses and is strictly younger than max_age_hours
    """
    try:
        created = validate_date(created_at)
    except ValueError:
        return False

    if created is None:
        return False

    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)

    reference = now or utc_now()
    age_hours = (reference - created).total_seconds() / 3600
    return age_hours < max_age_hours


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))


def chunk_list(items: List[Any], size: int) -> List[List[Any]]:
    """
    Split a list into consecutive chunks.

    Args:
        items: Items to split
        size: Maximum chunk size

    Returns:
        List of chunks, the last one possibly shorter
    """
    if size <= 0:
        raise ValueError("Chunk size must be a positive integer")
    return [items[i:i + size] for i in range(0, len(items), size)]


def dedupe(items) -> List[str]:
    """Drop empty and repeated entries, keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if not item or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def sanitize_text(text: str) -> str:
    """
    Clean and sanitize free text taken from case records and opinions.

    Args:
        text: Raw text to sanitize

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    # Remove extra whitespace and normalize line breaks
    text = re.sub(r'\s+', ' ', text.strip())

    # Remove HTML entities that might have been missed
    html_entities = {
        '&nbsp;': ' ',
        '&amp;': '&',
        '&lt;': '<',
        '&gt;': '>',
        '&quot;': '"',
        '&#39;': "'",
        '&apos;': "'",
    }

    for entity, replacement in html_entities.items():
        text = text.replace(entity, replacement)

    # Remove common PDF artifacts
    text = re.sub(r'\f', ' ', text)
    text = re.sub("\u00a0", " ", text)

    # Normalize quotes
    text = re.sub("[\u201c\u201d\u201e]", "\"", text)
    text = re.sub("[\u2018\u2019\u201a]", "'", text)

    # Clean up multiple spaces again after replacements
    text = re.sub(r'\s+', ' ', text).strip()

    return text


def strip_markup(markup: str) -> str:
    """
    Strip HTML/XML markup from opinion text.

    Args:
        markup: Marked-up opinion body

    Returns:
        Plain text with collapsed whitespace (empty string if nothing remains)
    """
    if not markup:
        return ""

    try:
        soup = BeautifulSoup(markup, "lxml")
    except FeatureNotFound:
        soup = BeautifulSoup(markup, "html.parser")

    return sanitize_text(soup.get_text(" "))


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Set up a logger for the engine.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
