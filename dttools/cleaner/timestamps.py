"""Timestamp normalization for instrument exports.

Instruments write times in a handful of layouts. Everything is rewritten to
``YYYY-MM-DD HH:MM:SS``; values that fit none of the layouts are kept as-is.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

logger = logging.getLogger(__name__)

TARGET_FORMAT = "%Y-%m-%d %H:%M:%S"

_ISO_FORMATS = ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S.%f")
_SPACED_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y/%m/%d %H:%M:%S")

# strptime's %f takes at most 6 digits; exports may carry nanoseconds
_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+$")


class TimestampParseError(ValueError):
    """Raised when a timestamp matches none of the known layouts."""


def parse_timestamp(text: str) -> str:
    """Parse ``text`` and return it in ``YYYY-MM-DD HH:MM:SS`` form.

    The layout is chosen by separator: ``T`` selects the ISO layouts (with
    or without fractional seconds, digits past microseconds are dropped),
    a space selects dash or slash dates.

    Raises:
        TimestampParseError: If no layout matches.
    """
    text = text.strip()

    if "T" in text:
        formats = _ISO_FORMATS
        text = _FRACTION_PATTERN.sub(r"\1", text)
    elif " " in text:
        formats = _SPACED_FORMATS
    else:
        raise TimestampParseError(f"Unrecognized time format: {text!r}")

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).strftime(TARGET_FORMAT)
        except ValueError:
            continue

    raise TimestampParseError(f"Invalid time value: {text!r}")


def normalize_timestamp(text: str) -> str:
    """Like ``parse_timestamp`` but returns ``text`` unchanged on failure."""
    try:
        return parse_timestamp(text)
    except TimestampParseError:
        logger.debug("Keeping unparseable time value %r", text)
        return text
