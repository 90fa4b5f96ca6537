"""
ServiceNow Timestamp Parsing

ServiceNow returns date-times without zone information, always in UTC. The
layout depends on the request's display_value mode:

- internal format (display_value=false): 2026-02-03 14:40:07
- display format (display_value=true):   03/02/2026 14:40:07

Both are accepted; the internal format is tried first.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .errors import InvalidArgumentError, TimestampParseError

logger = logging.getLogger(__name__)

UTC_MARKER = "Z"

INTERNAL_FORMAT = "%Y-%m-%d %H:%M:%S%z"
INTERNAL_FORMAT_PATTERN = "yyyy-MM-dd HH:mm:ss"

DISPLAY_FORMAT = "%m/%d/%Y %H:%M:%S%z"
DISPLAY_FORMAT_PATTERN = "MM/dd/yyyy HH:mm:ss"

# Both layouts are zero-padded to the same width
TIMESTAMP_WIDTH = len(INTERNAL_FORMAT_PATTERN)


def _strptime_utc(candidate: str, fmt: str) -> datetime:
    # strptime alone accepts unpadded fields such as "2026-2-3 1:2:3"
    if len(candidate) - len(UTC_MARKER) != TIMESTAMP_WIDTH:
        raise ValueError(
            f"expected {TIMESTAMP_WIDTH} characters, got {len(candidate) - len(UTC_MARKER)}"
        )
    return datetime.strptime(candidate, fmt).astimezone(timezone.utc)


def parse_servicenow_datetime_utc(raw: Optional[str]) -> datetime:
    """
    Parse a ServiceNow timestamp as a UTC datetime.

    A trailing "Z" is appended when missing since values are UTC by
    convention. Every field must be zero-padded to its full width.

    Examples:
        >>> parse_servicenow_datetime_utc("2026-02-03 14:40:07")
        datetime.datetime(2026, 2, 3, 14, 40, 7, tzinfo=datetime.timezone.utc)
        >>> parse_servicenow_datetime_utc("03/02/2026 14:40:07").month
        3

    Args:
        raw: Timestamp string in internal or display format

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        InvalidArgumentError: If raw is None, empty or whitespace
        TimestampParseError: If raw matches neither format
    """
    if raw is None or not raw.strip():
        raise InvalidArgumentError("Timestamp cannot be null or empty")

    candidate = raw if raw.endswith(UTC_MARKER) else raw + UTC_MARKER

    try:
        return _strptime_utc(candidate, INTERNAL_FORMAT)
    except ValueError as internal_error:
        try:
            parsed = _strptime_utc(candidate, DISPLAY_FORMAT)
        except ValueError as display_error:
            logger.warning(
                "Failed to parse ServiceNow timestamp",
                extra={'value': raw}
            )
            raise TimestampParseError(
                f"Unable to parse timestamp '{raw}'. Expected internal format "
                f"'{INTERNAL_FORMAT_PATTERN}' or display format '{DISPLAY_FORMAT_PATTERN}'. "
                f"Internal format error: {internal_error}; "
                f"display format error: {display_error}"
            ) from display_error

        logger.debug(
            "Parsed timestamp using display format",
            extra={'value': raw}
        )
        return parsed
