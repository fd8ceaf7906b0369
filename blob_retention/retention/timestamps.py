"""Timestamp extraction from storage keys.

Writers embed a filesystem-safe ISO-8601 instant in object names, with the
colons of the time part replaced by dashes:

    chat-2024-10-05T14-30-00Z-a1b2c3d4.json
    2025-04-21T14-30-00.123Z-admin_login.json
    2025-04-21T14-30-00Z.json
"""

import re
from datetime import datetime, timezone
from typing import Optional

_TIMESTAMP_PATTERN = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2})-(?P<minute>\d{2})-(?P<second>\d{2})"
    r"(?:\.(?P<millis>\d{1,3}))?Z"
)


def extract_timestamp(key: str) -> Optional[datetime]:
    """Extract the embedded timestamp from an object key.

    Only the basename is inspected; the timestamp may be the whole
    basename or a segment within it. The first well-formed match wins.

    Args:
        key: Full object key

    Returns:
        Timezone-aware UTC datetime, or None when the key carries no
        parsable timestamp. Epoch zero is returned as a real datetime.
    """
    basename = key.rsplit("/", 1)[-1]

    for match in _TIMESTAMP_PATTERN.finditer(basename):
        millis = match.group("millis") or "0"
        try:
            return datetime(
                int(match.group("year")),
                int(match.group("month")),
                int(match.group("day")),
                int(match.group("hour")),
                int(match.group("minute")),
                int(match.group("second")),
                int(millis.ljust(3, "0")) * 1000,
                tzinfo=timezone.utc,
            )
        except ValueError:
            # Out-of-range field such as month 13
            continue

    return None
