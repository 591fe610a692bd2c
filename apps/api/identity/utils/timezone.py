"""
Timezone helpers.

All timestamps are stored and returned in UTC.
"""

from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    """
    Get current time in UTC (timezone-aware).

    Use this instead of datetime.utcnow(), which returns a naive datetime.
    """
    return datetime.now(UTC)
