"""
Utility functions for timezone-aware timestamps.
Timestamps are stored as ISO 8601 strings in UTC: 2026-01-31T15:43:03.120000+00:00
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string (ORM column default)."""
    return utc_now().isoformat()
