from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional


def parse_rfc3339(value: str) -> datetime:
    """
    Parse RFC3339 timestamp string into tz-aware UTC datetime.

    Accepts strings like:
      - 2025-01-01T12:34:56Z
      - 2025-01-01T12:34:56.123Z
      - 2025-01-01T12:34:56+09:00

    Naive timestamps are treated as UTC (the BSN.cloud API omits the offset
    on some endpoints).
    """
    if not isinstance(value, str) or not value:
        raise ValueError("RFC3339 value must be a non-empty string")

    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)  # raises ValueError if invalid
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_optional_rfc3339(value: Any) -> Optional[datetime]:
    """Parse a timestamp field from an API payload; None if absent or invalid."""
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = parse_rfc3339(value)
    except ValueError:
        return None
    # Go zero time ("0001-01-01T00:00:00Z") means "not set".
    if dt.year == 1:
        return None
    return dt
