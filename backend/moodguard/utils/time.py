from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Union

__all__ = [
    "utc_now",
    "parse_iso",
    "as_utc",
]

def utc_now() -> datetime:
    """Timezone-aware UTC now."""
    return datetime.now(timezone.utc)

def as_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)

def parse_iso(s: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse ISO string to aware datetime (UTC). Returns None on failure."""
    if isinstance(s, datetime):
        return as_utc(s)
    if not s:
        return None
    try:
        # support both Z and +00:00
        s = s.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        return as_utc(datetime.fromisoformat(s))
    except ValueError:
        return None
