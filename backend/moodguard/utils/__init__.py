from .time import utc_now, parse_iso, as_utc
from .text import clip, truncate, squash_ws, unique_preserve

__all__ = [
    "utc_now", "parse_iso", "as_utc",
    "clip", "truncate", "squash_ws", "unique_preserve",
]
