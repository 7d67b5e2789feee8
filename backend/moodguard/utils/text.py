from __future__ import annotations

import re
from typing import Iterable, List

__all__ = [
    "clip",
    "truncate",
    "squash_ws",
    "unique_preserve",
]

_WS_RE = re.compile(r"\s+")

def clip(x: object, lo: float = 0.0, hi: float = 1.0) -> float:
    """Clamp into [lo, hi]; anything non-numeric (or NaN) collapses to lo."""
    try:
        f = float(x)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return lo
    if f != f:
        return lo
    return max(lo, min(hi, f))

def truncate(text: str, max_len: int) -> str:
    """Hard cut at max_len characters."""
    if not text or max_len <= 0:
        return ""
    return text[:max_len]

def squash_ws(s: str) -> str:
    """Collapse whitespace to single spaces; trim ends."""
    return _WS_RE.sub(" ", (s or "")).strip()

def unique_preserve(items: Iterable[str]) -> List[str]:
    """Deduplicate while preserving order."""
    seen = set()
    out: List[str] = []
    for it in items or []:
        if it not in seen:
            seen.add(it)
            out.append(it)
    return out
