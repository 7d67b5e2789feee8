"""
Error taxonomy for classifier-backed analysis.

- TransportError        network / timeout / HTTP 5xx / HTTP 429, retryable
- MalformedResponseError unparsable or non-object classifier output, recovered
                         by the adapters as an empty record
- ClassifierUnavailable  retries exhausted; callers fall back to deterministic signals

Out-of-range numbers are never an error here: they are clamped where they enter
(see moodguard.utils.text.clip and the schema validators).
"""

from __future__ import annotations

from typing import Optional


class MoodguardError(Exception):
    """Base class for errors raised by moodguard."""


class ClassifierError(MoodguardError):
    """Classifier call failed in a way that retrying will not fix (4xx, auth, bad request)."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class TransportError(ClassifierError):
    """Transient transport failure; safe to retry because classification has no side effects."""


class MalformedResponseError(ClassifierError):
    """Classifier answered, but not with a JSON object we can read."""


class ClassifierUnavailable(ClassifierError):
    """All attempts failed with transport errors."""

    def __init__(self, message: str, *, attempts: int, status: Optional[int] = None) -> None:
        super().__init__(message, status=status)
        self.attempts = attempts
