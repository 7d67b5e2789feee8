"""
Support context from the latest message plus recent mood history.

Used when composing a reply. `mood_urgency` is a magnitude signal like
EmotionalState.risk_level: it never feeds the safety combiner or the
follow-up scheduler.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np

from moodguard.schemas.common import RiskLevel
from moodguard.schemas.mood import MoodSample

__all__ = ["mood_urgency", "support_needs"]

URGENCY_TERMS = ("crisis", "emergency", "suicide", "harm", "can't cope")

# (terms in the message, need it signals)
MESSAGE_NEEDS = (
    (("lonely", "alone"), "social connection"),
    (("anxious", "worried"), "anxiety management"),
    (("sad", "depressed"), "mood elevation"),
    (("stress", "overwhelmed"), "stress relief"),
)
LOW_MOOD_NEEDS = ("emotional validation", "gentle encouragement")
HIGH_MOOD_NEEDS = ("calming techniques", "grounding exercises")
DEFAULT_NEEDS = ("general support", "active listening")


def _mean_intensity(recent: Sequence[MoodSample]) -> float | None:
    if not recent:
        return None
    return float(np.mean([s.intensity for s in recent]))


def mood_urgency(recent: Sequence[MoodSample], message: str) -> RiskLevel:
    text = (message or "").lower()
    if any(term in text for term in URGENCY_TERMS):
        return RiskLevel.CRITICAL

    avg = _mean_intensity(recent)
    if avg is not None:
        if avg <= 2:
            return RiskLevel.HIGH
        if avg <= 4:
            return RiskLevel.MEDIUM
    return RiskLevel.LOW


def support_needs(recent: Sequence[MoodSample], message: str) -> List[str]:
    text = (message or "").lower()
    needs: List[str] = [need for terms, need in MESSAGE_NEEDS if any(t in text for t in terms)]

    avg = _mean_intensity(recent)
    if avg is not None:
        if avg <= 3:
            needs.extend(LOW_MOOD_NEEDS)
        if avg >= 8:
            needs.extend(HIGH_MOOD_NEEDS)

    return needs or list(DEFAULT_NEEDS)
