"""
MoodPatternAnalyzer: turns a window of mood samples and journal entries into
an EmotionalPattern.

Statistics live in stats.py; this module adds the parts that need journal
text (triggers, coping) and the optional classifier for trigger extraction.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from moodguard.core.config import get_settings
from moodguard.domain.classifier.base import SemanticClassifier, request_record
from moodguard.domain.classifier.prompts import MAX_TRIGGERS_PER_ENTRY, TRIGGER_SCHEMA, TRIGGER_SYSTEM
from moodguard.domain.classifier.retry import RetryPolicy, Sleeper
from moodguard.domain.emotion.lexicon import arousal_factor, valence_sign
from moodguard.domain.mood import stats
from moodguard.schemas.mood import (
    MOOD_SCALE_MAX,
    CopingEffect,
    EmotionalPattern,
    JournalEntry,
    MoodSample,
    MoodTrends,
    TrendDirection,
)
from moodguard.utils.text import squash_ws, unique_preserve
from moodguard.utils.time import as_utc, utc_now

__all__ = ["MoodPatternAnalyzer", "COPING_CATALOG", "coping_effectiveness", "coping_strategies", "dominant_emotions"]

log = logging.getLogger("moodguard.mood")

MAX_DOMINANT = 3
MAX_TRIGGERS = 5
COPING_WINDOW = timedelta(hours=24)
COPING_CATALOG = ("meditation", "exercise", "journaling", "social support", "breathing", "mindfulness")

GENERAL_WELLNESS = ("Regular sleep schedule", "Balanced nutrition", "Creative expression")
EMOTION_STRATEGIES: Dict[str, Sequence[str]] = {
    "anxiety": ("Regular mindfulness and breathing exercises", "Structured daily routines"),
    "depression": ("Social connection and support", "Physical activity and movement"),
    "anger": ("Healthy expression of emotions", "Conflict resolution skills"),
}
LOW_VALENCE_STRATEGIES = ("Professional therapy support", "Medication evaluation if appropriate")
LOW_VALENCE = -0.3


def dominant_emotions(samples: Sequence[MoodSample]) -> List[str]:
    if not samples:
        return ["neutral"]
    # Counter.most_common keeps first-seen order among equal counts
    counts = Counter(s.emotion for s in samples)
    return [e for e, _ in counts.most_common(MAX_DOMINANT)]


def _averages(samples: Sequence[MoodSample]) -> tuple[float, float]:
    if not samples:
        return 0.0, 0.5
    scaled = np.asarray([s.intensity / MOOD_SCALE_MAX for s in samples], dtype=float)
    valence = np.asarray([valence_sign(s.emotion) for s in samples], dtype=float) * scaled
    arousal = np.asarray([arousal_factor(s.emotion) for s in samples], dtype=float) * scaled
    return float(valence.mean()), float(arousal.mean())


def _direction(trends: MoodTrends) -> TrendDirection:
    for label in (trends.monthly, trends.recent, trends.weekly):
        if label in ("improving", "declining"):
            return label  # type: ignore[return-value]
    return "stable"


def coping_effectiveness(
    samples: Sequence[MoodSample],
    journals: Sequence[JournalEntry],
    catalog: Iterable[str] = COPING_CATALOG,
) -> Dict[str, CopingEffect]:
    """
    For each strategy mentioned in a journal, average the intensity of samples
    logged in the 24h after the mention. Strategies never mentioned are omitted.
    """
    out: Dict[str, CopingEffect] = {}
    for strategy in catalog:
        mentions = [j for j in journals if strategy in (j.content or "").lower()]
        if not mentions:
            continue

        followed: List[float] = []
        for m in mentions:
            start = m.at
            after = [s.intensity for s in samples if start < s.at <= start + COPING_WINDOW]
            if after:
                followed.append(float(np.mean(after)))

        if len(followed) > 2:
            label = "high"
        elif followed:
            label = "moderate"
        else:
            label = "unrated"

        out[strategy] = CopingEffect(
            usage=len(mentions),
            average_intensity_after=float(np.mean(followed)) if followed else None,
            effectiveness=label,
        )
    return out


def coping_strategies(
    dominant: Sequence[str],
    average_valence: float,
    effectiveness: Dict[str, CopingEffect],
) -> List[str]:
    picks: List[str] = []
    for emotion in dominant:
        picks.extend(EMOTION_STRATEGIES.get(emotion, ()))
    if average_valence < LOW_VALENCE:
        picks.extend(LOW_VALENCE_STRATEGIES)
    picks.extend(GENERAL_WELLNESS)
    for name, eff in effectiveness.items():
        if eff.effectiveness == "high":
            picks.append(f"Keep up {name}: it has worked well for you")
    return unique_preserve(picks)


class MoodPatternAnalyzer:
    def __init__(
        self,
        classifier: Optional[SemanticClassifier] = None,
        *,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[Sleeper] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.classifier = classifier
        self.policy = policy
        self.sleep = sleep
        self.temperature = get_settings().ANALYSIS_TEMPERATURE if temperature is None else temperature

    async def _extract(self, entry: JournalEntry) -> List[str]:
        if self.classifier is None or not (entry.content or "").strip():
            return []
        try:
            record = await request_record(
                self.classifier,
                TRIGGER_SYSTEM,
                entry.content,
                TRIGGER_SCHEMA,
                temperature=self.temperature,
                policy=self.policy,
                sleep=self.sleep,
                label="trigger extraction",
            )
        except Exception as e:
            log.warning("trigger extraction failed, skipping entry: %s", e)
            return []

        raw = record.get("triggers")
        if not isinstance(raw, list):
            return []
        found = [squash_ws(str(t)).lower() for t in raw if isinstance(t, str) and t.strip()]
        return found[:MAX_TRIGGERS_PER_ENTRY]

    async def triggers(
        self,
        journals: Sequence[JournalEntry],
        prior_pattern: Optional[EmotionalPattern] = None,
    ) -> List[str]:
        votes: Counter[str] = Counter()
        for j in journals:
            votes.update(squash_ws(t).lower() for t in j.triggers)

        extracted = await asyncio.gather(*(self._extract(j) for j in journals))
        for found in extracted:
            votes.update(found)

        if prior_pattern is not None:
            votes.update(squash_ws(t).lower() for t in prior_pattern.trigger_patterns)

        votes.pop("", None)
        return [t for t, _ in votes.most_common(MAX_TRIGGERS)]

    async def analyze(
        self,
        samples: Sequence[MoodSample],
        journals: Sequence[JournalEntry] = (),
        prior_pattern: Optional[EmotionalPattern] = None,
        now: Optional[datetime] = None,
    ) -> EmotionalPattern:
        now = as_utc(now or utc_now())
        samples = stats.newest_first(samples)

        trends = MoodTrends(
            recent=stats.recent_trend(samples),
            weekly=stats.weekly_trend(samples, now),
            monthly=stats.monthly_trend(samples, now),
        )
        dominant = dominant_emotions(samples)
        valence, arousal = _averages(samples)
        coping = coping_effectiveness(samples, journals)
        triggers = await self.triggers(journals, prior_pattern)

        pattern = EmotionalPattern(
            dominant_emotions=dominant,
            average_valence=valence,
            average_arousal=arousal,
            volatility=stats.volatility(samples),
            trend_direction=_direction(trends),
            trigger_patterns=triggers,
            coping_strategies=coping_strategies(dominant, valence, coping),
            baseline=stats.baseline(samples),
            temporal=stats.temporal_patterns(samples),
            trends=trends,
            coping_effectiveness=coping,
            sample_count=len(samples),
        )
        log.debug(
            "pattern: %d samples, trend=%s, volatility=%.3f",
            pattern.sample_count,
            pattern.trend_direction,
            pattern.volatility,
        )
        return pattern
