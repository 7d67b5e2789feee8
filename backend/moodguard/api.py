# backend/moodguard/api.py
"""
Library entry points.

    await assess_risk(message, history, user_context)        -> CrisisAnalysis
    await score_emotional_state(message, history, user_id)   -> EmotionalState
    await analyze_mood_patterns(samples, journals, prior)    -> EmotionalPattern
    await generate_mood_forecast(user_id, history_source)    -> MoodForecast
    support_context(message, recent_samples)                 -> {"urgency", "supportNeeds"}

Services are built once from settings. With no OPENAI_API_KEY every call still
answers from the deterministic paths (keyword scan, lexical scores, statistics).
"""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Sequence

from moodguard.adapters.openai_classifier import get_classifier
from moodguard.adapters.store import DataStore
from moodguard.domain.classifier.risk import RiskClassifierAdapter
from moodguard.domain.emotion.scorer import EmotionalStateScorer
from moodguard.domain.forecast.forecaster import MoodForecaster
from moodguard.domain.mood.patterns import MoodPatternAnalyzer
from moodguard.domain.mood.support import mood_urgency, support_needs
from moodguard.domain.safety.service import SafetyService
from moodguard.schemas.emotion import EmotionalState
from moodguard.schemas.mood import EmotionalPattern, JournalEntry, MoodForecast, MoodSample
from moodguard.schemas.safety import CrisisAnalysis

__all__ = [
    "assess_risk",
    "score_emotional_state",
    "analyze_mood_patterns",
    "generate_mood_forecast",
    "support_context",
    "safety_service",
    "emotion_scorer",
    "pattern_analyzer",
    "mood_forecaster",
    "reset_services",
]


@lru_cache
def safety_service() -> SafetyService:
    classifier = get_classifier()
    return SafetyService(RiskClassifierAdapter(classifier) if classifier is not None else None)


@lru_cache
def emotion_scorer() -> EmotionalStateScorer:
    return EmotionalStateScorer(get_classifier())


@lru_cache
def pattern_analyzer() -> MoodPatternAnalyzer:
    return MoodPatternAnalyzer(get_classifier())


@lru_cache
def mood_forecaster() -> MoodForecaster:
    return MoodForecaster(get_classifier(), analyzer=pattern_analyzer())


def reset_services() -> None:
    for fn in (safety_service, emotion_scorer, pattern_analyzer, mood_forecaster):
        fn.cache_clear()


async def assess_risk(
    message: str,
    conversation_history: Sequence[str] = (),
    user_context: Optional[Mapping[str, Any]] = None,
    *,
    region: Optional[str] = None,
) -> CrisisAnalysis:
    return await safety_service().assess_risk(message, conversation_history, user_context, region=region)


async def score_emotional_state(
    message: str,
    conversation_history: Sequence[str] = (),
    user_id: Optional[str] = None,
) -> EmotionalState:
    return await emotion_scorer().score(message, conversation_history, user_id)


async def analyze_mood_patterns(
    mood_samples: Sequence[MoodSample],
    journal_entries: Sequence[JournalEntry] = (),
    prior_pattern: Optional[EmotionalPattern] = None,
    *,
    now: Optional[datetime] = None,
) -> EmotionalPattern:
    return await pattern_analyzer().analyze(mood_samples, journal_entries, prior_pattern, now=now)


async def generate_mood_forecast(
    user_id: str,
    history_source: DataStore,
    prior_pattern: Optional[EmotionalPattern] = None,
    *,
    now: Optional[datetime] = None,
) -> MoodForecast:
    return await mood_forecaster().generate(user_id, history_source, prior_pattern, now=now)


def support_context(message: str, recent_samples: Sequence[MoodSample] = ()) -> Dict[str, Any]:
    """Urgency and support needs for composing a reply. Pure; no classifier call."""
    return {
        "urgency": mood_urgency(recent_samples, message),
        "supportNeeds": support_needs(recent_samples, message),
    }
