# backend/moodguard/interfaces/http/deps/services.py
from __future__ import annotations

import logging
from functools import lru_cache

from moodguard import api
from moodguard.adapters.store import DataStore, MemoryStore, SupabaseStore
from moodguard.core.config import get_settings
from moodguard.domain.emotion.scorer import EmotionalStateScorer
from moodguard.domain.forecast.forecaster import MoodForecaster
from moodguard.domain.mood.patterns import MoodPatternAnalyzer
from moodguard.domain.safety.service import SafetyService

log = logging.getLogger("moodguard.http")


@lru_cache(maxsize=1)
def get_store() -> DataStore:
    """
    SupabaseStore when URL + service role are configured, otherwise an
    in-process MemoryStore (local dev).
    """
    s = get_settings()
    if s.SUPABASE_URL and s.SUPABASE_SERVICE_ROLE:
        return SupabaseStore(settings=s)
    log.info("supabase not configured; serving from MemoryStore")
    return MemoryStore()


@lru_cache(maxsize=1)
def get_safety_service() -> SafetyService:
    # same classifier wiring as the library entry point, plus persistence
    base = api.safety_service()
    return SafetyService(base.classifier, scanner=base.scanner, store=get_store(), settings=base.settings)


def get_emotion_scorer() -> EmotionalStateScorer:
    return api.emotion_scorer()


def get_pattern_analyzer() -> MoodPatternAnalyzer:
    return api.pattern_analyzer()


def get_forecaster() -> MoodForecaster:
    return api.mood_forecaster()


__all__ = [
    "get_store",
    "get_safety_service",
    "get_emotion_scorer",
    "get_pattern_analyzer",
    "get_forecaster",
]
