"""
Mood forecasting.

generate(): samples + journals -> pattern analyzer -> one classifier call
            -> calibrated MoodForecast (statistical fallback) -> store
reconcile(): back-fill the observed outcome and the resulting accuracy.

Calibration multiplies the classifier's raw confidence by the mean accuracy of
the user's previously reconciled forecasts.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from moodguard.adapters.store import DataStore
from moodguard.core.config import get_settings
from moodguard.core.errors import ClassifierError, ClassifierUnavailable
from moodguard.domain.classifier.base import SemanticClassifier, request_record
from moodguard.domain.classifier.prompts import FORECAST_SCHEMA, FORECAST_SYSTEM, forecast_user_content
from moodguard.domain.classifier.retry import RetryPolicy, Sleeper
from moodguard.domain.mood.patterns import MoodPatternAnalyzer
from moodguard.domain.mood.stats import newest_first
from moodguard.schemas.common import RiskLevel
from moodguard.schemas.mood import MOOD_SCALE_MAX, EmotionalPattern, MoodForecast, MoodSample
from moodguard.utils.text import clip
from moodguard.utils.time import as_utc, utc_now

__all__ = ["MoodForecaster", "forecast_accuracy", "statistical_forecast"]

log = logging.getLogger("moodguard.forecast")

SAMPLE_WINDOW = 30
JOURNAL_WINDOW = 10
CALIBRATION_WINDOW = 20
PROMPT_SAMPLES = 5

DEFAULT_CONFIDENCE = 0.5
STATISTICAL_CONFIDENCE = 0.3
LOW_BASELINE = 3.0

DAY_NAMES = ("Sundays", "Mondays", "Tuesdays", "Wednesdays", "Thursdays", "Fridays", "Saturdays")


def forecast_accuracy(predicted: float, actual: float) -> float:
    return clip(1.0 - abs(float(predicted) - float(actual)) / MOOD_SCALE_MAX)


def _str_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [str(x).strip() for x in v if x is not None and str(x).strip()]


def _number(v: Any) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return None if f != f else f


def _statistical_tier(pattern: EmotionalPattern) -> RiskLevel:
    low = pattern.sample_count > 0 and pattern.baseline < LOW_BASELINE
    declining = pattern.trend_direction == "declining"
    if low and declining:
        return RiskLevel.HIGH
    if low or declining:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _time_insights(pattern: EmotionalPattern) -> List[str]:
    out: List[str] = []
    days = pattern.temporal.day_of_week
    if len(days) > 1:
        worst = min(days, key=lambda d: days[d].average)
        best = max(days, key=lambda d: days[d].average)
        if days[best].average > days[worst].average:
            out.append(f"Mood tends to be lowest on {DAY_NAMES[worst]} and highest on {DAY_NAMES[best]}.")
    slots = pattern.temporal.time_of_day
    if len(slots) > 1:
        worst_slot = min(slots, key=lambda s: slots[s].average)
        out.append(f"Energy and mood dip most often in the {worst_slot}.")
    return out


def statistical_forecast(user_id: str, pattern: EmotionalPattern, now: datetime) -> MoodForecast:
    """Classifier-free forecast: dominant emotion at baseline intensity."""
    return MoodForecast(
        user_id=user_id,
        forecast_date=now,
        predicted_mood=pattern.dominant_emotions[0] if pattern.dominant_emotions else "neutral",
        predicted_intensity=pattern.baseline,
        confidence_score=STATISTICAL_CONFIDENCE,
        risk_level=_statistical_tier(pattern),
        trigger_factors=list(pattern.trigger_patterns),
        preventive_recommendations=list(pattern.coping_strategies[:3]),
        time_based_insights=_time_insights(pattern),
        historical_patterns=pattern,
        source="statistical",
    )


class MoodForecaster:
    def __init__(
        self,
        classifier: Optional[SemanticClassifier] = None,
        *,
        analyzer: Optional[MoodPatternAnalyzer] = None,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[Sleeper] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.classifier = classifier
        self.analyzer = analyzer or MoodPatternAnalyzer(classifier, policy=policy, sleep=sleep)
        self.policy = policy
        self.sleep = sleep
        self.temperature = get_settings().ANALYSIS_TEMPERATURE if temperature is None else temperature

    async def _ask(self, pattern: EmotionalPattern, samples: Sequence[MoodSample]) -> Dict[str, Any]:
        if self.classifier is None:
            return {}
        recent = [s.model_dump(mode="json", by_alias=True) for s in samples[:PROMPT_SAMPLES]]
        try:
            return await request_record(
                self.classifier,
                FORECAST_SYSTEM,
                forecast_user_content(pattern.model_dump(mode="json", by_alias=True), recent),
                FORECAST_SCHEMA,
                temperature=self.temperature,
                policy=self.policy,
                sleep=self.sleep,
                label="forecast classifier",
            )
        except ClassifierUnavailable as e:
            log.warning("forecast classifier unavailable after %d attempts, using statistics: %s", e.attempts, e)
            return {}
        except ClassifierError as e:
            log.warning("forecast classifier rejected the request (status=%s), using statistics: %s", e.status, e)
            return {}

    async def calibration(self, user_id: str, store: DataStore) -> Optional[float]:
        """Mean accuracy of the user's reconciled forecasts, or None without history."""
        try:
            past = await store.get_forecasts(user_id, CALIBRATION_WINDOW)
        except Exception as e:
            log.error("failed to load past forecasts for %s: %s", user_id, e)
            return None
        scores = [f.forecast_accuracy for f in past if f.forecast_accuracy is not None]
        if not scores:
            return None
        return float(np.mean(scores))

    def from_record(
        self,
        user_id: str,
        record: Mapping[str, Any],
        pattern: EmotionalPattern,
        now: datetime,
        calibration: Optional[float] = None,
    ) -> MoodForecast:
        raw_conf = _number(record.get("confidenceScore"))
        confidence = clip(DEFAULT_CONFIDENCE if raw_conf is None else raw_conf)
        if calibration is not None:
            confidence = clip(confidence * calibration)

        intensity = _number(record.get("predictedIntensity"))
        return MoodForecast(
            user_id=user_id,
            forecast_date=now,
            predicted_mood=str(record.get("predictedMood") or "").strip().lower() or "neutral",
            predicted_intensity=pattern.baseline if intensity is None else intensity,
            confidence_score=confidence,
            risk_level=RiskLevel.parse(record.get("riskLevel")) or RiskLevel.LOW,
            trigger_factors=_str_list(record.get("triggerFactors")),
            preventive_recommendations=_str_list(record.get("preventiveRecommendations")),
            time_based_insights=_str_list(record.get("timeBasedInsights")),
            historical_patterns=pattern,
            source="classifier",
        )

    async def generate(
        self,
        user_id: str,
        store: DataStore,
        prior_pattern: Optional[EmotionalPattern] = None,
        now: Optional[datetime] = None,
    ) -> MoodForecast:
        now = as_utc(now or utc_now())
        samples = newest_first(await store.get_mood_samples(user_id, SAMPLE_WINDOW))
        journals = await store.get_journal_entries(user_id, JOURNAL_WINDOW)

        pattern = await self.analyzer.analyze(samples, journals, prior_pattern, now=now)
        record = await self._ask(pattern, samples)

        if record:
            forecast = self.from_record(user_id, record, pattern, now, await self.calibration(user_id, store))
        else:
            forecast = statistical_forecast(user_id, pattern, now)

        log.info(
            "forecast for %s: %s @ %.1f (%s, conf=%.2f, risk=%s)",
            user_id,
            forecast.predicted_mood,
            forecast.predicted_intensity,
            forecast.source,
            forecast.confidence_score,
            forecast.risk_level.value,
        )
        return await self._save(forecast, store)

    async def reconcile(
        self,
        forecast: MoodForecast,
        actual_mood: str,
        actual_intensity: float,
        store: Optional[DataStore] = None,
        now: Optional[datetime] = None,
    ) -> MoodForecast:
        actual = clip(actual_intensity, 0.0, MOOD_SCALE_MAX)
        done = forecast.model_copy(
            update={
                "actual_mood": (actual_mood or "").strip().lower() or None,
                "actual_intensity": actual,
                "forecast_accuracy": forecast_accuracy(forecast.predicted_intensity, actual),
                "reconciled_at": as_utc(now or utc_now()),
            }
        )
        if store is None:
            return done
        return await self._save(done, store)

    async def _save(self, forecast: MoodForecast, store: DataStore) -> MoodForecast:
        try:
            return await store.save_forecast(forecast)
        except Exception as e:
            log.error("failed to save forecast for %s: %s", forecast.user_id, e)
            return forecast
