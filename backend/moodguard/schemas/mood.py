from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from moodguard.schemas.common import CamelModel, RiskLevel
from moodguard.utils.text import clip
from moodguard.utils.time import as_utc, parse_iso, utc_now

TrendLabel = Literal["improving", "declining", "stable", "insufficient_data", "no_data"]
TrendDirection = Literal["improving", "declining", "stable"]
Effectiveness = Literal["high", "moderate", "unrated"]

MOOD_SCALE_MAX = 10.0


def _timestamp(v: Any) -> Any:
    # strings and datetimes both land as aware UTC; let pydantic reject the rest
    if isinstance(v, (str, datetime)):
        return parse_iso(v) or v
    return v


class MoodSample(CamelModel):
    """A mood entry owned by the data store. Read-only here."""

    emotion: str = "neutral"
    intensity: float = Field(5.0, ge=0, le=MOOD_SCALE_MAX)
    timestamp: datetime = Field(default_factory=utc_now)
    context: str = ""

    @field_validator("intensity", mode="before")
    @classmethod
    def _scale(cls, v: Any) -> float:
        return clip(v, 0.0, MOOD_SCALE_MAX)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _ts(cls, v: Any) -> Any:
        return _timestamp(v)

    @field_validator("emotion", mode="before")
    @classmethod
    def _emotion(cls, v: Any) -> str:
        return (str(v).strip().lower() if v else "") or "neutral"

    @field_validator("context", mode="before")
    @classmethod
    def _context(cls, v: Any) -> str:
        return str(v or "")

    @property
    def at(self) -> datetime:
        return as_utc(self.timestamp)


class JournalEntry(CamelModel):
    content: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    triggers: List[str] = Field(default_factory=list)
    mood: Optional[str] = None

    @field_validator("created_at", mode="before")
    @classmethod
    def _ts(cls, v: Any) -> Any:
        return _timestamp(v)

    @field_validator("triggers", mode="before")
    @classmethod
    def _tags(cls, v: Any) -> List[str]:
        if not isinstance(v, (list, tuple)):
            return []
        return [str(t).strip() for t in v if t and str(t).strip()]

    @property
    def at(self) -> datetime:
        return as_utc(self.created_at)


class TemporalBucket(CamelModel):
    total: float = 0.0
    count: int = 0
    average: float = 0.0


class TemporalPatterns(CamelModel):
    # weekday 0=Sunday .. 6=Saturday
    day_of_week: Dict[int, TemporalBucket] = Field(default_factory=dict)
    time_of_day: Dict[str, TemporalBucket] = Field(default_factory=dict)


class MoodTrends(CamelModel):
    recent: TrendLabel = "insufficient_data"
    weekly: TrendLabel = "no_data"
    monthly: TrendLabel = "insufficient_data"


class CopingEffect(CamelModel):
    usage: int = 0
    average_intensity_after: Optional[float] = None
    effectiveness: Effectiveness = "unrated"


class EmotionalPattern(CamelModel):
    """Recomputed on demand from a MoodSample window."""

    dominant_emotions: List[str] = Field(default_factory=lambda: ["neutral"])
    average_valence: float = 0.0
    average_arousal: float = 0.5
    volatility: float = Field(0.0, ge=0)
    trend_direction: TrendDirection = "stable"
    trigger_patterns: List[str] = Field(default_factory=list)
    coping_strategies: List[str] = Field(default_factory=list)

    baseline: float = 5.0
    temporal: TemporalPatterns = Field(default_factory=TemporalPatterns)
    trends: MoodTrends = Field(default_factory=MoodTrends)
    coping_effectiveness: Dict[str, CopingEffect] = Field(default_factory=dict)
    sample_count: int = 0


class MoodForecast(CamelModel):
    """
    Two-phase record: created by the forecaster, later back-filled with the
    observed outcome by reconcile().
    """

    id: Optional[str] = None
    user_id: str
    forecast_date: datetime = Field(default_factory=utc_now)
    predicted_mood: str = "neutral"
    predicted_intensity: float = Field(5.0, ge=0, le=MOOD_SCALE_MAX)
    confidence_score: float = Field(0.5, ge=0, le=1)
    risk_level: RiskLevel = RiskLevel.LOW
    trigger_factors: List[str] = Field(default_factory=list)
    preventive_recommendations: List[str] = Field(default_factory=list)
    time_based_insights: List[str] = Field(default_factory=list)
    historical_patterns: Optional[EmotionalPattern] = None
    source: Literal["classifier", "statistical"] = "classifier"

    actual_mood: Optional[str] = None
    actual_intensity: Optional[float] = None
    forecast_accuracy: Optional[float] = None
    reconciled_at: Optional[datetime] = None

    @field_validator("predicted_intensity", mode="before")
    @classmethod
    def _scale(cls, v: Any) -> float:
        return clip(v, 0.0, MOOD_SCALE_MAX)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _conf(cls, v: Any) -> float:
        return clip(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> RiskLevel:
        return RiskLevel.coerce(v)

    @field_validator("forecast_date", "reconciled_at", mode="before")
    @classmethod
    def _ts(cls, v: Any) -> Any:
        return _timestamp(v)

    @property
    def is_reconciled(self) -> bool:
        return self.forecast_accuracy is not None


# ---- HTTP payloads ----------------------------------------------------------

class PatternRequest(CamelModel):
    mood_samples: List[MoodSample] = Field(default_factory=list)
    journal_entries: List[JournalEntry] = Field(default_factory=list)
    prior_pattern: Optional[EmotionalPattern] = None
    now: Optional[datetime] = None


class ReconcileRequest(CamelModel):
    forecast: MoodForecast
    actual_mood: str
    actual_intensity: float
