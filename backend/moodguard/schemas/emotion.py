from __future__ import annotations

from typing import Any, List, Optional

from pydantic import Field, field_validator

from moodguard.schemas.common import CamelModel, RiskLevel
from moodguard.utils.text import clip


class EmotionalState(CamelModel):
    primary_emotion: str = "neutral"
    intensity: float = Field(0.5, ge=0, le=1)
    valence: float = Field(0.0, ge=-1, le=1)
    arousal: float = Field(0.5, ge=0, le=1)
    confidence: float = Field(0.5, ge=0, le=1)
    # magnitude-driven; independent of the safety tier produced by the combiner
    risk_level: RiskLevel = RiskLevel.LOW
    supportive_response: Optional[str] = None
    recommended_actions: List[str] = Field(default_factory=list)
    source: str = "lexical"

    @field_validator("intensity", "arousal", "confidence", mode="before")
    @classmethod
    def _unit(cls, v: Any) -> float:
        return clip(v)

    @field_validator("valence", mode="before")
    @classmethod
    def _signed(cls, v: Any) -> float:
        return clip(v, -1.0, 1.0)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> RiskLevel:
        return RiskLevel.coerce(v)


class EmotionRequest(CamelModel):
    message: str
    conversation_history: List[str] = Field(default_factory=list)
    user_id: Optional[str] = None
