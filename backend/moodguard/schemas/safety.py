from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator

from moodguard.schemas.common import CamelModel, RiskLevel
from moodguard.utils.text import clip, truncate
from moodguard.utils.time import as_utc, utc_now

TRIGGER_MESSAGE_MAX = 500
SNIPPET_MAX = 200
CHECK_IN_TTL = timedelta(hours=24)


def _str_list(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    if isinstance(v, (list, tuple)):
        return [str(x) for x in v if x is not None and str(x).strip()]
    return []


class RiskAssessment(CamelModel):
    """One per inbound message. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    risk_level: RiskLevel = RiskLevel.NONE
    indicators: List[str] = Field(default_factory=list)
    confidence_score: float = Field(0.0, ge=0, le=1)
    analysis_reason: str = ""
    requires_check_in: bool = False
    sources: List[str] = Field(default_factory=list)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> RiskLevel:
        return RiskLevel.coerce(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _conf(cls, v: Any) -> float:
        return clip(v)


class SafetyCheckIn(CamelModel):
    """
    Deferred follow-up created whenever an assessment requires a check-in.
    The notification dispatcher flips response_received once; nothing else changes.
    """

    id: Optional[str] = None
    user_id: str
    trigger_message: str
    risk_level: RiskLevel
    timestamp: datetime = Field(default_factory=utc_now)
    follow_up_scheduled: Optional[datetime] = None
    check_in_required: bool = True
    response_received: bool = False
    indicators: List[str] = Field(default_factory=list)
    confidence_score: float = Field(0.0, ge=0, le=1)

    @field_validator("trigger_message", mode="before")
    @classmethod
    def _trim(cls, v: Any) -> str:
        return truncate(str(v or ""), TRIGGER_MESSAGE_MAX)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> RiskLevel:
        return RiskLevel.coerce(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _conf(cls, v: Any) -> float:
        return clip(v)

    def mark_responded(self) -> "SafetyCheckIn":
        return self.model_copy(update={"response_received": True})

    def is_due(self, now: Optional[datetime] = None) -> bool:
        """Scheduled follow-up time has arrived and nobody has answered yet."""
        if self.follow_up_scheduled is None or self.response_received:
            return False
        return as_utc(now or utc_now()) >= as_utc(self.follow_up_scheduled)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        True once CHECK_IN_TTL has passed since the follow-up time (or since
        creation when none was scheduled). A due check-in stays deliverable
        for that whole window.
        """
        anchor = self.follow_up_scheduled if self.follow_up_scheduled is not None else self.timestamp
        return as_utc(now or utc_now()) > as_utc(anchor) + CHECK_IN_TTL


class CrisisAnalysis(RiskAssessment):
    """RiskAssessment plus the resolved support plan and (optionally) the scheduled check-in."""

    immediate_actions: List[str] = Field(default_factory=list)
    emergency_contacts: List[str] = Field(default_factory=list)
    support_message: str = ""
    check_in: Optional[SafetyCheckIn] = None


class ClassifierRiskRecord(CamelModel):
    """
    Structured output of the semantic risk classifier.
    Every field is optional; an all-empty record means the response was unusable.
    """

    risk_level: Optional[RiskLevel] = None
    indicators: List[str] = Field(default_factory=list)
    confidence_score: Optional[float] = None
    analysis_reason: Optional[str] = None
    requires_check_in: Optional[bool] = None
    immediate_intervention: Optional[bool] = None
    support_message: Optional[str] = None

    @field_validator("risk_level", mode="before")
    @classmethod
    def _tier(cls, v: Any) -> Optional[RiskLevel]:
        return RiskLevel.parse(v)

    @field_validator("indicators", mode="before")
    @classmethod
    def _indicators(cls, v: Any) -> List[str]:
        return _str_list(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def _conf(cls, v: Any) -> Optional[float]:
        return None if v is None else clip(v)

    @field_validator("requires_check_in", "immediate_intervention", mode="before")
    @classmethod
    def _flag(cls, v: Any) -> Optional[bool]:
        if v is None or isinstance(v, bool):
            return v
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes", "y"}
        return bool(v)

    @field_validator("analysis_reason", "support_message", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    def is_empty(self) -> bool:
        return (
            self.risk_level is None
            and not self.indicators
            and self.confidence_score is None
            and self.analysis_reason is None
            and self.requires_check_in is None
            and self.immediate_intervention is None
        )


class CrisisLog(CamelModel):
    user_id: str
    risk_level: RiskLevel
    indicators: List[str] = Field(default_factory=list)
    confidence_score: float = 0.0
    text_snippet: str = ""
    sources: List[str] = Field(default_factory=list)
    detected_at: datetime = Field(default_factory=utc_now)

    @field_validator("text_snippet", mode="before")
    @classmethod
    def _trim(cls, v: Any) -> str:
        return truncate(str(v or ""), SNIPPET_MAX)


class SupportPlan(CamelModel):
    model_config = ConfigDict(frozen=True)

    immediate_actions: List[str] = Field(default_factory=list)
    emergency_contacts: List[str] = Field(default_factory=list)
    support_message: str = ""


# ---- HTTP payloads ----------------------------------------------------------

class AssessRequest(CamelModel):
    message: str
    conversation_history: List[str] = Field(default_factory=list)
    user_context: dict = Field(default_factory=dict)
    user_id: Optional[str] = None
    region: Optional[str] = None
