from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, Optional

from moodguard.schemas.common import RiskLevel
from moodguard.schemas.safety import SafetyCheckIn
from moodguard.utils.time import as_utc, utc_now

__all__ = ["follow_up_delay", "schedule_check_in", "check_in_message"]

_DELAYS: Dict[RiskLevel, timedelta] = {
    RiskLevel.CRITICAL: timedelta(hours=2),
    RiskLevel.HIGH: timedelta(hours=6),
    RiskLevel.MEDIUM: timedelta(hours=24),
}


def follow_up_delay(tier: RiskLevel) -> Optional[timedelta]:
    """None for low/none: nothing is scheduled."""
    return _DELAYS.get(RiskLevel.coerce(tier))


def schedule_check_in(
    user_id: str,
    tier: RiskLevel,
    trigger_message: str,
    *,
    now: Optional[datetime] = None,
    indicators: Iterable[str] = (),
    confidence_score: float = 0.0,
) -> SafetyCheckIn:
    now = as_utc(now or utc_now())
    delay = follow_up_delay(tier)
    return SafetyCheckIn(
        user_id=user_id,
        trigger_message=trigger_message,
        risk_level=tier,
        timestamp=now,
        follow_up_scheduled=(now + delay) if delay is not None else None,
        indicators=list(indicators),
        confidence_score=confidence_score,
    )


def check_in_message(tier: RiskLevel, elapsed: timedelta) -> str:
    tier = RiskLevel.coerce(tier)
    hours = max(0, int(elapsed.total_seconds() // 3600))

    if tier is RiskLevel.CRITICAL:
        return (
            f"Hi, I wanted to check in with you after our earlier conversation. It's been {hours} hours, "
            "and I'm concerned about your wellbeing. How are you feeling right now? Are you in a safe place?"
        )
    if tier is RiskLevel.HIGH:
        return (
            "I wanted to follow up on our conversation from earlier today. You were going through a "
            "difficult time, and I want to make sure you're okay. How are you feeling now?"
        )
    return (
        "I hope you're doing better since we last talked. I wanted to check in and see how you're "
        "managing. Remember, it's okay to reach out for support when you need it."
    )
