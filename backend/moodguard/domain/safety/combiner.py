from __future__ import annotations

from typing import Optional

from moodguard.schemas.common import highest
from moodguard.schemas.safety import ClassifierRiskRecord, RiskAssessment

__all__ = ["combine"]

CLASSIFIER_SOURCE = "classifier"


def combine(scanned: RiskAssessment, record: Optional[ClassifierRiskRecord]) -> RiskAssessment:
    """
    Reconcile the keyword scan with the classifier record.

    Tier and confidence are upgrade-only maxima, indicators are scanner-first.
    With no usable record the scan is returned as-is: a classifier contribution
    is never invented.
    """
    if record is None or record.is_empty():
        return scanned

    tier = highest(scanned.risk_level, record.risk_level)
    confidence = max(scanned.confidence_score, record.confidence_score or 0.0)
    ai_reason = record.analysis_reason or "no reason given"

    return RiskAssessment(
        risk_level=tier,
        indicators=[*scanned.indicators, *record.indicators],
        confidence_score=confidence,
        analysis_reason=f"Combined analysis: {scanned.analysis_reason} | AI: {ai_reason}",
        requires_check_in=bool(record.requires_check_in) or tier.needs_check_in,
        sources=[*scanned.sources, CLASSIFIER_SOURCE],
    )
