"""
Safety assessment pipeline.

message -> keyword scan (always) -> semantic classifier (best effort)
        -> combine -> support plan + follow-up check-in

Public API:
- SafetyService.assess_risk(message, history, user_context) -> CrisisAnalysis
- SafetyService.handle_message(user_id, message, ...) -> CrisisAnalysis (also persists)

Neither call raises on classifier or store failure; the worst case is the
scanner-only answer.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from moodguard.core.config import Settings, get_settings
from moodguard.core.errors import ClassifierUnavailable
from moodguard.adapters.store import DataStore
from moodguard.domain.classifier.risk import RiskClassifierAdapter
from moodguard.domain.safety.actions import resolve_actions
from moodguard.domain.safety.combiner import combine
from moodguard.domain.safety.followup import schedule_check_in
from moodguard.domain.safety.scanner import KeywordRiskScanner
from moodguard.schemas.common import RiskLevel
from moodguard.schemas.safety import ClassifierRiskRecord, CrisisAnalysis, CrisisLog, RiskAssessment
from moodguard.utils.time import as_utc, utc_now

__all__ = ["SafetyService"]

log = logging.getLogger("moodguard.safety")

CRISIS_LOG_MIN_TIER = RiskLevel.MEDIUM


class SafetyService:
    def __init__(
        self,
        classifier: Optional[RiskClassifierAdapter] = None,
        *,
        scanner: Optional[KeywordRiskScanner] = None,
        store: Optional[DataStore] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.scanner = scanner or KeywordRiskScanner()
        self.classifier = classifier
        self.store = store

    async def _classify(
        self,
        message: str,
        history: Sequence[str],
        user_context: Optional[Mapping[str, Any]],
    ) -> Optional[ClassifierRiskRecord]:
        if self.classifier is None:
            return None
        call = self.classifier.classify_risk(message, history, user_context)
        timeout = self.settings.SAFETY_CLASSIFIER_TIMEOUT_S
        try:
            if timeout:
                return await asyncio.wait_for(call, timeout=timeout)
            return await call
        except ClassifierUnavailable as e:
            log.warning("risk classifier unavailable after %d attempts, using keyword scan: %s", e.attempts, e)
        except asyncio.TimeoutError:
            log.warning("risk classifier exceeded %.1fs, using keyword scan", timeout)
        except Exception:
            # safety path must answer: any classifier failure degrades to the scan
            log.exception("risk classifier failed, using keyword scan")
        return None

    async def assess_risk(
        self,
        message: str,
        conversation_history: Sequence[str] = (),
        user_context: Optional[Mapping[str, Any]] = None,
        *,
        region: Optional[str] = None,
    ) -> CrisisAnalysis:
        scanned = self.scanner.scan(message)

        record: Optional[ClassifierRiskRecord] = None
        if scanned.risk_level is RiskLevel.CRITICAL and self.settings.SAFETY_SKIP_CLASSIFIER_ON_CRITICAL:
            log.warning("critical keyword match; skipping classifier (%d indicators)", len(scanned.indicators))
        else:
            record = await self._classify(message, conversation_history, user_context)

        assessment = combine(scanned, record)
        plan = resolve_actions(
            assessment.risk_level,
            region=region or self.settings.SAFETY_REGION,
            support_message=record.support_message if record is not None and "classifier" in assessment.sources else None,
        )
        return CrisisAnalysis(
            **assessment.model_dump(),
            immediate_actions=plan.immediate_actions,
            emergency_contacts=plan.emergency_contacts,
            support_message=plan.support_message,
        )

    async def handle_message(
        self,
        user_id: str,
        message: str,
        conversation_history: Sequence[str] = (),
        user_context: Optional[Mapping[str, Any]] = None,
        *,
        region: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CrisisAnalysis:
        """
        assess_risk + persistence: crisis log at tier >= medium, check-in when required.
        Store failures are logged; the in-memory analysis is always returned.
        """
        now = as_utc(now or utc_now())
        analysis = await self.assess_risk(message, conversation_history, user_context, region=region)

        if analysis.risk_level >= CRISIS_LOG_MIN_TIER:
            log.warning("risk %s for user %s (%d indicators)", analysis.risk_level.value, user_id, len(analysis.indicators))
            await self._save_crisis_log(user_id, message, analysis, now)

        if not analysis.requires_check_in:
            return analysis

        check_in = schedule_check_in(
            user_id,
            analysis.risk_level,
            message,
            now=now,
            indicators=analysis.indicators,
            confidence_score=analysis.confidence_score,
        )
        if self.store is not None:
            try:
                check_in = await self.store.save_or_update_safety_check_in(check_in)
            except Exception as e:
                log.error("failed to save safety check-in for %s: %s", user_id, e)
        return analysis.model_copy(update={"check_in": check_in})

    async def _save_crisis_log(self, user_id: str, message: str, assessment: RiskAssessment, now: datetime) -> None:
        if self.store is None:
            return
        record = CrisisLog(
            user_id=user_id,
            risk_level=assessment.risk_level,
            indicators=assessment.indicators,
            confidence_score=assessment.confidence_score,
            text_snippet=message,
            sources=assessment.sources,
            detected_at=now,
        )
        try:
            await self.store.save_crisis_log(record)
        except Exception as e:
            log.error("failed to log crisis event for %s: %s", user_id, e)
