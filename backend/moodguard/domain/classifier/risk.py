from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from pydantic import ValidationError

from moodguard.core.config import get_settings
from moodguard.domain.classifier.base import SemanticClassifier, request_record
from moodguard.domain.classifier.prompts import RISK_SCHEMA, RISK_SYSTEM, risk_user_content
from moodguard.domain.classifier.retry import RetryPolicy, Sleeper
from moodguard.schemas.safety import ClassifierRiskRecord

log = logging.getLogger("moodguard.classifier")


class RiskClassifierAdapter:
    """Semantic risk classification with bounded retries. Never sees the scanner result."""

    def __init__(
        self,
        classifier: SemanticClassifier,
        policy: Optional[RetryPolicy] = None,
        *,
        sleep: Optional[Sleeper] = None,
        temperature: Optional[float] = None,
    ) -> None:
        self.classifier = classifier
        self.policy = policy or RetryPolicy.from_settings()
        self.sleep = sleep
        self.temperature = get_settings().RISK_TEMPERATURE if temperature is None else temperature

    async def classify_risk(
        self,
        message: str,
        history: Sequence[str] = (),
        user_context: Optional[Mapping[str, Any]] = None,
    ) -> ClassifierRiskRecord:
        raw = await request_record(
            self.classifier,
            RISK_SYSTEM,
            risk_user_content(message, history, user_context),
            RISK_SCHEMA,
            temperature=self.temperature,
            policy=self.policy,
            sleep=self.sleep,
            label="risk classifier",
        )
        try:
            return ClassifierRiskRecord.model_validate(raw)
        except ValidationError as e:
            log.warning("risk classifier record failed validation, using empty record: %s", e)
            return ClassifierRiskRecord()
