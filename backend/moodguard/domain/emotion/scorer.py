"""
Emotional state scoring: a lexical pass that always works, overridden field by
field by the semantic classifier when it answers.

The risk_level computed here is a magnitude signal (how intense and how
negative), not the safety tier. It is reported alongside the emotional state
and never feeds the safety combiner or the follow-up scheduler.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from moodguard.core.config import get_settings
from moodguard.domain.classifier.base import SemanticClassifier, request_record
from moodguard.domain.classifier.prompts import EMOTION_SCHEMA, EMOTION_SYSTEM, emotion_user_content
from moodguard.domain.classifier.retry import RetryPolicy, Sleeper
from moodguard.domain.emotion.lexicon import (
    DEFAULT_EMOTION_LEXICON,
    RECOMMENDED_ACTIONS,
    SUPPORTIVE_LINES,
    EmotionLexicon,
    arousal_factor,
    valence_sign,
)
from moodguard.schemas.common import RiskLevel
from moodguard.schemas.emotion import EmotionalState
from moodguard.utils.text import clip

__all__ = ["EmotionalStateScorer", "magnitude_risk", "recommended_actions", "supportive_response"]

log = logging.getLogger("moodguard.emotion")

NEUTRAL = "neutral"
LEXICAL_CONFIDENCE = 0.5
CLASSIFIER_CONFIDENCE = 0.7


@lru_cache(maxsize=512)
def _word_rx(phrase: str) -> Pattern[str]:
    return re.compile(rf"\b{re.escape(phrase)}\b")


def _count(text: str, phrases: Sequence[str]) -> int:
    return sum(len(_word_rx(p).findall(text)) for p in phrases)


def _number(v: Any) -> Optional[float]:
    if isinstance(v, bool) or v is None:
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return None if f != f else f


def magnitude_risk(
    message: str,
    primary_emotion: str,
    intensity: float,
    valence: float,
    lexicon: EmotionLexicon = DEFAULT_EMOTION_LEXICON,
) -> RiskLevel:
    text = (message or "").lower()
    if any(p in text for p in lexicon.crisis_phrases):
        return RiskLevel.CRITICAL
    if any(p in text for p in lexicon.hopeless_phrases) or (intensity > 0.8 and valence < -0.7):
        return RiskLevel.HIGH
    if (intensity > 0.6 and valence < -0.5) or (primary_emotion == "depression" and intensity > 0.7):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def recommended_actions(emotion: str) -> List[str]:
    return list(RECOMMENDED_ACTIONS.get(emotion) or RECOMMENDED_ACTIONS[NEUTRAL])


def supportive_response(state: EmotionalState) -> str:
    if state.supportive_response:
        return state.supportive_response
    return SUPPORTIVE_LINES.get(state.primary_emotion) or SUPPORTIVE_LINES[NEUTRAL]


class EmotionalStateScorer:
    def __init__(
        self,
        classifier: Optional[SemanticClassifier] = None,
        *,
        lexicon: EmotionLexicon = DEFAULT_EMOTION_LEXICON,
        policy: Optional[RetryPolicy] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        self.classifier = classifier
        self.lexicon = lexicon
        self.policy = policy
        self.sleep = sleep

    # ---- lexical ----
    def category_hits(self, message: str) -> Dict[str, int]:
        text = (message or "").lower()
        return {name: _count(text, words) for name, words in self.lexicon.categories}

    def _primary(self, hits: Mapping[str, int]) -> Tuple[str, int]:
        best, best_hits = NEUTRAL, 0
        # strict > keeps the earliest declared category on ties
        for name in self.lexicon.names:
            if hits.get(name, 0) > best_hits:
                best, best_hits = name, hits[name]
        return best, best_hits

    def lexical(self, message: str) -> EmotionalState:
        text = (message or "").lower()
        primary, hits = self._primary(self.category_hits(text))
        boosted = _count(text, self.lexicon.intensifiers) > 0
        intensity = clip(0.2 * hits + (0.3 if boosted else 0.0) + 0.3)
        valence = valence_sign(primary) * intensity
        arousal = intensity * arousal_factor(primary)
        return EmotionalState(
            primary_emotion=primary,
            intensity=intensity,
            valence=valence,
            arousal=arousal,
            confidence=LEXICAL_CONFIDENCE,
            risk_level=magnitude_risk(message, primary, intensity, valence, self.lexicon),
            recommended_actions=recommended_actions(primary),
            source="lexical",
        )

    # ---- merged ----
    def merge(self, message: str, quick: EmotionalState, record: Mapping[str, Any]) -> EmotionalState:
        """Classifier fields win one by one; anything missing or non-numeric keeps the lexical value."""
        if not record:
            return quick

        emotion = str(record.get("primaryEmotion") or "").strip().lower() or quick.primary_emotion
        intensity = _number(record.get("intensity"))
        valence = _number(record.get("valence"))
        arousal = _number(record.get("arousal"))
        confidence = _number(record.get("confidence"))

        intensity = clip(quick.intensity if intensity is None else intensity)
        valence = clip(quick.valence if valence is None else valence, -1.0, 1.0)
        arousal = clip(quick.arousal if arousal is None else arousal)
        confidence = clip(CLASSIFIER_CONFIDENCE if confidence is None else confidence)

        actions = record.get("recommendedActions")
        if not isinstance(actions, list) or not actions:
            actions = recommended_actions(emotion)
        support = record.get("supportiveResponse")

        return EmotionalState(
            primary_emotion=emotion,
            intensity=intensity,
            valence=valence,
            arousal=arousal,
            confidence=confidence,
            risk_level=magnitude_risk(message, emotion, intensity, valence, self.lexicon),
            supportive_response=str(support).strip() if support else None,
            recommended_actions=[str(a) for a in actions],
            source="classifier",
        )

    async def score(
        self,
        message: str,
        conversation_history: Sequence[str] = (),
        user_id: Optional[str] = None,
    ) -> EmotionalState:
        quick = self.lexical(message)
        if self.classifier is None:
            return quick

        try:
            record = await request_record(
                self.classifier,
                EMOTION_SYSTEM,
                emotion_user_content(message, conversation_history),
                EMOTION_SCHEMA,
                temperature=get_settings().ANALYSIS_TEMPERATURE,
                policy=self.policy,
                sleep=self.sleep,
                label="emotion classifier",
            )
        except Exception as e:
            log.warning("emotion classifier failed for user %s, using lexical scores: %s", user_id or "-", e)
            return quick

        return self.merge(message, quick, record)
