from __future__ import annotations

import asyncio

import pytest

from moodguard.core.errors import TransportError
from moodguard.domain.classifier.retry import RetryPolicy
from moodguard.domain.emotion.lexicon import RECOMMENDED_ACTIONS
from moodguard.domain.emotion.scorer import EmotionalStateScorer, magnitude_risk, recommended_actions, supportive_response
from moodguard.schemas.common import RiskLevel

POLICY = RetryPolicy(max_attempts=2, base_delay_s=0.0, jitter_s=0.0, max_delay_s=0.0)


@pytest.fixture
def lexical() -> EmotionalStateScorer:
    return EmotionalStateScorer()


def test_keyword_hits_and_intensifier(lexical):
    state = lexical.lexical("I'm so anxious and worried about everything")
    assert state.primary_emotion == "anxiety"
    assert state.intensity == pytest.approx(1.0)
    assert state.valence == pytest.approx(-1.0)
    assert state.arousal == pytest.approx(1.0)
    assert state.confidence == pytest.approx(0.5)
    assert state.risk_level is RiskLevel.HIGH
    assert state.source == "lexical"


def test_no_hits_is_neutral(lexical):
    state = lexical.lexical("The meeting is at noon")
    assert state.primary_emotion == "neutral"
    assert state.intensity == pytest.approx(0.3)
    assert state.valence == 0.0
    assert state.arousal == pytest.approx(0.15)
    assert state.risk_level is RiskLevel.LOW


def test_ties_keep_declaration_order(lexical):
    assert lexical.lexical("I feel sad and angry").primary_emotion == "depression"


def test_words_match_on_boundaries(lexical):
    # "madness" should not count as "mad", "soon" should not count as "so"
    state = lexical.lexical("see you soon, the madness is over")
    assert state.primary_emotion == "neutral"
    assert state.intensity == pytest.approx(0.3)


def test_crisis_phrase_is_critical_magnitude(lexical):
    assert lexical.lexical("I want to end it all, I'm tired").risk_level is RiskLevel.CRITICAL


def test_magnitude_thresholds():
    assert magnitude_risk("", "anger", 0.9, -0.8) is RiskLevel.HIGH
    assert magnitude_risk("", "anger", 0.7, -0.6) is RiskLevel.MEDIUM
    assert magnitude_risk("", "depression", 0.75, -0.2) is RiskLevel.MEDIUM
    assert magnitude_risk("I just give up", "neutral", 0.1, 0.0) is RiskLevel.HIGH
    assert magnitude_risk("", "joy", 0.9, 0.9) is RiskLevel.LOW


def test_classifier_fields_override_one_by_one(scripted, no_sleep):
    fake = scripted(
        [{"primaryEmotion": "Grief", "intensity": 1.7, "valence": -0.6, "confidence": "n/a", "supportiveResponse": "I'm here."}]
    )
    scorer = EmotionalStateScorer(fake, policy=POLICY, sleep=no_sleep)
    state = asyncio.run(scorer.score("I miss her so much", ["she passed last month"], "u1"))

    assert state.source == "classifier"
    assert state.primary_emotion == "grief"
    assert state.intensity == 1.0
    assert state.valence == pytest.approx(-0.6)
    assert state.confidence == pytest.approx(0.7)
    assert state.risk_level is RiskLevel.MEDIUM
    assert state.recommended_actions == list(RECOMMENDED_ACTIONS["grief"])
    assert supportive_response(state) == "I'm here."
    assert "she passed last month" in fake.calls[0]["user_content"]


def test_classifier_failure_falls_back_to_lexical(scripted, no_sleep):
    fake = scripted([TransportError("down")])
    scorer = EmotionalStateScorer(fake, policy=POLICY, sleep=no_sleep)
    state = asyncio.run(scorer.score("I'm so happy today"))

    assert len(fake.calls) == 2
    assert state.source == "lexical"
    assert state.primary_emotion == "joy"
    assert state.valence > 0


def test_empty_record_keeps_lexical(scripted, no_sleep):
    fake = scripted([{}])
    state = asyncio.run(EmotionalStateScorer(fake, policy=POLICY, sleep=no_sleep).score("so frustrated"))
    assert state.source == "lexical"
    assert state.primary_emotion == "anger"


def test_recommendations_fall_back_to_neutral():
    assert recommended_actions("pride") == list(RECOMMENDED_ACTIONS["neutral"])
    assert "celebrating" in supportive_response(EmotionalStateScorer().lexical("so proud of this win"))
