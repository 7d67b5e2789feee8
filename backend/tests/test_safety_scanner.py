"""
Keyword scan, tier combination, support plans and follow-up scheduling.

Run with: pytest backend/tests/test_safety_scanner.py -v
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from moodguard.domain.safety.actions import resolve_actions
from moodguard.domain.safety.combiner import combine
from moodguard.domain.safety.followup import check_in_message, follow_up_delay, schedule_check_in
from moodguard.domain.safety.lexicon import CrisisLexicon
from moodguard.domain.safety.scanner import KeywordRiskScanner, scan
from moodguard.schemas.common import RiskLevel, highest
from moodguard.schemas.safety import ClassifierRiskRecord, RiskAssessment

ALL_TIERS = list(RiskLevel)
NOW = datetime(2024, 5, 6, 12, 0, tzinfo=timezone.utc)


class TestRiskLevel:
    def test_total_order(self):
        assert RiskLevel.NONE < RiskLevel.LOW < RiskLevel.MEDIUM < RiskLevel.HIGH < RiskLevel.CRITICAL

    def test_highest_is_upgrade_only(self):
        assert highest(RiskLevel.MEDIUM, RiskLevel.LOW) is RiskLevel.MEDIUM
        assert highest(None, RiskLevel.HIGH) is RiskLevel.HIGH
        assert highest() is RiskLevel.NONE

    def test_parse_unknown(self):
        assert RiskLevel.parse("CRITICAL") is RiskLevel.CRITICAL
        assert RiskLevel.parse("severe") is None
        assert RiskLevel.coerce("severe") is RiskLevel.NONE


class TestKeywordScan:
    SUICIDAL_SAMPLES = [
        "I want to die",
        "sometimes I think everyone would be better off dead without me",
        "I just want to end it all",
        "I can’t go on like this",  # curly apostrophe
        "I WISH I WAS DEAD",
    ]

    @pytest.mark.parametrize("text", SUICIDAL_SAMPLES)
    def test_suicidal_phrase_is_critical(self, text: str):
        result = scan(text)
        assert result.risk_level is RiskLevel.CRITICAL
        assert result.requires_check_in is True
        assert result.confidence_score == pytest.approx(0.9)
        assert any(i.startswith("Suicidal language") for i in result.indicators)

    def test_kill_myself_and_alone_example(self):
        result = scan("I want to kill myself and I'm completely alone")
        assert result.risk_level is RiskLevel.CRITICAL
        assert result.requires_check_in is True
        assert 'Suicidal language: "kill myself"' in result.indicators
        assert 'Isolation indicator: "completely alone"' in result.indicators
        assert result.analysis_reason == "Pattern matching detected 2 crisis indicators"
        assert result.sources == ["pattern"]

    def test_self_harm_is_high(self):
        result = scan("I cut myself last night")
        assert result.risk_level is RiskLevel.HIGH
        assert result.confidence_score == pytest.approx(0.8)
        assert result.requires_check_in is True

    def test_three_depression_hits_is_high(self):
        result = scan("I feel hopeless and worthless, just numb all the time")
        assert result.risk_level is RiskLevel.HIGH
        assert result.confidence_score == pytest.approx(0.7)
        assert len([i for i in result.indicators if i.startswith("Depression")]) == 3

    def test_single_depression_hit_is_medium(self):
        result = scan("honestly it all feels pointless")
        assert result.risk_level is RiskLevel.MEDIUM
        assert result.confidence_score == pytest.approx(0.5)
        assert result.requires_check_in is False

    def test_isolation_and_substance_floors(self):
        assert scan("no one cares about me").confidence_score == pytest.approx(0.4)
        sub = scan("I've been drinking to forget")
        assert sub.risk_level is RiskLevel.MEDIUM
        assert sub.confidence_score == pytest.approx(0.6)

    def test_tier_never_lowered_within_scan(self):
        # a later medium-tier rule must not pull a critical match down
        result = scan("I want to die, I have no friends and I'm drinking to forget")
        assert result.risk_level is RiskLevel.CRITICAL
        assert result.confidence_score == pytest.approx(0.9)

    def test_safe_text(self):
        result = scan("Had a nice walk with my dog this morning")
        assert result.risk_level is RiskLevel.NONE
        assert result.indicators == []
        assert result.confidence_score == 0.0
        assert result.analysis_reason == "No immediate crisis indicators detected"

    def test_injected_lexicon(self):
        scanner = KeywordRiskScanner(CrisisLexicon.build(suicidal=["Banana Split"]))
        assert scanner.scan("a banana split please").risk_level is RiskLevel.CRITICAL
        assert scanner.scan("I want to die").risk_level is RiskLevel.NONE


def _assessment(tier: RiskLevel, confidence: float = 0.5) -> RiskAssessment:
    return RiskAssessment(
        risk_level=tier,
        indicators=["scan"],
        confidence_score=confidence,
        analysis_reason="scan reason",
        requires_check_in=tier.needs_check_in,
        sources=["pattern"],
    )


class TestCombiner:
    @pytest.mark.parametrize("scan_tier", ALL_TIERS)
    @pytest.mark.parametrize("ai_tier", ALL_TIERS)
    def test_monotonic(self, scan_tier: RiskLevel, ai_tier: RiskLevel):
        combined = combine(_assessment(scan_tier), ClassifierRiskRecord(risk_level=ai_tier, confidence_score=0.2))
        assert combined.risk_level >= scan_tier
        assert combined.risk_level >= ai_tier
        assert combined.confidence_score == pytest.approx(0.5)
        assert combined.requires_check_in == combined.risk_level.needs_check_in

    def test_no_record_returns_scan(self):
        scanned = _assessment(RiskLevel.MEDIUM)
        assert combine(scanned, None) is scanned
        assert combine(scanned, ClassifierRiskRecord()) is scanned

    def test_classifier_upgrades_and_merges(self):
        record = ClassifierRiskRecord.model_validate(
            {
                "riskLevel": "high",
                "indicators": ["hopelessness about the future"],
                "confidenceScore": 0.85,
                "analysisReason": "sustained hopelessness",
                "requiresCheckIn": True,
            }
        )
        combined = combine(_assessment(RiskLevel.LOW, 0.3), record)
        assert combined.risk_level is RiskLevel.HIGH
        assert combined.indicators == ["scan", "hopelessness about the future"]
        assert combined.confidence_score == pytest.approx(0.85)
        assert combined.analysis_reason == "Combined analysis: scan reason | AI: sustained hopelessness"
        assert combined.sources == ["pattern", "classifier"]

    def test_classifier_can_request_check_in_below_high(self):
        combined = combine(_assessment(RiskLevel.LOW), ClassifierRiskRecord(risk_level="medium", requires_check_in=True))
        assert combined.risk_level is RiskLevel.MEDIUM
        assert combined.requires_check_in is True

    def test_out_of_range_confidence_is_clamped(self):
        record = ClassifierRiskRecord.model_validate({"riskLevel": "low", "confidenceScore": 7})
        assert record.confidence_score == 1.0


class TestSupportPlan:
    def test_critical_has_hotlines(self):
        plan = resolve_actions(RiskLevel.CRITICAL)
        assert "National Suicide Prevention Lifeline: 988" in plan.emergency_contacts
        assert plan.immediate_actions[0].startswith("Contact emergency services")
        assert "concerned about your safety" in plan.support_message

    def test_region_hotline_appended(self):
        plan = resolve_actions(RiskLevel.HIGH, region="uk")
        assert "Samaritans (UK & ROI): 116 123" in plan.emergency_contacts

    def test_medium_has_support_lines_only(self):
        plan = resolve_actions(RiskLevel.MEDIUM)
        assert plan.emergency_contacts
        assert not any("988" in c for c in plan.emergency_contacts)

    def test_low_has_no_contacts(self):
        plan = resolve_actions(RiskLevel.LOW)
        assert plan.emergency_contacts == []
        assert plan.immediate_actions

    def test_classifier_message_wins(self):
        plan = resolve_actions(RiskLevel.HIGH, support_message="  We're here with you.  ")
        assert plan.support_message == "We're here with you."


class TestFollowUp:
    def test_delay_ordering(self):
        assert follow_up_delay(RiskLevel.CRITICAL) < follow_up_delay(RiskLevel.HIGH) < follow_up_delay(RiskLevel.MEDIUM)
        assert follow_up_delay(RiskLevel.LOW) is None
        assert follow_up_delay(RiskLevel.NONE) is None

    def test_schedule_critical(self):
        check_in = schedule_check_in("u1", RiskLevel.CRITICAL, "x" * 800, now=NOW, indicators=["a"], confidence_score=0.9)
        assert check_in.follow_up_scheduled == NOW + timedelta(hours=2)
        assert len(check_in.trigger_message) == 500
        assert check_in.response_received is False
        assert check_in.mark_responded().response_received is True

    def test_schedule_low_has_no_follow_up(self):
        check_in = schedule_check_in("u1", RiskLevel.LOW, "meh", now=NOW)
        assert check_in.follow_up_scheduled is None
        assert not check_in.is_expired(NOW + timedelta(hours=23))
        assert check_in.is_expired(NOW + timedelta(hours=25))

    def test_check_in_expires_after_window(self):
        check_in = schedule_check_in("u1", RiskLevel.HIGH, "rough day", now=NOW)
        assert not check_in.is_expired(NOW + timedelta(hours=5))
        assert check_in.is_expired(NOW + timedelta(hours=6 + 25))

    def test_late_dispatcher_still_sees_due_check_in(self):
        check_in = schedule_check_in("u1", RiskLevel.HIGH, "rough day", now=NOW)
        assert not check_in.is_due(NOW + timedelta(hours=5))
        # follow-up fell due at +6h; a sweep an hour late must still deliver it
        late = NOW + timedelta(hours=7)
        assert check_in.is_due(late)
        assert not check_in.is_expired(late)
        assert not check_in.mark_responded().is_due(late)

    def test_unscheduled_check_in_is_never_due(self):
        check_in = schedule_check_in("u1", RiskLevel.LOW, "meh", now=NOW)
        assert not check_in.is_due(NOW + timedelta(hours=30))

    def test_message_tone_by_tier(self):
        critical = check_in_message(RiskLevel.CRITICAL, timedelta(hours=3, minutes=20))
        assert "3 hours" in critical
        assert "safe place" in critical
        assert "difficult time" in check_in_message(RiskLevel.HIGH, timedelta(hours=6))
        assert check_in_message(RiskLevel.MEDIUM, timedelta(0)) == check_in_message(RiskLevel.LOW, timedelta(0))
