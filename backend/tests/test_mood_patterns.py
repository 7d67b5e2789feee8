"""
Mood statistics and pattern analysis. Every windowed computation runs against a
fixed `now` so results do not depend on the wall clock.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import List, Sequence

import pytest

from moodguard.core.errors import TransportError
from moodguard.domain.classifier.retry import RetryPolicy
from moodguard.domain.mood import stats
from moodguard.domain.mood.patterns import MoodPatternAnalyzer, coping_effectiveness, dominant_emotions
from moodguard.domain.mood.support import mood_urgency, support_needs
from moodguard.schemas.common import RiskLevel
from moodguard.schemas.mood import EmotionalPattern, JournalEntry, MoodSample

NOW = datetime(2024, 5, 20, 18, 0, tzinfo=timezone.utc)  # a Monday evening
POLICY = RetryPolicy(max_attempts=2, base_delay_s=0.0, jitter_s=0.0, max_delay_s=0.0)


def series(values: Sequence[float], *, step: timedelta = timedelta(days=1), emotion: str = "neutral") -> List[MoodSample]:
    """Oldest value first, last value lands at NOW."""
    n = len(values)
    return [
        MoodSample(emotion=emotion, intensity=v, timestamp=NOW - step * (n - 1 - i))
        for i, v in enumerate(values)
    ]


def mirrored(samples: Sequence[MoodSample]) -> List[MoodSample]:
    return [s.model_copy(update={"intensity": 10 - s.intensity}) for s in samples]


class TestVolatility:
    def test_flat_series_is_zero(self):
        assert stats.volatility(series([6.0] * 8)) == 0.0

    def test_duplication_keeps_volatility(self):
        base = series([2, 4, 6, 8])
        assert stats.volatility(base + base) == pytest.approx(stats.volatility(base))

    def test_population_std_over_ten(self):
        assert stats.volatility(series([2, 4, 4, 4, 5, 5, 7, 9])) == pytest.approx(0.2)

    def test_fewer_than_two(self):
        assert stats.volatility([]) == 0.0
        assert stats.volatility(series([9])) == 0.0


class TestTrends:
    def test_two_samples_is_insufficient(self):
        assert stats.recent_trend(series([3, 8])) == "insufficient_data"

    def test_recent_trend_improving(self):
        assert stats.recent_trend(series([2, 2, 2, 6, 6, 6])) == "improving"

    def test_recent_trend_ignores_input_order(self):
        samples = series([2, 2, 2, 6, 6, 6])
        assert stats.recent_trend(list(reversed(samples))) == "improving"

    def test_three_samples_compare_with_themselves(self):
        assert stats.recent_trend(series([1, 5, 9])) == "stable"

    def test_weekly_trend(self):
        samples = series([3, 3, 3, 7, 7, 7], step=timedelta(days=3))
        assert stats.weekly_trend(samples, NOW) == "improving"
        assert stats.weekly_trend(series([5, 5], step=timedelta(days=30))[:1], NOW) == "no_data"

    def test_monthly_trend_slope(self):
        assert stats.monthly_trend(series([2, 3, 4, 5, 6, 7]), NOW) == "improving"
        assert stats.monthly_trend(series([5, 5, 5, 5, 5]), NOW) == "stable"
        assert stats.monthly_trend(series([2, 3, 4, 5]), NOW) == "insufficient_data"

    def test_monthly_window_drops_old_samples(self):
        old = series([1, 2, 3, 4, 5, 6], step=timedelta(days=10))
        assert stats.monthly_trend(old, NOW) == "insufficient_data"

    @pytest.mark.parametrize(
        "values",
        [
            [2, 3, 4, 5, 6, 7, 8],
            [9, 8, 6, 5, 3, 2, 1],
            [1, 1, 1, 8, 8, 8],
        ],
    )
    def test_mirroring_flips_labels(self, values):
        samples = series(values)
        flipped = mirrored(samples)
        swap = {"improving": "declining", "declining": "improving"}
        for fn in (stats.recent_trend, lambda s: stats.weekly_trend(s, NOW), lambda s: stats.monthly_trend(s, NOW)):
            label = fn(samples)
            if label in swap:
                assert fn(flipped) == swap[label]

    def test_ols_slope(self):
        assert stats.ols_slope([1, 3, 5, 7]) == pytest.approx(2.0)
        assert stats.ols_slope([4]) == 0.0


class TestTemporal:
    def test_buckets(self):
        samples = [
            MoodSample(intensity=4, timestamp="2024-05-20T08:00:00Z"),  # Monday morning
            MoodSample(intensity=6, timestamp="2024-05-20T09:30:00Z"),  # Monday morning
            MoodSample(intensity=2, timestamp="2024-05-25T23:00:00Z"),  # Saturday evening
            MoodSample(intensity=3, timestamp="2024-05-26T03:00:00Z"),  # Sunday night
        ]
        temporal = stats.temporal_patterns(samples)
        # Sunday=0 .. Saturday=6
        assert temporal.day_of_week[1].count == 2
        assert temporal.day_of_week[1].average == pytest.approx(5.0)
        assert temporal.day_of_week[6].average == pytest.approx(2.0)
        assert temporal.day_of_week[0].average == pytest.approx(3.0)
        assert temporal.time_of_day["morning"].total == pytest.approx(10.0)
        assert temporal.time_of_day["evening"].average == pytest.approx(2.0)
        assert temporal.time_of_day["night"].count == 1
        assert "afternoon" not in temporal.time_of_day

    def test_baseline(self):
        assert stats.baseline([]) == 5.0
        assert stats.baseline(series([2, 4, 9])) == pytest.approx(5.0)


class TestCoping:
    def test_effectiveness_window(self):
        mention = NOW - timedelta(days=3)
        journals = [
            JournalEntry(content="Tried MEDITATION before bed", created_at=mention),
            JournalEntry(content="exercise helped a lot", created_at=NOW - timedelta(days=10)),
        ]
        samples = [
            MoodSample(intensity=7, timestamp=mention + timedelta(hours=2)),
            MoodSample(intensity=9, timestamp=mention + timedelta(hours=20)),
            MoodSample(intensity=1, timestamp=mention + timedelta(hours=30)),  # outside 24h
            MoodSample(intensity=1, timestamp=mention),  # not strictly after
        ]
        result = coping_effectiveness(samples, journals)
        assert result["meditation"].usage == 1
        assert result["meditation"].average_intensity_after == pytest.approx(8.0)
        assert result["meditation"].effectiveness == "moderate"
        assert result["exercise"].effectiveness == "unrated"
        assert result["exercise"].average_intensity_after is None
        assert "breathing" not in result

    def test_high_after_three_followed_mentions(self):
        journals = [JournalEntry(content="breathing drills", created_at=NOW - timedelta(days=d)) for d in (1, 2, 3)]
        samples = [MoodSample(intensity=6, timestamp=NOW - timedelta(days=d) + timedelta(hours=1)) for d in (1, 2, 3)]
        assert coping_effectiveness(samples, journals)["breathing"].effectiveness == "high"


class TestAnalyzer:
    def test_empty_history(self):
        pattern = asyncio.run(MoodPatternAnalyzer().analyze([], [], now=NOW))
        assert pattern.dominant_emotions == ["neutral"]
        assert pattern.volatility == 0
        assert pattern.trend_direction == "stable"
        assert pattern.trigger_patterns == []
        assert pattern.average_valence == 0.0
        assert pattern.average_arousal == 0.5
        assert pattern.baseline == 5.0
        assert pattern.sample_count == 0

    def test_dominant_emotions_top_three(self):
        samples = (
            series([5, 5, 5], emotion="anxiety")
            + series([5, 5], emotion="joy")
            + series([5], emotion="anger")
            + series([5], emotion="grief")
        )
        assert dominant_emotions(samples) == ["anxiety", "joy", "anger"]

    def test_trend_prefers_monthly(self):
        samples = series([2, 3, 4, 5, 6, 7], emotion="joy")
        pattern = asyncio.run(MoodPatternAnalyzer().analyze(samples, now=NOW))
        assert pattern.trends.monthly == "improving"
        assert pattern.trend_direction == "improving"
        assert pattern.average_valence > 0

    def test_low_valence_adds_professional_support(self):
        samples = series([9, 9, 9], emotion="depression")
        pattern = asyncio.run(MoodPatternAnalyzer().analyze(samples, now=NOW))
        assert pattern.average_valence == pytest.approx(-0.9)
        assert "Professional therapy support" in pattern.coping_strategies
        assert "Social connection and support" in pattern.coping_strategies
        assert pattern.coping_strategies[-1] == "Creative expression"

    def test_triggers_ranked_from_tags_classifier_and_prior(self, scripted, no_sleep):
        fake = scripted([{"triggers": ["Work deadlines", "sleep", "family dinner", "ignored extra"]}])
        journals = [
            JournalEntry(content="Deadline crunch again", created_at=NOW, triggers=["work deadlines"]),
            JournalEntry(content="", created_at=NOW, triggers=["money"]),
        ]
        prior = EmotionalPattern(trigger_patterns=["money", "commute"])
        analyzer = MoodPatternAnalyzer(fake, policy=POLICY, sleep=no_sleep)

        triggers = asyncio.run(analyzer.triggers(journals, prior))

        # only the entry with text is sent to the classifier
        assert len(fake.calls) == 1
        assert triggers[:2] == ["work deadlines", "money"]
        assert "ignored extra" not in triggers
        assert len(triggers) == 5

    def test_trigger_extraction_failure_contributes_nothing(self, scripted, no_sleep):
        fake = scripted([TransportError("down")])
        journals = [JournalEntry(content="awful commute", triggers=["commute"])]
        analyzer = MoodPatternAnalyzer(fake, policy=POLICY, sleep=no_sleep)
        assert asyncio.run(analyzer.triggers(journals)) == ["commute"]


class TestSupportContext:
    @pytest.mark.parametrize(
        "values, message, expected",
        [
            ([8, 8], "I can't cope with this anymore", RiskLevel.CRITICAL),
            ([1, 2, 3], "just tired", RiskLevel.HIGH),
            ([4, 4], "just tired", RiskLevel.MEDIUM),
            ([7, 6], "just tired", RiskLevel.LOW),
            ([], "just tired", RiskLevel.LOW),
        ],
    )
    def test_urgency(self, values, message, expected):
        assert mood_urgency(series(values), message) is expected

    def test_needs_from_message_and_low_mood(self):
        needs = support_needs(series([2, 3]), "I feel so lonely and worried")
        assert needs == ["social connection", "anxiety management", "emotional validation", "gentle encouragement"]

    def test_high_intensity_needs_grounding(self):
        assert support_needs(series([9, 8]), "okay") == ["calming techniques", "grounding exercises"]

    def test_default_needs(self):
        assert support_needs([], "hello") == ["general support", "active listening"]
