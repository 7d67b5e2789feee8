"""
HTTP surface: routers wired to in-memory services through dependency overrides.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from moodguard.adapters.store import MemoryStore
from moodguard.domain.emotion.scorer import EmotionalStateScorer
from moodguard.domain.forecast.forecaster import MoodForecaster
from moodguard.domain.mood.patterns import MoodPatternAnalyzer
from moodguard.domain.safety.service import SafetyService
from moodguard.interfaces.http.deps import services as deps
from moodguard.interfaces.http.main import create_app
from moodguard.schemas.mood import MoodSample

NOW = datetime(2024, 5, 20, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client(store: MemoryStore) -> TestClient:
    app = create_app()
    analyzer = MoodPatternAnalyzer()
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_safety_service] = lambda: SafetyService(None, store=store)
    app.dependency_overrides[deps.get_emotion_scorer] = lambda: EmotionalStateScorer()
    app.dependency_overrides[deps.get_pattern_analyzer] = lambda: analyzer
    app.dependency_overrides[deps.get_forecaster] = lambda: MoodForecaster(analyzer=analyzer)
    return TestClient(app)


def test_ping(client):
    assert client.get("/_/ping").json() == {"ok": True}


def test_assess_crisis_example(client):
    r = client.post("/v1/safety/assess", json={"message": "I want to kill myself and I'm completely alone"})
    assert r.status_code == 200
    body = r.json()
    assert body["riskLevel"] == "critical"
    assert body["requiresCheckIn"] is True
    assert any("988" in c for c in body["emergencyContacts"])
    assert body["checkIn"] is None


def test_assess_with_user_schedules_check_in(client, store):
    r = client.post(
        "/v1/safety/assess",
        json={"message": "I cut myself again", "userId": "u-9", "conversationHistory": ["bad night"]},
    )
    body = r.json()
    assert body["riskLevel"] == "high"
    assert body["checkIn"]["userId"] == "u-9"
    assert body["checkIn"]["followUpScheduled"]
    assert len(store.check_ins) == 1
    assert len(store.crisis_logs) == 1


def test_assess_rejects_missing_message(client):
    r = client.post("/v1/safety/assess", json={"userId": "u"})
    assert r.status_code == 422
    assert r.json()["error"] == "validation_error"
    assert r.json()["request_id"]


def test_check_in_message(client):
    r = client.get("/v1/safety/check-in-message", params={"riskLevel": "critical", "hours": 2})
    assert r.status_code == 200
    assert "2 hours" in r.json()["message"]


def test_emotion_score(client):
    r = client.post("/v1/emotion/score", json={"message": "I'm so anxious about tomorrow"})
    body = r.json()
    assert body["primaryEmotion"] == "anxiety"
    assert 0.0 <= body["confidence"] <= 1.0
    assert body["supportiveResponse"]


def test_mood_patterns_empty(client):
    body = client.post("/v1/mood/patterns", json={}).json()
    assert body["dominantEmotions"] == ["neutral"]
    assert body["volatility"] == 0
    assert body["trendDirection"] == "stable"
    assert body["triggerPatterns"] == []


def test_mood_patterns_two_samples(client):
    samples = [
        {"emotion": "sad", "intensity": 3, "timestamp": (NOW - timedelta(hours=5)).isoformat()},
        {"emotion": "sad", "intensity": 12, "timestamp": NOW.isoformat()},
    ]
    body = client.post("/v1/mood/patterns", json={"moodSamples": samples, "now": NOW.isoformat()}).json()
    assert body["trends"]["recent"] == "insufficient_data"
    assert body["baseline"] == pytest.approx(6.5)  # 12 is clamped to 10


def test_forecast_and_reconcile(client, store):
    for i, v in enumerate((4, 5, 6)):
        store.add_mood_sample("u1", MoodSample(emotion="joy", intensity=v, timestamp=NOW - timedelta(days=3 - i)))

    forecast = client.post("/v1/mood/forecast/u1").json()
    assert forecast["source"] == "statistical"
    assert forecast["predictedMood"] == "joy"
    assert 0.0 <= forecast["confidenceScore"] <= 1.0

    r = client.post("/v1/mood/reconcile", json={"forecast": forecast, "actualMood": "calm", "actualIntensity": 5})
    done = r.json()
    assert done["forecastAccuracy"] == pytest.approx(1.0)
    assert store.forecasts[forecast["id"]].is_reconciled
