from typing import Optional

from fastapi import APIRouter, Body, Depends

from moodguard.adapters.store import DataStore
from moodguard.domain.forecast.forecaster import MoodForecaster
from moodguard.domain.mood.patterns import MoodPatternAnalyzer
from moodguard.interfaces.http.deps.services import get_forecaster, get_pattern_analyzer, get_store
from moodguard.schemas.mood import EmotionalPattern, MoodForecast, PatternRequest, ReconcileRequest

router = APIRouter()


@router.post("/patterns", response_model=EmotionalPattern)
async def patterns(body: PatternRequest, analyzer: MoodPatternAnalyzer = Depends(get_pattern_analyzer)):
    return await analyzer.analyze(body.mood_samples, body.journal_entries, body.prior_pattern, now=body.now)


@router.post("/forecast/{user_id}", response_model=MoodForecast)
async def forecast(
    user_id: str,
    prior_pattern: Optional[EmotionalPattern] = Body(None, embed=True, alias="priorPattern"),
    forecaster: MoodForecaster = Depends(get_forecaster),
    store: DataStore = Depends(get_store),
):
    return await forecaster.generate(user_id, store, prior_pattern)


@router.post("/reconcile", response_model=MoodForecast)
async def reconcile(
    body: ReconcileRequest,
    forecaster: MoodForecaster = Depends(get_forecaster),
    store: DataStore = Depends(get_store),
):
    return await forecaster.reconcile(body.forecast, body.actual_mood, body.actual_intensity, store)
