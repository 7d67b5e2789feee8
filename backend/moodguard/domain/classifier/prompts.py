"""System instructions, requested output schemas and user-content builders for every classifier call."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

HISTORY_TURNS = 3

# ---------------------------------------------------------------------
# Risk
# ---------------------------------------------------------------------
RISK_SYSTEM = """You are a crisis detection expert specializing in mental health risk assessment. Analyze the message and conversation context for:

1. Suicidal ideation (direct or indirect)
2. Self-harm intentions
3. Severe depression indicators
4. Substance abuse as coping mechanism
5. Complete social isolation
6. Immediate danger to self or others

Risk Levels:
- none: No concerning indicators
- low: Mild stress/sadness, normal coping
- medium: Moderate distress, some concerning language
- high: Clear distress signals, potential self-harm risk
- critical: Immediate suicide risk, self-harm statements, crisis language

Respond with a single JSON object only."""

RISK_SCHEMA: Dict[str, str] = {
    "riskLevel": "none|low|medium|high|critical",
    "indicators": "array of specific indicators found",
    "confidenceScore": "number 0.0-1.0",
    "analysisReason": "explanation of assessment",
    "requiresCheckIn": "boolean",
    "immediateIntervention": "boolean",
    "supportMessage": "optional short supportive message for the user",
}


def _format_context(user_context: Optional[Mapping[str, Any]]) -> str:
    if not user_context:
        return "{}"
    return json.dumps(dict(user_context), ensure_ascii=False, default=str)


def risk_user_content(
    message: str,
    history: Sequence[str],
    user_context: Optional[Mapping[str, Any]] = None,
) -> str:
    recent = "\n".join(str(h) for h in list(history or [])[-HISTORY_TURNS:])
    return (
        f'Current message: "{message}"\n\n'
        f"Recent conversation context:\n{recent}\n\n"
        f"User context: {_format_context(user_context)}"
    )


# ---------------------------------------------------------------------
# Emotion
# ---------------------------------------------------------------------
EMOTION_SYSTEM = (
    "You are a mental health AI assistant specializing in emotional analysis. "
    "Provide detailed emotional assessment with therapeutic insights. Respond with JSON only."
)

EMOTION_SCHEMA: Dict[str, str] = {
    "primaryEmotion": "anxiety|depression|anger|joy|grief|confusion|guilt|pride|neutral",
    "intensity": "number 0.0-1.0",
    "valence": "number -1.0 (negative) to 1.0 (positive)",
    "arousal": "number 0.0 (calm) to 1.0 (excited)",
    "confidence": "number 0.0-1.0",
    "supportiveResponse": "empathetic response addressing the emotion",
    "recommendedActions": "array of therapeutic suggestions",
}


def emotion_user_content(message: str, history: Sequence[str]) -> str:
    ctx = ""
    if history:
        ctx = "Recent conversation context:\n" + "\n".join(str(h) for h in history) + "\n\n"
    return (
        f'{ctx}Current message to analyze: "{message}"\n\n'
        "Consider explicit emotional language, implicit emotional indicators, "
        "context from conversation history, and crisis indicators requiring immediate support."
    )


# ---------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------
MAX_TRIGGERS_PER_ENTRY = 3

TRIGGER_SYSTEM = (
    "Extract emotional triggers from the following text. "
    f"Return a JSON object with a 'triggers' array (max {MAX_TRIGGERS_PER_ENTRY}). "
    "Focus on specific situations, people, thoughts, or events that may have contributed to emotional changes."
)

TRIGGER_SCHEMA: Dict[str, str] = {"triggers": "array of short trigger phrases"}


# ---------------------------------------------------------------------
# Forecast
# ---------------------------------------------------------------------
FORECAST_SYSTEM = (
    "You are an expert emotional intelligence AI specialized in mood forecasting and preventive "
    "mental health. Provide accurate, therapeutic predictions based on emotional patterns. "
    "Respond with JSON only."
)

FORECAST_SCHEMA: Dict[str, str] = {
    "predictedMood": "most likely mood state in next 24-48 hours",
    "predictedIntensity": "number 0-10, expected mood intensity",
    "confidenceScore": "number 0.0-1.0",
    "riskLevel": "low|medium|high|critical",
    "triggerFactors": "array of potential triggers to watch for",
    "preventiveRecommendations": "array of specific actions to maintain/improve mood",
    "timeBasedInsights": "array of insights based on weekday/weekend and time-of-day patterns",
}


def forecast_user_content(pattern: Mapping[str, Any], recent_samples: Iterable[Mapping[str, Any]]) -> str:
    dump = lambda obj: json.dumps(obj, ensure_ascii=False, default=str)  # noqa: E731
    samples: List[Mapping[str, Any]] = list(recent_samples)
    return (
        "Based on the following emotional and mood data, provide a predictive mood forecast.\n\n"
        f"Historical Mood Patterns: {dump({k: pattern.get(k) for k in ('volatility', 'temporal', 'baseline', 'dominantEmotions')})}\n"
        f"Recent Emotional Trends: {dump(pattern.get('trends'))}\n"
        f"Identified Triggers: {dump(pattern.get('triggerPatterns'))}\n"
        f"Coping Effectiveness: {dump(pattern.get('copingEffectiveness'))}\n"
        f"Most Recent Samples: {dump(samples)}\n\n"
        "Focus on therapeutic value and actionable insights."
    )
