from .patterns import MoodPatternAnalyzer, coping_effectiveness, coping_strategies, dominant_emotions
from .stats import baseline, monthly_trend, recent_trend, temporal_patterns, volatility, weekly_trend
from .support import mood_urgency, support_needs

__all__ = [
    "MoodPatternAnalyzer",
    "coping_effectiveness",
    "coping_strategies",
    "dominant_emotions",
    "baseline",
    "monthly_trend",
    "recent_trend",
    "temporal_patterns",
    "volatility",
    "weekly_trend",
    "mood_urgency",
    "support_needs",
]
