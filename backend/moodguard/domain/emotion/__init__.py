from .lexicon import DEFAULT_EMOTION_LEXICON, EmotionLexicon
from .scorer import EmotionalStateScorer, magnitude_risk, recommended_actions, supportive_response

__all__ = [
    "DEFAULT_EMOTION_LEXICON",
    "EmotionLexicon",
    "EmotionalStateScorer",
    "magnitude_risk",
    "recommended_actions",
    "supportive_response",
]
