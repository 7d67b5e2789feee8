from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

# Declaration order matters: it breaks ties between equally-hit categories.
EMOTION_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("anxiety", ("anxious", "worried", "nervous", "panic", "stress", "overwhelmed", "scared", "fear")),
    ("depression", ("sad", "down", "empty", "hopeless", "worthless", "numb", "tired", "exhausted")),
    ("anger", ("angry", "frustrated", "irritated", "mad", "furious", "annoyed", "rage")),
    ("joy", ("happy", "excited", "joyful", "great", "amazing", "wonderful", "fantastic", "love")),
    ("grief", ("loss", "grief", "mourning", "miss", "gone", "died", "death")),
    ("confusion", ("confused", "lost", "uncertain", "unclear", "mixed up", "puzzled")),
    ("guilt", ("guilty", "shame", "regret", "sorry", "fault", "blame")),
    ("pride", ("proud", "accomplished", "achieved", "success", "win", "victory")),
)

INTENSIFIERS: Tuple[str, ...] = ("very", "extremely", "really", "so", "incredibly", "absolutely")

POSITIVE: FrozenSet[str] = frozenset({"joy", "pride"})
NEGATIVE: FrozenSet[str] = frozenset({"anxiety", "depression", "anger", "grief", "guilt"})
HIGH_AROUSAL: FrozenSet[str] = frozenset({"anxiety", "anger", "joy"})

# magnitude-side risk phrases (separate from the crisis lexicon used by the safety scanner)
CRISIS_PHRASES: Tuple[str, ...] = ("suicide", "kill myself", "end it all", "not worth living", "hurt myself")
HOPELESS_PHRASES: Tuple[str, ...] = ("hopeless", "can't go on", "nothing matters", "give up")


def valence_sign(emotion: str) -> int:
    if emotion in POSITIVE:
        return 1
    if emotion in NEGATIVE:
        return -1
    return 0


def arousal_factor(emotion: str) -> float:
    return 1.0 if emotion in HIGH_AROUSAL else 0.5


@dataclass(frozen=True)
class EmotionLexicon:
    categories: Tuple[Tuple[str, Tuple[str, ...]], ...] = EMOTION_KEYWORDS
    intensifiers: Tuple[str, ...] = INTENSIFIERS
    crisis_phrases: Tuple[str, ...] = CRISIS_PHRASES
    hopeless_phrases: Tuple[str, ...] = HOPELESS_PHRASES

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.categories)


DEFAULT_EMOTION_LEXICON = EmotionLexicon()


RECOMMENDED_ACTIONS: Dict[str, Tuple[str, ...]] = {
    "anxiety": (
        "Practice deep breathing exercises",
        "Try grounding techniques (5-4-3-2-1 method)",
        "Consider progressive muscle relaxation",
        "Take a short walk in nature",
    ),
    "depression": (
        "Engage in a small, achievable activity",
        "Reach out to a supportive friend or family member",
        "Practice self-compassion",
        "Consider journaling your thoughts",
    ),
    "anger": (
        "Take several deep breaths before responding",
        "Use physical exercise to release tension",
        "Practice assertive communication",
        "Take a brief timeout to cool down",
    ),
    "joy": (
        "Share this positive moment with someone you care about",
        "Take time to savor and appreciate this feeling",
        "Consider what contributed to this positive state",
        "Use this energy for creative or meaningful activities",
    ),
    "grief": (
        "Allow yourself to feel and process these emotions",
        "Reach out to supportive friends or family",
        "Consider professional grief counseling",
        "Practice gentle self-care activities",
    ),
    "confusion": (
        "Break down complex thoughts into smaller parts",
        "Talk through your thoughts with someone you trust",
        "Write down your thoughts to organize them",
        "Take time to reflect before making decisions",
    ),
    "guilt": (
        "Practice self-forgiveness and compassion",
        "Consider if amends need to be made",
        "Focus on learning from the experience",
        "Talk to someone about these feelings",
    ),
    "neutral": (
        "Check in with your emotional state regularly",
        "Practice mindfulness and present-moment awareness",
        "Engage in activities that bring you joy",
        "Maintain healthy routines and self-care",
    ),
}

SUPPORTIVE_LINES: Dict[str, str] = {
    "anxiety": "I hear that you're feeling anxious right now. That's a very human response, and it's okay to feel this way.",
    "depression": "I recognize the heaviness you're carrying right now. Your feelings are valid and you're not alone.",
    "anger": "I can sense your frustration. Anger often signals that something important to you has been affected.",
    "joy": "It's wonderful to hear the happiness in your words. These positive moments are so important.",
    "grief": "I'm so sorry for what you're carrying. Grief takes time, and there's no right way to feel it.",
    "confusion": "It makes sense to feel unsure right now. We can take this one piece at a time.",
    "guilt": "It sounds like you're being hard on yourself. Mistakes don't erase your worth.",
    "pride": "That's worth celebrating. You put in the effort and it shows.",
    "neutral": "Thank you for sharing what you're experiencing. I'm here with you.",
}
