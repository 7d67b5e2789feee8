"""
Deterministic keyword risk scan. Always runs, never touches the network.

Each rule can only raise the running tier; confidence is the max of the
floors of every rule that fired.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from moodguard.domain.safety.lexicon import DEFAULT_CRISIS_LEXICON, CrisisLexicon
from moodguard.schemas.common import RiskLevel, highest
from moodguard.schemas.safety import RiskAssessment

__all__ = ["KeywordRiskScanner", "scan"]

# normalise curly apostrophes so "can’t" matches "can't"
_APOS_RE = re.compile(r"[‘’ʼ]")

SOURCE = "pattern"


def _matches(text: str, phrases: Tuple[str, ...]) -> List[str]:
    return [p for p in phrases if p in text]


class KeywordRiskScanner:
    def __init__(self, lexicon: CrisisLexicon = DEFAULT_CRISIS_LEXICON) -> None:
        self.lexicon = lexicon

    def scan(self, message: str) -> RiskAssessment:
        text = _APOS_RE.sub("'", (message or "").lower())
        lex = self.lexicon
        indicators: List[str] = []
        tier = RiskLevel.NONE
        confidence = 0.0

        suicidal = _matches(text, lex.suicidal)
        if suicidal:
            indicators += [f'Suicidal language: "{p}"' for p in suicidal]
            tier = RiskLevel.CRITICAL
            confidence = max(confidence, 0.9)

        self_harm = _matches(text, lex.self_harm)
        if self_harm:
            indicators += [f'Self-harm indication: "{p}"' for p in self_harm]
            tier = highest(tier, RiskLevel.HIGH)
            confidence = max(confidence, 0.8)

        depression = _matches(text, lex.severe_depression)
        indicators += [f'Depression indicator: "{p}"' for p in depression]
        if len(depression) >= 3:
            tier = highest(tier, RiskLevel.HIGH)
            confidence = max(confidence, 0.7)
        elif depression:
            tier = highest(tier, RiskLevel.MEDIUM)
            confidence = max(confidence, 0.5)

        isolation = _matches(text, lex.isolation)
        if isolation:
            indicators += [f'Isolation indicator: "{p}"' for p in isolation]
            tier = highest(tier, RiskLevel.MEDIUM)
            confidence = max(confidence, 0.4)

        substance = _matches(text, lex.substance)
        if substance:
            indicators += [f'Substance abuse: "{p}"' for p in substance]
            tier = highest(tier, RiskLevel.MEDIUM)
            confidence = max(confidence, 0.6)

        if indicators:
            reason = f"Pattern matching detected {len(indicators)} crisis indicators"
        else:
            reason = "No immediate crisis indicators detected"

        return RiskAssessment(
            risk_level=tier,
            indicators=indicators,
            confidence_score=confidence,
            analysis_reason=reason,
            requires_check_in=tier.needs_check_in,
            sources=[SOURCE],
        )


_default_scanner: Optional[KeywordRiskScanner] = None


def scan(message: str) -> RiskAssessment:
    """Module-level convenience using the default lexicon."""
    global _default_scanner
    if _default_scanner is None:
        _default_scanner = KeywordRiskScanner()
    return _default_scanner.scan(message)
