"""
Crisis trigger phrases, grouped by indicator category.

A CrisisLexicon is immutable and handed to the scanner at construction, so a
scanner's behaviour is fixed for its lifetime and tests can inject their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


def _phrases(items: Iterable[str]) -> Tuple[str, ...]:
    return tuple(p.strip().lower() for p in items if p and p.strip())


@dataclass(frozen=True)
class CrisisLexicon:
    suicidal: Tuple[str, ...]
    self_harm: Tuple[str, ...]
    severe_depression: Tuple[str, ...]
    isolation: Tuple[str, ...]
    substance: Tuple[str, ...]

    @classmethod
    def build(
        cls,
        *,
        suicidal: Iterable[str] = (),
        self_harm: Iterable[str] = (),
        severe_depression: Iterable[str] = (),
        isolation: Iterable[str] = (),
        substance: Iterable[str] = (),
    ) -> "CrisisLexicon":
        return cls(
            suicidal=_phrases(suicidal),
            self_harm=_phrases(self_harm),
            severe_depression=_phrases(severe_depression),
            isolation=_phrases(isolation),
            substance=_phrases(substance),
        )


DEFAULT_CRISIS_LEXICON = CrisisLexicon.build(
    suicidal=[
        "want to die", "kill myself", "end it all", "not worth living", "better off dead",
        "suicide", "suicidal", "hanging myself", "overdose", "jump off", "can't go on",
        "no point living", "tired of being alive", "wish i was dead", "ending my life",
    ],
    self_harm=[
        "cut myself", "hurt myself", "self harm", "cutting", "burning myself",
        "punish myself", "deserve pain", "blade", "razor", "self-injury",
    ],
    severe_depression=[
        "hopeless", "worthless", "nothing matters", "can't handle", "giving up",
        "no future", "empty inside", "numb", "pointless", "burden to everyone",
        "complete failure", "lost everything", "can't cope", "falling apart",
    ],
    isolation=[
        "no one cares", "all alone", "nobody understands", "isolated", "abandoned",
        "no friends", "no family", "completely alone", "no support", "everyone left",
    ],
    substance=[
        "drinking to forget", "drug to numb", "alcohol problem", "addiction",
        "overdosing", "pills to escape", "substance abuse", "getting high to cope",
    ],
)
