# backend/tests/conftest.py
from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

# Ensure "backend" is importable when running from repo root
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.dirname(THIS_DIR)
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

# Tests never talk to OpenAI or Supabase.
for _key in ("OPENAI_API_KEY", "SUPABASE_URL", "SUPABASE_SERVICE_ROLE"):
    os.environ.pop(_key, None)

import pytest

from moodguard.core.config import get_settings

get_settings.cache_clear()

Outcome = Union[Dict[str, Any], Exception]


class ScriptedClassifier:
    """
    SemanticClassifier double: answers each call with the next scripted
    outcome (a dict is returned, an exception is raised). The last outcome
    repeats once the script runs out.
    """

    def __init__(self, outcomes: Sequence[Outcome]) -> None:
        self.outcomes: List[Outcome] = list(outcomes)
        self.calls: List[Dict[str, Any]] = []

    async def classify(
        self,
        system: str,
        user_content: str,
        schema: Mapping[str, str],
        *,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        self.calls.append({"system": system, "user_content": user_content, "schema": dict(schema)})
        idx = min(len(self.calls) - 1, len(self.outcomes) - 1)
        outcome = self.outcomes[idx]
        if isinstance(outcome, Exception):
            raise outcome
        return dict(outcome)


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def scripted():
    return ScriptedClassifier


@pytest.fixture
def no_sleep() -> SleepRecorder:
    return SleepRecorder()
