# backend/moodguard/adapters/openai_classifier.py
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Dict, Mapping, Optional

import httpx
import openai
from openai import AsyncOpenAI

from moodguard.core.config import Settings, get_settings
from moodguard.core.errors import ClassifierError, TransportError
from moodguard.domain.classifier.base import parse_json_object

__all__ = ["OpenAIClassifier", "get_classifier", "classifier_reset"]

log = logging.getLogger("moodguard.classifier.openai")

_RETRYABLE_STATUS = {429}


def _is_retryable_status(status: Optional[int]) -> bool:
    return status is not None and (status >= 500 or status in _RETRYABLE_STATUS)


def _extract_content(resp: Any) -> Optional[str]:
    choices = getattr(resp, "choices", None)
    if not choices:
        return None
    msg = getattr(choices[0], "message", None)
    content = getattr(msg, "content", None)
    return str(content) if content else None


class OpenAIClassifier:
    """
    SemanticClassifier backed by chat completions in JSON mode.
    SDK-level retries are disabled; retrying is owned by domain.classifier.retry.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        *,
        model: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        s = settings or get_settings()
        self.model = model or s.OPENAI_MODEL
        self.default_temperature = s.ANALYSIS_TEMPERATURE
        self.client = client or AsyncOpenAI(
            api_key=s.OPENAI_API_KEY,
            timeout=s.OPENAI_TIMEOUT_S,
            max_retries=0,
        )

    async def classify(
        self,
        system: str,
        user_content: str,
        schema: Mapping[str, str],
        *,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        system_prompt = (
            f"{system}\n\nReturn a JSON object with these keys:\n"
            f"{json.dumps(dict(schema), indent=2, ensure_ascii=False)}"
        )
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                response_format={"type": "json_object"},
                temperature=self.default_temperature if temperature is None else temperature,
            )
        except (openai.APITimeoutError, openai.APIConnectionError) as e:
            raise TransportError(f"classifier transport error: {e}") from e
        except openai.APIStatusError as e:
            status = getattr(e, "status_code", None)
            if _is_retryable_status(status):
                raise TransportError(f"classifier HTTP {status}", status=status) from e
            raise ClassifierError(f"classifier HTTP {status}: {e}", status=status) from e
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise TransportError(f"classifier network error: {e}") from e

        return parse_json_object(_extract_content(resp))


_lock = threading.Lock()
_classifier: Optional[OpenAIClassifier] = None


def get_classifier() -> Optional[OpenAIClassifier]:
    """
    Lazy singleton. None when no API key is configured, in which case callers
    run on deterministic signals only.
    """
    global _classifier
    if _classifier is not None:
        return _classifier
    s = get_settings()
    if not s.OPENAI_API_KEY:
        log.warning("OPENAI_API_KEY not set; semantic classifier disabled")
        return None
    with _lock:
        if _classifier is None:
            _classifier = OpenAIClassifier(settings=s)
    return _classifier


def classifier_reset() -> None:
    global _classifier
    with _lock:
        _classifier = None
