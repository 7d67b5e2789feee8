from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Protocol

from moodguard.core.errors import MalformedResponseError
from moodguard.domain.classifier.retry import RetryPolicy, Sleeper, with_retries

__all__ = ["SemanticClassifier", "parse_json_object", "request_record"]

log = logging.getLogger("moodguard.classifier")


class SemanticClassifier(Protocol):
    """
    Prompt in, structured record out. Implementations raise TransportError on
    transient failures and MalformedResponseError when the answer is not a JSON object.
    Calls must be pure classification so retrying them is always safe.
    """

    async def classify(
        self,
        system: str,
        user_content: str,
        schema: Mapping[str, str],
        *,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]: ...


def parse_json_object(raw: Optional[str]) -> Dict[str, Any]:
    """Parse model output into a dict; tolerates ```json fences."""
    if not raw or not raw.strip():
        raise MalformedResponseError("empty classifier response")
    clean = raw.strip()
    if clean.startswith("```"):
        clean = clean.strip("`").strip()
        if clean.lower().startswith("json"):
            clean = clean[4:].strip()
    try:
        data = json.loads(clean)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"classifier response is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedResponseError(f"classifier response is {type(data).__name__}, expected object")
    return data


async def request_record(
    classifier: SemanticClassifier,
    system: str,
    user_content: str,
    schema: Mapping[str, str],
    *,
    temperature: Optional[float] = None,
    policy: Optional[RetryPolicy] = None,
    sleep: Optional[Sleeper] = None,
    label: str = "classifier",
) -> Dict[str, Any]:
    """
    One classifier call wrapped in the retry policy.
    Malformed output degrades to {}; ClassifierUnavailable and non-retryable errors propagate.
    """

    async def _once() -> Dict[str, Any]:
        return await classifier.classify(system, user_content, schema, temperature=temperature)

    kwargs: Dict[str, Callable[..., Awaitable[None]]] = {"sleep": sleep} if sleep is not None else {}
    try:
        return await with_retries(_once, policy, label=label, **kwargs)
    except MalformedResponseError as e:
        log.warning("%s returned malformed output, using empty record: %s", label, e)
        return {}
