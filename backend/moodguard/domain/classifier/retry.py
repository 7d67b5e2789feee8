"""
Bounded retry around a single classifier call.

Only TransportError is retried. Delay before attempt n+1 is
min(base * 2^(n-1) + uniform(0, jitter), cap), awaited without blocking the loop.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from moodguard.core.config import Settings, get_settings
from moodguard.core.errors import ClassifierUnavailable, TransportError

__all__ = ["RetryPolicy", "with_retries"]

log = logging.getLogger("moodguard.classifier")

T = TypeVar("T")
Sleeper = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_s: float = 1.0
    jitter_s: float = 1.0
    max_delay_s: float = 10.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RetryPolicy":
        s = settings or get_settings()
        return cls(
            max_attempts=max(1, int(s.CLASSIFIER_MAX_ATTEMPTS)),
            base_delay_s=s.CLASSIFIER_BASE_DELAY_S,
            jitter_s=s.CLASSIFIER_JITTER_S,
            max_delay_s=s.CLASSIFIER_MAX_DELAY_S,
        )

    def delay_for(self, attempt: int, rng: Callable[[], float] = random.random) -> float:
        backoff = self.base_delay_s * (2 ** (attempt - 1)) + rng() * self.jitter_s
        return min(backoff, self.max_delay_s)


async def with_retries(
    call: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    sleep: Sleeper = asyncio.sleep,
    rng: Callable[[], float] = random.random,
    label: str = "classifier",
) -> T:
    policy = policy or RetryPolicy.from_settings()
    attempts = max(1, policy.max_attempts)
    last: Optional[TransportError] = None

    for attempt in range(1, attempts + 1):
        try:
            return await call()
        except TransportError as e:
            last = e
            if attempt >= attempts:
                break
            delay = policy.delay_for(attempt, rng)
            log.warning(
                "%s request failed (%s), retrying in %.2fs (attempt %d/%d)",
                label, e, delay, attempt, attempts,
            )
            await sleep(delay)

    raise ClassifierUnavailable(
        f"{label} unavailable after {attempts} attempts: {last}",
        attempts=attempts,
        status=getattr(last, "status", None),
    ) from last
