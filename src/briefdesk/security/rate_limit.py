from __future__ import annotations

"""Per-process request throttling for magic-link and resend endpoints.

Each ``RateRule`` names its env overrides; hits are kept as timestamps in a
sliding window per ``(rule, identifier)``. Counters are process-local, so
several API replicas each enforce their own budget.
"""

import logging
import math
import os
import time
from collections import deque
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Deque, Dict, Tuple

from fastapi import HTTPException, status


logger = logging.getLogger("briefdesk.rate_limit")


@dataclass(frozen=True)
class RateRule:
    name: str
    limit: int
    window_seconds: int
    message: str = "Too many requests. Please try again later."

    def resolved(self) -> Tuple[int, int]:
        prefix = self.name.upper()
        return (
            _positive_env(f"{prefix}_LIMIT", self.limit),
            _positive_env(f"{prefix}_WINDOW_SEC", self.window_seconds),
        )


RESEND = RateRule("resend", 3, 3600, "Too many resends. Please try again later.")
CLIENT_ACCESS = RateRule("client_access", 120, 60)
RESPONSE_SAVE = RateRule("response_save", 60, 60, "Saving too fast. Please slow down.")


def _positive_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    return value if value > 0 else default


class SlidingWindowLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._hits: Dict[Tuple[str, str], Deque[float]] = {}
        self._lock = Lock()

    def hit(self, rule: RateRule, identifier: str) -> int:
        """Record one hit. Returns 0 when allowed, else seconds until a slot frees up."""
        limit, window = rule.resolved()
        now = self._clock()
        with self._lock:
            hits = self._hits.setdefault((rule.name, identifier), deque())
            while hits and now - hits[0] >= window:
                hits.popleft()
            if len(hits) >= limit:
                return max(1, math.ceil(window - (now - hits[0])))
            hits.append(now)
            return 0

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


limiter = SlidingWindowLimiter()


def _disabled() -> bool:
    return os.getenv("BRIEFDESK_RATE_LIMIT_DISABLED", "").lower() in {"1", "true", "yes", "on"}


def enforce(rule: RateRule, identifier: str) -> None:
    """Raise HTTP 429 with ``Retry-After`` once ``identifier`` exceeds ``rule``."""
    if _disabled():
        return
    retry_after = limiter.hit(rule, identifier)
    if retry_after:
        logger.info("Rate limit %s hit by %s", rule.name, identifier)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=rule.message,
            headers={"Retry-After": str(retry_after)},
        )


def reset_rate_limits() -> None:
    limiter.reset()
