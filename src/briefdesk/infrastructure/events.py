from __future__ import annotations

"""Project lifecycle notifications.

Every event is wrapped in a small envelope (id, type, project, timestamp,
data) and published as JSON on ``briefdesk.events.<type>`` when ``REDIS_URL``
is configured. Downstream mailers and dashboards subscribe there. Publishing
is best effort: a broken connection is dropped and retried on the next event.
"""

from datetime import UTC, datetime
from typing import Any, Dict, Optional
import json
import logging
import os
import uuid

import redis


logger = logging.getLogger("briefdesk.events")

CHANNEL_PREFIX = "briefdesk.events."


def make_envelope(event_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": uuid.uuid4().hex,
        "type": event_type,
        "project_id": payload.get("project_id"),
        "occurred_at": datetime.now(UTC).isoformat(),
        "data": payload,
    }


class EventBus:
    def __init__(self, url: str, timeout: float = 0.5) -> None:
        self.url = url
        self._timeout = timeout
        self._client: Optional[redis.Redis] = None

    def _connection(self) -> Optional[redis.Redis]:
        if self._client is None:
            try:
                client = redis.Redis.from_url(self.url, socket_timeout=self._timeout)
                client.ping()
            except (redis.RedisError, OSError) as exc:
                logger.warning("Event bus unreachable at %s: %s", self.url, exc)
                return None
            self._client = client
        return self._client

    def publish(self, event_type: str, payload: Dict[str, Any]) -> bool:
        client = self._connection()
        if client is None:
            return False
        body = json.dumps(make_envelope(event_type, payload), default=str)
        try:
            client.publish(CHANNEL_PREFIX + event_type, body)
        except (redis.RedisError, OSError) as exc:
            logger.warning("Dropped %s event: %s", event_type, exc)
            self._client = None
            return False
        return True


_bus: Optional[EventBus] = None


def get_event_bus() -> Optional[EventBus]:
    """Bus for the current ``REDIS_URL``; ``None`` when events are disabled."""
    global _bus
    url = os.getenv("REDIS_URL")
    if not url:
        return None
    if _bus is None or _bus.url != url:
        _bus = EventBus(url)
    return _bus


def publish_event(event_type: str, payload: Dict[str, Any]) -> bool:
    bus = get_event_bus()
    if bus is None:
        logger.debug("Event %s not published (no REDIS_URL)", event_type)
        return False
    return bus.publish(event_type, payload)
