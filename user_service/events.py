"""Best-effort publication of user lifecycle events.

Events are sent once, after the database change they describe has been
committed. A failed send is logged and dropped: callers never see it and
nothing is retried.
"""

from __future__ import annotations

import itertools
import json
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Optional, Protocol

import redis

from .errors import TransportError
from .models import UserEvent

if TYPE_CHECKING:  # pragma: no cover
    from .config import Settings

logger = logging.getLogger("userservice.events")

DEFAULT_TOPIC = "user-notifications"
DEFAULT_SOCKET_TIMEOUT = 3.0


class EventTransport(Protocol):
    def send(self, topic: str, key: str, payload: Dict[str, Any]) -> str:
        """Deliver ``payload`` to ``topic`` routed by ``key`` and return an ack id."""


@dataclass(frozen=True)
class SentMessage:
    topic: str
    key: str
    payload: Dict[str, Any]
    ack: str


class InMemoryTransport:
    """Keeps the most recent messages in memory. Used when no broker is configured."""

    def __init__(self, max_messages: int = 1000) -> None:
        self._messages: Deque[SentMessage] = deque(maxlen=max_messages)
        self._sequence = itertools.count(1)
        self._lock = threading.Lock()

    def send(self, topic: str, key: str, payload: Dict[str, Any]) -> str:
        with self._lock:
            ack = f"{topic}-{next(self._sequence)}"
            self._messages.append(SentMessage(topic=topic, key=key, payload=dict(payload), ack=ack))
        return ack

    @property
    def messages(self) -> List[SentMessage]:
        with self._lock:
            return list(self._messages)


class RedisStreamTransport:
    """Appends events to a Redis stream named after the topic.

    Each entry carries the routing key and the JSON encoded payload. Redis
    keeps entries of one stream in insertion order.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        *,
        max_stream_length: int = 10_000,
        socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        client: Optional[redis.Redis] = None,
    ) -> None:
        if client is None:
            client = redis.Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=socket_timeout,
                socket_timeout=socket_timeout,
            )
        self._client = client
        self._max_len = max_stream_length

    def send(self, topic: str, key: str, payload: Dict[str, Any]) -> str:
        fields = {"key": key, "payload": json.dumps(payload)}
        try:
            message_id = self._client.xadd(topic, fields, maxlen=self._max_len, approximate=True)
        except redis.RedisError as exc:
            raise TransportError(f"Failed to append event to stream '{topic}': {exc}") from exc
        if isinstance(message_id, bytes):
            message_id = message_id.decode("utf-8")
        return str(message_id)

    def close(self) -> None:
        self._client.close()


class EventPublisher:
    """Fire-and-forget publisher for :class:`UserEvent` notifications."""

    def __init__(self, transport: EventTransport, topic: str = DEFAULT_TOPIC) -> None:
        if not topic.strip():
            raise ValueError("Event topic must not be empty")
        self._transport = transport
        self._topic = topic

    @property
    def topic(self) -> str:
        return self._topic

    def publish(self, event: UserEvent) -> None:
        logger.info(
            "Publishing %s event to topic '%s' with key '%s'",
            event.event_type.value,
            self._topic,
            event.email,
        )
        try:
            self._transport.send(self._topic, event.email, event.to_payload())
        except Exception:
            logger.exception("Failed to publish %s event for %s", event.event_type.value, event.email)


def build_transport(settings: "Settings") -> EventTransport:
    """Return the transport selected by ``settings``."""

    if settings.redis_url:
        logger.info("Publishing user events to Redis at %s", settings.redis_url)
        return RedisStreamTransport(
            settings.redis_url,
            max_stream_length=settings.redis_max_stream_length,
            socket_timeout=settings.redis_socket_timeout,
        )
    logger.warning("No event broker configured; user events are kept in memory only")
    return InMemoryTransport()


__all__ = [
    "DEFAULT_SOCKET_TIMEOUT",
    "DEFAULT_TOPIC",
    "EventPublisher",
    "EventTransport",
    "InMemoryTransport",
    "RedisStreamTransport",
    "SentMessage",
    "build_transport",
]
