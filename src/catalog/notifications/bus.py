"""In-process publish/subscribe bus feeding GraphQL subscriptions.

Each subscriber owns an ``asyncio.Queue``; publishing puts the event on every
queue registered for the topic without waiting for consumers, so a slow
subscriber never holds up the publisher or its peers. There is no backlog:
a subscriber only sees events published after it registered.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

from ..config import get_subscriber_queue_size
from ..logging import get_logger
from .models import NotificationEvent

logger = get_logger(__name__)


class Subscription:
    """One subscriber's registration on a topic."""

    def __init__(self, bus: NotificationBus, topic: str, maxsize: int = 0) -> None:
        self.bus = bus
        self.topic = topic
        self.queue: asyncio.Queue[NotificationEvent] = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    async def get(self) -> NotificationEvent:
        """Wait for the next event on this subscription."""
        return await self.queue.get()

    def pending(self) -> int:
        return self.queue.qsize()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.bus.unsubscribe(self)

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.close()


class NotificationBus:
    """In-process async pub/sub bus keyed by topic string."""

    def __init__(self, max_queue_size: int = 0) -> None:
        self.max_queue_size = max_queue_size
        self._subscribers: dict[str, list[Subscription]] = {}

    def subscribe(self, topic: str) -> Subscription:
        """Register a new subscriber queue on ``topic``."""
        subscription = Subscription(self, topic, maxsize=self.max_queue_size)
        self._subscribers.setdefault(topic, []).append(subscription)
        logger.debug("Subscriber registered", topic=topic, subscribers=self.subscriber_count(topic))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.topic, [])
        if subscription in subscribers:
            subscribers.remove(subscription)
            logger.debug(
                "Subscriber removed",
                topic=subscription.topic,
                subscribers=len(subscribers),
            )
        if not subscribers:
            self._subscribers.pop(subscription.topic, None)

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    async def publish(self, topic: str, payload: Any) -> int:
        """Hand ``payload`` to every subscriber of ``topic``.

        Returns the number of subscribers the event was queued for.
        """
        event = NotificationEvent(topic=topic, payload=payload)
        delivered = 0
        for subscription in list(self._subscribers.get(topic, [])):
            try:
                subscription.queue.put_nowait(event)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    "Subscriber queue full, dropping event",
                    topic=topic,
                    queue_size=subscription.queue.maxsize,
                )

        logger.info("Notification published", topic=topic, delivered=delivered)
        return delivered

    async def listen(self, topic: str) -> AsyncGenerator[NotificationEvent, None]:
        """Yield events for ``topic`` until the consumer stops iterating."""
        subscription = self.subscribe(topic)
        try:
            while True:
                yield await subscription.get()
        finally:
            subscription.close()


_bus: NotificationBus | None = None


def get_notification_bus() -> NotificationBus:
    """Return the process-wide notification bus."""
    global _bus
    if _bus is None:
        _bus = NotificationBus(max_queue_size=get_subscriber_queue_size())
    return _bus


def reset_notification_bus() -> None:
    """Drop the process-wide bus (for tests)."""
    global _bus
    _bus = None
