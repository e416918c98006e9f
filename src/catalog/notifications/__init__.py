"""Real-time notifications for catalog writes."""

from .bus import NotificationBus, Subscription, get_notification_bus
from .models import BOOK_ADDED, NotificationEvent

__all__ = [
    "BOOK_ADDED",
    "NotificationBus",
    "NotificationEvent",
    "Subscription",
    "get_notification_bus",
]
