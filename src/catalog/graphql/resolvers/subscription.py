from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import aclosing
from typing import TYPE_CHECKING

from ...logging import get_logger
from ...notifications import BOOK_ADDED, get_notification_bus

if TYPE_CHECKING:
    from ..types.book import Book

logger = get_logger(__name__)


async def resolve_book_added() -> AsyncGenerator[Book, None]:
    """Stream every book added after the subscriber connects."""
    logger.info("Subscriber connected", topic=BOOK_ADDED)
    try:
        async with aclosing(get_notification_bus().listen(BOOK_ADDED)) as events:
            async for event in events:
                yield event.payload
    finally:
        logger.info("Subscriber disconnected", topic=BOOK_ADDED)
