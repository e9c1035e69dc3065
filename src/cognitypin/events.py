"""Completion event channel between sessions and the progress store."""
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from cognitypin.models import Article


@dataclass(frozen=True)
class ArticleCompleted:
    article: Article


@dataclass(frozen=True)
class QuizCompleted:
    article_id: str
    score: int


@dataclass(frozen=True)
class AccountDeleted:
    pass


class EventBus:
    """Synchronous publish/subscribe keyed by event class."""

    def __init__(self):
        self._handlers = defaultdict(list)

    def subscribe(self, event_type: type, handler: Callable) -> Callable[[], None]:
        self._handlers[event_type].append(handler)

        def unsubscribe():
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)

        return unsubscribe

    def publish(self, event) -> int:
        handlers = list(self._handlers[type(event)])
        logger.debug("Publishing {} to {} handler(s)", type(event).__name__, len(handlers))
        for handler in handlers:
            handler(event)
        return len(handlers)
