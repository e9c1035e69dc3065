"""Reading session state machine: idle -> reading -> completed."""
from enum import Enum

from loguru import logger

from cognitypin.events import ArticleCompleted, EventBus
from cognitypin.models import Article
from cognitypin.scheduler import Scheduler, TimerHandle

READING_TICK_SECONDS = 1.0
COMPLETION_THRESHOLD = 0.8


class ReadingState(str, Enum):
    IDLE = "idle"
    READING = "reading"
    COMPLETED = "completed"
    CLOSED = "closed"


def estimated_reading_time(minutes: int) -> str:
    return "1 min read" if minutes == 1 else f"{minutes} min read"


def progress_percentage(ratio: float) -> str:
    return f"{int(ratio * 100)}%"


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class ReadingSession:
    """Tracks how far one article has been read.

    Progress moves two ways. A one-second tick raises it toward
    ``elapsed / (reading_time * 60)`` but never lowers it. External
    snapshots from ``update_progress`` (e.g. scroll position) are taken
    as-is. Only ``complete()`` has a durable effect: it publishes
    ``ArticleCompleted``.
    """

    def __init__(self, article: Article, scheduler: Scheduler, events: EventBus):
        self.article = article
        self.scheduler = scheduler
        self.events = events
        self.state = ReadingState.IDLE
        self.progress = 0.0
        self.started_at: float | None = None
        self._timer: TimerHandle | None = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def ticking(self) -> bool:
        return self._timer is not None

    @property
    def is_active(self) -> bool:
        return self.state in (ReadingState.IDLE, ReadingState.READING)

    def start(self) -> None:
        if self.state != ReadingState.IDLE:
            return
        self.state = ReadingState.READING
        self.started_at = self.scheduler.now()
        self._timer = self.scheduler.call_every(READING_TICK_SECONDS, self.tick)
        logger.debug("Started reading {}", self.article.id)

    def auto_progress(self) -> float:
        if self.started_at is None:
            return 0.0
        elapsed = self.scheduler.now() - self.started_at
        return _clamp(elapsed / (self.article.reading_time * 60))

    def tick(self) -> None:
        # A tick that outlives its session must not touch it.
        if self.state != ReadingState.READING:
            return
        auto = self.auto_progress()
        if auto > self.progress:
            self.progress = auto

    def update_progress(self, ratio: float) -> None:
        if not self.is_active:
            return
        self.progress = _clamp(ratio)

    def complete(self) -> bool:
        """Finish the article. Returns False if the session already ended."""
        if not self.is_active:
            return False
        self.progress = 1.0
        self._stop_timer()
        self.state = ReadingState.COMPLETED
        logger.info("Completed article {}", self.article.id)
        self.events.publish(ArticleCompleted(self.article))
        return True

    def close(self) -> None:
        """Tear the session down. A mostly-read article still counts as read."""
        if self.state == ReadingState.CLOSED:
            return
        if self.is_active and self.progress > COMPLETION_THRESHOLD:
            self.complete()
        self._stop_timer()
        self.state = ReadingState.CLOSED

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def estimated_reading_time(self) -> str:
        return estimated_reading_time(self.article.reading_time)

    @property
    def progress_percentage(self) -> str:
        return progress_percentage(self.progress)
