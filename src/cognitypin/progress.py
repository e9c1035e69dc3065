"""User progress: read and bookmarked articles, reading time, streak, quiz scores."""
import sqlite3
from datetime import datetime

from loguru import logger

from cognitypin.db import get_value, set_value
from cognitypin.events import ArticleCompleted, EventBus, QuizCompleted
from cognitypin.models import UserProgress

PROGRESS_KEY = "userProgress"


def next_streak(streak: int, last_read: datetime | None, now: datetime) -> int:
    """Streak after a read at ``now``, counted in calendar days."""
    if last_read is None:
        return 1
    gap = (now.date() - last_read.date()).days
    if gap == 1:
        return streak + 1
    if gap > 1:
        return 1
    # Same day (or a clock that moved backwards): unchanged
    return streak


class ProgressStore:
    """Owns the single UserProgress record and writes it after every change."""

    def __init__(self, db_path: str | None = None, progress: UserProgress | None = None):
        self.db_path = db_path
        self.progress = progress or UserProgress()

    @classmethod
    def load(cls, db_path: str) -> "ProgressStore":
        data = get_value(db_path, PROGRESS_KEY)
        progress = None
        if isinstance(data, dict):
            try:
                progress = UserProgress.from_dict(data)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning("Discarding unreadable progress record: {}", e)
        elif data is not None:
            logger.warning("Discarding progress record of type {}", type(data).__name__)
        return cls(db_path, progress)

    def save(self) -> None:
        if not self.db_path:
            return
        try:
            set_value(self.db_path, PROGRESS_KEY, self.progress.to_dict())
        except sqlite3.Error as e:
            logger.warning("Could not save progress: {}", e)

    def attach(self, events: EventBus) -> None:
        events.subscribe(ArticleCompleted, self.on_article_completed)
        events.subscribe(QuizCompleted, self.on_quiz_completed)

    def on_article_completed(self, event: ArticleCompleted) -> None:
        self.mark_read(event.article.id, event.article.reading_time)

    def on_quiz_completed(self, event: QuizCompleted) -> None:
        self.record_quiz_score(event.article_id, event.score)

    def mark_read(self, article_id: str, minutes: int, now: datetime | None = None) -> None:
        now = now or datetime.now()
        p = self.progress
        p.read_ids.add(article_id)
        p.total_reading_time += max(minutes, 0)
        p.streak_days = next_streak(p.streak_days, p.last_read_date, now)
        p.last_read_date = now
        logger.debug("Marked {} read, streak {}", article_id, p.streak_days)
        self.save()

    def record_quiz_score(self, article_id: str, score: int) -> None:
        self.progress.quiz_scores[article_id] = max(0, min(100, int(score)))
        self.save()

    def toggle_bookmark(self, article_id: str) -> bool:
        """Flip the bookmark and return whether the article is now bookmarked."""
        ids = self.progress.bookmarked_ids
        if article_id in ids:
            ids.remove(article_id)
        else:
            ids.add(article_id)
        self.save()
        return article_id in ids

    def is_read(self, article_id: str) -> bool:
        return article_id in self.progress.read_ids

    def is_bookmarked(self, article_id: str) -> bool:
        return article_id in self.progress.bookmarked_ids

    def reset(self, persist: bool = True) -> None:
        self.progress = UserProgress()
        if persist:
            self.save()
