"""Debounced search and category filtering for the article list."""
from loguru import logger

from cognitypin.content import ContentRepository, matches_query
from cognitypin.models import Article, Category
from cognitypin.scheduler import Scheduler, TimerHandle

FILTER_DEBOUNCE_SECONDS = 0.3


class ArticleFilter:
    """Collapses rapid search/category edits into one recomputation.

    Every edit restarts the debounce window. Reading ``results`` runs any
    pending recomputation first, so a read always sees the last edit.
    """

    def __init__(self, content: ContentRepository, scheduler: Scheduler,
                 delay: float = FILTER_DEBOUNCE_SECONDS):
        self.content = content
        self.scheduler = scheduler
        self.delay = delay
        self.search_text = ""
        self.category: Category | None = None
        self.recompute_count = 0
        self._results = content.articles
        self._pending: TimerHandle | None = None

    def set_search_text(self, text: str) -> None:
        self.search_text = text or ""
        self._schedule()

    def set_category(self, category: Category | None) -> None:
        self.category = category
        self._schedule()

    def clear(self) -> None:
        self.search_text = ""
        self.category = None
        self._schedule()

    def _schedule(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self.scheduler.call_later(self.delay, self._recompute)

    def _recompute(self) -> None:
        self._pending = None
        self._results = apply_filters(self.content.articles, self.search_text, self.category)
        self.recompute_count += 1
        logger.debug("Filtered to {} article(s)", len(self._results))

    def flush(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._recompute()

    def close(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def results(self) -> list[Article]:
        self.flush()
        return list(self._results)

    @property
    def has_active_filters(self) -> bool:
        return bool(self.search_text) or self.category is not None

    @property
    def displayed(self) -> list[Article]:
        return self.results if self.has_active_filters else self.content.articles


def apply_filters(articles: list[Article], search_text: str, category: Category | None) -> list[Article]:
    if category is not None:
        articles = [a for a in articles if a.category == category]
    if search_text:
        articles = [a for a in articles if matches_query(a, search_text)]
    return list(articles)
