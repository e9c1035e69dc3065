"""Content repository: the immutable catalog plus its bookmark side table."""
import sqlite3
from pathlib import Path

from loguru import logger

from cognitypin.catalog import load_catalog
from cognitypin.db import get_value, set_value
from cognitypin.models import Article, Category, QuizQuestion

ARTICLES_KEY = "savedArticles"
QUESTIONS_KEY = "savedQuestions"
FEATURED_COUNT = 3


class ContentRepository:
    """Lookup, filter and search over a fixed catalog.

    Article records are never rebuilt to flip a bookmark. Bookmark state is
    kept in a set keyed by article id and only joined back in when the
    catalog is serialized.
    """

    def __init__(self, articles: list[Article], questions: list[QuizQuestion], db_path: str | None = None):
        self._articles = list(articles)
        self._by_id = {a.id: a for a in self._articles}
        self._questions = list(questions)
        self._bookmarks: set[str] = set()
        self.db_path = db_path

    @classmethod
    def load(cls, db_path: str, catalog_path: Path | None = None) -> "ContentRepository":
        articles, questions = load_catalog(catalog_path)
        repo = cls(articles, questions, db_path=db_path)
        repo.restore_saved()
        return repo

    @property
    def articles(self) -> list[Article]:
        return list(self._articles)

    @property
    def questions(self) -> list[QuizQuestion]:
        return list(self._questions)

    def get(self, article_id: str) -> Article | None:
        return self._by_id.get(article_id)

    def get_articles(self, category=None) -> list[Article]:
        """All articles, or those in one category. Unknown categories match nothing."""
        if category is None:
            return list(self._articles)
        try:
            category = Category(category)
        except ValueError:
            return []
        return [a for a in self._articles if a.category == category]

    def search(self, query: str) -> list[Article]:
        if not query:
            return list(self._articles)
        return [a for a in self._articles if matches_query(a, query)]

    def questions_for(self, article_id: str) -> list[QuizQuestion]:
        return [q for q in self._questions if q.article_id == article_id]

    def health_related(self) -> list[Article]:
        return [a for a in self._articles if a.health_related]

    def featured(self, count: int = FEATURED_COUNT) -> list[Article]:
        return self._articles[:max(count, 0)]

    def categories_with_counts(self) -> list[tuple[Category, int]]:
        return [(c, len(self.get_articles(c))) for c in Category]

    # Bookmarks

    def is_bookmarked(self, article_id: str) -> bool:
        return article_id in self._bookmarks

    def bookmarked(self) -> list[Article]:
        return [a for a in self._articles if a.id in self._bookmarks]

    def toggle_bookmark(self, article_id: str) -> bool | None:
        """Flip the bookmark flag. Returns the new flag, or None for unknown ids."""
        if article_id not in self._by_id:
            logger.warning("Ignoring bookmark toggle for unknown article {}", article_id)
            return None
        self.set_bookmarked(article_id, article_id not in self._bookmarks)
        return article_id in self._bookmarks

    def set_bookmarked(self, article_id: str, flag: bool) -> None:
        if article_id not in self._by_id:
            return
        if flag:
            self._bookmarks.add(article_id)
        else:
            self._bookmarks.discard(article_id)
        self.save()

    def clear_bookmarks(self) -> None:
        """Drop every bookmark in memory without touching the store."""
        self._bookmarks.clear()

    # Persistence

    def save(self) -> None:
        if not self.db_path:
            return
        try:
            set_value(self.db_path, ARTICLES_KEY,
                      [a.to_dict(bookmarked=a.id in self._bookmarks) for a in self._articles])
            set_value(self.db_path, QUESTIONS_KEY, [q.to_dict() for q in self._questions])
        except sqlite3.Error as e:
            logger.warning("Could not save catalog: {}", e)

    def restore_saved(self) -> None:
        """Recover bookmark flags from the saved catalog, matching articles by title."""
        if not self.db_path:
            return
        saved = get_value(self.db_path, ARTICLES_KEY, default=[])
        if not isinstance(saved, list):
            logger.warning("Ignoring saved catalog of type {}", type(saved).__name__)
            return
        by_title = {a.title: a for a in self._articles}
        for entry in saved:
            if not isinstance(entry, dict):
                continue
            article = by_title.get(entry.get("title"))
            if article is None:
                continue
            if entry.get("isBookmarked"):
                self._bookmarks.add(article.id)
            else:
                self._bookmarks.discard(article.id)


def matches_query(article: Article, query: str) -> bool:
    """Case-insensitive substring match against title, body and tags."""
    needle = query.casefold()
    return (
        needle in article.title.casefold()
        or needle in article.content.casefold()
        or any(needle in tag.casefold() for tag in article.tags)
    )
