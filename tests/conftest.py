import pytest

from cognitypin.events import EventBus
from cognitypin.models import Article, Category, Difficulty
from cognitypin.scheduler import ManualClock, Scheduler


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_cognitypin.db")
    return db_path


@pytest.fixture
def make_article():
    def _make(id="a1", category=Category.HEALTH, tags=(), difficulty=Difficulty.BEGINNER,
              health_related=False, reading_time=5, title=None, content="Body text."):
        return Article(
            id=id, title=title or f"Title {id}", content=content, category=category,
            reading_time=reading_time, tags=tags, difficulty=difficulty,
            health_related=health_related,
        )
    return _make


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


@pytest.fixture
def events():
    return EventBus()
