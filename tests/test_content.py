from cognitypin.content import ARTICLES_KEY, QUESTIONS_KEY, ContentRepository
from cognitypin.db import get_value, init_db, set_value
from cognitypin.models import Category


def _repo(tmp_db):
    init_db(tmp_db)
    return ContentRepository.load(tmp_db)


def test_get_articles_all_in_catalog_order(tmp_db):
    repo = _repo(tmp_db)
    ids = [a.id for a in repo.get_articles()]
    assert ids == ["heart-rate-variability", "sleep-cycles", "quantum-entanglement",
                   "future-of-ai", "habit-formation"]


def test_get_articles_by_category(tmp_db):
    repo = _repo(tmp_db)
    health = repo.get_articles(Category.HEALTH)
    assert [a.id for a in health] == ["heart-rate-variability", "sleep-cycles"]


def test_get_articles_accepts_category_value(tmp_db):
    repo = _repo(tmp_db)
    assert len(repo.get_articles("Science")) == 1


def test_get_articles_unknown_or_empty_category(tmp_db):
    repo = _repo(tmp_db)
    assert repo.get_articles("Astrology") == []
    assert repo.get_articles(Category.HISTORY) == []


def test_search_empty_query_returns_everything(tmp_db):
    repo = _repo(tmp_db)
    assert repo.search("") == repo.articles
    assert len(repo.search("")) == len(repo.articles)


def test_search_is_case_insensitive(tmp_db):
    repo = _repo(tmp_db)
    assert [a.id for a in repo.search("ENTANGLEMENT")] == ["quantum-entanglement"]


def test_search_matches_tags(tmp_db):
    repo = _repo(tmp_db)
    results = repo.search("wellness")
    assert [a.id for a in results] == ["heart-rate-variability"]


def test_search_no_match(tmp_db):
    repo = _repo(tmp_db)
    assert repo.search("xylophone") == []


def test_questions_for(tmp_db):
    repo = _repo(tmp_db)
    questions = repo.questions_for("heart-rate-variability")
    assert len(questions) == 1
    assert questions[0].correct_index == 1
    assert repo.questions_for("quantum-entanglement") == []
    assert repo.questions_for("unknown") == []


def test_get_unknown_article(tmp_db):
    repo = _repo(tmp_db)
    assert repo.get("nope") is None


def test_featured_and_health_related(tmp_db):
    repo = _repo(tmp_db)
    assert [a.id for a in repo.featured()] == ["heart-rate-variability", "sleep-cycles", "quantum-entanglement"]
    assert {a.id for a in repo.health_related()} == {"heart-rate-variability", "sleep-cycles", "habit-formation"}


def test_categories_with_counts_includes_empty(tmp_db):
    repo = _repo(tmp_db)
    counts = dict(repo.categories_with_counts())
    assert len(counts) == 8
    assert counts[Category.HEALTH] == 2
    assert counts[Category.MEDICINE] == 0


def test_toggle_bookmark_twice_restores_state(tmp_db):
    repo = _repo(tmp_db)
    assert repo.is_bookmarked("sleep-cycles") is False
    assert repo.toggle_bookmark("sleep-cycles") is True
    assert repo.toggle_bookmark("sleep-cycles") is False
    assert repo.is_bookmarked("sleep-cycles") is False


def test_toggle_bookmark_does_not_rebuild_article(tmp_db):
    repo = _repo(tmp_db)
    before = repo.get("sleep-cycles")
    repo.toggle_bookmark("sleep-cycles")
    assert repo.get("sleep-cycles") is before


def test_toggle_bookmark_unknown_id_is_noop(tmp_db):
    repo = _repo(tmp_db)
    assert repo.toggle_bookmark("nope") is None
    assert repo.bookmarked() == []


def test_bookmarks_persist_across_loads(tmp_db):
    repo = _repo(tmp_db)
    repo.toggle_bookmark("future-of-ai")
    again = ContentRepository.load(tmp_db)
    assert [a.id for a in again.bookmarked()] == ["future-of-ai"]
    assert get_value(tmp_db, QUESTIONS_KEY)  # written alongside the articles


def test_saved_catalog_merges_by_title(tmp_db):
    init_db(tmp_db)
    set_value(tmp_db, ARTICLES_KEY, [
        {"id": "old-random-id", "title": "The Science of Sleep Cycles", "isBookmarked": True},
        {"title": "An article that no longer exists", "isBookmarked": True},
        "garbage",
    ])
    repo = ContentRepository.load(tmp_db)
    assert [a.id for a in repo.bookmarked()] == ["sleep-cycles"]


def test_malformed_saved_catalog_is_ignored(tmp_db):
    init_db(tmp_db)
    set_value(tmp_db, ARTICLES_KEY, {"not": "a list"})
    repo = ContentRepository.load(tmp_db)
    assert repo.bookmarked() == []


def test_in_memory_repository_without_store(make_article):
    repo = ContentRepository([make_article("a"), make_article("b")], [])
    assert repo.toggle_bookmark("a") is True
    assert [a.id for a in repo.bookmarked()] == ["a"]
