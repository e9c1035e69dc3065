"""Tests for data model classes."""
from datetime import datetime

import pytest

from cognitypin.models import Article, Category, Difficulty, QuizQuestion, UserProgress


def test_article_defaults():
    a = Article(id="x", title="T", content="C", category=Category.SCIENCE, reading_time=3)
    assert a.tags == ()
    assert a.difficulty == Difficulty.BEGINNER
    assert a.health_related is False
    assert a.image_url is None


def test_article_tags_stored_as_tuple():
    a = Article(id="x", title="T", content="C", category=Category.SCIENCE, reading_time=3, tags=["a", "b"])
    assert a.tags == ("a", "b")


def test_article_rejects_non_positive_reading_time():
    with pytest.raises(ValueError):
        Article(id="x", title="T", content="C", category=Category.SCIENCE, reading_time=0)


def test_article_is_immutable():
    a = Article(id="x", title="T", content="C", category=Category.SCIENCE, reading_time=3)
    with pytest.raises(AttributeError):
        a.title = "changed"


def test_article_dict_round_trip_keeps_fields():
    a = Article(id="x", title="T", content="C", category=Category.NUTRITION, reading_time=2,
                tags=["food"], difficulty=Difficulty.ADVANCED, health_related=True)
    data = a.to_dict(bookmarked=True)
    assert data["category"] == "Nutrition"
    assert data["isBookmarked"] is True
    restored = Article.from_dict(data)
    assert restored == a


def test_eight_categories():
    assert len(list(Category)) == 8


def test_quiz_question_needs_two_options():
    with pytest.raises(ValueError):
        QuizQuestion(id="q", question="?", options=["only"], correct_index=0, article_id="a")


def test_quiz_question_correct_index_in_range():
    with pytest.raises(ValueError):
        QuizQuestion(id="q", question="?", options=["a", "b"], correct_index=2, article_id="a")


def test_user_progress_defaults():
    up = UserProgress()
    assert up.read_ids == set()
    assert up.bookmarked_ids == set()
    assert up.quiz_scores == {}
    assert up.total_reading_time == 0
    assert up.streak_days == 0
    assert up.last_read_date is None


def test_user_progress_from_dict_ignores_unknown_fields():
    data = UserProgress(read_ids={"a"}, streak_days=2, last_read_date=datetime(2025, 1, 2)).to_dict()
    data["someNewField"] = 42
    up = UserProgress.from_dict(data)
    assert up.read_ids == {"a"}
    assert up.streak_days == 2
    assert up.last_read_date == datetime(2025, 1, 2)


def test_user_progress_from_partial_dict():
    up = UserProgress.from_dict({"articlesRead": ["a", "b"]})
    assert up.read_ids == {"a", "b"}
    assert up.quiz_scores == {}
