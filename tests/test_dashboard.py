from datetime import datetime

from cognitypin.dashboard import (
    average_quiz_score, daily_goal_progress, export_user_data, format_reading_time,
    get_average_quiz_label, get_daily_goal_text, get_reading_stats, get_streak_label,
)
from cognitypin.models import UserProgress


def test_format_reading_time():
    assert format_reading_time(0) == "0m"
    assert format_reading_time(45) == "45m"
    assert format_reading_time(125) == "2h 5m"


def test_streak_label():
    assert get_streak_label(0) == "No streak"
    assert get_streak_label(1) == "1 day"
    assert get_streak_label(6) == "6 days"


def test_average_quiz_score():
    assert average_quiz_score({}) is None
    assert average_quiz_score({"a": 50, "b": 75}) == 62
    assert get_average_quiz_label({}) == "No quizzes taken"
    assert get_average_quiz_label({"a": 80}) == "80%"


def test_daily_goal():
    assert daily_goal_progress(1, 3) == 1 / 3
    assert daily_goal_progress(5, 3) == 1.0
    assert daily_goal_progress(2, 0) == 0.0
    assert get_daily_goal_text(5, 3) == "3 / 3 articles"
    assert get_daily_goal_text(0, 3) == "0 / 3 articles"


def test_reading_stats_empty_catalog():
    stats = get_reading_stats(UserProgress(), total_articles=0, daily_goal=3)
    assert stats["catalog_progress"] == 0.0
    assert stats["streak"] == "No streak"
    assert stats["average_quiz"] == "No quizzes taken"


def test_reading_stats_with_progress():
    progress = UserProgress(read_ids={"a", "b"}, bookmarked_ids={"c"}, quiz_scores={"a": 100},
                            total_reading_time=70, streak_days=2)
    stats = get_reading_stats(progress, total_articles=4, daily_goal=3)
    assert stats["articles_read"] == 2
    assert stats["catalog_progress"] == 0.5
    assert stats["reading_time"] == "1h 10m"
    assert stats["bookmarks"] == 1
    assert stats["daily_goal_text"] == "2 / 3 articles"


def test_export_user_data():
    stats = get_reading_stats(UserProgress(streak_days=1), total_articles=5, daily_goal=3)
    text = export_user_data(stats, generated_at=datetime(2025, 3, 10, 9, 30))
    assert text.startswith("CognityPin User Data Export\n")
    assert "Generated on: Monday, March 10, 2025 at 09:30" in text
    assert "Current Streak: 1 day" in text
    assert "Average Quiz Score: No quizzes taken" in text
