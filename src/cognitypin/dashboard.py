"""Reading statistics and plain-text data export."""
from datetime import datetime

from cognitypin.models import UserProgress
from cognitypin.scoring import reading_ratio


def format_reading_time(minutes: int) -> str:
    hours, mins = divmod(max(minutes, 0), 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def get_streak_label(days: int) -> str:
    if days <= 0:
        return "No streak"
    elif days == 1:
        return "1 day"
    return f"{days} days"


def average_quiz_score(scores: dict) -> int | None:
    """Integer mean of recorded quiz scores, or None before any quiz."""
    if not scores:
        return None
    return sum(scores.values()) // len(scores)


def get_average_quiz_label(scores: dict) -> str:
    avg = average_quiz_score(scores)
    return "No quizzes taken" if avg is None else f"{avg}%"


def daily_goal_progress(articles_read: int, goal: int) -> float:
    if goal <= 0:
        return 0.0
    return min(articles_read / goal, 1.0)


def get_daily_goal_text(articles_read: int, goal: int) -> str:
    done = int(daily_goal_progress(articles_read, goal) * goal)
    return f"{done} / {goal} articles"


def get_reading_stats(progress: UserProgress, total_articles: int, daily_goal: int) -> dict:
    read = len(progress.read_ids)
    return {
        "articles_read": read,
        "total_articles": total_articles,
        "catalog_progress": reading_ratio(read, total_articles),
        "reading_time": format_reading_time(progress.total_reading_time),
        "streak": get_streak_label(progress.streak_days),
        "bookmarks": len(progress.bookmarked_ids),
        "average_quiz": get_average_quiz_label(progress.quiz_scores),
        "daily_goal": daily_goal,
        "daily_goal_progress": daily_goal_progress(read, daily_goal),
        "daily_goal_text": get_daily_goal_text(read, daily_goal),
    }


def export_user_data(stats: dict, generated_at: datetime | None = None) -> str:
    generated_at = generated_at or datetime.now()
    lines = [
        "CognityPin User Data Export",
        f"Generated on: {generated_at.strftime('%A, %B %d, %Y at %H:%M')}",
        "",
        f"Articles Read: {stats['articles_read']}",
        f"Total Reading Time: {stats['reading_time']}",
        f"Current Streak: {stats['streak']}",
        f"Bookmarked Articles: {stats['bookmarks']}",
        f"Average Quiz Score: {stats['average_quiz']}",
        f"Daily Reading Goal: {stats['daily_goal']}",
    ]
    return "\n".join(lines) + "\n"
