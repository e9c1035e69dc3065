"""Data classes for the reading domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Category(str, Enum):
    HEALTH = "Health"
    SCIENCE = "Science"
    HISTORY = "History"
    TECHNOLOGY = "Technology"
    PSYCHOLOGY = "Psychology"
    NUTRITION = "Nutrition"
    FITNESS = "Fitness"
    MEDICINE = "Medicine"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


@dataclass(frozen=True)
class Article:
    id: str
    title: str
    content: str
    category: Category
    reading_time: int  # minutes
    tags: tuple = ()
    difficulty: Difficulty = Difficulty.BEGINNER
    health_related: bool = False
    image_url: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.reading_time <= 0:
            raise ValueError(f"reading_time must be positive, got {self.reading_time}")
        # Accept any iterable of tags but store an immutable sequence.
        object.__setattr__(self, "tags", tuple(self.tags))

    def to_dict(self, bookmarked: bool = False) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category.value,
            "readingTime": self.reading_time,
            "tags": list(self.tags),
            "difficulty": self.difficulty.value,
            "healthRelated": self.health_related,
            "imageURL": self.image_url,
            "dateCreated": self.created_at.isoformat(),
            "isBookmarked": bookmarked,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Article":
        created = data.get("dateCreated")
        return cls(
            id=data["id"],
            title=data["title"],
            content=data["content"],
            category=Category(data["category"]),
            reading_time=int(data["readingTime"]),
            tags=data.get("tags", ()),
            difficulty=Difficulty(data.get("difficulty", Difficulty.BEGINNER.value)),
            health_related=bool(data.get("healthRelated", False)),
            image_url=data.get("imageURL"),
            created_at=datetime.fromisoformat(created) if created else datetime.now(),
        )


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    question: str
    options: tuple
    correct_index: int
    article_id: str
    explanation: str = ""

    def __post_init__(self):
        object.__setattr__(self, "options", tuple(self.options))
        if len(self.options) < 2:
            raise ValueError(f"question {self.id} needs at least two options")
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(f"question {self.id} has out-of-range correct index {self.correct_index}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "correctAnswerIndex": self.correct_index,
            "explanation": self.explanation,
            "articleId": self.article_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizQuestion":
        return cls(
            id=data["id"],
            question=data["question"],
            options=data["options"],
            correct_index=int(data["correctAnswerIndex"]),
            article_id=data["articleId"],
            explanation=data.get("explanation", ""),
        )


@dataclass
class UserProgress:
    read_ids: set = field(default_factory=set)
    bookmarked_ids: set = field(default_factory=set)
    quiz_scores: dict = field(default_factory=dict)  # article id -> 0..100
    total_reading_time: int = 0  # minutes
    streak_days: int = 0
    last_read_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "articlesRead": sorted(self.read_ids),
            "bookmarkedArticles": sorted(self.bookmarked_ids),
            "quizScores": dict(self.quiz_scores),
            "totalReadingTime": self.total_reading_time,
            "streakDays": self.streak_days,
            "lastReadDate": self.last_read_date.isoformat() if self.last_read_date else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UserProgress":
        last = data.get("lastReadDate")
        scores = data.get("quizScores", {})
        if not isinstance(scores, dict):
            raise TypeError(f"quizScores must be an object, got {type(scores).__name__}")
        return cls(
            read_ids=_id_set(data, "articlesRead"),
            bookmarked_ids=_id_set(data, "bookmarkedArticles"),
            quiz_scores={str(k): max(0, min(100, int(v))) for k, v in scores.items()},
            total_reading_time=max(0, int(data.get("totalReadingTime", 0))),
            streak_days=max(0, int(data.get("streakDays", 0))),
            last_read_date=datetime.fromisoformat(last) if last else None,
        )


def _id_set(data: dict, key: str) -> set:
    ids = data.get(key, [])
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        raise TypeError(f"{key} must be a list of article ids")
    return set(ids)
