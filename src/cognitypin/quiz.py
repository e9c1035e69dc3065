"""Quiz state machine for an article's question set."""
from enum import Enum

from loguru import logger

from cognitypin.events import EventBus, QuizCompleted
from cognitypin.models import QuizQuestion

UNANSWERED = -1


class QuizState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


def count_correct(questions: list[QuizQuestion], selections: list[int]) -> int:
    return sum(1 for q, s in zip(questions, selections) if s == q.correct_index)


def quiz_score(questions: list[QuizQuestion], selections: list[int]) -> int:
    """Percentage of correct answers rounded half up. No questions scores 0."""
    if not questions:
        return 0
    return int(100 * count_correct(questions, selections) / len(questions) + 0.5)


class QuizSession:
    def __init__(self, article_id: str, events: EventBus | None = None):
        self.article_id = article_id
        self.events = events
        self._reset()

    def _reset(self) -> None:
        self.state = QuizState.NOT_STARTED
        self.questions: list[QuizQuestion] = []
        self.selections: list[int] = []
        self.index = 0
        self.score = 0

    def start(self, questions: list[QuizQuestion]) -> bool:
        if not questions:
            return False
        self.questions = list(questions)
        self.selections = [UNANSWERED] * len(self.questions)
        self.index = 0
        self.score = 0
        self.state = QuizState.IN_PROGRESS
        logger.debug("Started quiz for {} with {} question(s)", self.article_id, len(self.questions))
        return True

    def select_answer(self, option_index: int) -> None:
        if self.state != QuizState.IN_PROGRESS:
            return
        if not 0 <= self.index < len(self.selections):
            return
        self.selections[self.index] = option_index

    def next(self) -> None:
        if self.state != QuizState.IN_PROGRESS:
            return
        if self.index < len(self.questions) - 1:
            self.index += 1
        else:
            self.complete()

    def previous(self) -> None:
        if self.state == QuizState.IN_PROGRESS and self.index > 0:
            self.index -= 1

    def complete(self) -> int:
        if self.state != QuizState.IN_PROGRESS:
            return self.score
        self.score = quiz_score(self.questions, self.selections)
        self.state = QuizState.COMPLETED
        logger.info("Quiz for {} scored {}", self.article_id, self.score)
        if self.events is not None:
            self.events.publish(QuizCompleted(self.article_id, self.score))
        return self.score

    def close(self) -> None:
        self._reset()

    @property
    def has_quiz(self) -> bool:
        return bool(self.questions)

    @property
    def current_question(self) -> QuizQuestion | None:
        if 0 <= self.index < len(self.questions):
            return self.questions[self.index]
        return None

    @property
    def has_selected_current(self) -> bool:
        if not 0 <= self.index < len(self.selections):
            return False
        return self.selections[self.index] != UNANSWERED

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == len(self.questions) - 1

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return (self.index + 1) / len(self.questions)

    @property
    def correct_count(self) -> int:
        return count_correct(self.questions, self.selections)
