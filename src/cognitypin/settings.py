"""Reader preferences and account deletion."""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from cognitypin.content import ARTICLES_KEY, QUESTIONS_KEY, ContentRepository
from cognitypin.db import delete_value, get_value, set_value
from cognitypin.events import AccountDeleted, EventBus
from cognitypin.progress import PROGRESS_KEY, ProgressStore

FONT_SCALES = {
    "Small": 0.9,
    "Medium": 1.0,
    "Large": 1.1,
    "Extra Large": 1.2,
}
COLOR_SCHEMES = ("light", "dark")
DEFAULT_DAILY_GOAL = 3

PREFERENCE_KEYS = {
    "notifications_enabled": "notificationsEnabled",
    "health_enabled": "healthKitEnabled",
    "reading_reminders": "readingReminders",
    "font_size": "fontSize",
    "daily_reading_goal": "dailyReadingGoal",
    "color_scheme": "selectedColorScheme",
    "onboarding_completed": "hasCompletedOnboarding",
}


@dataclass
class Preferences:
    notifications_enabled: bool = False
    health_enabled: bool = False
    reading_reminders: bool = False
    font_size: str = "Medium"
    daily_reading_goal: int = DEFAULT_DAILY_GOAL
    color_scheme: Optional[str] = None  # None follows the system
    onboarding_completed: bool = False

    @property
    def font_scale(self) -> float:
        return FONT_SCALES.get(self.font_size, 1.0)


def load_preferences(db_path: str) -> Preferences:
    prefs = Preferences()
    for attr, key in PREFERENCE_KEYS.items():
        default = getattr(prefs, attr)
        value = get_value(db_path, key, default)
        setattr(prefs, attr, value if _valid(attr, value) else default)
    return prefs


def _valid(attr: str, value) -> bool:
    if attr == "font_size":
        return value in FONT_SCALES
    if attr == "daily_reading_goal":
        return isinstance(value, int) and not isinstance(value, bool)
    if attr == "color_scheme":
        return value is None or value in COLOR_SCHEMES
    return isinstance(value, bool)


def save_preference(db_path: str, prefs: Preferences, attr: str, value) -> None:
    """Update one preference in memory and in the store."""
    if attr not in PREFERENCE_KEYS:
        raise KeyError(attr)
    if not _valid(attr, value):
        raise ValueError(f"invalid value for {attr}: {value!r}")
    setattr(prefs, attr, value)
    key = PREFERENCE_KEYS[attr]
    if value is None:
        delete_value(db_path, key)
    else:
        set_value(db_path, key, value)


def delete_account(db_path: str, progress: ProgressStore, content: ContentRepository,
                   events: EventBus) -> Preferences:
    """Forget everything stored for this reader and return fresh preferences."""
    for key in (PROGRESS_KEY, ARTICLES_KEY, QUESTIONS_KEY, *PREFERENCE_KEYS.values()):
        delete_value(db_path, key)
    progress.reset(persist=False)
    content.clear_bookmarks()
    logger.info("Account data deleted")
    events.publish(AccountDeleted())
    return Preferences()
