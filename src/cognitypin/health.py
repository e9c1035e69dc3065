"""Health readings supplied from outside and the insights derived from them."""
from dataclasses import dataclass

from cognitypin.models import Article

STEP_GOAL = 10000
HEALTHY_HEART_RATE = (60, 100)
HEALTHY_SLEEP_HOURS = (7, 9)
INSIGHT_ARTICLE_LIMIT = 3

# Article tags that speak to each metric, used to rank suggested reading.
METRIC_TAGS = {
    "Steps": {"fitness", "activity", "cardiovascular", "habits", "wellness"},
    "Heart Rate": {"heart rate", "cardiovascular", "stress", "wellness"},
    "Sleep": {"sleep", "cycles", "rem", "recovery"},
}


@dataclass
class HealthMetrics:
    steps: float = 0
    heart_rate: float = 0
    sleep_hours: float = 0


@dataclass(frozen=True)
class HealthInsight:
    title: str
    description: str
    metric: str
    value: float
    unit: str


def generate_insights(metrics: HealthMetrics) -> list[HealthInsight]:
    """Turn today's readings into insights. A reading of 0 means no data."""
    insights = []
    if metrics.steps > 0:
        if metrics.steps >= STEP_GOAL:
            insights.append(HealthInsight(
                "Great Activity Level!",
                "You've reached the recommended 10,000 steps today. This level of activity "
                "is associated with numerous health benefits.",
                "Steps", metrics.steps, "steps",
            ))
        else:
            insights.append(HealthInsight(
                "Increase Your Activity",
                "Consider adding more movement to your day. Even small increases in activity "
                "can have significant health benefits.",
                "Steps", metrics.steps, "steps",
            ))

    low, high = HEALTHY_HEART_RATE
    if metrics.heart_rate > 0 and low <= metrics.heart_rate <= high:
        insights.append(HealthInsight(
            "Healthy Resting Heart Rate",
            "Your heart rate is within the normal range. A lower resting heart rate often "
            "indicates better cardiovascular fitness.",
            "Heart Rate", metrics.heart_rate, "bpm",
        ))

    low, high = HEALTHY_SLEEP_HOURS
    if metrics.sleep_hours > 0:
        if low <= metrics.sleep_hours <= high:
            insights.append(HealthInsight(
                "Optimal Sleep Duration",
                "You're getting the recommended amount of sleep. Quality sleep is crucial for "
                "physical recovery and mental health.",
                "Sleep", metrics.sleep_hours, "hours",
            ))
        elif metrics.sleep_hours < low:
            insights.append(HealthInsight(
                "Consider More Sleep",
                "You might benefit from getting more sleep. Most adults need 7-9 hours of "
                "sleep for optimal health.",
                "Sleep", metrics.sleep_hours, "hours",
            ))
    return insights


def articles_for_insight(insight: HealthInsight, articles: list[Article],
                         limit: int = INSIGHT_ARTICLE_LIMIT) -> list[Article]:
    """Health-relevant articles, those sharing the most metric tags first."""
    tags = METRIC_TAGS.get(insight.metric, set())
    candidates = [a for a in articles if a.health_related]
    ranked = sorted(candidates, key=lambda a: -len(tags & {t.casefold() for t in a.tags}))
    return ranked[:max(limit, 0)]
