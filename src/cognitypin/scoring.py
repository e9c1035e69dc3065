"""Related-article scoring and reader recommendations."""
from cognitypin.models import Article

CATEGORY_WEIGHT = 10
SHARED_TAG_WEIGHT = 3
DIFFICULTY_WEIGHT = 2
HEALTH_WEIGHT = 5

RELATED_LIMIT = 3
RECOMMENDED_LIMIT = 5


def relevance_score(article: Article, other: Article) -> int:
    """Fixed heuristic relevance between two articles.

    Args:
        article: The article being read.
        other: A candidate article.

    Returns:
        +10 same category, +3 per distinct shared tag, +2 same difficulty,
        +5 when both are health-related.
    """
    score = 0
    if other.category == article.category:
        score += CATEGORY_WEIGHT
    score += len(set(article.tags) & set(other.tags)) * SHARED_TAG_WEIGHT
    if other.difficulty == article.difficulty:
        score += DIFFICULTY_WEIGHT
    if article.health_related and other.health_related:
        score += HEALTH_WEIGHT
    return score


def score_candidates(article: Article, corpus: list[Article]) -> list[tuple[Article, int]]:
    """Positively scored candidates, best first. Equal scores keep corpus order."""
    scored = []
    for other in corpus:
        if other.id == article.id:
            continue
        score = relevance_score(article, other)
        if score > 0:
            scored.append((other, score))
    # sorted() is stable, so ties stay in catalog order
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def related_articles(article: Article, corpus: list[Article], limit: int = RELATED_LIMIT) -> list[Article]:
    if limit <= 0:
        return []
    return [other for other, _ in score_candidates(article, corpus)[:limit]]


def recommended_for_reader(articles: list[Article], read_ids: set, limit: int = RECOMMENDED_LIMIT) -> list[Article]:
    """Home-screen picks: one unread article per category already read, then any unread."""
    if limit <= 0:
        return []
    preferred = []
    for a in articles:
        if a.id in read_ids and a.category not in preferred:
            preferred.append(a.category)

    unread = [a for a in articles if a.id not in read_ids]
    picks = []
    for category in preferred:
        for a in unread:
            if a.category == category:
                picks.append(a)
                break
    for a in unread:
        if len(picks) >= limit:
            break
        if a not in picks:
            picks.append(a)
    return picks[:limit]


def reading_ratio(read_count: int, total: int) -> float:
    """Share of the catalog read so far. Empty catalogs report 0.0."""
    if total <= 0:
        return 0.0
    return read_count / total
