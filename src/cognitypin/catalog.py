"""Load the bundled article catalog and quiz questions."""
import json
from pathlib import Path

from loguru import logger

from cognitypin.models import Article, QuizQuestion

CONTENT_DIR = Path(__file__).parent / "data"


def load_catalog(path: Path | None = None) -> tuple[list[Article], list[QuizQuestion]]:
    """Read articles and questions from catalog.json, in file order."""
    path = path or CONTENT_DIR / "catalog.json"
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    articles = [Article.from_dict(a) for a in data.get("articles", [])]
    known = {a.id for a in articles}
    questions = []
    for q in data.get("questions", []):
        question = QuizQuestion.from_dict(q)
        if question.article_id not in known:
            logger.warning("Skipping question {} for unknown article {}", question.id, question.article_id)
            continue
        questions.append(question)
    logger.debug("Loaded {} articles and {} questions from {}", len(articles), len(questions), path)
    return articles, questions
