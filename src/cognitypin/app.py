"""Interactive CLI application."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, IntPrompt, Prompt
from rich.table import Table

from cognitypin.content import ContentRepository
from cognitypin.dashboard import export_user_data, get_reading_stats
from cognitypin.db import DEFAULT_DB_PATH, init_db
from cognitypin.events import EventBus
from cognitypin.filters import ArticleFilter
from cognitypin.health import HealthMetrics, articles_for_insight, generate_insights
from cognitypin.models import Article, Category
from cognitypin.progress import ProgressStore
from cognitypin.quiz import QuizSession, QuizState
from cognitypin.reading import ReadingSession, estimated_reading_time
from cognitypin.scheduler import Scheduler
from cognitypin.scoring import recommended_for_reader, related_articles
from cognitypin.settings import (
    FONT_SCALES, Preferences, delete_account, load_preferences, save_preference,
)

console = Console()
EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the reader leaves a reading or quiz flow early."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, choices: list[str]) -> int:
    answer = session_prompt(prompt, choices=[*choices, *EXIT_WORDS], show_choices=False)
    return int(answer)


@dataclass
class Services:
    db_path: str
    content: ContentRepository
    progress: ProgressStore
    events: EventBus
    scheduler: Scheduler
    preferences: Preferences
    health: HealthMetrics = field(default_factory=HealthMetrics)


def build_services(db_path: str, clock: Optional[Callable[[], float]] = None,
                   catalog_path: Optional[Path] = None) -> Services:
    """Construct every service once and wire the completion events."""
    init_db(db_path)
    events = EventBus()
    scheduler = Scheduler(clock) if clock else Scheduler()
    content = ContentRepository.load(db_path, catalog_path)
    progress = ProgressStore.load(db_path)
    progress.attach(events)
    sync_bookmarks(content, progress)
    return Services(
        db_path=db_path,
        content=content,
        progress=progress,
        events=events,
        scheduler=scheduler,
        preferences=load_preferences(db_path),
    )


def sync_bookmarks(content: ContentRepository, progress: ProgressStore) -> None:
    """Reconcile bookmarks recovered from the saved catalog with the progress record."""
    from_catalog = {a.id for a in content.bookmarked()}
    known = {a.id for a in content.articles}
    merged = (progress.progress.bookmarked_ids & known) | from_catalog
    if merged != progress.progress.bookmarked_ids:
        progress.progress.bookmarked_ids = merged
        progress.save()
    for article_id in merged - from_catalog:
        content.set_bookmarked(article_id, True)


def toggle_bookmark(services: Services, article_id: str) -> Optional[bool]:
    """Flip a bookmark in the progress record and mirror it into the catalog."""
    if services.content.get(article_id) is None:
        logger.warning("Ignoring bookmark toggle for unknown article {}", article_id)
        return None
    flag = services.progress.toggle_bookmark(article_id)
    services.content.set_bookmarked(article_id, flag)
    return flag


def configure_logging(db_path: str) -> None:
    logger.remove()
    log_path = Path(db_path).parent / "cognitypin.log"
    logger.add(
        log_path,
        level=os.environ.get("COGNITYPIN_LOG_LEVEL", "INFO"),
        rotation="1 MB",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} | {message}",
    )


def show_welcome():
    console.print(Panel(
        "[bold]CognityPin[/bold]\n[dim]Read, learn, and test yourself[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("home", "Featured and recommended reading"),
        ("browse", "All articles"),
        ("categories", "Articles by category"),
        ("search", "Search titles, text and tags"),
        ("read", "Read an article"),
        ("quiz", "Take an article quiz"),
        ("bookmarks", "Saved articles"),
        ("stats", "Reading statistics"),
        ("health", "Reading ideas from today's health data"),
        ("settings", "Preferences"),
        ("export", "Export your data"),
        ("delete", "Delete all your data"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def article_table(services: Services, articles: list[Article], title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Category")
    table.add_column("Level")
    table.add_column("Time", justify="right")
    table.add_column("")
    for i, a in enumerate(articles, 1):
        marks = ("[green]read[/green] " if services.progress.is_read(a.id) else "") + \
            ("[yellow]saved[/yellow]" if services.progress.is_bookmarked(a.id) else "")
        table.add_row(str(i), a.title, a.category.value, a.difficulty.value,
                      estimated_reading_time(a.reading_time), marks.strip())
    return table


def pick_article(services: Services, articles: list[Article], title: str = "Articles") -> Optional[Article]:
    if not articles:
        console.print("[yellow]No articles found.[/yellow]")
        return None
    console.print(article_table(services, articles, title))
    choice = session_int_prompt("Article number (0 to cancel)", [str(n) for n in range(len(articles) + 1)])
    if choice == 0:
        return None
    return articles[choice - 1]


def show_related(services: Services, article: Article) -> None:
    related = related_articles(article, services.content.articles)
    if not related:
        return
    console.print("\n[bold]Related reading:[/bold]")
    for r in related:
        console.print(f"  [cyan]{r.title}[/cyan] [dim]({r.category.value}, {estimated_reading_time(r.reading_time)})[/dim]")


def run_reading_session(services: Services, article: Article) -> bool:
    """Page through an article. Returns True when it was marked read."""
    paragraphs = [p.strip() for p in article.content.split("\n\n") if p.strip()]
    session = ReadingSession(article, services.scheduler, services.events)
    console.print(Panel(
        f"[bold]{article.title}[/bold]\n[dim]{article.category.value} | {article.difficulty.value} | "
        f"{session.estimated_reading_time}[/dim]",
        border_style="cyan",
    ))
    session.start()
    try:
        for i, paragraph in enumerate(paragraphs, 1):
            console.print(paragraph + "\n")
            session_prompt("[dim]Enter to continue, q to stop[/dim]", default="", show_default=False)
            services.scheduler.run_pending()
            session.update_progress(i / len(paragraphs))
            console.print(f"[dim]Progress: {session.progress_percentage}[/dim]")
        session.complete()
        console.print("[green]Article complete![/green]")
    except SessionExitRequested:
        services.scheduler.run_pending()
        console.print(f"[dim]Stopped at {session.progress_percentage}.[/dim]")
    finally:
        session.close()
    return services.progress.is_read(article.id)


def run_quiz_session(services: Services, article: Article) -> Optional[int]:
    """Walk through an article's quiz. Returns the score, or None if abandoned."""
    quiz = QuizSession(article.id, services.events)
    if not quiz.start(services.content.questions_for(article.id)):
        console.print("[yellow]No quiz for this article yet.[/yellow]")
        return None
    console.print(f"\n[bold]Quiz[/bold] — {article.title}\n")
    try:
        while quiz.state == QuizState.IN_PROGRESS:
            q = quiz.current_question
            console.print(f"[bold]Q{quiz.index + 1}/{len(quiz.questions)}.[/bold] {q.question}\n")
            for n, option in enumerate(q.options, 1):
                marker = "[green]>[/green]" if quiz.selections[quiz.index] == n - 1 else " "
                console.print(f" {marker}[cyan]{n})[/cyan] {option}")
            choices = [str(n) for n in range(1, len(q.options) + 1)]
            if not quiz.is_first:
                choices.append("b")
            answer = session_prompt("\nYour answer (b = back)", choices=[*choices, *EXIT_WORDS], show_choices=False)
            if answer == "b":
                quiz.previous()
                continue
            quiz.select_answer(int(answer) - 1)
            quiz.next()
        score = quiz.score
        for q, selected in zip(quiz.questions, quiz.selections):
            if selected == q.correct_index:
                console.print(f"[green]Correct:[/green] {q.question}")
            else:
                console.print(f"[red]Incorrect:[/red] {q.question} Answer: [green]{q.options[q.correct_index]}[/green]")
            if q.explanation:
                console.print(f"[dim]{q.explanation}[/dim]")
        console.print(f"\n[bold]Score: {quiz.correct_count}/{len(quiz.questions)} ({score}%)[/bold]\n")
        return score
    except SessionExitRequested:
        console.print("[dim]Quiz closed without a score.[/dim]")
        return None
    finally:
        quiz.close()


def read_and_follow_up(services: Services, article: Article) -> None:
    run_reading_session(services, article)
    show_related(services, article)
    if services.content.questions_for(article.id):
        if Confirm.ask("Take the quiz for this article?", default=True):
            run_quiz_session(services, article)


def cmd_home(services: Services):
    p = services.progress.progress
    stats = get_reading_stats(p, len(services.content.articles), services.preferences.daily_reading_goal)
    console.print(Panel(
        f"Streak: [bold]{stats['streak']}[/bold]  |  Read: [bold]{stats['articles_read']}/"
        f"{stats['total_articles']}[/bold]  |  Today's goal: {stats['daily_goal_text']}",
        title="Home", border_style="blue",
    ))
    console.print(article_table(services, services.content.featured(), "Featured"))
    recommended = recommended_for_reader(services.content.articles, p.read_ids)
    if recommended:
        console.print(article_table(services, recommended, "Recommended for you"))


def cmd_browse(services: Services):
    article = pick_article(services, services.content.articles, "All Articles")
    if article:
        read_and_follow_up(services, article)


def cmd_categories(services: Services):
    table = Table(title="Categories")
    table.add_column("#", justify="right")
    table.add_column("Category", style="cyan")
    table.add_column("Articles", justify="right")
    counts = services.content.categories_with_counts()
    for i, (category, count) in enumerate(counts, 1):
        table.add_row(str(i), category.value, str(count))
    console.print(table)
    choice = IntPrompt.ask("Category number (0 to cancel)", default=0)
    if not 1 <= choice <= len(counts):
        return
    category = counts[choice - 1][0]
    article = pick_article(services, services.content.get_articles(category), category.value)
    if article:
        read_and_follow_up(services, article)


def cmd_search(services: Services):
    article_filter = ArticleFilter(services.content, services.scheduler)
    try:
        article_filter.set_search_text(Prompt.ask("Search"))
        category = Prompt.ask(
            "Category (blank for all)",
            choices=["", *[c.value for c in Category]], default="", show_choices=False,
        )
        article_filter.set_category(Category(category) if category else None)
        article = pick_article(services, article_filter.displayed, "Search Results")
    finally:
        article_filter.close()
    if article:
        read_and_follow_up(services, article)


def cmd_read(services: Services):
    unread = [a for a in services.content.articles if not services.progress.is_read(a.id)]
    article = pick_article(services, unread or services.content.articles, "Up Next")
    if article:
        read_and_follow_up(services, article)


def cmd_quiz(services: Services):
    with_quiz = [a for a in services.content.articles if services.content.questions_for(a.id)]
    article = pick_article(services, with_quiz, "Articles with a Quiz")
    if article:
        run_quiz_session(services, article)


def cmd_bookmarks(services: Services):
    saved = services.content.bookmarked()
    if not saved:
        console.print("[yellow]No bookmarks yet. Save articles to find them here.[/yellow]")
    else:
        console.print(article_table(services, saved, "Bookmarks"))
    if Confirm.ask("Add or remove a bookmark?", default=False):
        article = pick_article(services, services.content.articles, "All Articles")
        if article:
            flag = toggle_bookmark(services, article.id)
            console.print(f"[green]{'Saved' if flag else 'Removed'}:[/green] {article.title}")


def cmd_stats(services: Services):
    stats = get_reading_stats(
        services.progress.progress, len(services.content.articles),
        services.preferences.daily_reading_goal,
    )
    table = Table(title="Your Reading")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Articles read", f"{stats['articles_read']} of {stats['total_articles']}")
    table.add_row("Catalog progress", f"{stats['catalog_progress'] * 100:.0f}%")
    table.add_row("Reading time", stats["reading_time"])
    table.add_row("Current streak", stats["streak"])
    table.add_row("Bookmarks", str(stats["bookmarks"]))
    table.add_row("Average quiz score", stats["average_quiz"])
    table.add_row("Daily goal", stats["daily_goal_text"])
    console.print(table)


def cmd_health(services: Services):
    if not services.preferences.health_enabled:
        console.print("[yellow]Health data is turned off. Enable it in settings.[/yellow]")
        return
    services.health = HealthMetrics(
        steps=FloatPrompt.ask("Steps today", default=services.health.steps),
        heart_rate=FloatPrompt.ask("Average heart rate (bpm)", default=services.health.heart_rate),
        sleep_hours=FloatPrompt.ask("Hours slept", default=services.health.sleep_hours),
    )
    insights = generate_insights(services.health)
    if not insights:
        console.print("[dim]No insights for these readings.[/dim]")
        return
    for insight in insights:
        picks = articles_for_insight(insight, services.content.articles)
        body = f"{insight.description}\n[dim]{insight.value:g} {insight.unit}[/dim]"
        if picks:
            body += "\n\n" + "\n".join(f"  [cyan]{a.title}[/cyan]" for a in picks)
        console.print(Panel(body, title=insight.title, border_style="green"))


def cmd_settings(services: Services):
    prefs = services.preferences
    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Notifications", "on" if prefs.notifications_enabled else "off")
    table.add_row("Health data", "on" if prefs.health_enabled else "off")
    table.add_row("Reading reminders", "on" if prefs.reading_reminders else "off")
    table.add_row("Font size", prefs.font_size)
    table.add_row("Daily reading goal", str(prefs.daily_reading_goal))
    table.add_row("Color scheme", prefs.color_scheme or "system")
    console.print(table)
    choice = Prompt.ask(
        "Change",
        choices=["notifications", "health", "reminders", "font", "goal", "scheme", "done"],
        default="done",
    )
    if choice == "notifications":
        save_preference(services.db_path, prefs, "notifications_enabled", not prefs.notifications_enabled)
    elif choice == "health":
        save_preference(services.db_path, prefs, "health_enabled", not prefs.health_enabled)
    elif choice == "reminders":
        save_preference(services.db_path, prefs, "reading_reminders", not prefs.reading_reminders)
    elif choice == "font":
        size = Prompt.ask("Font size", choices=list(FONT_SCALES), default=prefs.font_size)
        save_preference(services.db_path, prefs, "font_size", size)
    elif choice == "goal":
        goal = IntPrompt.ask("Articles per day", default=prefs.daily_reading_goal)
        save_preference(services.db_path, prefs, "daily_reading_goal", max(goal, 1))
    elif choice == "scheme":
        scheme = Prompt.ask("Color scheme", choices=["system", "light", "dark"], default="system")
        save_preference(services.db_path, prefs, "color_scheme", None if scheme == "system" else scheme)


def cmd_export(services: Services):
    stats = get_reading_stats(
        services.progress.progress, len(services.content.articles),
        services.preferences.daily_reading_goal,
    )
    text = export_user_data(stats)
    console.print(Panel(text, title="Export", border_style="blue"))
    path = Prompt.ask("Save to file (blank to skip)", default="", show_default=False)
    if path:
        Path(path).write_text(text, encoding="utf-8")
        console.print(f"[green]Saved to {path}[/green]")


def cmd_delete(services: Services):
    if not Confirm.ask("[red]Delete all reading history, bookmarks and settings?[/red]", default=False):
        return
    services.preferences = delete_account(
        services.db_path, services.progress, services.content, services.events,
    )
    console.print("[green]Your data has been deleted.[/green]")


COMMANDS = {
    "home": cmd_home,
    "browse": cmd_browse,
    "categories": cmd_categories,
    "search": cmd_search,
    "read": cmd_read,
    "quiz": cmd_quiz,
    "bookmarks": cmd_bookmarks,
    "stats": cmd_stats,
    "health": cmd_health,
    "settings": cmd_settings,
    "export": cmd_export,
    "delete": cmd_delete,
}


def main():
    db_path = DEFAULT_DB_PATH
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    configure_logging(db_path)
    services = build_services(db_path)
    if not services.preferences.onboarding_completed:
        save_preference(db_path, services.preferences, "onboarding_completed", True)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="home").strip().lower()
        try:
            if choice in ("quit", "exit", "q"):
                console.print("[dim]Happy reading![/dim]")
                break
            command = COMMANDS.get(choice)
            if command is None:
                console.print("[red]Unknown command. Try again.[/red]")
                continue
            command(services)
        except SessionExitRequested:
            continue
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command {} failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
