"""Interactive CLI application."""
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from portugues_pratico.dashboard import get_accuracy_color, get_accuracy_label, get_study_stats
from portugues_pratico.dataset import VerbDataset
from portugues_pratico.db import DATA_DIR, DEFAULT_DB_PATH, KeyValueStore, init_db
from portugues_pratico.models import PRONOUNS, TENSES, QuizState
from portugues_pratico.quiz import QuizSession
from portugues_pratico.review import get_weak_tenses, get_weak_verbs
from portugues_pratico.settings import (
    get_available_pronouns, get_available_tenses, load_settings, save_settings, update_settings,
)
from portugues_pratico.spaced_repetition import SpacedRepetitionLedger
from portugues_pratico.wrong_answers import WrongAnswerLog

LOG_DIR = str(DATA_DIR)
LOG_FILE = "quiz.log"

console = Console()
logger = logging.getLogger(__name__)

PRONOUN_LABELS = {"eu": "eu", "tu": "tu", "voce": "você", "nos": "nós", "voces": "vocês"}
TENSE_LABELS = {
    "presentIndicative": "Present indicative",
    "preteriteIndicative": "Preterite indicative",
    "imperfectIndicative": "Imperfect indicative",
    "futureIndicative": "Future indicative",
    "conditionalIndicative": "Conditional",
    "presentSubjunctive": "Present subjunctive",
    "imperfectSubjunctive": "Imperfect subjunctive",
    "futureSubjunctive": "Future subjunctive",
    "imperative": "Imperative",
}


class SessionExitRequested(Exception):
    """Raised when the user types 'q' or 'menu' during a practice session."""


def setup_logging(log_dir: str = LOG_DIR) -> None:
    pkg_logger = logging.getLogger("portugues_pratico")
    pkg_logger.setLevel(logging.INFO)
    os.makedirs(log_dir, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE), maxBytes=5_000_000, backupCount=3
    )
    file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    pkg_logger.addHandler(file_handler)


def session_prompt(prompt: str, **kwargs) -> str:
    value = Prompt.ask(prompt, **kwargs)
    if value.strip().lower() in ("q", "menu"):
        raise SessionExitRequested()
    return value


def show_welcome():
    console.print(Panel(
        "[bold]Português Prático[/bold]\n[dim]Verb conjugation practice[/dim]",
        title="Bem-vindo", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("practice", "Conjugation quiz"),
        ("stats", "Score + spaced repetition progress"),
        ("wrong", "Review wrong answers"),
        ("settings", "Choose tenses, pronouns and verbs"),
        ("export", "Save progress data as JSON"),
        ("clear", "Erase progress data"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def format_score(state: QuizState) -> str:
    return f"Score: {state.score}/{state.total_questions}"


def show_question(state: QuizState) -> None:
    q = state.current_question
    pronoun = PRONOUN_LABELS.get(q.pronoun, q.pronoun)
    tense = TENSE_LABELS.get(q.tense, q.tense)
    title = "Retry" if state.has_retried else tense
    console.print(Panel(
        f"[bold]{q.verb.infinitive}[/bold] [dim]({q.verb.translation})[/dim]\n"
        f"{tense} — [cyan]{pronoun}[/cyan] ___",
        title=title, border_style="cyan",
    ))


def run_practice_session(session: QuizSession) -> QuizState:
    """Ask questions until the user exits or no question can be generated."""
    state = session.start()
    while True:
        if state.current_question is None:
            console.print(
                "[yellow]No question available. Enable more tenses or pronouns, "
                "or relax the verb filter in settings.[/yellow]"
            )
            return state
        show_question(state)
        answer = session_prompt("Your answer")
        while not answer.strip():
            answer = session_prompt("Your answer")
        session.set_answer(answer)
        state = session.check_answer()
        if state.is_correct:
            console.print("[green]Correct![/green]")
        else:
            console.print("[red]Incorrect.[/red]")
            if not state.has_retried:
                again = session_prompt("Try again?", choices=["y", "n"], default="y")
                if again == "y":
                    state = session.retry()
                    continue
            console.print(f"Answer: [green]{state.current_question.correct_answer}[/green]")
        console.print(f"[dim]{format_score(state)}[/dim]\n")
        state = session.next_question()


def cmd_practice(session: QuizSession):
    console.print("\n[bold]Practice[/bold] [dim](type 'q' to return to the menu)[/dim]\n")
    try:
        run_practice_session(session)
    except SessionExitRequested:
        pass
    console.print(f"[bold]{format_score(session.state)}[/bold]")


def cmd_stats(session: QuizSession):
    stats = get_study_stats(session.state, session.ledger, session.wrong_answers)
    color = get_accuracy_color(stats["accuracy"])
    label = get_accuracy_label(stats["accuracy"])
    console.print(Panel(
        f"Session: [bold]{stats['score']}/{stats['total_questions']}[/bold] "
        f"[{color}]{stats['accuracy']}% {label}[/{color}]",
        title="Progress", border_style="blue",
    ))
    if stats["tracked"] == 0:
        console.print("[dim]No conjugations tracked yet. Start practicing to see your progress![/dim]")
        return
    table = Table(title="Spaced Repetition")
    table.add_column("Tracked", justify="right")
    table.add_column("Mastered", justify="right")
    table.add_column("Struggling", justify="right")
    table.add_column("Due", justify="right")
    table.add_row(
        str(stats["tracked"]), str(stats["mastered"]), str(stats["struggling"]), str(stats["due"]),
    )
    console.print(table)
    console.print(f"[dim]Wrong answers logged: {stats['wrong_answers_logged']}[/dim]")


def cmd_wrong(session: QuizSession):
    records = session.wrong_answers.list_all()
    if not records:
        console.print("[green]No wrong answers logged.[/green]")
        return
    table = Table(title=f"Wrong Answers ({len(records)})")
    table.add_column("Verb", style="cyan")
    table.add_column("Tense")
    table.add_column("Pronoun")
    table.add_column("Yours", style="red")
    table.add_column("Correct", style="green")
    for r in reversed(records[-20:]):
        table.add_row(
            r.verb, TENSE_LABELS.get(r.tense, r.tense),
            PRONOUN_LABELS.get(r.pronoun, r.pronoun), r.user_answer, r.correct_answer,
        )
    console.print(table)
    weak = get_weak_tenses(session.wrong_answers)
    if weak:
        console.print("\n[bold]Most missed tenses:[/bold]")
        for w in weak[:3]:
            console.print(f"  [red]{w['misses']} misses[/red] — {TENSE_LABELS.get(w['tense'], w['tense'])}")
    verbs = get_weak_verbs(session.wrong_answers, limit=5)
    if verbs:
        console.print("[bold]Most missed verbs:[/bold] " + ", ".join(v["verb"] for v in verbs))


def _parse_choices(text: str, allowed: list) -> list:
    chosen = [part.strip() for part in text.split(",") if part.strip()]
    unknown = [c for c in chosen if c not in allowed]
    if unknown:
        raise ValueError(f"Unknown values: {', '.join(unknown)}")
    return chosen


def cmd_settings(session: QuizSession, store: KeyValueStore):
    s = session.settings
    console.print(f"  Tenses:     {', '.join(get_available_tenses(s)) or '-'}")
    console.print(f"  Pronouns:   {', '.join(get_available_pronouns(s)) or '-'}")
    console.print(f"  Verbs:      {s.regularity_filter}")
    console.print(f"  Categories: {', '.join(sorted(s.irregular_categories)) or 'all'}")
    ratio = "uniform" if s.regular_irregular_ratio is None else f"{s.regular_irregular_ratio:.0%} regular"
    console.print(f"  Mix:        {ratio}")
    console.print(
        f"  Spaced rep: {'on' if s.spaced_repetition.enabled else 'off'}, "
        f"{s.spaced_repetition.review_interval_days} day interval"
    )
    console.print(f"  Accents:    {'must match' if s.strict_accents else 'ignored'}")
    field = Prompt.ask(
        "Change", choices=[
            "tenses", "pronouns", "verbs", "categories", "ratio", "spaced", "interval", "accents", "done",
        ],
        default="done",
    )
    if field == "done":
        return
    if field == "tenses":
        value = Prompt.ask(f"Tenses (comma separated from {', '.join(TENSES)})")
        s = update_settings(s, enabled_tenses=_parse_choices(value, TENSES))
    elif field == "pronouns":
        value = Prompt.ask(f"Pronouns (comma separated from {', '.join(PRONOUNS)})")
        s = update_settings(s, enabled_pronouns=_parse_choices(value, PRONOUNS))
    elif field == "verbs":
        value = Prompt.ask("Verbs", choices=["all", "regular", "irregular"], default="all")
        s = update_settings(s, regularity_filter=value)
    elif field == "categories":
        known = sorted({c for v in session.dataset.list() for c in v.irregular_category})
        value = Prompt.ask(
            f"Irregular categories (comma separated from {', '.join(known)}, blank for all)", default=""
        )
        s = update_settings(s, irregular_categories=_parse_choices(value, known))
    elif field == "ratio":
        value = Prompt.ask("Share of regular verbs (0-1, blank for uniform)", default="").strip()
        s = update_settings(s, regular_irregular_ratio=float(value) if value else None)
    elif field == "spaced":
        value = Prompt.ask("Spaced repetition", choices=["on", "off"], default="on")
        s = update_settings(s, spaced_repetition={"enabled": value == "on"})
    elif field == "interval":
        value = IntPrompt.ask("Review interval (days)", default=1)
        s = update_settings(s, spaced_repetition={"review_interval_days": value})
    elif field == "accents":
        value = Prompt.ask("Accents must match", choices=["y", "n"], default="y")
        s = update_settings(s, strict_accents=value == "y")
    session.update_settings(s)
    save_settings(store, s)
    console.print("[green]Settings saved.[/green]")


def cmd_export(session: QuizSession):
    what = Prompt.ask("Export", choices=["progress", "wrong"], default="progress")
    if what == "progress":
        data, default_name = session.ledger.export_serialized(), "spaced_repetition_data.json"
    else:
        data, default_name = session.wrong_answers.export_serialized(), "wrong_answers.json"
    file_path = Prompt.ask("File path", default=default_name)
    Path(file_path).write_text(data, encoding="utf-8")
    console.print(f"[green]Exported to {file_path}[/green]")


def cmd_clear(session: QuizSession):
    what = Prompt.ask("Clear", choices=["progress", "wrong", "cancel"], default="cancel")
    if what == "progress":
        session.ledger.clear()
        console.print("[green]Spaced repetition data cleared.[/green]")
    elif what == "wrong":
        session.wrong_answers.clear()
        console.print("[green]Wrong answers cleared.[/green]")


def build_session(db_path: str = DEFAULT_DB_PATH, verbs_path: str = None) -> tuple[QuizSession, KeyValueStore]:
    init_db(db_path)
    store = KeyValueStore(db_path)
    session = QuizSession(
        dataset=VerbDataset.from_file(verbs_path),
        settings=load_settings(store),
        ledger=SpacedRepetitionLedger(store),
        wrong_answers=WrongAnswerLog(store),
    )
    return session, store


def main():
    setup_logging()
    session, store = build_session(os.environ.get("PORTUGUES_PRATICO_DB", DEFAULT_DB_PATH))
    logger.info("Started with %d verbs", len(session.dataset))

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="practice").strip().lower()
        try:
            if choice == "practice":
                cmd_practice(session)
            elif choice == "stats":
                cmd_stats(session)
            elif choice == "wrong":
                cmd_wrong(session)
            elif choice == "settings":
                cmd_settings(session, store)
            elif choice == "export":
                cmd_export(session)
            elif choice == "clear":
                cmd_clear(session)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Até logo![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
