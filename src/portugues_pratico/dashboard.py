"""Accuracy scoring and progress statistics."""
from datetime import datetime
from typing import Optional

from portugues_pratico.models import QuizState
from portugues_pratico.spaced_repetition import SpacedRepetitionLedger
from portugues_pratico.wrong_answers import WrongAnswerLog


def get_accuracy_label(score: float) -> str:
    if score >= 90:
        return "MASTERED"
    elif score >= 70:
        return "GOOD"
    elif score >= 50:
        return "NEEDS WORK"
    return "STRUGGLING"


def get_accuracy_color(score: float) -> str:
    if score >= 90:
        return "green"
    elif score >= 70:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def session_accuracy(state: QuizState) -> float:
    """Percentage of first attempts answered correctly this session."""
    if state.total_questions == 0:
        return 0.0
    return round((state.score / state.total_questions) * 100, 1)


def get_study_stats(
    state: QuizState,
    ledger: SpacedRepetitionLedger,
    wrong_answers: WrongAnswerLog,
    now: Optional[datetime] = None,
) -> dict:
    ledger_stats = ledger.stats(now)
    return {
        "score": state.score,
        "total_questions": state.total_questions,
        "accuracy": session_accuracy(state),
        "tracked": ledger_stats["total"],
        "mastered": ledger_stats["mastered"],
        "struggling": ledger_stats["struggling"],
        "due": ledger_stats["due"],
        "wrong_answers_logged": len(wrong_answers.list_all()),
    }
