"""Weak area identification from the wrong-answer log."""
from collections import Counter

from portugues_pratico.wrong_answers import WrongAnswerLog


def _ranked(counts: Counter, field: str) -> list[dict]:
    total = sum(counts.values())
    return [
        {field: name, "misses": misses, "share": round((misses / total) * 100, 1)}
        for name, misses in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def get_weak_tenses(wrong_answers: WrongAnswerLog) -> list[dict]:
    """Tenses ordered by number of logged misses (worst first)."""
    return _ranked(Counter(r.tense for r in wrong_answers.list_all()), "tense")


def get_weak_verbs(wrong_answers: WrongAnswerLog, limit: int = 10) -> list[dict]:
    """Verbs ordered by number of logged misses (worst first)."""
    return _ranked(Counter(r.verb for r in wrong_answers.list_all()), "verb")[:limit]
