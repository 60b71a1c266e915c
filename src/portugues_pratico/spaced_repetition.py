"""Two-bucket spaced repetition ledger for individual conjugations.

A correct answer retires a conjugation for a year; a wrong answer brings it
back after the configured review interval. The whole ledger is stored as one
JSON array and rewritten on every answer.
"""
import json
import logging
import sqlite3
from datetime import datetime, timedelta
from typing import Callable, Optional

from portugues_pratico.db import KeyValueStore
from portugues_pratico.models import ConjugationKey, SpacedRepetitionEntry

logger = logging.getLogger(__name__)

SPACED_REPETITION_KEY = "spaced_repetition"
MASTERED_DELAY = timedelta(days=365)
MASTERED_THRESHOLD = 2
STRUGGLING_THRESHOLD = 2


class SpacedRepetitionLedger:
    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def entries(self) -> list[SpacedRepetitionEntry]:
        """Every stored entry; an unreadable ledger is treated as empty."""
        try:
            stored = self.store.get(SPACED_REPETITION_KEY)
            if not stored:
                return []
            return [SpacedRepetitionEntry.from_dict(item) for item in json.loads(stored)]
        except (sqlite3.Error, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to get spaced repetition entries: %s", e)
            return []

    def save(self, entries: list[SpacedRepetitionEntry]) -> None:
        try:
            self.store.set(
                SPACED_REPETITION_KEY, json.dumps([entry.to_dict() for entry in entries])
            )
        except sqlite3.Error as e:
            logger.error("Failed to save spaced repetition entries: %s", e)

    def get_entry(self, key: ConjugationKey) -> Optional[SpacedRepetitionEntry]:
        for entry in self.entries():
            if entry.key == key:
                return entry
        return None

    def record_answer(
        self,
        key: ConjugationKey,
        is_correct: bool,
        review_interval_days: int,
        now: Optional[datetime] = None,
    ) -> SpacedRepetitionEntry:
        now = now or self.clock()
        entries = self.entries()
        entry = next((e for e in entries if e.key == key), None)
        if entry is None:
            entry = SpacedRepetitionEntry(key=key, last_seen=now, next_review=now)
            entries.append(entry)

        if is_correct:
            entry.correct_count += 1
            entry.next_review = now + MASTERED_DELAY
        else:
            entry.incorrect_count += 1
            entry.next_review = now + timedelta(days=review_interval_days)
        entry.last_seen = now

        self.save(entries)
        logger.debug(
            "Recorded %s answer for %s/%s/%s, next review %s",
            "correct" if is_correct else "incorrect",
            key.verb, key.pronoun, key.tense, entry.next_review.isoformat(),
        )
        return entry

    def is_due(self, key: ConjugationKey, now: Optional[datetime] = None) -> bool:
        entry = self.get_entry(key)
        if entry is None:
            return True
        return entry.next_review <= (now or self.clock())

    def list_due(self, now: Optional[datetime] = None) -> list[ConjugationKey]:
        now = now or self.clock()
        return [e.key for e in self.entries() if e.next_review <= now]

    def list_mastered(self) -> list[ConjugationKey]:
        return [e.key for e in self.entries() if e.correct_count >= MASTERED_THRESHOLD]

    def list_struggling(self) -> list[ConjugationKey]:
        return [e.key for e in self.entries() if e.incorrect_count >= STRUGGLING_THRESHOLD]

    def stats(self, now: Optional[datetime] = None) -> dict:
        now = now or self.clock()
        entries = self.entries()
        return {
            "total": len(entries),
            "mastered": sum(1 for e in entries if e.correct_count >= MASTERED_THRESHOLD),
            "struggling": sum(1 for e in entries if e.incorrect_count >= STRUGGLING_THRESHOLD),
            "due": sum(1 for e in entries if e.next_review <= now),
        }

    def clear(self) -> None:
        try:
            self.store.remove(SPACED_REPETITION_KEY)
        except sqlite3.Error as e:
            logger.error("Failed to clear spaced repetition data: %s", e)

    def export_serialized(self) -> str:
        return json.dumps([entry.to_dict() for entry in self.entries()], indent=2, ensure_ascii=False)
