"""Bounded log of missed conjugations."""
import json
import logging
import sqlite3

from portugues_pratico.db import KeyValueStore
from portugues_pratico.models import WrongAnswerRecord

logger = logging.getLogger(__name__)

WRONG_ANSWERS_KEY = "wrong_answers"
MAX_WRONG_ANSWERS = 100


class WrongAnswerLog:
    def __init__(self, store: KeyValueStore, limit: int = MAX_WRONG_ANSWERS):
        self.store = store
        self.limit = limit

    def list_all(self) -> list[WrongAnswerRecord]:
        try:
            stored = self.store.get(WRONG_ANSWERS_KEY)
            if not stored:
                return []
            return [WrongAnswerRecord.from_dict(item) for item in json.loads(stored)]
        except (sqlite3.Error, ValueError, KeyError, TypeError) as e:
            logger.error("Failed to get wrong answers: %s", e)
            return []

    def append(self, record: WrongAnswerRecord) -> None:
        """Add a record, keeping only the most recent ``limit`` entries."""
        records = self.list_all()
        records.append(record)
        records = records[-self.limit:]
        try:
            self.store.set(WRONG_ANSWERS_KEY, json.dumps([r.to_dict() for r in records]))
        except sqlite3.Error as e:
            logger.error("Failed to save wrong answer: %s", e)

    def clear(self) -> None:
        try:
            self.store.remove(WRONG_ANSWERS_KEY)
        except sqlite3.Error as e:
            logger.error("Failed to clear wrong answers: %s", e)

    def export_serialized(self) -> str:
        return json.dumps([r.to_dict() for r in self.list_all()], indent=2, ensure_ascii=False)
