import random
from datetime import datetime

import pytest

from portugues_pratico.dataset import VerbDataset
from portugues_pratico.db import KeyValueStore, init_db
from portugues_pratico.models import Verb
from portugues_pratico.spaced_repetition import SpacedRepetitionLedger
from portugues_pratico.wrong_answers import WrongAnswerLog

NOW = datetime(2024, 3, 1, 12, 0, 0)


def make_verb(infinitive, regularity="regular", present=None, category=()):
    return Verb(
        infinitive=infinitive,
        translation=f"to {infinitive}",
        regularity=regularity,
        conjugations={"presentIndicative": present or {}},
        irregular_category=tuple(category),
    )


FALAR = make_verb("falar", present={
    "eu": "falo", "tu": "falas", "voce": "fala", "nos": "falamos", "voces": "falam",
})
COMER = make_verb("comer", present={
    "eu": "como", "tu": "comes", "voce": "come", "nos": "comemos", "voces": "comem",
})
SER = make_verb("ser", regularity="irregular", category=["highly-irregular"], present={
    "eu": "sou", "tu": "és", "voce": "é", "nos": "somos", "voces": "são",
})


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_quiz.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    init_db(tmp_db)
    return KeyValueStore(tmp_db)


@pytest.fixture
def ledger(store):
    return SpacedRepetitionLedger(store, clock=lambda: NOW)


@pytest.fixture
def wrong_log(store):
    return WrongAnswerLog(store)


@pytest.fixture
def verbs():
    return [FALAR, COMER, SER]


@pytest.fixture
def dataset(verbs):
    return VerbDataset(verbs)


@pytest.fixture
def rng():
    return random.Random(1234)
