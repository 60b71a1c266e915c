# tests/test_integration.py
"""End-to-end test of the core workflow."""
import random
from datetime import timedelta

from portugues_pratico.dataset import VerbDataset
from portugues_pratico.db import KeyValueStore, init_db
from portugues_pratico.quiz import QuizSession
from portugues_pratico.settings import default_settings, load_settings, save_settings, update_settings
from portugues_pratico.spaced_repetition import SpacedRepetitionLedger
from portugues_pratico.wrong_answers import WrongAnswerLog
from conftest import NOW


def make_session(db_path, clock):
    store = KeyValueStore(db_path)
    return QuizSession(
        dataset=VerbDataset.from_file(),
        settings=load_settings(store),
        ledger=SpacedRepetitionLedger(store),
        wrong_answers=WrongAnswerLog(store),
        rng=random.Random(42),
        clock=clock,
    )


def test_full_session_workflow(tmp_db):
    """Answer a round of questions, then resume in a new session the next day."""
    init_db(tmp_db)
    store = KeyValueStore(tmp_db)
    save_settings(store, update_settings(default_settings(), regularity_filter="irregular"))

    now = {"t": NOW}
    session = make_session(tmp_db, lambda: now["t"])
    state = session.start()
    missed = []
    for i in range(6):
        q = state.current_question
        assert q.verb.regularity == "irregular"
        if i % 2:
            session.set_answer(q.correct_answer)
        else:
            session.set_answer("errado")
            missed.append(q.key)
        session.check_answer()
        state = session.next_question()
    assert session.state.total_questions == 6
    assert session.state.score == 3
    assert len(session.wrong_answers.list_all()) == 3

    # Next day, a fresh session starts with the missed conjugations
    now["t"] = NOW + timedelta(days=1)
    resumed = make_session(tmp_db, lambda: now["t"])
    assert resumed.settings.regularity_filter == "irregular"
    assert resumed.start().current_question.key in missed
    assert set(resumed.ledger.list_due(now["t"])) == set(missed)
