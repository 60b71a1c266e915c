"""Tests for the wrong-answer log."""
import json
from datetime import timedelta

from portugues_pratico.db import KeyValueStore
from portugues_pratico.models import WrongAnswerRecord
from portugues_pratico.wrong_answers import MAX_WRONG_ANSWERS, WRONG_ANSWERS_KEY, WrongAnswerLog
from conftest import NOW


def make_record(i=0, user_answer="falo"):
    return WrongAnswerRecord(
        verb=f"verb{i}", translation="to speak", pronoun="tu", tense="presentIndicative",
        user_answer=user_answer, correct_answer="falas", timestamp=NOW + timedelta(seconds=i),
    )


def test_empty_log(wrong_log):
    assert wrong_log.list_all() == []


def test_append_and_list(wrong_log):
    wrong_log.append(make_record(1))
    wrong_log.append(make_record(2))
    assert [r.verb for r in wrong_log.list_all()] == ["verb1", "verb2"]


def test_append_persists(store):
    WrongAnswerLog(store).append(make_record(1, user_answer="falás"))
    record = WrongAnswerLog(store).list_all()[0]
    assert record == make_record(1, user_answer="falás")


def test_log_capped_at_100(wrong_log):
    for i in range(MAX_WRONG_ANSWERS + 1):
        wrong_log.append(make_record(i))
    records = wrong_log.list_all()
    assert len(records) == 100
    assert records[0].verb == "verb1"
    assert records[-1].verb == "verb100"
    assert "verb0" not in {r.verb for r in records}


def test_custom_limit(store):
    log = WrongAnswerLog(store, limit=2)
    for i in range(5):
        log.append(make_record(i))
    assert [r.verb for r in log.list_all()] == ["verb3", "verb4"]


def test_clear(wrong_log):
    wrong_log.append(make_record())
    wrong_log.clear()
    assert wrong_log.list_all() == []


def test_export_serialized(wrong_log):
    wrong_log.append(make_record(0))
    data = json.loads(wrong_log.export_serialized())
    assert data == [make_record(0).to_dict()]


def test_export_empty(wrong_log):
    assert json.loads(wrong_log.export_serialized()) == []


def test_malformed_payload_reads_as_empty(store, wrong_log):
    store.set(WRONG_ANSWERS_KEY, "[{\"verb\": 1}]")
    assert wrong_log.list_all() == []


def test_storage_unavailable_is_silent(tmp_db):
    log = WrongAnswerLog(KeyValueStore(tmp_db))
    log.append(make_record())  # should not raise
    assert log.list_all() == []
