"""Tests for data model classes."""
from datetime import datetime

from portugues_pratico.models import (
    ConjugationKey, Question, QuizSettings, QuizState, SpacedRepetitionEntry, WrongAnswerRecord,
)
from conftest import COMER, FALAR, NOW


def test_verb_conjugate():
    assert FALAR.conjugate("presentIndicative", "tu") == "falas"


def test_verb_conjugate_missing_tense():
    assert FALAR.conjugate("imperative", "tu") is None


def test_verb_conjugate_missing_pronoun():
    assert FALAR.conjugate("presentIndicative", "vos") is None


def test_conjugation_key_is_value_type():
    a = ConjugationKey(verb="falar", pronoun="eu", tense="presentIndicative")
    b = ConjugationKey(verb="falar", pronoun="eu", tense="presentIndicative")
    assert a == b
    assert len({a, b}) == 1


def test_conjugation_keys_differ_by_any_field():
    base = ConjugationKey("falar", "eu", "presentIndicative")
    assert base != ConjugationKey("falar", "tu", "presentIndicative")
    assert base != ConjugationKey("comer", "eu", "presentIndicative")
    assert base != ConjugationKey("falar", "eu", "futureIndicative")


def test_question_key():
    q = Question(verb=FALAR, pronoun="tu", tense="presentIndicative", correct_answer="falas")
    assert q.key == ConjugationKey("falar", "tu", "presentIndicative")


def test_verbs_and_questions_are_hashable():
    q = Question(verb=FALAR, pronoun="tu", tense="presentIndicative", correct_answer="falas")
    same = Question(verb=FALAR, pronoun="tu", tense="presentIndicative", correct_answer="falas")
    assert hash(FALAR) == hash(FALAR)
    assert len({q, same}) == 1
    assert len({FALAR, COMER}) == 2


def test_quiz_state_defaults():
    s = QuizState()
    assert s.current_question is None
    assert s.user_answer == ""
    assert s.is_answered is False
    assert s.is_correct is None
    assert s.has_retried is False
    assert s.score == 0
    assert s.total_questions == 0
    assert s.phase == "no_question"


def test_quiz_settings_defaults():
    s = QuizSettings()
    assert s.enabled_pronouns == {"eu", "tu", "voce", "nos", "voces"}
    assert s.enabled_tenses == {"presentIndicative"}
    assert s.regularity_filter == "all"
    assert s.spaced_repetition.enabled is True
    assert s.spaced_repetition.review_interval_days == 1
    assert s.strict_accents is True


def test_entry_dict_round_trip():
    entry = SpacedRepetitionEntry(
        key=ConjugationKey("ser", "voce", "presentIndicative"),
        last_seen=NOW,
        next_review=datetime(2024, 3, 2, 12, 0, 0),
        correct_count=1,
        incorrect_count=3,
    )
    data = entry.to_dict()
    assert data["key"] == {"verb": "ser", "pronoun": "voce", "tense": "presentIndicative"}
    assert data["next_review"] == "2024-03-02T12:00:00"
    assert SpacedRepetitionEntry.from_dict(data) == entry


def test_wrong_answer_record_from_dict_without_translation():
    record = WrongAnswerRecord.from_dict({
        "verb": "falar", "pronoun": "tu", "tense": "presentIndicative",
        "user_answer": "falo", "correct_answer": "falas",
        "timestamp": "2024-03-01T12:00:00",
    })
    assert record.translation == ""
    assert record.timestamp == NOW
