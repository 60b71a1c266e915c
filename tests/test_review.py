# tests/test_review.py
from portugues_pratico.models import WrongAnswerRecord
from portugues_pratico.review import get_weak_tenses, get_weak_verbs
from conftest import NOW


def miss(verb, tense="presentIndicative"):
    return WrongAnswerRecord(
        verb=verb, translation="", pronoun="eu", tense=tense,
        user_answer="x", correct_answer="y", timestamp=NOW,
    )


def test_get_weak_tenses_empty(wrong_log):
    assert get_weak_tenses(wrong_log) == []


def test_get_weak_tenses_ranked(wrong_log):
    for record in [miss("ser", "preteriteIndicative"), miss("ir", "preteriteIndicative"), miss("ser")]:
        wrong_log.append(record)
    weak = get_weak_tenses(wrong_log)
    assert weak[0] == {"tense": "preteriteIndicative", "misses": 2, "share": 66.7}
    assert weak[1]["tense"] == "presentIndicative"


def test_get_weak_verbs_limit(wrong_log):
    for verb in ["ser", "ser", "ir", "ter", "fazer"]:
        wrong_log.append(miss(verb))
    weak = get_weak_verbs(wrong_log, limit=2)
    assert len(weak) == 2
    assert weak[0]["verb"] == "ser"
    assert weak[0]["misses"] == 2
    # ties broken alphabetically
    assert weak[1]["verb"] == "fazer"
