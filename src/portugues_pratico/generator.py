"""Picking the next conjugation to ask."""
import logging
import random
from datetime import datetime
from typing import Optional

from portugues_pratico.models import ConjugationKey, Question, QuizSettings, Verb
from portugues_pratico.settings import get_available_pronouns, get_available_tenses
from portugues_pratico.spaced_repetition import SpacedRepetitionLedger

logger = logging.getLogger(__name__)

MAX_TRIALS = 100


def get_filtered_verbs(verbs: list[Verb], settings: QuizSettings) -> list[Verb]:
    filtered = []
    for verb in verbs:
        if settings.regularity_filter != "all" and verb.regularity != settings.regularity_filter:
            continue
        if (
            verb.regularity == "irregular"
            and settings.irregular_categories
            and not settings.irregular_categories.intersection(verb.irregular_category)
        ):
            continue
        filtered.append(verb)
    return filtered


def _pick_verb(verbs: list[Verb], settings: QuizSettings, rng: random.Random) -> Verb:
    ratio = settings.regular_irregular_ratio
    if ratio is None or settings.regularity_filter != "all":
        return rng.choice(verbs)
    regular = [v for v in verbs if v.regularity == "regular"]
    irregular = [v for v in verbs if v.regularity == "irregular"]
    if not regular or not irregular:
        return rng.choice(verbs)
    return rng.choice(regular if rng.random() < ratio else irregular)


def _resolve_due(
    key: ConjugationKey, verbs: list[Verb], tenses: list, pronouns: list
) -> Optional[Question]:
    if key.tense not in tenses or key.pronoun not in pronouns:
        return None
    verb = next((v for v in verbs if v.infinitive == key.verb), None)
    if verb is None:
        return None
    answer = verb.conjugate(key.tense, key.pronoun)
    if answer is None:
        return None
    return Question(verb=verb, pronoun=key.pronoun, tense=key.tense, correct_answer=answer)


def generate_question(
    verbs: list[Verb],
    settings: QuizSettings,
    ledger: Optional[SpacedRepetitionLedger] = None,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Optional[Question]:
    """Return the next question, or None when nothing can be asked.

    With spaced repetition enabled, conjugations due for review come first;
    otherwise random combinations are tried up to MAX_TRIALS times, skipping
    ones the ledger has scheduled for later.
    """
    rng = rng or random.Random()
    filtered = get_filtered_verbs(verbs, settings)
    tenses = get_available_tenses(settings)
    pronouns = get_available_pronouns(settings)
    if not filtered or not tenses or not pronouns:
        return None

    use_ledger = settings.spaced_repetition.enabled and ledger is not None
    schedule = {}
    if use_ledger:
        now = now or ledger.clock()
        schedule = {entry.key: entry.next_review for entry in ledger.entries()}
        due = [key for key, next_review in schedule.items() if next_review <= now]
        if due:
            question = _resolve_due(rng.choice(due), filtered, tenses, pronouns)
            if question is not None:
                return question

    for _ in range(MAX_TRIALS):
        verb = _pick_verb(filtered, settings, rng)
        tense = rng.choice(tenses)
        pronoun = rng.choice(pronouns)
        answer = verb.conjugate(tense, pronoun)
        if answer is None:
            continue
        question = Question(verb=verb, pronoun=pronoun, tense=tense, correct_answer=answer)
        next_review = schedule.get(question.key)
        if use_ledger and next_review is not None and next_review > now:
            continue
        return question

    logger.info("No question found after %d trials", MAX_TRIALS)
    return None
