"""Quiz state machine: a pure reducer plus the session that issues its side effects."""
import dataclasses
import logging
import random
import unicodedata
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Union

from portugues_pratico.dataset import VerbDataset
from portugues_pratico.generator import generate_question
from portugues_pratico.models import Question, QuizSettings, QuizState, WrongAnswerRecord
from portugues_pratico.spaced_repetition import SpacedRepetitionLedger
from portugues_pratico.wrong_answers import WrongAnswerLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetQuestion:
    question: Question


@dataclass(frozen=True)
class SetAnswer:
    text: str


@dataclass(frozen=True)
class CheckAnswer:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class NextQuestion:
    question: Optional[Question]


@dataclass(frozen=True)
class ResetQuiz:
    pass


QuizAction = Union[SetQuestion, SetAnswer, CheckAnswer, Retry, NextQuestion, ResetQuiz]


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def is_answer_correct(user_answer: str, correct_answer: str, strict_accents: bool = True) -> bool:
    """Compare answers ignoring case and surrounding whitespace.

    Accented characters must match unless ``strict_accents`` is False.
    """
    given = user_answer.strip().lower()
    expected = correct_answer.strip().lower()
    if not strict_accents:
        given, expected = strip_accents(given), strip_accents(expected)
    return given == expected


def _fresh(state: QuizState, question: Optional[Question]) -> QuizState:
    return dataclasses.replace(
        state,
        current_question=question,
        user_answer="",
        is_answered=False,
        is_correct=None,
        has_retried=False,
    )


def quiz_reducer(state: QuizState, action: QuizAction, strict_accents: bool = True) -> QuizState:
    """Return the state after ``action``; disallowed actions return ``state`` itself."""
    phase = state.phase

    if isinstance(action, SetQuestion):
        return _fresh(state, action.question)

    if isinstance(action, SetAnswer):
        if phase != "unanswered":
            return state
        return dataclasses.replace(state, user_answer=action.text)

    if isinstance(action, CheckAnswer):
        if phase != "unanswered":
            return state
        correct = is_answer_correct(
            state.user_answer, state.current_question.correct_answer, strict_accents
        )
        score, total = state.score, state.total_questions
        # A resubmission after Retry was already counted on the first attempt
        if not state.has_retried:
            total += 1
            if correct:
                score += 1
        return dataclasses.replace(
            state, is_answered=True, is_correct=correct, score=score, total_questions=total
        )

    if isinstance(action, Retry):
        if phase != "answered" or state.is_correct is not False:
            return state
        return dataclasses.replace(
            state, is_answered=False, is_correct=None, user_answer="", has_retried=True
        )

    if isinstance(action, NextQuestion):
        if phase != "answered":
            return state
        return _fresh(state, action.question)

    if isinstance(action, ResetQuiz):
        return QuizState()

    return state


class QuizSession:
    """One quiz run wired to its dataset, settings, ledger and wrong-answer log."""

    def __init__(
        self,
        dataset: VerbDataset,
        settings: QuizSettings,
        ledger: SpacedRepetitionLedger,
        wrong_answers: WrongAnswerLog,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.dataset = dataset
        self.settings = settings
        self.ledger = ledger
        self.wrong_answers = wrong_answers
        self.rng = rng or random.Random()
        self.clock = clock
        self.state = QuizState()

    def _generate(self) -> Optional[Question]:
        return generate_question(
            self.dataset.list(), self.settings, self.ledger, rng=self.rng, now=self.clock()
        )

    def dispatch(self, action: QuizAction) -> QuizState:
        new_state = quiz_reducer(self.state, action, self.settings.strict_accents)
        if isinstance(action, CheckAnswer) and new_state is not self.state:
            self._record_check(new_state)
        self.state = new_state
        return new_state

    def _record_check(self, checked: QuizState) -> None:
        question = checked.current_question
        now = self.clock()
        self.ledger.record_answer(
            question.key,
            checked.is_correct,
            self.settings.spaced_repetition.review_interval_days,
            now=now,
        )
        if not checked.is_correct:
            self.wrong_answers.append(WrongAnswerRecord(
                verb=question.verb.infinitive,
                translation=question.verb.translation,
                pronoun=question.pronoun,
                tense=question.tense,
                user_answer=checked.user_answer.strip(),
                correct_answer=question.correct_answer,
                timestamp=now,
            ))

    def start(self) -> QuizState:
        question = self._generate()
        if question is None:
            logger.info("No question available for current settings")
            return self.state
        return self.dispatch(SetQuestion(question))

    def set_answer(self, text: str) -> QuizState:
        return self.dispatch(SetAnswer(text))

    def check_answer(self) -> QuizState:
        return self.dispatch(CheckAnswer())

    def retry(self) -> QuizState:
        return self.dispatch(Retry())

    def next_question(self) -> QuizState:
        if self.state.phase != "answered":
            return self.state
        return self.dispatch(NextQuestion(self._generate()))

    def reset(self) -> QuizState:
        return self.dispatch(ResetQuiz())

    def update_settings(self, settings: QuizSettings) -> None:
        self.settings = settings
