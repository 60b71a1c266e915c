"""Data classes for the conjugation quiz domain model."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

PRONOUNS = ["eu", "tu", "voce", "nos", "voces"]

TENSES = [
    "presentIndicative",
    "preteriteIndicative",
    "imperfectIndicative",
    "futureIndicative",
    "conditionalIndicative",
    "presentSubjunctive",
    "imperfectSubjunctive",
    "futureSubjunctive",
    "imperative",
]

REGULARITY_FILTERS = ("all", "regular", "irregular")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored ISO timestamp as naive local time."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class Verb:
    infinitive: str
    translation: str
    regularity: str
    conjugations: dict = field(hash=False)
    irregular_category: tuple = ()

    def conjugate(self, tense: str, pronoun: str) -> Optional[str]:
        """Return the conjugated form, or None if the table lacks it."""
        forms = self.conjugations.get(tense)
        if not forms:
            return None
        return forms.get(pronoun) or None


@dataclass(frozen=True)
class ConjugationKey:
    verb: str
    pronoun: str
    tense: str

    def to_dict(self) -> dict:
        return {"verb": self.verb, "pronoun": self.pronoun, "tense": self.tense}

    @classmethod
    def from_dict(cls, data: dict) -> "ConjugationKey":
        return cls(verb=data["verb"], pronoun=data["pronoun"], tense=data["tense"])


@dataclass
class SpacedRepetitionEntry:
    key: ConjugationKey
    last_seen: datetime
    next_review: datetime
    correct_count: int = 0
    incorrect_count: int = 0

    def to_dict(self) -> dict:
        return {
            "key": self.key.to_dict(),
            "last_seen": self.last_seen.isoformat(),
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
            "next_review": self.next_review.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SpacedRepetitionEntry":
        return cls(
            key=ConjugationKey.from_dict(data["key"]),
            last_seen=parse_timestamp(data["last_seen"]),
            next_review=parse_timestamp(data["next_review"]),
            correct_count=int(data["correct_count"]),
            incorrect_count=int(data["incorrect_count"]),
        )


@dataclass(frozen=True)
class SpacedRepetitionSettings:
    enabled: bool = True
    review_interval_days: int = 1


@dataclass(frozen=True)
class QuizSettings:
    enabled_pronouns: frozenset = frozenset(PRONOUNS)
    enabled_tenses: frozenset = frozenset({"presentIndicative"})
    regularity_filter: str = "all"
    spaced_repetition: SpacedRepetitionSettings = field(default_factory=SpacedRepetitionSettings)
    irregular_categories: frozenset = frozenset()
    regular_irregular_ratio: Optional[float] = None
    strict_accents: bool = True


@dataclass(frozen=True)
class Question:
    verb: Verb
    pronoun: str
    tense: str
    correct_answer: str

    @property
    def key(self) -> ConjugationKey:
        return ConjugationKey(verb=self.verb.infinitive, pronoun=self.pronoun, tense=self.tense)


@dataclass(frozen=True)
class QuizState:
    current_question: Optional[Question] = None
    user_answer: str = ""
    is_answered: bool = False
    is_correct: Optional[bool] = None
    has_retried: bool = False
    score: int = 0
    total_questions: int = 0

    @property
    def phase(self) -> str:
        if self.current_question is None:
            return "no_question"
        return "answered" if self.is_answered else "unanswered"


@dataclass
class WrongAnswerRecord:
    verb: str
    translation: str
    pronoun: str
    tense: str
    user_answer: str
    correct_answer: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "verb": self.verb,
            "translation": self.translation,
            "pronoun": self.pronoun,
            "tense": self.tense,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WrongAnswerRecord":
        return cls(
            verb=data["verb"],
            translation=data.get("translation", ""),
            pronoun=data["pronoun"],
            tense=data["tense"],
            user_answer=data["user_answer"],
            correct_answer=data["correct_answer"],
            timestamp=parse_timestamp(data["timestamp"]),
        )
