"""Quiz settings: defaults, partial-merge updates and persistence."""
import dataclasses
import json
import logging
import sqlite3

from portugues_pratico.db import KeyValueStore
from portugues_pratico.models import (
    PRONOUNS, TENSES, REGULARITY_FILTERS, QuizSettings, SpacedRepetitionSettings,
)

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"

_SET_FIELDS = ("enabled_pronouns", "enabled_tenses", "irregular_categories")


def default_settings() -> QuizSettings:
    return QuizSettings()


def _validate(settings: QuizSettings) -> QuizSettings:
    if settings.regularity_filter not in REGULARITY_FILTERS:
        raise ValueError(f"Unknown regularity filter: {settings.regularity_filter!r}")
    if settings.spaced_repetition.review_interval_days < 0:
        raise ValueError("review_interval_days must not be negative")
    ratio = settings.regular_irregular_ratio
    if ratio is not None and not 0.0 <= ratio <= 1.0:
        raise ValueError("regular_irregular_ratio must be between 0 and 1")
    return settings


def update_settings(settings: QuizSettings, **changes) -> QuizSettings:
    """Return a new snapshot with ``changes`` merged over ``settings``.

    ``spaced_repetition`` may be given as a dict of partial changes, e.g.
    ``update_settings(s, spaced_repetition={"review_interval_days": 3})``.
    """
    if "spaced_repetition" in changes and isinstance(changes["spaced_repetition"], dict):
        changes["spaced_repetition"] = dataclasses.replace(
            settings.spaced_repetition, **changes["spaced_repetition"]
        )
    for name in _SET_FIELDS:
        if name in changes:
            changes[name] = frozenset(changes[name])
    return _validate(dataclasses.replace(settings, **changes))


def _order(values, canonical: list) -> list:
    known = [v for v in canonical if v in values]
    return known + sorted(v for v in values if v not in canonical)


def get_available_tenses(settings: QuizSettings) -> list:
    return _order(settings.enabled_tenses, TENSES)


def get_available_pronouns(settings: QuizSettings) -> list:
    return _order(settings.enabled_pronouns, PRONOUNS)


def settings_to_dict(settings: QuizSettings) -> dict:
    return {
        "enabled_pronouns": get_available_pronouns(settings),
        "enabled_tenses": get_available_tenses(settings),
        "regularity_filter": settings.regularity_filter,
        "spaced_repetition": {
            "enabled": settings.spaced_repetition.enabled,
            "review_interval_days": settings.spaced_repetition.review_interval_days,
        },
        "irregular_categories": sorted(settings.irregular_categories),
        "regular_irregular_ratio": settings.regular_irregular_ratio,
        "strict_accents": settings.strict_accents,
    }


def settings_from_dict(data: dict) -> QuizSettings:
    sr = data.get("spaced_repetition", {})
    changes = {k: v for k, v in data.items() if k != "spaced_repetition"}
    return update_settings(
        QuizSettings(spaced_repetition=SpacedRepetitionSettings(**sr)), **changes
    )


def load_settings(store: KeyValueStore) -> QuizSettings:
    """Load persisted settings, falling back to defaults on any failure."""
    try:
        stored = store.get(SETTINGS_KEY)
        if not stored:
            return default_settings()
        return settings_from_dict(json.loads(stored))
    except (sqlite3.Error, ValueError, KeyError, TypeError) as e:
        logger.error("Failed to load settings: %s", e)
        return default_settings()


def save_settings(store: KeyValueStore, settings: QuizSettings) -> None:
    try:
        store.set(SETTINGS_KEY, json.dumps(settings_to_dict(settings)))
    except sqlite3.Error as e:
        logger.error("Failed to save settings: %s", e)
