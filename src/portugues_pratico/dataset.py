"""Loading the read-only verb dataset."""
import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from portugues_pratico.models import Verb, REGULARITY_FILTERS

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"
DEFAULT_VERBS_PATH = CONTENT_DIR / "verbs.json"


class DatasetError(Exception):
    """Raised when the verb dataset cannot be read or is malformed."""


def read_dataset_file(file_path: str) -> list:
    path = Path(file_path)
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DatasetError(f"Cannot read verb dataset {file_path}: {e}") from e
    try:
        if suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DatasetError(f"Cannot parse verb dataset {file_path}: {e}") from e
    # Accept either a bare list or {"verbs": [...]}
    if isinstance(data, dict):
        data = data.get("verbs")
    if not isinstance(data, list):
        raise DatasetError(f"Verb dataset {file_path} must contain a list of verbs")
    return data


def parse_verb(raw: dict) -> Verb:
    try:
        regularity = raw["regularity"]
        if regularity not in REGULARITY_FILTERS[1:]:
            raise DatasetError(f"Unknown regularity {regularity!r} for {raw.get('infinitive')}")
        conjugations = {
            tense: {pronoun: str(form) for pronoun, form in forms.items()}
            for tense, forms in raw["conjugations"].items()
        }
        return Verb(
            infinitive=raw["infinitive"],
            translation=raw.get("translation", ""),
            regularity=regularity,
            conjugations=conjugations,
            irregular_category=tuple(raw.get("irregular_category") or ()),
        )
    except (KeyError, AttributeError, TypeError) as e:
        raise DatasetError(f"Malformed verb entry {raw!r}: {e}") from e


def load_verbs(file_path: Optional[str] = None) -> list[Verb]:
    """Load and validate every verb in a JSON or YAML dataset file."""
    path = file_path or str(DEFAULT_VERBS_PATH)
    verbs = [parse_verb(raw) for raw in read_dataset_file(path)]
    logger.info("Loaded %d verbs from %s", len(verbs), path)
    return verbs


class VerbDataset:
    """Read-only collection of verbs, loaded once."""

    def __init__(self, verbs: list[Verb]):
        self._verbs = tuple(verbs)

    @classmethod
    def from_file(cls, file_path: Optional[str] = None) -> "VerbDataset":
        return cls(load_verbs(file_path))

    def list(self) -> list[Verb]:
        return list(self._verbs)

    def get(self, infinitive: str) -> Optional[Verb]:
        for verb in self._verbs:
            if verb.infinitive == infinitive:
                return verb
        return None

    def __len__(self) -> int:
        return len(self._verbs)
