from __future__ import annotations

import json
import logging

from pairmatch.engine.serialize import progress_from_dict, progress_to_dict
from pairmatch.engine.types import Progress

from .content import schema_errors
from .storage import STORAGE_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class ProgressService:
    """Loads and saves the persisted progress snapshot.

    Storage problems never escape this class: a bad or missing snapshot
    loads as defaults, and a failed save is logged and reported as False.
    """

    def __init__(self, store: KeyValueStore, schema: object | None = None, key: str = STORAGE_KEY) -> None:
        self._store = store
        self._schema = schema
        self._key = key

    def load(self) -> Progress:
        try:
            text = self._store.get(self._key)
        except Exception:
            logger.exception("Error loading game data")
            return Progress()
        if text is None:
            return Progress()

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("Stored game data is not valid JSON, using defaults: %s", e)
            return Progress()
        if not isinstance(raw, dict):
            logger.warning("Stored game data is not an object, using defaults")
            return Progress()

        if self._schema is not None:
            errors = schema_errors(raw, self._schema)
            if errors:
                logger.warning("Stored game data failed validation, using defaults:\n%s", "\n".join(errors))
                return Progress()

        return progress_from_dict(raw)

    def save(self, progress: Progress) -> bool:
        try:
            text = json.dumps(progress_to_dict(progress), indent=2)
            self._store.set(self._key, text)
        except Exception:
            logger.exception("Error saving game data")
            return False
        logger.info(
            "Saved progress: %d games, %d achievements",
            progress.stats.games_played,
            len(progress.unlocked),
        )
        return True
