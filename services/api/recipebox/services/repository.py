"""Recipe list and version history persistence for one user.

Both aggregates are read and written whole: every mutation loads the
full list, changes it in memory and writes the full list back. Last
writer wins.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from ..infra.kv_store import KeyValueStore, MalformedValue, recipes_key, history_key
from ..schemas import Recipe

logger = logging.getLogger("recipebox.repository")

History = list[Optional[list[Recipe]]]


class RecipeRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def _load_list(self, key: str) -> list:
        try:
            data = self.store.get_json(key)
        except MalformedValue as e:
            logger.warning(f"{e}; treating as empty")
            return []
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(f"Expected a list under {key!r}, got {type(data).__name__}; treating as empty")
            return []
        return data

    def load_recipes(self, email: str) -> list[Recipe]:
        key = recipes_key(email)
        try:
            return [Recipe.model_validate(r) for r in self._load_list(key)]
        except ValidationError as e:
            logger.warning(f"Invalid recipe under {key!r}: {e}; treating as empty")
            return []

    def save_recipes(self, email: str, recipes: list[Recipe]) -> None:
        self.store.set_json(recipes_key(email), [r.to_store() for r in recipes])

    def load_history(self, email: str) -> History:
        key = history_key(email)
        history: History = []
        try:
            for entry in self._load_list(key):
                if entry is None:
                    history.append(None)
                else:
                    history.append([Recipe.model_validate(r) for r in entry])
        except (ValidationError, TypeError) as e:
            logger.warning(f"Invalid history under {key!r}: {e}; treating as empty")
            return []
        return history

    def save_history(self, email: str, history: History) -> None:
        payload = [
            None if entry is None else [r.to_store() for r in entry]
            for entry in history
        ]
        self.store.set_json(history_key(email), payload)

    def clear(self, email: str) -> None:
        self.store.remove(recipes_key(email))
        self.store.remove(history_key(email))
