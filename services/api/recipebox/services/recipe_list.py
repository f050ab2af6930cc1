import logging
from typing import Optional

from ..core import clock
from ..infra.kv_store import KeyValueStore, MalformedValue, expanded_key
from ..schemas import Recipe
from .repository import RecipeRepository

logger = logging.getLogger("recipebox.recipes")


def delete_recipe(repo: RecipeRepository, email: str, index: int) -> Optional[Recipe]:
    """Remove the recipe at index; returns it, or None when out of range.

    The history entry at the same position goes with it and the expanded
    marker follows its recipe, so both stay aligned after the shift.
    """
    recipes = repo.load_recipes(email)
    if not 0 <= index < len(recipes):
        return None
    removed = recipes.pop(index)
    repo.save_recipes(email, recipes)

    history = repo.load_history(email)
    if index < len(history):
        history.pop(index)
        repo.save_history(email, history)

    expanded = get_expanded(repo.store, email)
    if expanded == index:
        repo.store.remove(expanded_key(email))
    elif expanded is not None and expanded > index:
        repo.store.set_json(expanded_key(email), expanded - 1)

    logger.info(f"Deleted recipe at index {index} for {email}")
    return removed


def get_expanded(store: KeyValueStore, email: str) -> Optional[int]:
    try:
        value = store.get_json(expanded_key(email))
    except MalformedValue:
        return None
    return value if isinstance(value, int) else None


def toggle_expand(store: KeyValueStore, email: str, index: int) -> Optional[int]:
    """Expand index, or collapse it if it is already the expanded one."""
    current = get_expanded(store, email)
    if current == index:
        store.remove(expanded_key(email))
        return None
    store.set_json(expanded_key(email), index)
    return index


def restore_version(repo: RecipeRepository, email: str, index: int) -> Optional[Recipe]:
    """Pop the latest snapshot for index and make it the current recipe.

    Returns the restored recipe, or None when there is nothing to restore
    or no recipe at index (both aggregates untouched).
    """
    history = repo.load_history(email)
    if index < 0 or index >= len(history) or not history[index]:
        return None

    recipes = repo.load_recipes(email)
    if index >= len(recipes):
        logger.warning(f"History at index {index} has no recipe ({len(recipes)} recipes) for {email}")
        return None

    snapshot = history[index].pop()
    if not snapshot.last_modified:
        snapshot.last_modified = clock.now_stamp()
    recipes[index] = snapshot

    repo.save_recipes(email, recipes)
    repo.save_history(email, history)

    logger.info(f"Restored recipe at index {index} for {email} ({len(history[index])} versions left)")
    return snapshot


def list_versions(repo: RecipeRepository, email: str, index: int) -> list[Recipe]:
    history = repo.load_history(email)
    if index < 0 or index >= len(history) or not history[index]:
        return []
    return history[index]


def version_counts(repo: RecipeRepository, email: str, count: int) -> list[int]:
    history = repo.load_history(email)
    return [len(history[i] or []) if i < len(history) else 0 for i in range(count)]
