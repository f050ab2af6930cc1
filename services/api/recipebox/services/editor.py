"""Recipe editor: an incrementally built draft committed to the repository.

A draft is either a new recipe (recipe_index is None) or a copy of the
recipe at a list position being edited. Drafts live in the store under
`draft-{email}` between requests.
"""

import logging
from typing import Optional

from pydantic import BaseModel, ValidationError

from ..core import clock
from ..infra.kv_store import KeyValueStore, MalformedValue, draft_key
from ..routes import RECIPES_ROUTE
from ..schemas import Recipe, Step
from .repository import RecipeRepository

logger = logging.getLogger("recipebox.editor")


class RecipeNotFound(LookupError):
    def __init__(self, index: int):
        super().__init__(f"No recipe at index {index}")
        self.index = index


class RecipeDraft(BaseModel):
    title: str = ""
    tags: list[str] = []
    ingredients: list[str] = []
    steps: list[Step] = []
    recipe_index: Optional[int] = None
    recipe_id: Optional[str] = None

    def set_title(self, title: str) -> None:
        self.title = title

    def add_tag(self, text: str) -> bool:
        value = (text or "").strip()
        if not value:
            return False
        self.tags.append(value)
        return True

    def add_ingredient(self, text: str) -> bool:
        value = (text or "").strip()
        if not value:
            return False
        self.ingredients.append(value)
        return True

    def add_step(self, description: str, time: Optional[int] = None) -> bool:
        value = (description or "").strip()
        if not value:
            return False
        # negative times are kept as entered
        self.steps.append(Step(description=value, time=time if time is not None else 0))
        return True

    def delete_tag(self, pos: int) -> bool:
        return _delete_at(self.tags, pos)

    def delete_ingredient(self, pos: int) -> bool:
        return _delete_at(self.ingredients, pos)

    def delete_step(self, pos: int) -> bool:
        return _delete_at(self.steps, pos)

    def clear(self) -> None:
        self.title = ""
        self.tags = []
        self.ingredients = []
        self.steps = []
        self.recipe_index = None
        self.recipe_id = None

    @classmethod
    def from_recipe(cls, recipe: Recipe, index: int) -> "RecipeDraft":
        return cls(
            title=recipe.title,
            tags=list(recipe.tags),
            ingredients=list(recipe.ingredients),
            steps=[s.model_copy() for s in recipe.steps],
            recipe_index=index,
            recipe_id=recipe.id,
        )


def _delete_at(items: list, pos: int) -> bool:
    if 0 <= pos < len(items):
        del items[pos]
        return True
    return False


# --- Draft persistence ---

def get_draft(store: KeyValueStore, email: str) -> RecipeDraft:
    key = draft_key(email)
    try:
        data = store.get_json(key)
    except MalformedValue as e:
        logger.warning(f"{e}; starting a fresh draft")
        return RecipeDraft()
    if not data:
        return RecipeDraft()
    try:
        return RecipeDraft.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid draft under {key!r}: {e}; starting a fresh draft")
        return RecipeDraft()


def put_draft(store: KeyValueStore, email: str, draft: RecipeDraft) -> None:
    store.set_json(draft_key(email), draft.model_dump(mode="json"))


def discard_draft(store: KeyValueStore, email: str) -> None:
    store.remove(draft_key(email))


# --- Create ---

def commit_recipe(repo: RecipeRepository, email: str, draft: RecipeDraft) -> Optional[Recipe]:
    """Append the draft as a new recipe and clear it.

    No-op (returns None) when the title is blank.
    """
    if not draft.title.strip():
        return None

    recipe = Recipe(
        id=clock.new_recipe_id(),
        title=draft.title,
        tags=list(draft.tags),
        ingredients=list(draft.ingredients),
        steps=list(draft.steps),
        last_modified=clock.now_stamp(),
    )
    recipes = repo.load_recipes(email)
    recipes.append(recipe)
    repo.save_recipes(email, recipes)
    draft.clear()

    logger.info(f"Created recipe {recipe.id} at index {len(recipes) - 1} for {email}")
    return recipe


# --- Edit ---

def load_draft(repo: RecipeRepository, email: str, index: int) -> RecipeDraft:
    recipes = repo.load_recipes(email)
    if not 0 <= index < len(recipes):
        raise RecipeNotFound(index)
    if recipes[index].id is None:
        # Older data; the draft needs an id to find its recipe again on save
        recipes[index].id = clock.new_recipe_id()
        repo.save_recipes(email, recipes)
    return RecipeDraft.from_recipe(recipes[index], index)


def save_recipe(repo: RecipeRepository, email: str, index: int, draft: RecipeDraft) -> tuple[Recipe, str]:
    """Overwrite the recipe at index with the draft, keeping a snapshot.

    The stored recipe is appended to history[index] first (lastModified
    defaulted to now when missing). Returns the saved recipe and the route
    to show next.

    Raises RecipeNotFound when index is out of range or, for a draft loaded
    from a recipe, when the recipe now at index is a different one.
    """
    recipes = repo.load_recipes(email)
    if not 0 <= index < len(recipes):
        raise RecipeNotFound(index)

    previous = recipes[index]
    if draft.recipe_id is not None and previous.id != draft.recipe_id:
        raise RecipeNotFound(index)
    snapshot = previous.model_copy(deep=True)
    if not snapshot.last_modified:
        snapshot.last_modified = clock.now_stamp()

    history = repo.load_history(email)
    while len(history) <= index:
        history.append(None)
    if history[index] is None:
        history[index] = []
    history[index].append(snapshot)

    updated = Recipe(
        id=previous.id,
        title=draft.title,
        tags=list(draft.tags),
        ingredients=list(draft.ingredients),
        steps=list(draft.steps),
        last_modified=clock.now_stamp(),
    )
    recipes[index] = updated

    repo.save_recipes(email, recipes)
    repo.save_history(email, history)

    logger.info(f"Saved recipe at index {index} for {email} ({len(history[index])} versions)")
    return updated, RECIPES_ROUTE


def commit_draft(repo: RecipeRepository, email: str, draft: RecipeDraft) -> tuple[Optional[Recipe], Optional[int]]:
    """Create or save depending on whether the draft edits an existing recipe.

    Returns (recipe, index); (None, None) when the title is blank.
    """
    if not draft.title.strip():
        return None, None

    if draft.recipe_index is None:
        recipe = commit_recipe(repo, email, draft)
        return recipe, len(repo.load_recipes(email)) - 1

    index = draft.recipe_index
    recipe, _ = save_recipe(repo, email, index, draft)
    draft.clear()
    return recipe, index
