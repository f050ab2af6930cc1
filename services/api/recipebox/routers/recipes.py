"""Recipes API router.

Recipes are addressed by their position in the user's list.

Endpoints:
- GET /api/recipes - List recipes with expand state and version counts
- POST /api/recipes - Create a recipe from a full body
- GET /api/recipes/{index} - Get one recipe
- DELETE /api/recipes/{index} - Delete a recipe
- POST /api/recipes/{index}/toggle - Expand/collapse in the list view
- GET /api/recipes/{index}/versions - Previous versions, oldest first
- POST /api/recipes/{index}/restore - Restore the latest previous version
- POST /api/recipes/{index}/edit - Load a recipe into the editor draft
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..deps import get_current_user, get_repository, get_store
from ..infra.kv_store import KeyValueStore
from ..routes import edit_route
from ..schemas import (
    CommitResult, Recipe, RecipeCreate, RecipeListItem, RecipeListOut,
    RestoreOut, ToggleOut, User, VersionOut,
)
from ..services import recipe_list
from ..services.editor import RecipeDraft, RecipeNotFound, commit_recipe, load_draft, put_draft
from ..services.repository import RecipeRepository

router = APIRouter()
logger = logging.getLogger("recipebox.recipes")


def _get_or_404(repo: RecipeRepository, email: str, index: int) -> Recipe:
    recipes = repo.load_recipes(email)
    if not 0 <= index < len(recipes):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipes[index]


@router.get("/recipes", response_model=RecipeListOut)
def list_recipes(
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
    store: KeyValueStore = Depends(get_store),
):
    """List the user's recipes in stored order."""
    recipes = repo.load_recipes(user.email)
    counts = recipe_list.version_counts(repo, user.email, len(recipes))
    expanded = recipe_list.get_expanded(store, user.email)

    items = [
        RecipeListItem(
            index=i,
            recipe=r,
            expanded=(i == expanded),
            versions=counts[i],
            edit_route=edit_route(i),
        )
        for i, r in enumerate(recipes)
    ]
    return RecipeListOut(items=items, expanded_index=expanded)


@router.post("/recipes", response_model=CommitResult)
def create_recipe(
    payload: RecipeCreate,
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
):
    """Create a recipe in one go. Blank entries are dropped; a blank title is a no-op."""
    draft = RecipeDraft(title=payload.title)
    for tag in payload.tags:
        draft.add_tag(tag)
    for ingredient in payload.ingredients:
        draft.add_ingredient(ingredient)
    for step in payload.steps:
        draft.add_step(step.description, step.time)

    recipe = commit_recipe(repo, user.email, draft)
    if recipe is None:
        return CommitResult(committed=False)
    index = len(repo.load_recipes(user.email)) - 1
    return CommitResult(committed=True, recipe=recipe, index=index)


@router.get("/recipes/{index}", response_model=Recipe)
def get_recipe(
    index: int,
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
):
    return _get_or_404(repo, user.email, index)


@router.delete("/recipes/{index}", status_code=204)
def delete_recipe(
    index: int,
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
):
    removed = recipe_list.delete_recipe(repo, user.email, index)
    if removed is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return Response(status_code=204)


@router.post("/recipes/{index}/toggle", response_model=ToggleOut)
def toggle_recipe(
    index: int,
    user: User = Depends(get_current_user),
    store: KeyValueStore = Depends(get_store),
):
    return ToggleOut(expanded_index=recipe_list.toggle_expand(store, user.email, index))


@router.get("/recipes/{index}/versions", response_model=list[VersionOut])
def list_recipe_versions(
    index: int,
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
):
    versions = recipe_list.list_versions(repo, user.email, index)
    return [
        VersionOut(version=i + 1, last_modified=v.last_modified or "Unknown", recipe=v)
        for i, v in enumerate(versions)
    ]


@router.post("/recipes/{index}/restore", response_model=RestoreOut)
def restore_recipe_version(
    index: int,
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
):
    """Restore the most recent previous version; no-op when there is none."""
    restored = recipe_list.restore_version(repo, user.email, index)
    left = len(recipe_list.list_versions(repo, user.email, index))
    if restored is None:
        current = _get_or_404(repo, user.email, index)
        return RestoreOut(restored=False, recipe=current, versions=left)
    return RestoreOut(restored=True, recipe=restored, versions=left)


@router.post("/recipes/{index}/edit", response_model=RecipeDraft)
def edit_recipe(
    index: int,
    user: User = Depends(get_current_user),
    repo: RecipeRepository = Depends(get_repository),
    store: KeyValueStore = Depends(get_store),
):
    """Start editing: the recipe at index becomes the user's draft."""
    try:
        draft = load_draft(repo, user.email, index)
    except RecipeNotFound:
        raise HTTPException(status_code=404, detail="Recipe not found")
    put_draft(store, user.email, draft)
    return draft
