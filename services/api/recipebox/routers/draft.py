"""Recipe editor API router.

The draft is built one field at a time. Blank titles, tags, ingredients
and step descriptions are ignored and the unchanged draft is returned.

Endpoints:
- GET /api/draft, DELETE /api/draft
- PUT /api/draft/title
- POST /api/draft/{tags,ingredients,steps}
- DELETE /api/draft/{tags,ingredients,steps}/{pos}
- POST /api/draft/commit - Create, or save over the recipe being edited
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_current_user, get_repository, get_store
from ..infra.kv_store import KeyValueStore
from ..routes import RECIPES_ROUTE
from ..schemas import CommitResult, StepCreate, TextItem, TitleUpdate, User
from ..services.editor import (
    RecipeDraft, RecipeNotFound, commit_draft, discard_draft, get_draft, put_draft,
)
from ..services.repository import RecipeRepository

router = APIRouter(prefix="/draft", tags=["draft"])
logger = logging.getLogger("recipebox.editor")


@router.get("", response_model=RecipeDraft)
def read_draft(user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    return get_draft(store, user.email)


@router.delete("", response_model=RecipeDraft)
def reset_draft(user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    discard_draft(store, user.email)
    return RecipeDraft()


@router.put("/title", response_model=RecipeDraft)
def set_title(body: TitleUpdate, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    draft.set_title(body.title)
    put_draft(store, user.email, draft)
    return draft


@router.post("/tags", response_model=RecipeDraft)
def add_tag(body: TextItem, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    if draft.add_tag(body.value):
        put_draft(store, user.email, draft)
    return draft


@router.delete("/tags/{pos}", response_model=RecipeDraft)
def delete_tag(pos: int, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    if draft.delete_tag(pos):
        put_draft(store, user.email, draft)
    return draft


@router.post("/ingredients", response_model=RecipeDraft)
def add_ingredient(body: TextItem, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    if draft.add_ingredient(body.value):
        put_draft(store, user.email, draft)
    return draft


@router.delete("/ingredients/{pos}", response_model=RecipeDraft)
def delete_ingredient(pos: int, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    if draft.delete_ingredient(pos):
        put_draft(store, user.email, draft)
    return draft


@router.post("/steps", response_model=RecipeDraft)
def add_step(body: StepCreate, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    if draft.add_step(body.description, body.time):
        put_draft(store, user.email, draft)
    return draft


@router.delete("/steps/{pos}", response_model=RecipeDraft)
def delete_step(pos: int, user: User = Depends(get_current_user), store: KeyValueStore = Depends(get_store)):
    draft = get_draft(store, user.email)
    if draft.delete_step(pos):
        put_draft(store, user.email, draft)
    return draft


@router.post("/commit", response_model=CommitResult)
def commit(
    user: User = Depends(get_current_user),
    store: KeyValueStore = Depends(get_store),
    repo: RecipeRepository = Depends(get_repository),
):
    draft = get_draft(store, user.email)
    try:
        recipe, index = commit_draft(repo, user.email, draft)
    except RecipeNotFound:
        # The recipe being edited is gone; drop the stale draft
        discard_draft(store, user.email)
        raise HTTPException(status_code=404, detail="Recipe not found")

    if recipe is None:
        return CommitResult(committed=False)

    discard_draft(store, user.email)
    return CommitResult(committed=True, recipe=recipe, index=index, redirect=RECIPES_ROUTE)
