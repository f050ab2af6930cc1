"""Pydantic schemas for RecipeBox API.

Stored shapes:
- User (the `user` key)
- Recipe with nested steps (`recipes-{email}`, `previousVersions-{email}`)

Request/response models for the auth, recipe, draft and timer routers.
"""

from typing import Optional

from pydantic import BaseModel, Field


# --- Stored models ---

class Step(BaseModel):
    description: str
    time: int = 0  # seconds, stored as entered


class Recipe(BaseModel):
    id: Optional[str] = None
    title: str
    tags: list[str] = []
    ingredients: list[str] = []
    steps: list[Step] = []
    last_modified: Optional[str] = Field(None, alias="lastModified")

    class Config:
        populate_by_name = True

    def to_store(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class User(BaseModel):
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    password: Optional[str] = None  # local login only, never verified


class ExternalIdentity(BaseModel):
    """Identity handed over by the upstream OAuth session."""
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    provider: Optional[str] = None


# --- Auth ---

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserOut(BaseModel):
    email: str
    name: Optional[str] = None
    image: Optional[str] = None


class ProviderOut(BaseModel):
    name: str
    sign_in_url: str


# --- Recipes ---

class RecipeCreate(BaseModel):
    title: str = ""
    tags: list[str] = []
    ingredients: list[str] = []
    steps: list[Step] = []


class RecipeListItem(BaseModel):
    index: int
    recipe: Recipe
    expanded: bool = False
    versions: int = 0
    edit_route: str


class RecipeListOut(BaseModel):
    items: list[RecipeListItem]
    expanded_index: Optional[int] = None


class VersionOut(BaseModel):
    version: int  # 1-based, oldest first
    last_modified: str
    recipe: Recipe


class ToggleOut(BaseModel):
    expanded_index: Optional[int] = None


class RestoreOut(BaseModel):
    restored: bool
    recipe: Recipe
    versions: int


# --- Draft ---

class TitleUpdate(BaseModel):
    title: str = ""


class TextItem(BaseModel):
    value: str = ""


class StepCreate(BaseModel):
    description: str = ""
    time: Optional[int] = None


class CommitResult(BaseModel):
    committed: bool
    recipe: Optional[Recipe] = None
    index: Optional[int] = None
    redirect: Optional[str] = None


# --- Timer ---

class TimerStart(BaseModel):
    seconds: int


class TimerOut(BaseModel):
    active: bool
    remaining: Optional[int] = None
