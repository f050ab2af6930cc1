"""Authentication API router.

Endpoints:
- GET /api/auth/providers - External sign-in options
- GET /api/auth/me - Current user (401 + redirect when none)
- POST /api/auth/login - Local email/password login
- POST /api/auth/logout - Forget the user and their data
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_current_user, get_identity_provider, get_store
from ..infra.kv_store import KeyValueStore
from ..routes import HOME_ROUTE, RECIPES_ROUTE
from ..schemas import LoginRequest, ProviderOut, User, UserOut
from ..services.identity import IdentityProvider, LoginError, local_login, logout
from ..services.timers import registry
from ..settings import settings

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger("recipebox.auth")


@router.get("/providers", response_model=list[ProviderOut])
def list_providers():
    return [
        ProviderOut(name=name, sign_in_url=f"/api/auth/signin/{name}")
        for name in settings.oauth_providers
    ]


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return UserOut(email=user.email, name=user.name, image=user.image)


@router.post("/login")
def login(payload: LoginRequest, store: KeyValueStore = Depends(get_store)):
    try:
        user = local_login(store, payload.email, payload.password)
    except LoginError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"user": UserOut(email=user.email), "redirect": RECIPES_ROUTE}


@router.post("/logout")
def logout_user(
    user: User = Depends(get_current_user),
    store: KeyValueStore = Depends(get_store),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    registry.discard(user.email)
    logout(store, user, provider)
    return {"ok": True, "redirect": HOME_ROUTE}
