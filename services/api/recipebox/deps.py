"""FastAPI dependencies for RecipeBox API.

Provides:
- Key-value store and repository
- Current user resolution (stored user → external session headers → 401)
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException

from .infra.kv_store import KeyValueStore
from .routes import HOME_ROUTE
from .schemas import ExternalIdentity, User
from .services.identity import ExternalSessionProvider, IdentityProvider, resolve_user
from .services.repository import RecipeRepository


def get_store() -> KeyValueStore:
    return KeyValueStore()


def get_repository(store: KeyValueStore = Depends(get_store)) -> RecipeRepository:
    return RecipeRepository(store)


def get_identity_provider() -> IdentityProvider:
    return ExternalSessionProvider()


def get_external_identity(
    x_auth_email: Optional[str] = Header(None, alias="X-Auth-Email"),
    x_auth_name: Optional[str] = Header(None, alias="X-Auth-Name"),
    x_auth_image: Optional[str] = Header(None, alias="X-Auth-Image"),
    x_auth_provider: Optional[str] = Header(None, alias="X-Auth-Provider"),
) -> Optional[ExternalIdentity]:
    """Identity forwarded by the upstream OAuth session, if any."""
    if not x_auth_email:
        return None
    return ExternalIdentity(
        email=x_auth_email,
        name=x_auth_name,
        image=x_auth_image,
        provider=x_auth_provider,
    )


def get_current_user(
    store: KeyValueStore = Depends(get_store),
    external: Optional[ExternalIdentity] = Depends(get_external_identity),
) -> User:
    """Resolve the current user or send the client to the login route.

    Raises:
        HTTPException 401 with a redirect hint when nobody is logged in
    """
    user = resolve_user(store, external)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"message": "Not logged in", "redirect": HOME_ROUTE},
        )
    return user
