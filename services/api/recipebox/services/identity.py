"""Who is using the store.

Resolution order:
1. The stored `user` record
2. An external (OAuth) session, materialized into a stored `user` record
3. Nobody: the caller sends the client to the login route

The local email/password path accepts any pair with no blank field. Nothing is
verified against anything.
"""

import logging
from typing import Optional, Protocol

from pydantic import ValidationError

from ..infra.kv_store import KeyValueStore, MalformedValue, USER_KEY, draft_key, expanded_key
from ..schemas import ExternalIdentity, User
from .repository import RecipeRepository

logger = logging.getLogger("recipebox.auth")

MISSING_CREDENTIALS = "Email and password are required"


class LoginError(ValueError):
    pass


class IdentityProvider(Protocol):
    def sign_out(self, email: str) -> None: ...


class ExternalSessionProvider:
    """Stand-in for the upstream OAuth provider; only sign-out is ours to call."""

    def sign_out(self, email: str) -> None:
        logger.info(f"Ending external session for {email}")


def get_stored_user(store: KeyValueStore) -> Optional[User]:
    try:
        data = store.get_json(USER_KEY)
    except MalformedValue as e:
        logger.warning(f"{e}; ignoring stored user")
        return None
    if not isinstance(data, dict):
        return None
    try:
        return User.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid stored user: {e}")
        return None


def _store_user(store: KeyValueStore, user: User) -> None:
    store.set_json(USER_KEY, user.model_dump(mode="json", exclude_none=True))


def resolve_user(store: KeyValueStore, external: Optional[ExternalIdentity] = None) -> Optional[User]:
    user = get_stored_user(store)
    if user:
        return user

    if external and external.email:
        user = User(email=external.email, name=external.name or "", image=external.image or "")
        _store_user(store, user)
        logger.info(f"Materialized user {user.email} from {external.provider or 'external'} session")
        return user

    return None


def local_login(store: KeyValueStore, email: str, password: str) -> User:
    email = (email or "").strip()
    # password is stored as entered, but blank-only does not count
    if not email or not (password or "").strip():
        raise LoginError(MISSING_CREDENTIALS)

    user = User(email=email, password=password)
    _store_user(store, user)
    logger.warning(f"Local login for {email} accepted without credential verification")
    return user


def logout(store: KeyValueStore, user: User, provider: IdentityProvider) -> None:
    """Forget the user and everything stored for them, then end the external session."""
    store.remove(USER_KEY)
    RecipeRepository(store).clear(user.email)
    store.remove(draft_key(user.email))
    store.remove(expanded_key(user.email))
    provider.sign_out(user.email)
    logger.info(f"Logged out {user.email}")
