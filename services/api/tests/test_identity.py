import json

import pytest

from recipebox.schemas import ExternalIdentity, Recipe
from recipebox.services.identity import (
    MISSING_CREDENTIALS, LoginError, local_login, logout, resolve_user,
)


class RecordingProvider:
    def __init__(self):
        self.signed_out = []

    def sign_out(self, email):
        self.signed_out.append(email)


def test_nobody_logged_in(store):
    assert resolve_user(store, None) is None


def test_external_session_is_materialized(store, mock_redis):
    ext = ExternalIdentity(email="g@x.com", name="Gil", image="http://img", provider="google")
    user = resolve_user(store, ext)
    assert user.email == "g@x.com"
    assert json.loads(mock_redis.get("user")) == {"email": "g@x.com", "name": "Gil", "image": "http://img"}


def test_stored_user_wins_over_external(store):
    local_login(store, "local@x.com", "pw")
    user = resolve_user(store, ExternalIdentity(email="g@x.com"))
    assert user.email == "local@x.com"


@pytest.mark.parametrize("email,password", [("", "pw"), ("a@x.com", ""), ("  ", "pw"), ("a@x.com", "   ")])
def test_local_login_requires_both_fields(store, email, password):
    with pytest.raises(LoginError) as exc:
        local_login(store, email, password)
    assert str(exc.value) == MISSING_CREDENTIALS
    assert resolve_user(store) is None


def test_local_login_accepts_any_pair(store, mock_redis):
    user = local_login(store, "a@x.com", "anything")
    assert user.email == "a@x.com"
    assert json.loads(mock_redis.get("user")) == {"email": "a@x.com", "password": "anything"}


def test_malformed_stored_user_is_ignored(store, mock_redis):
    mock_redis.set("user", "not-json")
    assert resolve_user(store) is None


def test_logout_removes_user_and_data(store, repo, mock_redis):
    user = local_login(store, "a@x.com", "pw")
    repo.save_recipes("a@x.com", [Recipe(title="Soup")])
    repo.save_history("a@x.com", [[Recipe(title="Soup0")]])
    repo.save_recipes("b@x.com", [Recipe(title="Other")])
    provider = RecordingProvider()

    logout(store, user, provider)

    assert mock_redis.get("user") is None
    assert mock_redis.get("recipes-a@x.com") is None
    assert mock_redis.get("previousVersions-a@x.com") is None
    assert mock_redis.get("recipes-b@x.com") is not None
    assert provider.signed_out == ["a@x.com"]
