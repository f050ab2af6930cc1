import json

from recipebox.infra.kv_store import KeyValueStore
from recipebox.schemas import Recipe, Step


def _recipes():
    return [
        Recipe(id="r1", title="Soup", tags=["warm"], ingredients=["Water"],
               steps=[Step(description="Boil", time=60)], last_modified="2024-01-01 10:00:00"),
        Recipe(title="Toast"),
    ]


def test_round_trip_recipes(repo):
    recipes = _recipes()
    repo.save_recipes("a@x.com", recipes)
    assert repo.load_recipes("a@x.com") == recipes


def test_stored_layout_uses_browser_keys(repo, mock_redis):
    repo.save_recipes("a@x.com", _recipes()[:1])
    raw = json.loads(mock_redis.get("recipes-a@x.com"))
    assert raw[0]["lastModified"] == "2024-01-01 10:00:00"
    assert raw[0]["steps"] == [{"description": "Boil", "time": 60}]


def test_absent_is_empty(repo):
    assert repo.load_recipes("nobody@x.com") == []
    assert repo.load_history("nobody@x.com") == []


def test_malformed_json_tolerated_as_empty(repo, mock_redis):
    mock_redis.set("recipes-a@x.com", "{not json")
    mock_redis.set("previousVersions-a@x.com", '{"a": 1}')
    assert repo.load_recipes("a@x.com") == []
    assert repo.load_history("a@x.com") == []


def test_legacy_recipe_without_lastmodified(repo, mock_redis):
    mock_redis.set("recipes-a@x.com", json.dumps([
        {"title": "Soup", "tags": [], "ingredients": ["Water"], "steps": [{"description": "Boil", "time": 60}]}
    ]))
    [recipe] = repo.load_recipes("a@x.com")
    assert recipe.last_modified is None
    assert recipe.id is None


def test_sparse_history_round_trip(repo, mock_redis):
    history = [None, [Recipe(title="v1")]]
    repo.save_history("a@x.com", history)
    assert json.loads(mock_redis.get("previousVersions-a@x.com"))[0] is None
    assert repo.load_history("a@x.com") == history


def test_users_are_isolated(repo):
    repo.save_recipes("a@x.com", [Recipe(title="A")])
    repo.save_recipes("b@x.com", [Recipe(title="B")])
    assert [r.title for r in repo.load_recipes("a@x.com")] == ["A"]
    assert [r.title for r in repo.load_recipes("b@x.com")] == ["B"]


def test_clear_removes_both_aggregates(repo, mock_redis):
    repo.save_recipes("a@x.com", [Recipe(title="A")])
    repo.save_history("a@x.com", [[Recipe(title="A0")]])
    repo.clear("a@x.com")
    assert mock_redis.get("recipes-a@x.com") is None
    assert mock_redis.get("previousVersions-a@x.com") is None


def test_key_prefix(mock_redis):
    store = KeyValueStore(prefix="tab1:")
    store.set("user", "{}")
    assert mock_redis.get("tab1:user") == "{}"
    assert store.get("user") == "{}"
    store.remove("user")
    assert mock_redis.get("tab1:user") is None
