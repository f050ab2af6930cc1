from recipebox.core import clock
from recipebox.schemas import Recipe
from recipebox.services.recipe_list import (
    delete_recipe, get_expanded, list_versions, restore_version, toggle_expand, version_counts,
)

EMAIL = "a@x.com"


def _seed(repo, titles):
    repo.save_recipes(EMAIL, [Recipe(title=t) for t in titles])


def test_delete_removes_exactly_index(repo):
    _seed(repo, ["A", "B", "C", "D"])
    removed = delete_recipe(repo, EMAIL, 1)
    assert removed.title == "B"
    assert [r.title for r in repo.load_recipes(EMAIL)] == ["A", "C", "D"]


def test_delete_out_of_range(repo):
    _seed(repo, ["A"])
    assert delete_recipe(repo, EMAIL, 3) is None
    assert len(repo.load_recipes(EMAIL)) == 1


def test_delete_keeps_histories_aligned(repo):
    _seed(repo, ["A", "B", "C"])
    repo.save_history(EMAIL, [[Recipe(title="A0")], None, [Recipe(title="C0")]])

    delete_recipe(repo, EMAIL, 0)

    history = repo.load_history(EMAIL)
    assert history[0] is None
    assert [r.title for r in history[1]] == ["C0"]


def test_restore_pops_last_snapshot(repo):
    _seed(repo, ["Soup v3"])
    repo.save_history(EMAIL, [[
        Recipe(title="Soup v1", last_modified="d1"),
        Recipe(title="Soup v2", last_modified="d2"),
    ]])

    restored = restore_version(repo, EMAIL, 0)

    assert restored.title == "Soup v2"
    assert repo.load_recipes(EMAIL)[0].title == "Soup v2"
    assert repo.load_recipes(EMAIL)[0].last_modified == "d2"
    assert [r.title for r in repo.load_history(EMAIL)[0]] == ["Soup v1"]


def test_restore_defaults_missing_timestamp(repo, monkeypatch):
    monkeypatch.setattr(clock, "now_stamp", lambda: "now")
    _seed(repo, ["B"])
    repo.save_history(EMAIL, [[Recipe(title="A")]])
    assert restore_version(repo, EMAIL, 0).last_modified == "now"


def test_restore_without_history_is_noop(repo, mock_redis):
    _seed(repo, ["A"])
    repo.save_history(EMAIL, [[]])
    before = (mock_redis.get("recipes-a@x.com"), mock_redis.get("previousVersions-a@x.com"))

    assert restore_version(repo, EMAIL, 0) is None
    assert restore_version(repo, EMAIL, 7) is None

    after = (mock_redis.get("recipes-a@x.com"), mock_redis.get("previousVersions-a@x.com"))
    assert before == after


def test_toggle_expand_single_slot(store):
    assert toggle_expand(store, EMAIL, 0) == 0
    assert toggle_expand(store, EMAIL, 2) == 2
    assert toggle_expand(store, EMAIL, 2) is None
    assert toggle_expand(store, EMAIL, 1) == 1


def test_versions_listing(repo):
    _seed(repo, ["A", "B"])
    repo.save_history(EMAIL, [None, [Recipe(title="B0"), Recipe(title="B1")]])
    assert list_versions(repo, EMAIL, 0) == []
    assert [r.title for r in list_versions(repo, EMAIL, 1)] == ["B0", "B1"]
    assert version_counts(repo, EMAIL, 3) == [0, 2, 0]


def test_restore_with_history_past_last_recipe_is_noop(repo, mock_redis):
    _seed(repo, ["A"])
    repo.save_history(EMAIL, [None, None, [Recipe(title="X")]])
    before = (mock_redis.get("recipes-a@x.com"), mock_redis.get("previousVersions-a@x.com"))

    assert restore_version(repo, EMAIL, 2) is None

    after = (mock_redis.get("recipes-a@x.com"), mock_redis.get("previousVersions-a@x.com"))
    assert before == after
    assert [r.title for r in repo.load_recipes(EMAIL)] == ["A"]


def test_delete_shifts_expanded_marker(repo, store):
    _seed(repo, ["A", "B", "C"])
    toggle_expand(store, EMAIL, 2)

    delete_recipe(repo, EMAIL, 0)

    assert get_expanded(store, EMAIL) == 1


def test_delete_expanded_recipe_collapses(repo, store):
    _seed(repo, ["A", "B", "C"])
    toggle_expand(store, EMAIL, 1)

    delete_recipe(repo, EMAIL, 1)
    assert get_expanded(store, EMAIL) is None

    toggle_expand(store, EMAIL, 0)
    delete_recipe(repo, EMAIL, 1)
    assert get_expanded(store, EMAIL) == 0
