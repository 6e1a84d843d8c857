import json

from marketplace.client.bookmarks import PICKED_DEVELOPERS, PICKED_PROJECTS, PickStore


def test_empty_store_returns_empty_list(tmp_path):
    store = PickStore(tmp_path / "picks.json")
    assert store.get(PICKED_PROJECTS) == []


def test_picking_twice_stores_the_id_once(tmp_path):
    store = PickStore(tmp_path / "picks.json")
    assert store.add(PICKED_PROJECTS, "p1") is True
    assert store.add(PICKED_PROJECTS, "p1") is False
    assert store.get(PICKED_PROJECTS) == ["p1"]


def test_remove_leaves_other_ids(tmp_path):
    store = PickStore(tmp_path / "picks.json")
    for item_id in ("p1", "p2", "p3"):
        store.add(PICKED_PROJECTS, item_id)
    store.add(PICKED_DEVELOPERS, "d1")

    assert store.remove(PICKED_PROJECTS, "p2") is True
    assert store.remove(PICKED_PROJECTS, "p2") is False
    assert store.get(PICKED_PROJECTS) == ["p1", "p3"]
    assert store.get(PICKED_DEVELOPERS) == ["d1"]


def test_store_persists_under_browser_keys(tmp_path):
    path = tmp_path / "picks.json"
    PickStore(path).add(PICKED_DEVELOPERS, "d9")

    assert json.loads(path.read_text()) == {"pickedDevelopers": ["d9"]}
    assert PickStore(path).get(PICKED_DEVELOPERS) == ["d9"]


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "picks.json"
    path.write_text("{not json")
    store = PickStore(path)
    assert store.get(PICKED_PROJECTS) == []
    assert store.add(PICKED_PROJECTS, "p1")
    assert store.get(PICKED_PROJECTS) == ["p1"]


def test_non_list_value_reads_as_empty(tmp_path):
    path = tmp_path / "picks.json"
    path.write_text(json.dumps({"pickedProjects": "p1"}))
    assert PickStore(path).get(PICKED_PROJECTS) == []


def test_resolve_filters_fresh_list(tmp_path):
    store = PickStore(tmp_path / "picks.json")
    store.add(PICKED_PROJECTS, "p2")
    store.add(PICKED_PROJECTS, "deleted-on-server")
    fresh = [{"id": "p1"}, {"id": "p2"}]
    assert store.resolve(PICKED_PROJECTS, fresh) == [{"id": "p2"}]
