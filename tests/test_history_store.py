import json
from itertools import count

import pytest

from anchorxpath.errors import HistoryStoreError
from anchorxpath.history_store import HistoryStore


def _clock():
    return count(1000).__next__


def test_save_and_list_newest_first(tmp_path) -> None:
    store = HistoryStore(base_dir=tmp_path, clock=_clock())

    store.save_item("//*[@id='product-title']", "https://shop.example.com/p/1", inner_text="Acme Widget")
    saved = store.save_item("//main", "https://shop.example.com/p/2", icon_url="https://shop.example.com/favicon.ico")

    items = store.get_items()
    assert [item.selector for item in items] == ["//main", "//*[@id='product-title']"]
    assert items[0] == saved
    assert items[0].icon_url == "https://shop.example.com/favicon.ico"
    assert items[1].inner_text == "Acme Widget"
    assert (tmp_path / "history.db").exists()


def test_history_is_capped_at_the_newest_items(tmp_path) -> None:
    store = HistoryStore(base_dir=tmp_path, clock=_clock())

    for index in range(55):
        store.save_item(f"//li[{index + 1}]", "https://shop.example.com")

    items = store.get_items()
    assert len(items) == 50
    assert items[0].selector == "//li[55]"
    assert items[-1].selector == "//li[6]"


def test_remove_and_clear(tmp_path) -> None:
    store = HistoryStore(base_dir=tmp_path, clock=_clock())
    first = store.save_item("//main", "https://a.example.com")
    store.save_item("//footer", "https://b.example.com")

    store.remove_item(first.timestamp)
    assert [item.selector for item in store.get_items()] == ["//footer"]

    store.clear()
    assert store.get_items() == []


def test_json_fallback_when_sqlite_is_unavailable(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(HistoryStore, "_initialize_sqlite", lambda self: False)
    store = HistoryStore(base_dir=tmp_path, clock=_clock(), limit=2)

    store.save_item("//main", "https://a.example.com")
    store.save_item("//nav", "https://a.example.com")
    store.save_item("//footer", "https://a.example.com")

    assert [item.selector for item in store.get_items()] == ["//footer", "//nav"]
    payload = json.loads((tmp_path / "history.json").read_text(encoding="utf-8"))
    assert [raw["selector"] for raw in payload["history"]] == ["//footer", "//nav"]

    store.remove_item(1002)
    assert [item.selector for item in store.get_items()] == ["//nav"]


def test_corrupted_json_history_raises(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(HistoryStore, "_initialize_sqlite", lambda self: False)
    (tmp_path / "history.json").write_text("{not json", encoding="utf-8")
    store = HistoryStore(base_dir=tmp_path)

    with pytest.raises(HistoryStoreError):
        store.get_items()


def test_json_history_with_an_unexpected_layout_raises(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(HistoryStore, "_initialize_sqlite", lambda self: False)
    history_file = tmp_path / "history.json"
    history_file.write_text("[]", encoding="utf-8")
    store = HistoryStore(base_dir=tmp_path)

    with pytest.raises(HistoryStoreError):
        store.get_items()

    history_file.write_text(json.dumps({"history": ["//main"]}), encoding="utf-8")
    with pytest.raises(HistoryStoreError):
        store.get_items()

    history_file.write_text(json.dumps({"history": [{"timestamp": "soon"}]}), encoding="utf-8")
    with pytest.raises(HistoryStoreError):
        store.save_item("//main", "https://a.example.com")
