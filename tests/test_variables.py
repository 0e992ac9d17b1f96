from apiline.workflows import VariableStore


def test_set_overwrites_and_get_returns_none_for_missing():
    store = VariableStore({"a": "1"})
    store.set("a", "2")
    store.set("b", "3")

    assert store.get("a") == "2"
    assert store.get("b") == "3"
    assert store.get("missing") is None


def test_merge_preserving_existing_only_adds_new_names():
    store = VariableStore({"token": "runtime", "empty": ""})
    store.merge_preserving_existing({"token": "from-file", "empty": "x", "extra": "new"})

    assert store.to_dict() == {"token": "runtime", "empty": "", "extra": "new"}


def test_merge_accepts_another_store():
    store = VariableStore({"a": "1"})
    store.merge_preserving_existing(VariableStore({"a": "9", "b": "2"}))

    assert store.get("a") == "1"
    assert store.get("b") == "2"


def test_copy_is_independent():
    store = VariableStore({"a": "1"})
    clone = store.copy()
    clone.set("a", "2")

    assert store.get("a") == "1"
    assert clone != store
