import json

import pytest

from dataset_curator.core import Pair
from dataset_curator.storage import DatasetStore


@pytest.fixture()
def store(tmp_path):
    return DatasetStore(tmp_path / "data" / "dataset.json")


class TestDatasetStore:
    def test_missing_file_loads_empty(self, store):
        assert store.get_all() == []
        assert len(store) == 0

    def test_add_stamps_and_persists(self, store):
        stored = store.add(Pair(prompt="a", completion="b", tags=["t"]))
        assert stored.timestamp is not None
        assert stored.timestamp.tzinfo is not None

        reopened = DatasetStore(store.path)
        [pair] = reopened.get_all()
        assert (pair.prompt, pair.completion, pair.tags) == ("a", "b", ["t"])
        assert pair.timestamp == stored.timestamp

    def test_file_is_a_json_array(self, store):
        store.add_many([Pair(prompt="a", completion="b"), Pair(prompt="c", completion="d")])
        payload = json.loads(store.path.read_text(encoding="utf-8"))
        assert [record["prompt"] for record in payload] == ["a", "c"]
        assert all("timestamp" in record for record in payload)

    def test_update_and_delete(self, store):
        store.add_many([Pair(prompt="a", completion="b"), Pair(prompt="c", completion="d")])
        store.update(1, Pair(prompt="x", completion="y"))
        assert store.get(1).prompt == "x"
        store.delete(0)
        assert [pair.prompt for pair in store.get_all()] == ["x"]

    def test_out_of_range_index(self, store):
        with pytest.raises(IndexError):
            store.update(0, Pair(prompt="a", completion="b"))
        with pytest.raises(IndexError):
            store.delete(3)
        assert store.get(5) is None

    def test_clear(self, store):
        store.add(Pair(prompt="a", completion="b"))
        store.clear()
        assert DatasetStore(store.path).get_all() == []

    def test_stats(self, store):
        store.add_many([Pair(prompt="a", completion="b"), Pair(prompt="", completion="b")])
        assert store.get_stats() == {"total": 2, "valid": 1, "warnings": 1}

    def test_remove_duplicates_and_validate(self, store):
        store.add_many(
            [
                Pair(prompt="a", completion="b"),
                Pair(prompt="a", completion="b"),
                Pair(prompt="c", completion=""),
            ]
        )
        assert store.remove_duplicates() == 1
        assert store.validate() == 1
        assert [(pair.prompt, pair.completion) for pair in DatasetStore(store.path).get_all()] == [("a", "b")]

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "dataset.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(ValueError):
            DatasetStore(path)

    def test_non_array_payload(self, tmp_path):
        path = tmp_path / "dataset.json"
        path.write_text('{"prompt": "a"}', encoding="utf-8")
        with pytest.raises(ValueError):
            DatasetStore(path)
