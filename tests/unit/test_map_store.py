"""
Unit tests for the JSON map store.

Run: pytest tests/unit/test_map_store.py -v
"""

import json
from unittest.mock import patch

import pytest

from services.map_store import load_map, save_map


class TestLoadMap:
    """Tests for load_map()"""

    def test_missing_file_returns_empty_map(self, tmp_path):
        """A map that was never saved is not an error."""
        assert load_map(tmp_path / "nope" / "category_map.json") == {}

    def test_loads_flat_object(self, tmp_path):
        path = tmp_path / "category_map.json"
        path.write_text(json.dumps({"Widgets": 7, "Tools": 12}), encoding="utf-8")

        assert load_map(path) == {"Widgets": 7, "Tools": 12}

    def test_invalid_json_returns_empty_map(self, tmp_path):
        path = tmp_path / "category_map.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_map(path) == {}

    def test_non_object_payload_returns_empty_map(self, tmp_path):
        path = tmp_path / "category_map.json"
        path.write_text(json.dumps([["Widgets", 7]]), encoding="utf-8")

        assert load_map(path) == {}

    def test_unreadable_path_returns_empty_map(self, tmp_path):
        """A directory where the file should be is logged, not raised."""
        path = tmp_path / "category_map.json"
        path.mkdir()

        assert load_map(path) == {}

    def test_drops_non_integer_ids(self, tmp_path):
        path = tmp_path / "product_map.json"
        path.write_text(
            json.dumps({"Good": 1, "AlsoGood": "2", "Bad": "abc", "Null": None, "Flag": True}),
            encoding="utf-8"
        )

        assert load_map(path) == {"Good": 1, "AlsoGood": 2}

    def test_keys_are_case_sensitive(self, tmp_path):
        path = tmp_path / "category_map.json"
        path.write_text(json.dumps({"widgets": 1, "Widgets": 2}), encoding="utf-8")

        assert load_map(path) == {"widgets": 1, "Widgets": 2}


class TestSaveMap:
    """Tests for save_map()"""

    @pytest.mark.parametrize("mapping", [
        {},
        {"Widgets": 7},
        {"ABC Widget": 42, "ABC-123": 42, "Café Crème": 3},
    ])
    def test_save_then_load_returns_same_map(self, tmp_path, mapping):
        path = tmp_path / "map.json"

        assert save_map(path, mapping) is True
        assert load_map(path) == mapping

    def test_creates_missing_parent_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "category_map.json"

        assert save_map(path, {"Widgets": 7}) is True
        assert path.exists()

    def test_writes_pretty_printed_json(self, tmp_path):
        path = tmp_path / "category_map.json"

        save_map(path, {"Widgets": 7})

        assert path.read_text(encoding="utf-8") == '{\n  "Widgets": 7\n}'

    def test_overwrites_previous_contents(self, tmp_path):
        path = tmp_path / "category_map.json"
        save_map(path, {"Old": 1})

        save_map(path, {"New": 2})

        assert load_map(path) == {"New": 2}

    def test_leaves_no_temp_files(self, tmp_path):
        save_map(tmp_path / "category_map.json", {"Widgets": 7})

        assert [p.name for p in tmp_path.iterdir()] == ["category_map.json"]

    def test_write_failure_is_swallowed(self, tmp_path):
        """Save failures are reported through the return value only."""
        path = tmp_path / "category_map.json"

        with patch("services.map_store.os.replace", side_effect=OSError("disk full")):
            assert save_map(path, {"Widgets": 7}) is False

        assert not path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_parent_is_a_file_is_swallowed(self, tmp_path):
        blocker = tmp_path / "data"
        blocker.write_text("not a directory", encoding="utf-8")

        assert save_map(blocker / "category_map.json", {"Widgets": 7}) is False
