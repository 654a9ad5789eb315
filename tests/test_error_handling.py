"""
Tests for error handling across services and handlers.

Verifies graceful degradation when things go wrong:
- Missing or corrupt snapshot
- Records with unexpected shapes
- Bad settings values
"""

import json

import pytest

from vesslo_launcher.search.handlers.app_search import AppSearchHandler
from vesslo_launcher.search.handlers.updates import UpdatesHandler
from vesslo_launcher.services.catalog import search_apps
from vesslo_launcher.services.data import VessloDataStore, load_vesslo_data


class TestSnapshotErrors:
    """The palette keeps working when data.json is broken."""

    def test_truncated_file_shows_missing_data(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"exportedAt": "2025-01-01T00:00:00Z", "apps": [')
        store = VessloDataStore(path)
        store.reload()
        results = AppSearchHandler(store).get_results("")
        assert results[0].title == "Vesslo data not found"

    def test_root_not_an_object(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps([1, 2, 3]))
        assert load_vesslo_data(path) is None

    def test_bad_update_count(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"exportedAt": "", "updateCount": "many", "apps": []}))
        assert load_vesslo_data(path) is None

    def test_directory_instead_of_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.mkdir()
        assert load_vesslo_data(path) is None

    def test_null_lists_are_empty(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "exportedAt": "2025-01-01T00:00:00Z",
            "apps": [{"id": "1", "name": "Bare", "tags": None, "sources": None}],
        }))
        data = load_vesslo_data(path)
        assert data.apps[0].tags == []
        assert data.apps[0].sources == []

    def test_invalid_utf8_returns_none(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_bytes(b'{"exportedAt": "x", "apps": [], "memo": "\xff\xfe"}')
        assert load_vesslo_data(path) is None

    def test_invalid_utf8_shows_missing_data(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_bytes(b'{"exportedAt": "x", "apps": [{"id": "1", "name": "\xff"}]}')
        store = VessloDataStore(path)
        assert store.reload() is None
        results = AppSearchHandler(store).get_results("")
        assert results[0].title == "Vesslo data not found"

    def test_null_tag_entries_dropped(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "exportedAt": "2025-01-01T00:00:00Z",
            "apps": [{"id": "1", "name": "A", "tags": [None, "dev"], "sources": [None]}],
        }))
        data = load_vesslo_data(path)
        assert data.apps[0].tags == ["dev"]
        assert data.apps[0].sources == []
        assert search_apps(data.apps, "none") == []

    @pytest.mark.parametrize("apps", [{}, "", 0, False])
    def test_falsy_apps_value_rejected(self, tmp_path, apps):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"exportedAt": "2025-01-01T00:00:00Z", "apps": apps}))
        assert load_vesslo_data(path) is None

    @pytest.mark.parametrize("tags", [{}, "", 0, False])
    def test_falsy_tags_value_rejected(self, tmp_path, tags):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "exportedAt": "2025-01-01T00:00:00Z",
            "apps": [{"id": "1", "name": "A", "tags": tags}],
        }))
        assert load_vesslo_data(path) is None

    def test_falsy_apps_shows_missing_data(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"exportedAt": "2025-01-01T00:00:00Z", "apps": {}}))
        store = VessloDataStore(path)
        store.reload()
        results = AppSearchHandler(store).get_results("zzz")
        assert results[0].title == "Vesslo data not found"


class TestSettingsErrors:

    def test_unknown_default_sort_rejected(self, store):
        with pytest.raises(ValueError):
            UpdatesHandler(store, default_sort="popularity")
