"""
Tests for the AppSearchHandler.

Uses the sample snapshot through an in-memory store.
"""

import base64

from vesslo_launcher.search.handlers.app_search import AppSearchHandler
from vesslo_launcher.search.router import ResultItem


def _titles(results):
    return [r.title for r in results]


def _action(result, title):
    return next(a for a in result.actions if a.title == title)


class TestAppSearchHandler:
    """Test app search handler behavior."""

    def test_always_matches(self, store):
        handler = AppSearchHandler(store)
        assert handler.matches("anything") is True
        assert handler.matches("") is True

    def test_empty_query_lists_all_apps(self, store):
        handler = AppSearchHandler(store)
        results = handler.get_results("")
        assert _titles(results) == ["Firefox", "Xcode", "iTerm", "Notes Helper", "Arc"]
        assert all(isinstance(r, ResultItem) for r in results)

    def test_max_results_caps_list(self, store):
        handler = AppSearchHandler(store, max_results=2)
        assert len(handler.get_results("")) == 2

    def test_results_carry_app(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("xcode")[0]
        assert result.result_type == "app"
        assert result.app.bundle_id == "com.apple.dt.Xcode"

    def test_matched_field_indicators(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("mozilla")[0]
        tooltips = [a.tooltip for a in result.accessories if a.icon]
        assert tooltips == ["Matched: Developer"]

    def test_name_match_has_no_indicator(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("xcode")[0]
        assert [a for a in result.accessories if a.icon] == []

    def test_subtitle_joins_version_developer_tags(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("firefox")[0]
        assert result.description == "120.0 • Mozilla • #browser • #dev"

    def test_update_and_source_badges(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("firefox")[0]
        badges = [(a.tag, a.color) for a in result.accessories if a.tag]
        assert badges == [("UPDATE", "green"), ("Brew", "orange")]

    def test_no_update_badge_without_target(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("notes helper")[0]
        assert [a.tag for a in result.accessories if a.tag] == []

    def test_empty_target_version_has_no_update_badge(self, store):
        firefox = store.data.apps[0]
        firefox.target_version = ""
        result = AppSearchHandler(store).get_results("firefox")[0]
        assert [a.tag for a in result.accessories if a.tag] == ["Brew"]
        assert all(a.section != "Update" for a in result.actions)

    def test_result_icon_decoded_from_app(self, store):
        png = b"\x89PNG\r\n\x1a\nicon"
        store.data.apps[0].icon = base64.b64encode(png).decode()
        result = AppSearchHandler(store).get_results("firefox")[0]
        assert result.app.icon_bytes() == png

    def test_browse_tag_sets_query_to_tag(self, store):
        handler = AppSearchHandler(store)
        result = handler.get_results("firefox")[0]
        assert _action(result, "Browse #dev").set_query == "dev"

    def test_update_actions_only_with_update(self, store):
        handler = AppSearchHandler(store)
        firefox = handler.get_results("firefox")[0]
        notes = handler.get_results("notes helper")[0]
        assert "Update Via Homebrew" in _titles(firefox.actions)
        assert all(a.section != "Update" for a in notes.actions)

    def test_bundle_actions_need_bundle_id(self, store):
        handler = AppSearchHandler(store)
        notes = handler.get_results("notes helper")[0]
        assert "Open in Vesslo" not in _titles(notes.actions)
        assert "Copy Bundle Id" not in _titles(notes.actions)
        assert _titles(notes.actions)[:2] == ["Open App", "Show in Finder"]

    def test_no_results_shows_empty_view(self, store):
        handler = AppSearchHandler(store)
        results = handler.get_results("zzzz")
        assert len(results) == 1
        assert results[0].title == "No apps found"
        assert results[0].result_type == "empty"

    def test_missing_data_shows_hint(self, empty_store):
        handler = AppSearchHandler(empty_store)
        results = handler.get_results("firefox")
        assert _titles(results) == ["Vesslo data not found"]
