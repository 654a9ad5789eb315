"""
Tests for the UpdatesHandler.

Covers source grouping, flat sorts, sort-option hints, and the
per-source actions on update rows.
"""

import pytest

from vesslo_launcher.search.handlers.updates import UpdatesHandler


def _titles(results):
    return [r.title for r in results]


def _action_titles(result):
    return [a.title for a in result.actions]


class TestUpdatesMatching:

    def test_matches_prefix(self, store):
        handler = UpdatesHandler(store)
        assert handler.matches("u:") is True
        assert handler.matches("u: name") is True
        assert handler.matches("update") is False

    def test_rejects_unknown_default_sort(self, store):
        with pytest.raises(ValueError):
            UpdatesHandler(store, default_sort="size")


class TestUpdatesResults:

    def test_default_groups_by_source(self, store):
        results = UpdatesHandler(store).get_results("u:")
        assert _titles(results) == ["Firefox", "iTerm", "Xcode", "Arc"]
        assert [r.section for r in results] == [
            "Homebrew (1)",
            "Sparkle (1)",
            "App Store (1)",
            "Manual (1)",
        ]

    def test_configured_default_sort(self, store):
        results = UpdatesHandler(store, default_sort="name-desc").get_results("u:")
        assert _titles(results) == ["Xcode", "iTerm", "Firefox", "Arc"]

    def test_sort_by_name(self, store):
        results = UpdatesHandler(store).get_results("u: name")
        assert _titles(results) == ["Arc", "Firefox", "iTerm", "Xcode"]
        assert results[0].section == "Updates (4) - By Name (A-Z)"

    def test_sort_prefix(self, store):
        results = UpdatesHandler(store).get_results("u: dev")
        assert results[0].section == "Updates (4) - By Developer"
        assert _titles(results) == ["Xcode", "iTerm", "Firefox", "Arc"]

    def test_unknown_sort_lists_options(self, store):
        results = UpdatesHandler(store).get_results("u: size")
        assert _titles(results) == ["By Source", "By Name (A-Z)", "By Name (Z-A)", "By Developer"]
        assert results[1].actions[0].set_query == "u: name"
        assert all(r.result_type == "hint" for r in results)

    def test_version_and_badge(self, store):
        firefox = UpdatesHandler(store).get_results("u:")[0]
        assert firefox.accessories[0].text == "120.0 → 121.0"
        assert (firefox.accessories[1].tag, firefox.accessories[1].color) == ("brew", "orange")
        assert firefox.description == "Mozilla"

    def test_all_up_to_date(self, store):
        for app in store.apps:
            app.target_version = None
        results = UpdatesHandler(store).get_results("u:")
        assert _titles(results) == ["All apps are up to date!"]

    def test_missing_data(self, empty_store):
        assert _titles(UpdatesHandler(empty_store).get_results("u:")) == ["Vesslo data not found"]


class TestUpdateActions:
    """Primary action depends on the update source."""

    def _by_title(self, store, title):
        return next(r for r in UpdatesHandler(store).get_results("u:") if r.title == title)

    def test_homebrew_primary(self, store):
        result = self._by_title(store, "Firefox")
        assert result.primary_action().title == "Update Via Homebrew"
        assert result.primary_action().close_on_run is False

    def test_app_store_primary(self, store):
        assert self._by_title(store, "Xcode").primary_action().title == "Open in App Store"

    def test_sparkle_primary(self, store):
        assert self._by_title(store, "iTerm").primary_action().title == "Update in Vesslo"

    def test_manual_falls_back_to_vesslo(self, store):
        assert self._by_title(store, "Arc").primary_action().title == "Open in Vesslo"

    def test_secondary_actions(self, store):
        titles = _action_titles(self._by_title(store, "Xcode"))
        assert titles[1:] == ["Open App", "Show in Finder", "Open in Vesslo"]
