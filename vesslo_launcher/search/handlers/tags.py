"""
Tag Browser Handler - Browse Vesslo apps grouped by tag.

Triggers on the "#" prefix:
  #              → All tags, most used first
  #dev           → Apps tagged "dev" (exact tag), or tags containing "dev"
  #dev firefox   → Apps tagged "dev" whose name contains "firefox"

Unknown tags fall back to fuzzy suggestions.
"""

from typing import Optional

from vesslo_launcher.search.router import Accessory, ItemAction, ResultItem
from vesslo_launcher.search.handlers.items import ItemFactory, data_missing_item, empty_item
from vesslo_launcher.services.catalog import TagGroup, filter_tags, group_by_tag


class TagBrowseHandler:
    """List tags, then the apps under a selected tag."""

    name = "tags"
    priority = 300

    def __init__(self, store, items: ItemFactory = None, prefix: str = "#", fuzzy_threshold: int = 60):
        self.store = store
        self.items = items or ItemFactory()
        self.prefix = prefix
        self.fuzzy_threshold = fuzzy_threshold

    def matches(self, query: str) -> bool:
        return query.strip().startswith(self.prefix)

    def get_results(self, query: str) -> list[ResultItem]:
        if not self.store.loaded:
            return [data_missing_item()]

        groups = group_by_tag(self.store.apps)
        if not groups:
            return [empty_item(
                "No tags found",
                "Add tags to your apps in Vesslo",
                "tag-symbolic",
            )]

        text = query.strip()[len(self.prefix):].strip()
        selected = self._select_tag(groups, text)
        if selected is not None:
            group, name_filter = selected
            return self._tag_apps(group, name_filter)

        filtered = filter_tags(groups, text, self.fuzzy_threshold)
        if not filtered:
            return [empty_item(
                "No tags found",
                f"No tag matches '{text}'",
                "tag-symbolic",
            )]
        return [self._tag_to_result(group, len(filtered)) for group in filtered]

    def _select_tag(self, groups: list[TagGroup], text: str) -> Optional[tuple[TagGroup, str]]:
        """
        Find the tag the query points at.

        Returns:
            Tuple of (group, name_filter), or None to list tags instead
        """
        if not text:
            return None

        # Longest tag first so "dev tools" wins over "dev"
        for group in sorted(groups, key=lambda g: len(g.tag), reverse=True):
            if text == group.tag:
                return group, ""
            if text.startswith(group.tag + " "):
                return group, text[len(group.tag):].strip()
        return None

    def _tag_to_result(self, group: TagGroup, total: int) -> ResultItem:
        return ResultItem(
            title=f"#{group.tag}",
            icon="tag-symbolic",
            result_type="tag",
            section=f"Tags ({total})",
            accessories=[Accessory(text=f"{group.count} apps")],
            actions=[ItemAction(
                "View Apps",
                icon="view-list-symbolic",
                set_query=f"{self.prefix}{group.tag}",
            )],
        )

    def _tag_apps(self, group: TagGroup, name_filter: str) -> list[ResultItem]:
        apps = group.apps
        if name_filter:
            q = name_filter.lower()
            apps = [app for app in apps if q in app.name.lower()]

        if not apps:
            return [empty_item(
                "No apps found",
                f"No app in #{group.tag} matches '{name_filter}'",
                "system-search",
            )]

        section = f"#{group.tag} ({len(apps)} apps)"
        return [
            self.items.app_item(app, section=section, back_query=self.prefix)
            for app in apps
        ]
