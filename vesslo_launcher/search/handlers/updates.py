"""
Updates Handler - Apps with a pending update.

Triggers on the "u:" prefix with an optional sort option:
  u:              → Default sort (settings [updates] default_sort)
  u: source       → Sections: Homebrew, Sparkle, App Store, Manual
  u: name         → Flat list A-Z
  u: name-desc    → Flat list Z-A
  u: developer    → Flat list by developer

Unique prefixes work too ("u: dev").
"""

from vesslo_launcher.search.router import ItemAction, ResultItem
from vesslo_launcher.search.handlers.items import ItemFactory, data_missing_item, empty_item
from vesslo_launcher.services.catalog import (
    SORT_LABELS,
    SORT_SOURCE,
    build_update_sections,
    resolve_sort_option,
)


class UpdatesHandler:
    """Show pending updates grouped by source or sorted."""

    name = "updates"
    priority = 200

    def __init__(self, store, items: ItemFactory = None, prefix: str = "u:", default_sort: str = SORT_SOURCE):
        if default_sort not in SORT_LABELS:
            raise ValueError(f"Unknown default sort option: {default_sort!r}")
        self.store = store
        self.items = items or ItemFactory()
        self.prefix = prefix
        self.default_sort = default_sort

    def matches(self, query: str) -> bool:
        return query.strip().startswith(self.prefix)

    def get_results(self, query: str) -> list[ResultItem]:
        arg = query.strip()[len(self.prefix):].strip()
        sort_by = resolve_sort_option(arg) if arg else self.default_sort
        if sort_by is None:
            return self._sort_hints(arg)

        if not self.store.loaded:
            return [data_missing_item()]

        sections = build_update_sections(self.store.apps, sort_by)
        if not sections:
            return [empty_item(
                "All apps are up to date!",
                "No updates available",
                "emblem-ok-symbolic",
            )]

        return [
            self.items.update_item(app, section=section.title)
            for section in sections
            for app in section.apps
        ]

    def _sort_hints(self, arg: str) -> list[ResultItem]:
        """Offer the sort options when the argument is not one of them."""
        return [
            ResultItem(
                title=label,
                description=f"{self.prefix} {key}",
                icon="view-sort-ascending-symbolic",
                result_type="hint",
                section=f"Unknown sort option: {arg}",
                actions=[ItemAction(label, set_query=f"{self.prefix} {key}")],
            )
            for key, label in SORT_LABELS.items()
        ]
