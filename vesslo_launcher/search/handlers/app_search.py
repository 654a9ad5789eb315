"""
App Search Handler - Search Vesslo apps by name, developer, tag, or memo.

Fallback handler: any query no prefix handler claims lands here. Each
row shows which non-name fields matched, and "Browse #tag" actions put
the tag into the search field.
"""

from vesslo_launcher.search.router import ResultItem
from vesslo_launcher.search.handlers.items import ItemFactory, data_missing_item, empty_item
from vesslo_launcher.services.catalog import search_apps


class AppSearchHandler:
    """Search the Vesslo snapshot."""

    name = "app_search"
    priority = 1000

    def __init__(self, store, items: ItemFactory = None, max_results: int = 200):
        self.store = store
        self.items = items or ItemFactory()
        self.max_results = max_results

    def matches(self, query: str) -> bool:
        return True

    def get_results(self, query: str) -> list[ResultItem]:
        if not self.store.loaded:
            return [data_missing_item()]

        results = search_apps(self.store.apps, query or "")
        if not results:
            return [empty_item(
                "No apps found",
                "Try a different search term",
                "system-search",
            )]

        return [
            self.items.app_item(
                result.app,
                matched_fields=result.matched_fields,
                tag_query=lambda tag: tag,
            )
            for result in results[:self.max_results]
        ]
