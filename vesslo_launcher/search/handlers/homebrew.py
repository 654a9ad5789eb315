"""
Homebrew Bulk Update Handler - Upgrade outdated Homebrew casks.

Triggers on the "brew:" prefix. The first row updates every cask at
once (`brew upgrade --cask`) after a confirmation step; the rows below
update one cask each.

Confirmation: activating "Update All" arms the row, activating it again
runs the upgrade. "Cancel" or closing the palette disarms it.
"""

from loguru import logger

from vesslo_launcher.search.router import Accessory, ItemAction, ResultItem
from vesslo_launcher.search.handlers.items import ItemFactory, data_missing_item, empty_item
from vesslo_launcher.services import actions
from vesslo_launcher.services.catalog import homebrew_updates


class BulkHomebrewHandler:
    """Bulk and per-app Homebrew cask upgrades."""

    name = "bulk_brew"
    priority = 100

    def __init__(self, store, items: ItemFactory = None, prefix: str = "brew:"):
        self.store = store
        self.items = items or ItemFactory()
        self.prefix = prefix
        self.confirm_pending = False
        self.updating = False

    def matches(self, query: str) -> bool:
        return query.strip().startswith(self.prefix)

    def reset(self) -> None:
        """Drop a pending confirmation (palette closed)."""
        self.confirm_pending = False

    def get_results(self, query: str) -> list[ResultItem]:
        if not self.store.loaded:
            return [data_missing_item()]

        apps = homebrew_updates(self.store.apps)
        if not apps:
            return [empty_item(
                "All Homebrew apps are up to date!",
                "No Homebrew updates available",
                "emblem-ok-symbolic",
            )]

        update_all = ItemAction(
            "Update All",
            callback=lambda: self.request_update_all(len(apps)),
            icon="go-down",
            close_on_run=False,
        )
        results = [self._bulk_item(len(apps))]
        results.extend(
            self.items.bulk_app_item(app, update_all, section="Individual Apps")
            for app in apps
        )
        return results

    def _bulk_item(self, count: int) -> ResultItem:
        section = f"Homebrew Updates ({count})"
        accessories = [Accessory(tag="BULK", color="green")]

        if self.updating:
            return ResultItem(
                title="Updating all Homebrew apps...",
                description=f"{count} apps",
                icon="content-loading-symbolic",
                result_type="bulk",
                section=section,
                accessories=accessories,
            )

        if self.confirm_pending:
            return ResultItem(
                title="Update All Homebrew Apps?",
                description=f"This will update {count} apps using Homebrew. Continue?",
                icon="dialog-question",
                result_type="bulk",
                section=section,
                accessories=accessories,
                actions=[
                    ItemAction("Update All", callback=lambda: self.confirm_update_all(count),
                               icon="go-down", close_on_run=False),
                    ItemAction("Cancel", callback=self.reset, icon="process-stop", close_on_run=False),
                ],
            )

        return ResultItem(
            title="Update All Homebrew Apps",
            description=f"{count} apps",
            icon="go-down",
            result_type="bulk",
            section=section,
            accessories=accessories,
            actions=[ItemAction("Update All", callback=lambda: self.request_update_all(count),
                                icon="go-down", close_on_run=False)],
        )

    def request_update_all(self, count: int) -> None:
        """First activation: ask for confirmation."""
        if count == 0 or self.updating:
            return
        self.confirm_pending = True

    def confirm_update_all(self, count: int) -> None:
        """Second activation: run `brew upgrade --cask` in the background."""
        if not self.confirm_pending or self.updating:
            return
        self.confirm_pending = False
        self.updating = True
        self.items.run_async(self._update_all, count)

    def _update_all(self, count: int) -> None:
        try:
            result = actions.run_brew_upgrade_all(count, self.items.brew_path, self.items.brew_timeout)
            if not result.ok:
                logger.warning(f"Bulk Homebrew update failed: {result.message}")
        finally:
            self.updating = False
