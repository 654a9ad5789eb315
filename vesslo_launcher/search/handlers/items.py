"""
Result builders shared by the Vesslo handlers.

Turns VessloApp records into ResultItems with badges and actions, so the
search, tag, and update views render apps the same way.
"""

import threading
from typing import Callable, Optional

from vesslo_launcher.models import VessloApp
from vesslo_launcher.search.router import Accessory, ItemAction, ResultItem
from vesslo_launcher.services import actions
from vesslo_launcher.services.catalog import (
    MATCH_DEVELOPER,
    MATCH_MEMO,
    MATCH_TAG,
    source_badge,
    source_color,
)

# field -> (icon, color, tooltip)
MATCH_INDICATORS = {
    MATCH_DEVELOPER: ("avatar-default-symbolic", "blue", "Matched: Developer"),
    MATCH_MEMO: ("text-x-generic-symbolic", "orange", "Matched: Memo"),
    MATCH_TAG: ("tag-symbolic", "purple", "Matched: Tag"),
}

APP_ICON = "application-x-executable"


def _run_in_thread(fn: Callable, *args) -> None:
    threading.Thread(target=fn, args=args, daemon=True).start()


def version_info(app: VessloApp) -> str:
    return f"{app.version} → {app.target_version}"


def app_subtitle(app: VessloApp) -> str:
    parts = [app.version, app.developer] + [f"#{t}" for t in app.tags]
    return " • ".join(p for p in parts if p)


class ItemFactory:
    """
    Builds app, update and bulk rows.

    Brew upgrades block for minutes, so they go through `run_async`
    (a daemon thread by default).
    """

    def __init__(
        self,
        brew_path: str = "brew",
        brew_timeout: float = 900,
        run_async: Optional[Callable] = None,
    ):
        self.brew_path = brew_path
        self.brew_timeout = brew_timeout
        self.run_async = run_async or _run_in_thread

    # -- actions -----------------------------------------------------------

    def brew_upgrade_action(self, app: VessloApp, title: str = "Update Via Homebrew",
                            icon: str = "utilities-terminal", section: str = "Update") -> ItemAction:
        return ItemAction(
            title=title,
            icon=icon,
            section=section,
            close_on_run=False,
            callback=lambda: self.run_async(
                actions.run_brew_upgrade, app.homebrew_cask, app.name,
                self.brew_path, self.brew_timeout,
            ),
        )

    def _open_actions(self, app: VessloApp, section: str = "") -> list[ItemAction]:
        return [
            ItemAction("Open App", lambda: actions.open_path(app.path), "system-run", section),
            ItemAction("Show in Finder", lambda: actions.reveal_path(app.path), "folder", section),
        ]

    def _open_in_vesslo_action(self, app: VessloApp, title: str = "Open in Vesslo",
                               icon: str = "emblem-symbolic-link", section: str = "") -> ItemAction:
        return ItemAction(title, lambda: actions.open_in_vesslo(app.bundle_id), icon, section)

    def update_actions(self, app: VessloApp) -> list[ItemAction]:
        """Per-source update actions; several may apply to one app."""
        result = []
        if app.is_homebrew and app.homebrew_cask:
            result.append(self.brew_upgrade_action(app))
        if app.is_app_store and app.app_store_id:
            url = actions.app_store_url(app.app_store_id)
            result.append(ItemAction("Open in App Store", lambda: actions.open_url(url),
                                     "system-software-install", "Update"))
        if app.is_sparkle and app.bundle_id:
            result.append(self._open_in_vesslo_action(app, "Update in Vesslo", "go-down", "Update"))
        return result

    # -- rows --------------------------------------------------------------

    def app_item(
        self,
        app: VessloApp,
        matched_fields: Optional[list[str]] = None,
        section: str = "",
        tag_query: Optional[Callable[[str], str]] = None,
        back_query: Optional[str] = None,
    ) -> ResultItem:
        """
        Row used by search and tag browsing.

        Args:
            app: The app to render
            matched_fields: Search match reasons to show as indicators
            section: Section header the row belongs to
            tag_query: Maps a tag to the query "Browse #tag" switches to
            back_query: Query for the "Back to Tags" action
        """
        accessories = []
        for matched in matched_fields or []:
            icon, color, tooltip = MATCH_INDICATORS.get(
                matched, ("radio-symbolic", "secondary", "Matched"))
            accessories.append(Accessory(icon=icon, color=color, tooltip=tooltip))

        if app.target_version:
            accessories.append(Accessory(tag="UPDATE", color="green"))

        for source in app.sources:
            accessories.append(Accessory(tag=source, color=source_color(source)))

        item_actions = self._open_actions(app)
        if app.bundle_id:
            item_actions.append(self._open_in_vesslo_action(app, section="Vesslo"))
            bundle_id = app.bundle_id
            item_actions.append(ItemAction(
                "Copy Bundle Id", lambda: actions.copy_to_clipboard(bundle_id),
                "edit-copy", "Vesslo",
            ))

        if app.target_version:
            item_actions.extend(self.update_actions(app))

        if tag_query is not None:
            for tag in app.tags:
                item_actions.append(ItemAction(
                    f"Browse #{tag}", icon="tag-symbolic", section="Tags",
                    set_query=tag_query(tag),
                ))

        if back_query is not None:
            item_actions.append(ItemAction("Back to Tags", icon="go-previous", set_query=back_query))

        return ResultItem(
            title=app.name,
            description=app_subtitle(app),
            icon=APP_ICON,
            result_type="app",
            section=section,
            accessories=accessories,
            actions=item_actions,
            app=app,
        )

    def update_item(self, app: VessloApp, section: str = "") -> ResultItem:
        """Row in the updates view: primary action depends on the source."""
        badge, color = source_badge(app)

        item_actions = self.update_actions(app)
        if badge == "manual" and app.bundle_id:
            item_actions.append(self._open_in_vesslo_action(app, section="Update"))

        item_actions.extend(self._open_actions(app))
        if app.bundle_id:
            item_actions.append(self._open_in_vesslo_action(app))

        return ResultItem(
            title=app.name,
            description=app.developer or "",
            icon=APP_ICON,
            result_type="update",
            section=section,
            accessories=[Accessory(text=version_info(app)), Accessory(tag=badge, color=color)],
            actions=item_actions,
            app=app,
        )

    def bulk_app_item(self, app: VessloApp, update_all: ItemAction, section: str = "") -> ResultItem:
        return ResultItem(
            title=app.name,
            description=app.developer or "",
            icon=APP_ICON,
            result_type="update",
            section=section,
            accessories=[Accessory(text=version_info(app)), Accessory(tag="brew", color="orange")],
            actions=[
                self.brew_upgrade_action(app, title="Update", icon="go-down", section=""),
                update_all,
            ],
            app=app,
        )


def empty_item(title: str, description: str, icon: str = "dialog-information") -> ResultItem:
    """Placeholder row shown instead of an empty list."""
    return ResultItem(
        title=title,
        description=description,
        icon=icon,
        result_type="empty",
    )


def data_missing_item() -> ResultItem:
    return empty_item(
        "Vesslo data not found",
        "Please run Vesslo app to export data",
        "dialog-warning",
    )
