"""
Palette Panel - Search entry plus routed Vesslo results.

Features:
- Search entry; prefixes switch views (#tags, u: updates, brew: Homebrew)
- Results grouped under section headers with badges and app icons
- Enter runs the primary action, Shift+Enter or right-click lists all actions
- Escape leaves the action list, or closes the palette
- Snapshot re-read every time the palette opens
- Homebrew upgrades run on a worker thread and refresh the list when done
"""

import threading

from gi.repository import Gdk, GLib, Gtk
from ignis import widgets
from loguru import logger

from vesslo_launcher.search.handlers import ItemFactory
from vesslo_launcher.search.router import ResultItem
from vesslo_launcher.services.actions import TOAST_FAILURE, notify
from vesslo_launcher.services.data import get_data_store
from vesslo_launcher.utils.helpers import (
    build_router,
    close_launcher,
    get_focused_monitor,
    load_settings,
)


class PalettePanel:
    """
    Command palette over the Vesslo snapshot.

    Queries go through the QueryRouter; the panel only renders ResultItems
    and dispatches their actions.
    """

    def __init__(self, store=None, settings=None):
        self.settings = settings or load_settings()
        self.store = store or get_data_store()

        homebrew = self.settings["homebrew"]
        self.items = ItemFactory(
            brew_path=homebrew["brew_path"],
            brew_timeout=homebrew["timeout_seconds"],
            run_async=self._run_async,
        )
        self.router = build_router(self.store, self.settings, items=self.items)

        self.results: list[ResultItem] = []
        self.action_item = None  # ResultItem whose actions are listed

        # Widgets (created in create_window)
        self.search_entry = None
        self.results_box = None

        # Keyboard navigation
        self.selected_index = -1  # -1 means no selection
        self.result_buttons = []
        self.visible_items: list[ResultItem] = []

    def create_window(self):
        """
        Create the palette window.

        Returns:
            widgets.Window anchored at top center, hidden until toggled
        """
        self.search_entry = widgets.Entry(
            placeholder_text="Search apps by name, developer, tag, or memo...",
            css_classes=["search-entry"],
            on_change=lambda x: self._on_search_changed(),
        )

        self.results_box = widgets.Box(
            vertical=True,
            spacing=2,
            css_classes=["search-results"],
        )

        panel = self.settings["panel"]
        window = widgets.Window(
            namespace="vesslo-palette",
            monitor=get_focused_monitor(),
            anchor=["top"],
            exclusivity="normal",
            kb_mode="on_demand",
            layer="top",
            default_width=panel["width"],
            default_height=panel["height"],
            visible=False,
            margin_top=8,
            child=widgets.Box(
                vertical=True,
                css_classes=["panel", "palette-panel"],
                child=[
                    self.search_entry,
                    widgets.Scroll(
                        vexpand=True,
                        hexpand=True,
                        child=self.results_box,
                    ),
                ],
            ),
        )

        key_controller = Gtk.EventControllerKey()
        key_controller.connect("key-pressed", self._on_key_press)
        window.add_controller(key_controller)

        window.connect("notify::visible", self._on_visibility_changed)

        return window

    # -- data flow ---------------------------------------------------------

    def _on_search_changed(self):
        """Handle search entry text changes."""
        self.action_item = None
        self.selected_index = -1
        self._refresh()

    def _refresh(self):
        """Re-route the current query and rebuild the list."""
        query = self.search_entry.get_text() if self.search_entry else ""
        handler_name, results = self.router.route(query)

        notice = self.store.status_notice()
        self.results = ([notice] if notice else []) + results
        logger.debug(f"Routed {query!r} to {handler_name} ({len(results)} results)")

        if self.action_item is not None:
            self._show_actions(self.action_item)
        else:
            self._update_results(self.results)

    def _refresh_idle(self) -> bool:
        self._refresh()
        return False  # Don't repeat

    def _run_async(self, fn, *args):
        """Run a blocking call off the GTK thread, then refresh the list."""
        def worker():
            try:
                fn(*args)
            finally:
                GLib.idle_add(self._refresh_idle)

        threading.Thread(target=worker, daemon=True).start()

    # -- rendering ---------------------------------------------------------

    def _update_results(self, items: list[ResultItem]):
        """Rebuild result rows, inserting a header whenever the section changes."""
        child = self.results_box.get_first_child()
        while child:
            next_child = child.get_next_sibling()
            self.results_box.remove(child)
            child = next_child

        self.result_buttons = []
        self.visible_items = []

        current_section = None
        for item in items:
            if item.section and item.section != current_section:
                self.results_box.append(widgets.Label(
                    label=item.section,
                    css_classes=["section-header"],
                    halign="start",
                ))
            current_section = item.section

            button = self._create_result_button(item)
            self.results_box.append(button)
            self.result_buttons.append(button)
            self.visible_items.append(item)

        self._update_selection_highlight()

    def _create_result_button(self, item: ResultItem):
        """
        Create a row for a result: icon, title/subtitle, accessories.

        Args:
            item: ResultItem to render

        Returns:
            widgets.Button
        """
        button = widgets.Button(
            css_classes=["result-item", f"result-{item.result_type}"],
            child=widgets.Box(
                spacing=10,
                child=[
                    self._create_icon(item),
                    widgets.Box(
                        vertical=True,
                        hexpand=True,
                        valign="center",
                        child=[
                            widgets.Label(
                                label=item.title,
                                css_classes=["result-title"],
                                halign="start",
                                ellipsize="end",
                                max_width_chars=40,
                            ),
                            widgets.Label(
                                label=item.description,
                                css_classes=["result-description"],
                                halign="start",
                                ellipsize="end",
                                max_width_chars=60,
                                visible=bool(item.description),
                            ),
                        ],
                    ),
                    widgets.Box(
                        spacing=6,
                        valign="center",
                        child=[self._create_accessory(a) for a in item.accessories],
                    ),
                ],
            ),
        )

        gesture_left = Gtk.GestureClick()
        gesture_left.set_button(1)
        gesture_left.connect("pressed", lambda g, n, x, y, item=item: self._activate(item))
        button.add_controller(gesture_left)

        gesture_right = Gtk.GestureClick()
        gesture_right.set_button(3)
        gesture_right.connect("pressed", lambda g, n, x, y, item=item: self._show_actions(item))
        button.add_controller(gesture_right)

        return button

    def _create_icon(self, item: ResultItem):
        """App icon from the snapshot's base64 PNG, else a themed icon."""
        png = item.app.icon_bytes() if item.app is not None else None
        if png:
            try:
                texture = Gdk.Texture.new_from_bytes(GLib.Bytes.new(png))
                image = Gtk.Image.new_from_paintable(texture)
                image.set_pixel_size(32)
                image.add_css_class("app-icon")
                return image
            except GLib.Error:
                logger.debug(f"Invalid icon data for {item.title}")

        return widgets.Icon(
            image=item.icon,
            pixel_size=32,
            css_classes=["app-icon"],
        )

    def _create_accessory(self, accessory):
        if accessory.tag:
            return widgets.Label(
                label=accessory.tag,
                css_classes=["badge", f"badge-{accessory.color}"],
                tooltip_text=accessory.tooltip or None,
            )
        if accessory.icon:
            return widgets.Icon(
                image=accessory.icon,
                pixel_size=16,
                css_classes=["accessory-icon", f"accessory-{accessory.color}"],
                tooltip_text=accessory.tooltip or None,
            )
        return widgets.Label(
            label=accessory.text,
            css_classes=["accessory-text"],
        )

    def _show_actions(self, item: ResultItem):
        """Replace the list with the item's actions, grouped by section."""
        if not item.actions:
            return
        self.action_item = item
        self.selected_index = 0
        rows = [
            ResultItem(
                title=action.title,
                icon=action.icon or "system-run",
                result_type="action",
                section=action.section or item.title,
                actions=[action],
            )
            for action in item.actions
        ]
        self._update_results(rows)

    # -- actions -----------------------------------------------------------

    def _activate(self, item: ResultItem):
        action = item.primary_action()
        if action is None:
            return

        if action.set_query is not None:
            self.action_item = None
            self.search_entry.set_text(action.set_query)
            self.search_entry.set_position(-1)
            return

        try:
            action.callback()
        except Exception:
            logger.exception(f"Action '{action.title}' failed")
            notify(f"{action.title} failed", "See the launcher log for details", TOAST_FAILURE)
            return

        if action.close_on_run:
            close_launcher()
        else:
            self.action_item = None
            self._refresh()

    def _on_visibility_changed(self, window, param):
        """Reload the snapshot on open; reset state on close."""
        if window.get_visible():
            monitor = get_focused_monitor()
            if window.monitor != monitor:
                window.monitor = monitor

            if self.store.reload() is None:
                notify("Vesslo data not found", "Please run Vesslo app first", TOAST_FAILURE)
            self._refresh()
            GLib.timeout_add(150, self._grab_entry_focus)
        else:
            self.router.reset()
            self.action_item = None
            self.selected_index = -1
            self.search_entry.set_text("")

    def _grab_entry_focus(self) -> bool:
        self.search_entry.grab_focus()
        return False  # Don't repeat

    # -- keyboard ----------------------------------------------------------

    def _on_key_press(self, controller, keyval, keycode, state):
        """Arrows navigate, Enter activates, Shift+Enter lists actions, Escape backs out."""
        if keyval == Gdk.KEY_Escape:
            if self.action_item is not None:
                self.action_item = None
                self.selected_index = -1
                self._update_results(self.results)
            else:
                close_launcher()
            return True

        if not self.result_buttons:
            return False

        if keyval == Gdk.KEY_Down:
            if self.selected_index < len(self.result_buttons) - 1:
                self.selected_index += 1
                self._update_selection_highlight()
            return True

        elif keyval == Gdk.KEY_Up:
            if self.selected_index > 0:
                self.selected_index -= 1
                self._update_selection_highlight()
            elif self.selected_index == 0:
                self.selected_index = -1
                self._update_selection_highlight()
                self.search_entry.grab_focus()
            return True

        elif keyval in (Gdk.KEY_Return, Gdk.KEY_KP_Enter):
            index = max(self.selected_index, 0)
            if index >= len(self.visible_items):
                return False
            item = self.visible_items[index]
            if state & Gdk.ModifierType.SHIFT_MASK and self.action_item is None:
                self._show_actions(item)
            else:
                self._activate(item)
            return True

        return False

    def _update_selection_highlight(self):
        """Update visual highlight for keyboard navigation."""
        for i, button in enumerate(self.result_buttons):
            if i == self.selected_index:
                button.add_css_class("keyboard-selected")
                button.grab_focus()
            else:
                button.remove_css_class("keyboard-selected")
