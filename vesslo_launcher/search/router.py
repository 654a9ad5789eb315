"""
Query Router - Dispatches palette queries to priority-ordered handlers.

Each handler declares a priority (lower = higher priority) and a matches()
method. The router finds the first matching handler and returns its results.
App search is always the fallback (highest priority number).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Callable


@dataclass
class Accessory:
    """Right-aligned decoration on a result row: plain text, a badge, or an icon."""
    text: str = ""
    tag: str = ""
    color: str = "secondary"  # orange, blue, green, purple, secondary
    icon: str = ""
    tooltip: str = ""


@dataclass
class ItemAction:
    """
    Secondary action offered for a result.

    Either runs `callback` or, when `set_query` is given, replaces the
    palette query (used for tag navigation). The palette closes after a
    callback runs unless `close_on_run` is False.
    """
    title: str
    callback: Optional[Callable] = None
    icon: str = ""
    section: str = ""
    set_query: Optional[str] = None
    close_on_run: bool = True


@dataclass
class ResultItem:
    """A single palette result from any handler."""
    title: str
    description: str = ""
    icon: str = "application-x-executable"
    result_type: str = "app"  # app, tag, update, bulk, hint, empty, notice
    section: str = ""
    accessories: list[Accessory] = field(default_factory=list)
    actions: list[ItemAction] = field(default_factory=list)
    on_activate: Optional[Callable] = None
    app: object = None  # VessloApp for app and update results

    def primary_action(self) -> Optional[ItemAction]:
        """The action Enter triggers: on_activate, else the first action."""
        if self.on_activate is not None:
            return ItemAction(title=self.title, callback=self.on_activate)
        return self.actions[0] if self.actions else None


class SearchHandler(ABC):
    """Base class for all search handlers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Handler identifier."""
        ...

    @property
    @abstractmethod
    def priority(self) -> int:
        """Lower number = checked first. App search should be ~1000."""
        ...

    @abstractmethod
    def matches(self, query: str) -> bool:
        """Return True if this handler should process the query."""
        ...

    @abstractmethod
    def get_results(self, query: str) -> list[ResultItem]:
        """Return results for the query."""
        ...


class QueryRouter:
    """Routes queries to the appropriate handler based on priority."""

    def __init__(self):
        self._handlers: list[SearchHandler] = []

    def register(self, handler: SearchHandler) -> None:
        """Register a handler and re-sort by priority."""
        self._handlers.append(handler)
        self._handlers.sort(key=lambda h: h.priority)

    def reset(self) -> None:
        """Clear per-session handler state (e.g. pending confirmations)."""
        for handler in self._handlers:
            if hasattr(handler, "reset"):
                handler.reset()

    def route(self, query: str) -> tuple[str, list[ResultItem]]:
        """
        Find the first matching handler and return its results.

        Args:
            query: The palette query string

        Returns:
            Tuple of (handler_name, results_list).
            Returns ("none", []) if no handler matches.
        """
        if not query or not query.strip():
            # Empty query - app search lists everything
            for handler in self._handlers:
                if handler.name == "app_search":
                    return handler.name, handler.get_results("")
            return "none", []

        for handler in self._handlers:
            if handler.matches(query):
                return handler.name, handler.get_results(query)

        return "none", []
