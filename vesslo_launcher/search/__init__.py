"""
Search package - Query routing and handler framework.

Palette queries are dispatched to priority-ordered handlers: Homebrew
bulk updates, the updates list, tag browsing, and app search as fallback.
"""

from .router import Accessory, ItemAction, QueryRouter, ResultItem, SearchHandler

__all__ = ["QueryRouter", "SearchHandler", "ResultItem", "Accessory", "ItemAction"]
