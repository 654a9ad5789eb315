"""
Search handlers - One per Vesslo palette view.

Each handler checks if it can handle a query and returns typed results.
"""

from .app_search import AppSearchHandler
from .homebrew import BulkHomebrewHandler
from .items import ItemFactory
from .tags import TagBrowseHandler
from .updates import UpdatesHandler

__all__ = [
    "AppSearchHandler",
    "BulkHomebrewHandler",
    "ItemFactory",
    "TagBrowseHandler",
    "UpdatesHandler",
]
