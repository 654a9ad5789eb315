"""
Vesslo Data Service - Read the snapshot Vesslo exports to disk.

Vesslo is the source of truth; this side never writes the file. The
snapshot is re-read each time the palette opens because Vesslo refreshes
it in the background.

A snapshot older than `stale_after_hours` (default 24) usually means the
Vesslo app is no longer running, so the data may be out of date.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger

from vesslo_launcher.models import VessloApp, VessloData
from vesslo_launcher.search.router import ResultItem

DATA_PATH = Path.home() / ".vesslo" / "data.json"
DEFAULT_STALE_HOURS = 24


def load_vesslo_data(path: Optional[Path] = None) -> Optional[VessloData]:
    """
    Load and parse the Vesslo snapshot.

    Args:
        path: Snapshot location, defaults to ~/.vesslo/data.json

    Returns:
        VessloData, or None if the file is missing or unreadable
    """
    data_path = Path(path) if path else DATA_PATH
    if not data_path.exists():
        logger.debug(f"Vesslo data not found at {data_path}")
        return None

    try:
        with open(data_path, encoding="utf-8") as f:
            payload = json.load(f)
        return VessloData.from_dict(payload)
    except (OSError, ValueError):
        # ValueError covers JSONDecodeError, UnicodeDecodeError and DataFormatError
        logger.exception(f"Failed to load Vesslo data from {data_path}")
        return None


def is_vesslo_running(
    path: Optional[Path] = None,
    max_age_hours: float = DEFAULT_STALE_HOURS,
    now: Optional[datetime] = None,
) -> bool:
    """Vesslo counts as running when its last export is recent enough."""
    data = load_vesslo_data(path)
    if data is None:
        return False
    return data.is_fresh(max_age_hours, now)


class VessloDataStore:
    """
    Holds the most recently loaded snapshot for the search handlers.

    Methods:
        reload(): Re-read the snapshot from disk
        status_notice(): Warning result for stale data
    """

    def __init__(self, path: Optional[Path] = None, stale_after_hours: float = DEFAULT_STALE_HOURS):
        self.path = Path(path).expanduser() if path else DATA_PATH
        self.stale_after_hours = stale_after_hours
        self.data: Optional[VessloData] = None

    @property
    def loaded(self) -> bool:
        return self.data is not None

    @property
    def apps(self) -> list[VessloApp]:
        return self.data.apps if self.data else []

    def reload(self) -> Optional[VessloData]:
        self.data = load_vesslo_data(self.path)
        if self.data is not None:
            logger.debug(
                f"Loaded {len(self.data.apps)} apps "
                f"({self.data.update_count} updates) exported at {self.data.exported_at}"
            )
        return self.data

    def status_notice(self, now: Optional[datetime] = None) -> Optional[ResultItem]:
        """
        Warn about a stale snapshot.

        Returns:
            ResultItem of type "notice", or None when data is fresh or
            missing (handlers show their own empty view for missing data)
        """
        if self.data is None or self.data.is_fresh(self.stale_after_hours, now):
            return None

        age = self.data.age_hours(now)
        if age is None:
            description = f"Unknown export time: {self.data.exported_at or 'missing'}"
        else:
            description = f"Last exported {int(age)}h ago. Is Vesslo running?"
        return ResultItem(
            title="Vesslo data may be out of date",
            description=description,
            icon="dialog-warning",
            result_type="notice",
        )


# Singleton accessor
_data_store_instance = None


def get_data_store() -> VessloDataStore:
    """
    Get the singleton VessloDataStore configured from settings.

    Returns:
        VessloDataStore: The global instance (not loaded until reload())
    """
    global _data_store_instance
    if _data_store_instance is None:
        from vesslo_launcher.utils.helpers import load_settings
        settings = load_settings()["vesslo"]
        _data_store_instance = VessloDataStore(
            path=settings["data_path"],
            stale_after_hours=settings["stale_after_hours"],
        )
    return _data_store_instance
