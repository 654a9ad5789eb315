"""
Shared test fixtures for the Vesslo launcher test suite.

Provides a sample Vesslo snapshot and settings files that use real file
I/O (no mocking of the filesystem), plus an in-memory store for the
handlers.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest
import toml

from vesslo_launcher.models import VessloData
from vesslo_launcher.search.handlers.items import ItemFactory

SAMPLE_APPS = [
    {
        "id": "1",
        "name": "Firefox",
        "bundleId": "org.mozilla.firefox",
        "version": "120.0",
        "targetVersion": "121.0",
        "developer": "Mozilla",
        "path": "/Applications/Firefox.app",
        "icon": None,
        "tags": ["browser", "dev"],
        "memo": "Main browser",
        "sources": ["Brew"],
        "appStoreId": None,
        "homebrewCask": "firefox",
    },
    {
        "id": "2",
        "name": "Xcode",
        "bundleId": "com.apple.dt.Xcode",
        "version": "15.0",
        "targetVersion": "15.1",
        "developer": "Apple",
        "path": "/Applications/Xcode.app",
        "icon": None,
        "tags": ["dev"],
        "memo": None,
        "sources": ["App Store"],
        "appStoreId": "497799835",
        "homebrewCask": None,
    },
    {
        "id": "3",
        "name": "iTerm",
        "bundleId": "com.googlecode.iterm2",
        "version": "3.4.0",
        "targetVersion": "3.5.0",
        "developer": "George Nachman",
        "path": "/Applications/iTerm.app",
        "icon": None,
        "tags": ["dev", "terminal"],
        "memo": "Use with tmux",
        "sources": ["Sparkle"],
        "appStoreId": None,
        "homebrewCask": None,
    },
    {
        "id": "4",
        "name": "Notes Helper",
        "bundleId": None,
        "version": "1.0",
        "targetVersion": None,
        "developer": None,
        "path": "/Applications/Notes Helper.app",
        "icon": None,
        "tags": [],
        "memo": "firefox bookmarks export",
        "sources": [],
        "appStoreId": None,
        "homebrewCask": None,
    },
    {
        "id": "5",
        "name": "Arc",
        "bundleId": "company.thebrowser.Browser",
        "version": "1.2",
        "targetVersion": "1.3",
        "developer": "The Browser Company",
        "path": "/Applications/Arc.app",
        "icon": None,
        "tags": ["browser"],
        "memo": None,
        "sources": [],
        "appStoreId": None,
        "homebrewCask": None,
    },
]


def make_payload(apps=None, exported_at=None):
    """Build a snapshot dict the way Vesslo writes it."""
    apps = SAMPLE_APPS if apps is None else apps
    if exported_at is None:
        exported_at = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return {
        "exportedAt": exported_at,
        "updateCount": sum(1 for a in apps if a.get("targetVersion") is not None),
        "apps": apps,
    }


class FakeStore:
    """In-memory stand-in for VessloDataStore."""

    def __init__(self, data=None):
        self.data = data

    @property
    def loaded(self):
        return self.data is not None

    @property
    def apps(self):
        return self.data.apps if self.data else []

    def status_notice(self, now=None):
        return None


@pytest.fixture
def sample_data():
    return VessloData.from_dict(make_payload())


@pytest.fixture
def store(sample_data):
    return FakeStore(sample_data)


@pytest.fixture
def empty_store():
    return FakeStore(None)


@pytest.fixture
def sync_items():
    """ItemFactory that runs brew calls inline instead of on a thread."""
    return ItemFactory(brew_path="brew", brew_timeout=30, run_async=lambda fn, *args: fn(*args))


@pytest.fixture
def tmp_snapshot(tmp_path):
    """Write a fresh snapshot to a real data.json file."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(make_payload(), indent=2))
    return path


@pytest.fixture
def stale_snapshot(tmp_path):
    """Snapshot exported two days ago."""
    path = tmp_path / "data.json"
    exported = (datetime.now(timezone.utc) - timedelta(hours=48)).strftime("%Y-%m-%dT%H:%M:%SZ")
    path.write_text(json.dumps(make_payload(exported_at=exported)))
    return path


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with a few overrides."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "vesslo": {"data_path": str(tmp_path / "data.json")},
        "prefixes": {"updates": "up:"},
        "updates": {"default_sort": "name"},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


@pytest.fixture
def sample_records():
    """Raw camelCase app records, as found in data.json."""
    return [dict(record) for record in SAMPLE_APPS]


@pytest.fixture
def payload_factory():
    return make_payload
