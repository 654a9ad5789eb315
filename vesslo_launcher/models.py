"""
Snapshot models - Typed view of the JSON exported by Vesslo.

Vesslo writes ~/.vesslo/data.json periodically:

    {
      "exportedAt": "2025-01-31T09:12:44Z",
      "updateCount": 3,
      "apps": [{"id": "...", "name": "...", "bundleId": "...", ...}]
    }

Keys are camelCase on disk and snake_case here.
"""

import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

SOURCE_BREW = "Brew"
SOURCE_SPARKLE = "Sparkle"
SOURCE_APP_STORE = "App Store"


class DataFormatError(ValueError):
    """Raised when the snapshot does not have the expected shape."""


def _optional_str(record: dict, key: str) -> Optional[str]:
    value = record.get(key)
    if value is None:
        return None
    return str(value)


def _str_list(record: dict, key: str) -> list[str]:
    value = record.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DataFormatError(f"'{key}' must be a list, got {type(value).__name__}")
    return [str(v) for v in value if v is not None]


@dataclass
class VessloApp:
    """A single application tracked by Vesslo."""
    id: str
    name: str
    path: str = ""
    bundle_id: Optional[str] = None
    version: Optional[str] = None
    target_version: Optional[str] = None
    developer: Optional[str] = None
    icon: Optional[str] = None  # base64 PNG
    tags: list[str] = field(default_factory=list)
    memo: Optional[str] = None
    sources: list[str] = field(default_factory=list)
    app_store_id: Optional[str] = None
    homebrew_cask: Optional[str] = None

    @classmethod
    def from_dict(cls, record: dict) -> "VessloApp":
        if not isinstance(record, dict):
            raise DataFormatError(f"App record must be an object, got {type(record).__name__}")
        if record.get("id") is None or record.get("name") is None:
            raise DataFormatError(f"App record missing 'id' or 'name': {record!r:.80}")

        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            path=str(record.get("path") or ""),
            bundle_id=_optional_str(record, "bundleId"),
            version=_optional_str(record, "version"),
            target_version=_optional_str(record, "targetVersion"),
            developer=_optional_str(record, "developer"),
            icon=_optional_str(record, "icon"),
            tags=_str_list(record, "tags"),
            memo=_optional_str(record, "memo"),
            sources=_str_list(record, "sources"),
            app_store_id=_optional_str(record, "appStoreId"),
            homebrew_cask=_optional_str(record, "homebrewCask"),
        )

    @property
    def has_update(self) -> bool:
        return self.target_version is not None

    def has_source(self, source: str) -> bool:
        return source in self.sources

    @property
    def is_homebrew(self) -> bool:
        return self.has_source(SOURCE_BREW)

    @property
    def is_sparkle(self) -> bool:
        return self.has_source(SOURCE_SPARKLE)

    @property
    def is_app_store(self) -> bool:
        return self.has_source(SOURCE_APP_STORE)

    def icon_bytes(self) -> Optional[bytes]:
        """Decode the embedded PNG icon, or None if absent or corrupt."""
        if not self.icon:
            return None
        try:
            return base64.b64decode(self.icon, validate=True)
        except (binascii.Error, ValueError):
            return None


@dataclass
class VessloData:
    """Whole snapshot: export timestamp plus the app list."""
    exported_at: str
    update_count: int = 0
    apps: list[VessloApp] = field(default_factory=list)

    @classmethod
    def from_dict(cls, payload: dict) -> "VessloData":
        if not isinstance(payload, dict):
            raise DataFormatError("Snapshot root must be an object")

        apps = payload.get("apps")
        if apps is None:
            apps = []
        if not isinstance(apps, list):
            raise DataFormatError("'apps' must be a list")

        try:
            update_count = int(payload.get("updateCount") or 0)
        except (TypeError, ValueError):
            raise DataFormatError(f"'updateCount' is not a number: {payload.get('updateCount')!r}")

        return cls(
            exported_at=str(payload.get("exportedAt") or ""),
            update_count=update_count,
            apps=[VessloApp.from_dict(a) for a in apps],
        )

    def exported_datetime(self) -> Optional[datetime]:
        """
        Parse exportedAt into an aware datetime.

        Naive timestamps are treated as UTC. Returns None when unparseable.
        """
        text = self.exported_at.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def age_hours(self, now: Optional[datetime] = None) -> Optional[float]:
        exported = self.exported_datetime()
        if exported is None:
            return None
        now = now or datetime.now(timezone.utc)
        return (now - exported).total_seconds() / 3600

    def is_fresh(self, max_age_hours: float = 24, now: Optional[datetime] = None) -> bool:
        age = self.age_hours(now)
        return age is not None and age < max_age_hours
