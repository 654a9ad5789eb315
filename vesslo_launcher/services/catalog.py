"""
Catalog - Searching, tag grouping, and update ordering over the snapshot.

Everything here is pure list processing over VessloApp records so the
search handlers and tests can share it without touching the UI.

Search reports *why* an app matched (developer, memo, tag). A name match
includes the app but is not reported, since the name is already the
item title.
"""

from dataclasses import dataclass, field
from typing import Optional

from rapidfuzz import fuzz, process

from vesslo_launcher.models import VessloApp

MATCH_DEVELOPER = "developer"
MATCH_MEMO = "memo"
MATCH_TAG = "tag"

SORT_SOURCE = "source"
SORT_NAME = "name"
SORT_NAME_DESC = "name-desc"
SORT_DEVELOPER = "developer"

SORT_LABELS = {
    SORT_SOURCE: "By Source",
    SORT_NAME: "By Name (A-Z)",
    SORT_NAME_DESC: "By Name (Z-A)",
    SORT_DEVELOPER: "By Developer",
}


@dataclass
class SearchResult:
    """An app that matched a query and the fields that caused it."""
    app: VessloApp
    matched_fields: list[str] = field(default_factory=list)


@dataclass
class TagGroup:
    tag: str
    apps: list[VessloApp] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.apps)


@dataclass
class UpdateSection:
    title: str
    apps: list[VessloApp] = field(default_factory=list)


def _contains(value: Optional[str], query: str) -> bool:
    return value is not None and query in value.lower()


def match_fields(app: VessloApp, query: str) -> Optional[list[str]]:
    """
    Classify a single app against a lowercased query.

    Returns:
        Matched field names (possibly empty for a name-only match),
        or None when the app does not match at all
    """
    matched = []
    if _contains(app.developer, query):
        matched.append(MATCH_DEVELOPER)
    if _contains(app.memo, query):
        matched.append(MATCH_MEMO)
    if any(query in tag.lower() for tag in app.tags):
        matched.append(MATCH_TAG)

    if _contains(app.name, query) or matched:
        return matched
    return None


def search_apps(apps: list[VessloApp], query: str) -> list[SearchResult]:
    """
    Case-insensitive substring search over name, developer, memo and tags.

    An empty query returns every app with no matched fields. Result order
    follows the snapshot order.
    """
    q = query.lower()
    if not q:
        return [SearchResult(app) for app in apps]

    results = []
    for app in apps:
        matched = match_fields(app, q)
        if matched is not None:
            results.append(SearchResult(app, matched))
    return results


def group_by_tag(apps: list[VessloApp]) -> list[TagGroup]:
    """
    Group apps under each of their tags, largest group first.

    Ties keep the order in which tags first appear in the snapshot.
    """
    groups: dict[str, TagGroup] = {}
    for app in apps:
        for tag in dict.fromkeys(app.tags):
            groups.setdefault(tag, TagGroup(tag)).apps.append(app)

    return sorted(groups.values(), key=lambda g: -g.count)


def apps_for_tag(groups: list[TagGroup], tag: str) -> list[VessloApp]:
    for group in groups:
        if group.tag == tag:
            return group.apps
    return []


def filter_tags(groups: list[TagGroup], text: str, fuzzy_threshold: int = 60) -> list[TagGroup]:
    """
    Narrow the tag list by a partial tag name.

    Substring matches come first in group order; if there are none, fall
    back to fuzzy suggestions (typos like "#prodctivity").
    """
    q = text.strip().lower()
    if not q or not groups:
        return list(groups)

    substring = [g for g in groups if q in g.tag.lower()]
    if substring:
        return substring

    choices = {i: g.tag for i, g in enumerate(groups)}
    matches = process.extract(
        q,
        choices,
        scorer=fuzz.WRatio,
        processor=str.lower,
        limit=len(choices),
        score_cutoff=fuzzy_threshold,
    )
    # matches: list of (matched_string, score, key)
    return [groups[key] for _tag, _score, key in matches]


def apps_with_updates(apps: list[VessloApp]) -> list[VessloApp]:
    return [app for app in apps if app.has_update]


def _name_key(app: VessloApp):
    return (app.name.casefold(), app.name)


def _developer_key(app: VessloApp):
    developer = app.developer or ""
    return (developer.casefold(), developer)


def sort_updates(apps: list[VessloApp], sort_by: str) -> list[VessloApp]:
    """
    Order update candidates for display.

    "source" keeps snapshot order (sections do the grouping); the other
    options sort by name or developer. All sorts are stable.
    """
    if sort_by == SORT_SOURCE:
        return list(apps)
    if sort_by == SORT_NAME:
        return sorted(apps, key=_name_key)
    if sort_by == SORT_NAME_DESC:
        return sorted(apps, key=_name_key, reverse=True)
    if sort_by == SORT_DEVELOPER:
        return sorted(apps, key=_developer_key)
    raise ValueError(f"Unknown sort option: {sort_by!r}")


def resolve_sort_option(text: str) -> Optional[str]:
    """Map user input ("", "name", "dev", "name-d") to a sort key."""
    q = text.strip().lower()
    if q in SORT_LABELS:
        return q
    candidates = [key for key in SORT_LABELS if key.startswith(q)]
    if len(candidates) == 1:
        return candidates[0]
    return None


def source_badge(app: VessloApp) -> tuple[str, str]:
    """
    Pick the single badge shown on an update row.

    Returns:
        Tuple of (badge_text, color)
    """
    if app.is_homebrew:
        return "brew", "orange"
    if app.is_app_store:
        return "appStore", "blue"
    if app.is_sparkle:
        return "sparkle", "green"
    return "manual", "secondary"


def source_color(source: str) -> str:
    return {
        "Brew": "orange",
        "App Store": "blue",
        "Sparkle": "green",
    }.get(source, "secondary")


# Section order on screen. Filters overlap: an app with Brew or Sparkle and
# App Store is listed in both of its sections.
_SOURCE_SECTIONS = [
    ("Homebrew", lambda app: app.is_homebrew),
    ("Sparkle", lambda app: app.is_sparkle and not app.is_homebrew),
    ("App Store", lambda app: app.is_app_store),
    ("Manual", lambda app: not (app.is_homebrew or app.is_sparkle or app.is_app_store)),
]


def group_updates_by_source(apps: list[VessloApp]) -> list[UpdateSection]:
    """Split apps into Homebrew / Sparkle / App Store / Manual sections."""
    sections = []
    for label, belongs in _SOURCE_SECTIONS:
        members = [app for app in apps if belongs(app)]
        if members:
            sections.append(UpdateSection(f"{label} ({len(members)})", members))
    return sections


def build_update_sections(apps: list[VessloApp], sort_by: str) -> list[UpdateSection]:
    """Sections for the updates view under the chosen sort option."""
    ordered = sort_updates(apps_with_updates(apps), sort_by)
    if not ordered:
        return []
    if sort_by == SORT_SOURCE:
        return group_updates_by_source(ordered)
    return [UpdateSection(f"Updates ({len(ordered)}) - {SORT_LABELS[sort_by]}", ordered)]


def homebrew_updates(apps: list[VessloApp]) -> list[VessloApp]:
    """Apps Homebrew can upgrade right now."""
    return [
        app for app in apps
        if app.is_homebrew and app.has_update and app.homebrew_cask
    ]
