"""Aggregate page metadata into the site-wide page index and listings.

The page index is the JSON array that the browser-side label router fetches
from ``fragments/page-index.json``. The same entries drive the label and
category listing pages and the sitemap, so the grouping helpers live here
too.

Examples
--------
>>> label_slug("  Web Components! ")
'web-components'
"""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ

import msgspec
import msgspec.json as msgspec_json

from flint_pages._constants import DEFAULT_ORDER, ROOT_PARENT

from .paths import url_path

if typ.TYPE_CHECKING:
    from .metadata import PageMetadata


class PageIndexEntry(msgspec.Struct, frozen=True):
    """Public summary of one page, serialized into the page index JSON."""

    url: str
    title: str
    description: str = ""
    labels: list[str] = msgspec.field(default_factory=list)
    category: str = ""
    date: str | None = None


class NavItem(msgspec.Struct):
    """Navigation bar entry for a root-level page."""

    label: str
    href: str
    active: bool = False
    hx_boost: bool = False
    order: int = DEFAULT_ORDER


def label_slug(text: str) -> str:
    """Return the URL slug shared by label pages and the client-side router.

    Lowercase, trim, collapse runs of characters outside ``[a-z0-9]`` into a
    single hyphen, then trim leading and trailing hyphens.
    """
    return re.sub(r"[^a-z0-9]+", "-", text.lower().strip()).strip("-")


def build_page_index_entry(metadata: PageMetadata, url: str) -> PageIndexEntry:
    """Return the index entry for a page published at ``url``."""
    return PageIndexEntry(
        url=url,
        title=metadata.title,
        description=metadata.description,
        labels=list(metadata.labels),
        category=metadata.category,
        date=metadata.date.isoformat() if metadata.date else None,
    )


def generate_page_index(
    pages: cabc.Iterable[tuple[str, PageMetadata]], base_path: str = ""
) -> list[PageIndexEntry]:
    """Build index entries from ``(relative_path, metadata)`` pairs."""
    return [
        build_page_index_entry(metadata, url_path(relative, base_path))
        for relative, metadata in pages
    ]


def encode_page_index(entries: cabc.Sequence[PageIndexEntry]) -> bytes:
    """Serialize index entries into the JSON document served to browsers."""
    return msgspec_json.encode(list(entries))


def group_by_label(
    entries: cabc.Iterable[PageIndexEntry],
) -> dict[str, list[PageIndexEntry]]:
    """Group entries under every label they carry, in first-seen order."""
    groups: dict[str, list[PageIndexEntry]] = {}
    for entry in entries:
        for label in entry.labels:
            groups.setdefault(label, []).append(entry)
    return groups


def group_by_category(
    entries: cabc.Iterable[PageIndexEntry],
) -> dict[str, list[PageIndexEntry]]:
    """Group entries by their category, skipping uncategorized pages."""
    groups: dict[str, list[PageIndexEntry]] = {}
    for entry in entries:
        if entry.category:
            groups.setdefault(entry.category, []).append(entry)
    return groups


def listing_groups(
    groups: cabc.Mapping[str, list[PageIndexEntry]], minimum: int = 2
) -> dict[str, list[PageIndexEntry]]:
    """Keep only groups with at least ``minimum`` members.

    A listing for a single page adds nothing over linking to the page itself,
    so labels and categories used once produce no listing page.
    """
    return {name: pages for name, pages in groups.items() if len(pages) >= minimum}


def collect_site_labels(pages: cabc.Iterable[PageMetadata]) -> list[str]:
    """Return every distinct label across ``pages`` in first-seen order."""
    seen: dict[str, None] = {}
    for page in pages:
        for label in page.labels:
            seen.setdefault(label, None)
    return list(seen)


def generate_navigation(
    pages: cabc.Iterable[tuple[str, PageMetadata]],
    base_path: str = "",
    *,
    hx_boost: bool = False,
) -> list[NavItem]:
    """Return nav items for root-level pages sorted by order then title.

    With ``hx_boost`` every link is marked for htmx boosting.
    """
    items = [
        NavItem(
            label=metadata.title,
            href=url_path(relative, base_path),
            order=metadata.order,
            hx_boost=hx_boost,
        )
        for relative, metadata in pages
        if metadata.parent == ROOT_PARENT
    ]
    items.sort(key=lambda item: (item.order, item.label.casefold()))
    return items


__all__ = [
    "NavItem",
    "PageIndexEntry",
    "build_page_index_entry",
    "collect_site_labels",
    "encode_page_index",
    "generate_navigation",
    "generate_page_index",
    "group_by_category",
    "group_by_label",
    "label_slug",
    "listing_groups",
]
