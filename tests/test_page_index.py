"""Unit tests for the page index, navigation, listings and SEO artifacts."""

from __future__ import annotations

import datetime as dt

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from flint_pages.content.metadata import PageMetadata
from flint_pages.content.page_index import (
    PageIndexEntry,
    collect_site_labels,
    encode_page_index,
    generate_navigation,
    generate_page_index,
    group_by_category,
    group_by_label,
    label_slug,
    listing_groups,
)
from flint_pages.seo import generate_robots_txt, generate_sitemap

PAGES = [
    ("index.md", PageMetadata(short_uri="home", title="Home", order=0)),
    (
        "blog/index.md",
        PageMetadata(short_uri="blog", title="Blog", order=1, labels=("news",)),
    ),
    (
        "blog/launch.md",
        PageMetadata(
            short_uri="launch",
            title="Launch",
            parent="blog",
            labels=("news", "python"),
            category="Releases",
            date=dt.date(2026, 2, 1),
            description="We shipped.",
        ),
    ),
    ("about.md", PageMetadata(short_uri="about", title="about")),
]


@pytest.mark.parametrize(
    ("text", "slug"),
    [
        ("Python", "python"),
        ("  Web Components! ", "web-components"),
        ("C++ & Rust", "c-rust"),
        ("--edge--", "edge"),
    ],
)
def test_label_slug(text: str, slug: str) -> None:
    """Labels slug to lowercase hyphenated ASCII."""
    assert label_slug(text) == slug, f"unexpected slug for {text!r}"


def test_navigation_uses_root_pages_in_order() -> None:
    """Only root-level pages appear, sorted by order then title."""
    items = generate_navigation(PAGES, "/docs")
    assert [(item.label, item.href) for item in items] == [
        ("Home", "/docs/"),
        ("Blog", "/docs/blog"),
        ("about", "/docs/about"),
    ], "expected root pages sorted by order then title"
    assert not any(item.active for item in items), "expected no active item yet"
    assert not any(item.hx_boost for item in items), "expected no boost by default"


def test_navigation_can_boost_every_link() -> None:
    """``hx_boost`` marks each generated nav item."""
    items = generate_navigation(PAGES, hx_boost=True)
    assert all(item.hx_boost for item in items), "expected every item boosted"


def test_page_index_entries() -> None:
    """Every page becomes an entry with its public URL."""
    entries = generate_page_index(PAGES)
    launch = entries[2]
    assert launch.url == "/blog/launch", "expected the clean URL"
    assert launch.labels == ["news", "python"], "expected the labels"
    assert launch.date == "2026-02-01", "expected an ISO date"
    assert entries[0].date is None, "expected undated pages to carry null"


def test_encode_page_index_round_trips_as_json() -> None:
    """The encoded index is a JSON array of objects."""
    payload = msgspec_json.decode(encode_page_index(generate_page_index(PAGES)))
    assert isinstance(payload, list), "expected a JSON array"
    assert payload[2] == {
        "url": "/blog/launch",
        "title": "Launch",
        "description": "We shipped.",
        "labels": ["news", "python"],
        "category": "Releases",
        "date": "2026-02-01",
    }, "expected every public field"


def test_label_groups_need_two_pages() -> None:
    """Listing groups keep labels shared by at least two pages."""
    entries = generate_page_index(PAGES)
    groups = group_by_label(entries)
    assert set(groups) == {"news", "python"}, "expected every label grouped"
    assert list(listing_groups(groups)) == ["news"], "expected shared labels only"


def test_category_groups_skip_uncategorized() -> None:
    """Pages without a category are not grouped."""
    groups = group_by_category(generate_page_index(PAGES))
    assert list(groups) == ["Releases"], "expected only the real category"
    assert listing_groups(groups) == {}, "expected no single-page listings"


def test_collect_site_labels_first_seen_order() -> None:
    """Site labels are unique and keep first-seen order."""
    labels = collect_site_labels(metadata for _path, metadata in PAGES)
    assert labels == ["news", "python"], "expected unique labels"


def test_robots_txt_points_at_sitemap() -> None:
    """``robots.txt`` allows everything and names the sitemap."""
    assert generate_robots_txt("https://example.com/", "/docs") == (
        "User-agent: *\nAllow: /\n\nSitemap: https://example.com/docs/sitemap.xml\n"
    ), "expected the permissive robots file"


def test_sitemap_lists_pages_and_skips_listings() -> None:
    """Listing pages are excluded and dated pages carry ``lastmod``."""
    entries = [
        *generate_page_index(PAGES, "/docs"),
        PageIndexEntry(url="/docs/label/news", title="Label: news"),
        PageIndexEntry(url="/docs/category/releases", title="Category: Releases"),
    ]
    xml = generate_sitemap(entries, "https://example.com", "/docs")
    soup = BeautifulSoup(xml, "html.parser")
    locs = [loc.get_text() for loc in soup.find_all("loc")]
    assert locs == [
        "https://example.com/docs/",
        "https://example.com/docs/blog",
        "https://example.com/docs/blog/launch",
        "https://example.com/docs/about",
    ], "expected one absolute URL per page"
    lastmods = [tag.get_text() for tag in soup.find_all("lastmod")]
    assert lastmods == ["2026-02-01"], "expected lastmod only for dated pages"
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>'), (
        "expected an XML declaration"
    )
