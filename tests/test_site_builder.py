"""End-to-end tests for :class:`SiteBuilder`.

Each test lays out a small content tree under ``tmp_path``, builds it, and
inspects the written HTML with BeautifulSoup and the page index with
``msgspec``. The shared ``site`` fixture covers a home page, a blog section
with a ``:::children`` directive, two posts, a plain document without a
``Short-URI``, and one document whose header cannot be parsed.

Usage
-----
Run ``pytest tests/test_site_builder.py -v``.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import msgspec.json as msgspec_json
import pytest
from bs4 import BeautifulSoup

from flint_pages.builder import BuildResult, SiteBuilder, copy_static_assets
from flint_pages.config import BuildConfig
from flint_pages.content.hierarchy import CircularReferenceError, OrphanPageError
from flint_pages.content.metadata import (
    DuplicateShortUriError,
    InvalidPageTypeError,
)
from flint_pages.tags import TemplateNotFoundError

if typ.TYPE_CHECKING:
    from pathlib import Path

SITE_FILES: dict[str, str] = {
    "index.md": """
        ---
        Short-URI: home
        title: Home
        Order: 0
        Labels: [python]
        ---
        # Welcome
        """,
    "blog/index.md": """
        ---
        Short-URI: blog
        title: Blog
        Type: section
        Order: 1
        ---
        # Blog

        :::children sort=date-desc
        :::
        """,
    "blog/first.md": """
        ---
        Short-URI: first
        title: First Post
        Type: post
        Parent: blog
        Template: post
        Date: 2026-01-05
        Author: Ada
        Category: News
        Labels: [python, release]
        Description: The first one.
        ---
        Hello from the first post.
        """,
    "blog/second.md": """
        ---
        Short-URI: second
        title: Second Post
        Type: post
        Parent: blog
        Template: post
        Date: 2026-02-01
        Category: News
        Labels: [release]
        ---
        Hello again.
        """,
    "notes.md": """
        Plain notes without a header.
        """,
    "broken.md": """
        ---
        title: [unclosed
        ---
        Never rendered.
        """,
}


def _write_tree(root: Path, files: dict[str, str]) -> None:
    for relative, body in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(body).lstrip(), encoding="utf-8")


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


@pytest.fixture
def site(tmp_path: Path) -> tuple[BuildConfig, BuildResult]:
    """Build the sample site with a base path and a site URL."""
    _write_tree(tmp_path / "content", SITE_FILES)
    config = BuildConfig(
        content_dir=tmp_path / "content",
        output_dir=tmp_path / "dist",
        base_path="/docs",
        site_url="https://example.com",
    )
    return config, SiteBuilder(config).build()


def test_build_writes_every_artifact(site: tuple[BuildConfig, BuildResult]) -> None:
    """Pages, listings, the page index and SEO files are all written."""
    config, result = site
    written = {
        path.relative_to(config.output_dir).as_posix() for path in result.written
    }
    assert written == {
        "index.html",
        "blog/index.html",
        "blog/first/index.html",
        "blog/second/index.html",
        "notes/index.html",
        "assets/pygments.css",
        "fragments/page-index.json",
        "label/python/index.html",
        "label/release/index.html",
        "category/news/index.html",
        "robots.txt",
        "sitemap.xml",
    }, "expected every page and generated artifact"
    assert all(path.exists() for path in result.written), "expected files on disk"


def test_malformed_header_is_skipped(site: tuple[BuildConfig, BuildResult]) -> None:
    """Documents with unparseable headers are reported, not rendered."""
    config, result = site
    assert [skipped.relative_path for skipped in result.skipped] == ["broken.md"], (
        "expected the broken document to be skipped"
    )
    assert not (config.output_dir / "broken").exists(), "expected no output"


def test_navigation_marks_current_section(
    site: tuple[BuildConfig, BuildResult],
) -> None:
    """Root pages form the nav, with the current section active."""
    config, _result = site
    soup = _soup(config.output_dir / "blog/first/index.html")
    links = soup.select("nav.site-nav a")
    assert [(link.get_text(), link["href"]) for link in links] == [
        ("Home", "/docs/"),
        ("Blog", "/docs/blog"),
    ], "expected root pages in order with base-path hrefs"
    assert links[1].get("aria-current") == "page", "expected Blog to be active"
    assert links[0].get("aria-current") is None, "expected Home to be inactive"


def test_post_layout_and_breadcrumbs(site: tuple[BuildConfig, BuildResult]) -> None:
    """Posts render through the post layout with a breadcrumb trail."""
    config, _result = site
    soup = _soup(config.output_dir / "blog/first/index.html")
    assert soup.title is not None, "expected a <title> element"
    assert soup.title.get_text() == "First Post", "expected the post title"
    header = soup.select_one("article header")
    assert header is not None, "expected the blog header"
    assert "January 5, 2026" in header.get_text(), "expected the formatted date"
    assert "Ada" in header.get_text(), "expected the author byline"
    crumbs = soup.select("nav.breadcrumbs li")
    assert [crumb.get_text(strip=True).rstrip("/") for crumb in crumbs] == [
        "Blog",
        "First Post",
    ], "expected a Blog > First Post trail"
    assert crumbs[0].a is not None, "expected the ancestor to be linked"
    assert crumbs[0].a["href"] == "/docs/blog", "expected the ancestor URL"
    assert "Hello from the first post." in soup.get_text(), "expected the body"


def test_children_directive_lists_posts(
    site: tuple[BuildConfig, BuildResult],
) -> None:
    """The blog index lists its posts newest first."""
    config, _result = site
    soup = _soup(config.output_dir / "blog/index.html")
    links = soup.select("ul.children-list a")
    assert [(link.get_text(), link["href"]) for link in links] == [
        ("Second Post", "/docs/blog/second"),
        ("First Post", "/docs/blog/first"),
    ], "expected children sorted by date, newest first"
    assert ":::" not in soup.get_text(), "expected no directive markers left"


def test_label_footer_lists_site_labels(
    site: tuple[BuildConfig, BuildResult],
) -> None:
    """Every page carries the site-wide label footer."""
    config, _result = site
    soup = _soup(config.output_dir / "index.html")
    labels = [link["data-label"] for link in soup.select("footer a.label-link")]
    assert labels == ["python", "release"], "expected sorted site labels"


def test_plain_document_renders_outside_the_tree(
    site: tuple[BuildConfig, BuildResult],
) -> None:
    """Documents without a Short-URI render but stay out of nav and index."""
    config, _result = site
    soup = _soup(config.output_dir / "notes/index.html")
    assert soup.title is not None, "expected a <title> element"
    assert soup.title.get_text() == "Untitled", "expected the default title"
    nav = [link.get_text() for link in soup.select("nav.site-nav a")]
    assert "Untitled" not in nav, "expected plain documents outside the nav"
    payload = msgspec_json.decode(
        (config.output_dir / "fragments/page-index.json").read_bytes()
    )
    assert [entry["url"] for entry in payload] == [
        "/docs/blog/first",
        "/docs/blog",
        "/docs/blog/second",
        "/docs/",
    ], "expected only Short-URI documents, in scan order"


def test_label_and_category_pages(site: tuple[BuildConfig, BuildResult]) -> None:
    """Shared labels and categories get listing pages."""
    config, _result = site
    soup = _soup(config.output_dir / "label/release/index.html")
    assert soup.title is not None, "expected a <title> element"
    assert soup.title.get_text() == "Label: release", "expected the label title"
    description = soup.find("meta", attrs={"name": "description"})
    assert description is not None, "expected a description meta tag"
    assert description["content"] == 'All pages tagged with "release"', (
        "expected the label description"
    )
    titles = [link.get_text() for link in soup.select("section.listing-index li a")]
    assert titles == ["First Post", "Second Post"], "expected both tagged posts"

    category = _soup(config.output_dir / "category/news/index.html")
    assert category.title is not None, "expected a <title> element"
    assert category.title.get_text() == "Category: News", "expected category title"


def test_seo_files(site: tuple[BuildConfig, BuildResult]) -> None:
    """Robots and sitemap use the configured site URL and base path."""
    config, _result = site
    robots = (config.output_dir / "robots.txt").read_text(encoding="utf-8")
    assert "Sitemap: https://example.com/docs/sitemap.xml" in robots, (
        "expected the sitemap URL"
    )
    sitemap = (config.output_dir / "sitemap.xml").read_text(encoding="utf-8")
    assert "<loc>https://example.com/docs/blog/first</loc>" in sitemap, (
        "expected absolute page URLs"
    )
    assert "/label/" not in sitemap, "expected listing pages to be excluded"


def test_no_seo_files_without_site_url(tmp_path: Path) -> None:
    """Without a site URL no robots or sitemap is written."""
    _write_tree(tmp_path / "content", {"index.md": SITE_FILES["index.md"]})
    config = BuildConfig(content_dir=tmp_path / "content", output_dir=tmp_path / "out")
    SiteBuilder(config).build()
    assert (config.output_dir / "index.html").exists(), "expected the home page"
    assert not (config.output_dir / "robots.txt").exists(), "expected no robots"
    assert not (config.output_dir / "sitemap.xml").exists(), "expected no sitemap"


@pytest.mark.parametrize(
    ("files", "error", "needle"),
    [
        (
            {
                "a.md": "---\nShort-URI: same\n---\nA",
                "b.md": "---\nShort-URI: same\n---\nB",
            },
            DuplicateShortUriError,
            "b.md",
        ),
        (
            {"lost.md": "---\nShort-URI: lost\nParent: ghost\n---\nx"},
            OrphanPageError,
            "lost.md",
        ),
        (
            {
                "a.md": "---\nShort-URI: a\nParent: b\n---\nx",
                "b.md": "---\nShort-URI: b\nParent: a\n---\nx",
            },
            CircularReferenceError,
            "a -> b -> a",
        ),
        (
            {"odd.md": "---\nShort-URI: odd\nType: article\n---\nx"},
            InvalidPageTypeError,
            "odd.md",
        ),
    ],
)
def test_validation_errors_abort_the_build(
    tmp_path: Path,
    files: dict[str, str],
    error: type[Exception],
    needle: str,
) -> None:
    """Structural problems stop the build before anything is written."""
    _write_tree(tmp_path / "content", files)
    config = BuildConfig(content_dir=tmp_path / "content", output_dir=tmp_path / "out")
    with pytest.raises(error, match=needle):
        SiteBuilder(config).build()
    assert not config.output_dir.exists(), "expected nothing to be written"


def test_unknown_template_aborts(tmp_path: Path) -> None:
    """Asking for an unregistered layout is an error."""
    _write_tree(
        tmp_path / "content",
        {"index.md": "---\nShort-URI: home\nTemplate: landing\n---\nx"},
    )
    config = BuildConfig(content_dir=tmp_path / "content", output_dir=tmp_path / "out")
    with pytest.raises(TemplateNotFoundError, match="landing"):
        SiteBuilder(config).build()


def test_custom_templates_dir(tmp_path: Path) -> None:
    """Layouts load from the configured templates directory."""
    _write_tree(tmp_path / "content", {"index.md": "---\nShort-URI: home\n---\nHi"})
    templates = tmp_path / "layouts"
    templates.mkdir()
    (templates / "default.html").write_text(
        "<html>{{title}}|{{content}}</html>", encoding="utf-8"
    )
    config = BuildConfig(
        content_dir=tmp_path / "content",
        output_dir=tmp_path / "out",
        templates_dir=templates,
    )
    SiteBuilder(config).build()
    html = (config.output_dir / "index.html").read_text(encoding="utf-8")
    assert html == "<html>home|<p>Hi</p></html>", "expected the custom layout"


def test_process_file_renders_standalone(tmp_path: Path) -> None:
    """A single document renders without any site context."""
    builder = SiteBuilder(BuildConfig(output_dir=tmp_path))
    processed = builder.process_file(
        "---\nShort-URI: solo\ntitle: Solo\n---\nHi there", "guides/solo.md"
    )
    assert processed.output_path == "guides/solo/index.html", "expected clean URL"
    assert processed.data == {"Short-URI": "solo", "title": "Solo"}, (
        "expected the raw header"
    )
    soup = BeautifulSoup(processed.html, "html.parser")
    assert soup.title is not None, "expected a <title> element"
    assert soup.title.get_text() == "Solo", "expected the title"
    assert soup.select("nav.site-nav") == [], "expected no navigation"


def test_static_assets_are_copied(tmp_path: Path) -> None:
    """The static tree is mirrored into the output directory."""
    static = tmp_path / "static"
    (static / "assets").mkdir(parents=True)
    (static / "assets" / "main.css").write_text("body{}", encoding="utf-8")
    output = tmp_path / "out"
    copied = copy_static_assets(static, output)
    assert copied == [output / "assets" / "main.css"], "expected the copied file"
    assert (output / "assets" / "main.css").read_text(encoding="utf-8") == "body{}", (
        "expected identical content"
    )
    assert copy_static_assets(tmp_path / "absent", output) == [], (
        "expected nothing from a missing directory"
    )
