"""Unit tests for output paths, public URLs and active-link matching."""

from __future__ import annotations

import pytest

from flint_pages.content.paths import is_active_path, output_path, url_path


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("index.md", "index.html"),
        ("about.md", "about/index.html"),
        ("blog/index.md", "blog/index.html"),
        ("blog/first-post.md", "blog/first-post/index.html"),
        ("blog/tutorials/index.md", "blog/tutorials/index.html"),
        ("blog\\windows.md", "blog/windows/index.html"),
    ],
)
def test_output_path(relative: str, expected: str) -> None:
    """Documents map to clean-URL output files."""
    assert output_path(relative) == expected, f"unexpected output for {relative}"


@pytest.mark.parametrize(
    ("relative", "base_path", "expected"),
    [
        ("index.md", "", "/"),
        ("index.md", "/docs", "/docs/"),
        ("about.md", "", "/about"),
        ("blog/index.md", "", "/blog"),
        ("blog/post.md", "/docs", "/docs/blog/post"),
    ],
)
def test_url_path(relative: str, base_path: str, expected: str) -> None:
    """Public URLs drop extensions and ``index`` and carry the base path."""
    assert url_path(relative, base_path) == expected, f"unexpected URL for {relative}"


def test_root_link_only_active_on_root_page() -> None:
    """The home link is active on the home page only."""
    assert is_active_path("/", "index.md"), "expected home to be active on home"
    assert not is_active_path("/", "about.md"), "expected home inactive elsewhere"


def test_section_link_active_for_descendants() -> None:
    """A section link stays active beneath its own path."""
    assert is_active_path("/blog", "blog/index.md"), "expected exact match"
    assert is_active_path("/blog", "blog/first.md"), "expected descendant match"


def test_prefix_without_segment_boundary_is_inactive() -> None:
    """``/about`` is not active on ``/about-us``."""
    assert not is_active_path("/about", "about-us.md"), (
        "expected whole-segment matching"
    )


def test_active_path_strips_base_path() -> None:
    """Hrefs carrying the base path match base-less page URLs."""
    assert is_active_path("/docs/blog", "blog/post.md", "/docs"), (
        "expected the base path to be ignored"
    )
    assert is_active_path("/docs/", "index.md", "/docs"), (
        "expected the prefixed root to be active on the home page"
    )


@pytest.mark.parametrize(
    "relative", ["about.md", "blog/index.md", "blog/post.md", "blog/tutorials/index.md"]
)
def test_output_path_is_stable(relative: str) -> None:
    """Mapping an output path back through the mapper yields the same file."""
    first = output_path(relative)
    again = output_path(first.removesuffix(".html").removesuffix("/index") + ".md")
    assert again == first, f"expected a stable mapping for {relative}"
