"""Map source document paths to output files and public URLs.

These helpers are pure functions of a content-relative path and an explicit
``base_path`` prefix, so every caller passes the prefix in rather than reading
it from the environment.

Examples
--------
>>> output_path("about.md"), output_path("blog/index.md")
('about/index.html', 'blog/index.html')
>>> url_path("blog/index.md", "/docs")
'/docs/blog'
"""

from __future__ import annotations

import posixpath


def _strip_extension(relative_path: str) -> str:
    normalized = relative_path.replace("\\", "/")
    base, _ext = posixpath.splitext(normalized)
    return base


def output_path(relative_path: str) -> str:
    """Return the clean-URL output file for a content-relative path.

    ``index`` documents keep their directory (``blog/index.md`` becomes
    ``blog/index.html``); every other document becomes a directory index
    (``blog/post.md`` becomes ``blog/post/index.html``).
    """
    base = _strip_extension(relative_path)
    if base == "index" or base.endswith("/index"):
        return f"{base}.html"
    return f"{base}/index.html"


def url_path(relative_path: str, base_path: str = "") -> str:
    """Return the public URL for a content-relative path."""
    path = _strip_extension(relative_path)
    if path == "index":
        return f"{base_path}/"
    if path.endswith("/index"):
        path = path[: -len("/index")]
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base_path}{path}"


def is_active_path(href: str, relative_path: str, base_path: str = "") -> bool:
    """Return True when the nav ``href`` covers the page at ``relative_path``.

    Matching works on whole path segments: ``/about`` is active for
    ``/about`` and ``/about/team`` but not for ``/about-us``. The site root
    ``/`` is only active on the root index page.
    """
    target = href
    if base_path and target.startswith(base_path):
        target = target[len(base_path) :] or "/"
    page = url_path(relative_path)
    if target == "/":
        return page == "/"
    target = target.rstrip("/")
    return page == target or page.startswith(f"{target}/")


__all__ = ["is_active_path", "output_path", "url_path"]
