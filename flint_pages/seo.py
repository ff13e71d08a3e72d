"""Search-engine artifacts written alongside the rendered site.

Both files need absolute URLs, so they are only produced when the build is
configured with a ``site_url``. Listing pages (``label/`` and ``category/``)
are left out of the sitemap; they duplicate content that is already listed.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from jinja2 import Environment, FileSystemLoader, select_autoescape

from flint_pages._constants import CATEGORY_DIR, LABEL_DIR
from flint_pages.tags.components import TEMPLATES_DIR

if typ.TYPE_CHECKING:
    from flint_pages.content.page_index import PageIndexEntry

SITEMAP_TEMPLATE = "sitemap.xml.jinja"


def generate_robots_txt(site_url: str, base_path: str = "") -> str:
    """Return a permissive ``robots.txt`` pointing crawlers at the sitemap."""
    site = site_url.rstrip("/")
    return f"User-agent: *\nAllow: /\n\nSitemap: {site}{base_path}/sitemap.xml\n"


def sitemap_entries(
    entries: cabc.Iterable[PageIndexEntry], base_path: str = ""
) -> list[PageIndexEntry]:
    """Drop listing pages from ``entries``, keeping their order."""
    excluded = (f"{base_path}/{LABEL_DIR}/", f"{base_path}/{CATEGORY_DIR}/")
    return [entry for entry in entries if not entry.url.startswith(excluded)]


def generate_sitemap(
    entries: cabc.Iterable[PageIndexEntry], site_url: str, base_path: str = ""
) -> str:
    """Render ``sitemap.xml`` for the published pages.

    Parameters
    ----------
    entries : Iterable[PageIndexEntry]
        Page index entries; their ``url`` already carries ``base_path``.
    site_url : str
        Absolute origin such as ``"https://example.com"``.
    base_path : str, optional
        URL prefix used to recognise listing pages.

    Returns
    -------
    str
        The XML document. ``<lastmod>`` is emitted only for dated pages.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template(SITEMAP_TEMPLATE)
    return template.render(
        site_url=site_url.rstrip("/"), pages=sitemap_entries(entries, base_path)
    )


__all__ = ["generate_robots_txt", "generate_sitemap", "sitemap_entries"]
