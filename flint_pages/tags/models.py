"""Shared dataclasses consumed by the tag engine."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import typing as typ

if typ.TYPE_CHECKING:
    from flint_pages.content.page_index import NavItem


@dc.dataclass(slots=True)
class RenderContext:
    """Everything a layout template needs to render one page.

    Attributes
    ----------
    title : str
        Page title, resolved from the header or the configured default.
    content : str
        Compiled body HTML, inserted verbatim by ``{{content}}``.
    description : str
        Meta description.
    keywords : str
        Comma-separated meta keywords.
    base_path : str
        URL prefix for subpath hosting, e.g. ``"/docs"`` or ``""``.
    navigation : list[NavItem]
        Site navigation items with the active flag set for this page.
    site_labels : list[str]
        Every label used anywhere on the site.
    frontmatter : dict[str, Any]
        Raw header mapping.
    css_files : list[str]
        Extra stylesheets linked from ``<head>``.
    js_files : list[str]
        Extra scripts loaded from ``<head>``.
    author : str
        Byline text.
    date : datetime.date or None
        Publication date.
    category : str
        Primary classification.
    labels : list[str]
        Page labels.
    type : str
        ``"page"``, ``"post"`` or ``"section"``.
    breadcrumbs : list[dict[str, str]]
        ``title``/``href`` trail from the top-level ancestor to this page.
    """

    title: str
    content: str = ""
    description: str = ""
    keywords: str = ""
    base_path: str = ""
    navigation: list[NavItem] = dc.field(default_factory=list)
    site_labels: list[str] = dc.field(default_factory=list)
    frontmatter: dict[str, typ.Any] = dc.field(default_factory=dict)
    css_files: list[str] = dc.field(default_factory=list)
    js_files: list[str] = dc.field(default_factory=list)
    author: str = ""
    date: dt.date | None = None
    category: str = ""
    labels: list[str] = dc.field(default_factory=list)
    type: str = "page"
    breadcrumbs: list[dict[str, str]] = dc.field(default_factory=list)


__all__ = ["RenderContext"]
