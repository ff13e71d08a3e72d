"""HTML building blocks rendered from the package's Jinja partials.

Structural template tags (``{{head}}``, ``{{navigation}}``,
``{{label-footer}}`` and friends) and the generated listing pages all render
through a :class:`ComponentRegistry`. Each component is a callable taking
keyword props and returning an HTML string; the built-in ones are thin
wrappers around Jinja templates in ``flint_pages/templates`` rendered with
autoescaping enabled, so titles and labels are always escaped while
pre-rendered fragments travel as :class:`markupsafe.Markup`.

Example
-------
>>> from flint_pages.tags.components import default_components
>>> components = default_components()
>>> components.render("category-pill", category="Tutorials")  # doctest: +ELLIPSIS
'<span class="inline-block ...">Tutorials</span>'
"""

from __future__ import annotations

import collections.abc as cabc
import functools
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from flint_pages.content.page_index import label_slug

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

Component = cabc.Callable[..., str]


class ComponentNotFoundError(LookupError):
    """Raised when rendering a component that was never registered."""


class ComponentRegistry:
    """Named HTML components looked up at render time."""

    def __init__(self) -> None:
        self._components: dict[str, Component] = {}

    def register(self, name: str, component: Component) -> None:
        """Register ``component`` under ``name``, replacing any previous one."""
        self._components[name] = component

    def has(self, name: str) -> bool:
        """Return True when ``name`` is registered."""
        return name in self._components

    def names(self) -> list[str]:
        """Return registered names in insertion order."""
        return list(self._components)

    def render(self, name: str, **props: typ.Any) -> str:
        """Render the component registered as ``name`` with ``props``.

        Raises
        ------
        ComponentNotFoundError
            If ``name`` has not been registered.
        """
        try:
            component = self._components[name]
        except KeyError as exc:
            available = ", ".join(self.names())
            msg = f"Component {name!r} is not registered. Available: {available}"
            raise ComponentNotFoundError(msg) from exc
        return component(**props)


@functools.cache
def _environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html", "xml", "jinja"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _render(template_name: str, **context: typ.Any) -> str:
    return _environment().get_template(template_name).render(**context)


def render_head(
    *,
    title: str,
    base_path: str = "",
    description: str = "",
    keywords: str = "",
    css_files: cabc.Sequence[str] = (),
    js_files: cabc.Sequence[str] = (),
    lang: str = "en",
) -> str:
    """Render the doctype, ``<html>`` open tag and complete ``<head>``."""
    return _render(
        "head.jinja",
        title=title,
        base_path=base_path,
        description=description,
        keywords=keywords,
        css_files=list(css_files),
        js_files=list(js_files),
        lang=lang,
    )


def render_foot_scripts(*, base_path: str = "") -> str:
    """Render the script tags that close the ``<body>``."""
    return _render("foot_scripts.jinja", base_path=base_path)


def render_navigation(*, items: cabc.Sequence[typ.Any]) -> str:
    """Render the site navigation bar; empty when there are no items."""
    if not items:
        return ""
    return _render("navigation.jinja", items=list(items))


def render_label_footer(*, labels: cabc.Iterable[str], base_path: str = "") -> str:
    """Render the site-wide label cloud, sorted case-insensitively."""
    ordered = sorted(set(labels), key=str.casefold)
    if not ordered:
        return ""
    entries = [{"text": label, "slug": label_slug(label)} for label in ordered]
    return _render("label_footer.jinja", labels=entries, base_path=base_path)


def render_listing_index(*, heading: str, pages: cabc.Sequence[typ.Any]) -> str:
    """Render a label or category listing of page index entries."""
    return _render("listing_index.jinja", heading=heading, pages=list(pages))


def render_children_listing(*, children: cabc.Sequence[typ.Any]) -> str:
    """Render the inline child-page listing used by ``:::children``."""
    return _render("children_listing.jinja", children=list(children))


def render_breadcrumbs(*, trail: cabc.Sequence[typ.Mapping[str, str]]) -> str:
    """Render a breadcrumb trail; a single-step trail renders nothing."""
    if len(trail) < 2:
        return ""
    return _render("breadcrumbs.jinja", trail=list(trail))


def render_category_pill(*, category: str) -> str:
    """Render the category badge, or nothing for uncategorized pages."""
    if not category:
        return ""
    return _render("category_pill.jinja", category=category)


def render_label_badges(*, labels: cabc.Sequence[str]) -> str:
    """Render one badge per page label."""
    if not labels:
        return ""
    return _render("label_badges.jinja", labels=list(labels))


def render_blog_header(
    *,
    title: str,
    reading_time: str,
    author: str = "",
    date_iso: str = "",
    date_text: str = "",
    category: str = "",
    labels: cabc.Sequence[str] = (),
) -> str:
    """Render the article header: category, title, byline and labels."""
    return _render(
        "blog_header.jinja",
        title=title,
        author=author,
        date_iso=date_iso,
        date_text=date_text,
        reading_time=reading_time,
        category_pill=Markup(render_category_pill(category=category)),
        label_badges=Markup(render_label_badges(labels=labels)),
    )


@functools.cache
def default_components() -> ComponentRegistry:
    """Return the shared registry of built-in components."""
    registry = ComponentRegistry()
    registry.register("head", render_head)
    registry.register("foot-scripts", render_foot_scripts)
    registry.register("navigation", render_navigation)
    registry.register("label-footer", render_label_footer)
    registry.register("listing-index", render_listing_index)
    registry.register("children-listing", render_children_listing)
    registry.register("breadcrumbs", render_breadcrumbs)
    registry.register("category-pill", render_category_pill)
    registry.register("label-badges", render_label_badges)
    registry.register("blog-header", render_blog_header)
    return registry


__all__ = [
    "TEMPLATES_DIR",
    "Component",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "default_components",
    "render_blog_header",
    "render_breadcrumbs",
    "render_category_pill",
    "render_children_listing",
    "render_foot_scripts",
    "render_head",
    "render_label_badges",
    "render_label_footer",
    "render_listing_index",
    "render_navigation",
]
