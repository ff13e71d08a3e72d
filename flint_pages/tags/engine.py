"""Resolve ``{{tag}}`` placeholders and ``{{#if tag}}`` blocks in layouts.

Layout templates are plain HTML files. Two constructs are recognised:

``{{name}}``
    Replaced by the value of the named tag.
``{{#if name}}...{{/if}}``
    Kept when the named tag resolves to a non-empty string, dropped
    otherwise. Blocks do not nest.

Conditionals are resolved first, so a kept block may itself contain tags that
are expanded in the second pass. Tag names come from a closed set; anything
else is left in the output verbatim.

Example
-------
>>> from flint_pages.tags.engine import process_template
>>> from flint_pages.tags.models import RenderContext
>>> process_template("<h1>{{title}}</h1>{{#if author}}by {{author}}{{/if}}",
...                  RenderContext(title="Hello"))
'<h1>Hello</h1>'
"""

from __future__ import annotations

import datetime as dt
import math
import re
import typing as typ

from .components import ComponentRegistry, default_components

if typ.TYPE_CHECKING:
    from .models import RenderContext

CONDITIONAL_PATTERN = re.compile(r"\{\{#if\s+(\S+?)\}\}(.*?)\{\{/if\}\}", re.DOTALL)
TAG_PATTERN = re.compile(r"\{\{(\S+?)\}\}")
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
WORDS_PER_MINUTE = 200
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def estimate_reading_time(html: str) -> int:
    """Return whole minutes needed to read ``html`` at 200 words per minute."""
    words = HTML_TAG_PATTERN.sub(" ", html).split()
    return max(1, math.floor(len(words) / WORDS_PER_MINUTE + 0.5))


def format_date(value: dt.date) -> str:
    """Format ``value`` as ``"February 1, 2026"`` regardless of locale."""
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.UTC)
        value = value.date()
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def resolve_tag(
    name: str, ctx: RenderContext, components: ComponentRegistry | None = None
) -> str:
    """Return the rendered value of tag ``name`` for ``ctx``.

    Unknown names resolve to the literal ``{{name}}`` so templates can carry
    placeholders meant for a later stage.
    """
    parts = components or default_components()
    match name:
        case "head":
            return parts.render(
                "head",
                title=ctx.title,
                base_path=ctx.base_path,
                description=ctx.description,
                keywords=ctx.keywords,
                css_files=ctx.css_files,
                js_files=ctx.js_files,
            )
        case "navigation":
            return parts.render("navigation", items=ctx.navigation)
        case "content":
            return ctx.content
        case "label-footer":
            return parts.render(
                "label-footer", labels=ctx.site_labels, base_path=ctx.base_path
            )
        case "foot-scripts":
            return parts.render("foot-scripts", base_path=ctx.base_path)
        case "breadcrumbs":
            return parts.render("breadcrumbs", trail=ctx.breadcrumbs)
        case "blog-header":
            return parts.render(
                "blog-header",
                title=ctx.title,
                author=ctx.author,
                date_iso=ctx.date.isoformat()[:10] if ctx.date else "",
                date_text=format_date(ctx.date) if ctx.date else "",
                reading_time=_reading_time_text(ctx),
                category=ctx.category,
                labels=ctx.labels,
            )
        case "title":
            return ctx.title
        case "description":
            return ctx.description
        case "keywords":
            return ctx.keywords
        case "author":
            return ctx.author
        case "category":
            return ctx.category
        case "basePath":
            return ctx.base_path
        case "formatted-date":
            return format_date(ctx.date) if ctx.date else ""
        case "reading-time":
            return _reading_time_text(ctx)
        case "category-pill":
            return parts.render("category-pill", category=ctx.category)
        case "label-badges":
            return parts.render("label-badges", labels=ctx.labels)
        case _:
            return f"{{{{{name}}}}}"


def is_tag_truthy(
    name: str, ctx: RenderContext, components: ComponentRegistry | None = None
) -> bool:
    """Return True when tag ``name`` resolves to a non-empty string."""
    return len(resolve_tag(name, ctx, components)) > 0


def process_template(
    template: str, ctx: RenderContext, components: ComponentRegistry | None = None
) -> str:
    """Resolve every conditional block and then every tag in ``template``."""

    def _conditional(match: re.Match[str]) -> str:
        return match.group(2) if is_tag_truthy(match.group(1), ctx, components) else ""

    def _tag(match: re.Match[str]) -> str:
        return resolve_tag(match.group(1), ctx, components)

    result = CONDITIONAL_PATTERN.sub(_conditional, template)
    return TAG_PATTERN.sub(_tag, result)


def _reading_time_text(ctx: RenderContext) -> str:
    return f"{estimate_reading_time(ctx.content)} min read"


__all__ = [
    "estimate_reading_time",
    "format_date",
    "is_tag_truthy",
    "process_template",
    "resolve_tag",
]
