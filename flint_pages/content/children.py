r"""Expand ``:::children`` directives into inline child-page listings.

A section page can list its children by including a directive block::

    :::children sort=date-desc
    :::

At build time the block is replaced with a listing of the page's children
(title link, date, category, description), wrapped in a raw HTML fence so the
Markdown compiler leaves it alone.

Sort modes
----------
``order`` (default)
    Ascending ``Order``, ties broken by title.
``title``
    Case-insensitive title.
``date-desc`` / ``date-asc``
    Newest or oldest first; undated pages sort last.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import re

from flint_pages._constants import DEFAULT_ORDER
from flint_pages.generator.preprocessor import (
    SHIELDED_PATTERN,
    parse_attributes,
    sub_outside_code,
)
from flint_pages.tags.components import ComponentRegistry, default_components
from flint_pages.tags.engine import format_date

DIRECTIVE_PATTERN = re.compile(
    r"^:::children(?:[ \t]+([^\n]*))?[ \t]*\n(?:.*?\n)??^:::[ \t]*$",
    re.MULTILINE | re.DOTALL,
)


@dc.dataclass(frozen=True, slots=True)
class ChildPage:
    """Listing data for one child page."""

    title: str
    url: str
    short_uri: str = ""
    description: str = ""
    date: dt.date | None = None
    category: str = ""
    labels: tuple[str, ...] = ()
    author: str = ""
    type: str = "page"
    order: int = DEFAULT_ORDER


def has_children_directive(body: str) -> bool:
    """Return True when ``body`` has a directive block outside code samples."""
    return DIRECTIVE_PATTERN.search(SHIELDED_PATTERN.sub("", body)) is not None


def sort_children(
    children: cabc.Iterable[ChildPage], sort_mode: str | None = None
) -> list[ChildPage]:
    """Return ``children`` ordered by ``sort_mode``.

    Unknown or missing modes fall back to ``order``.
    """
    items = list(children)
    by_order = sorted(items, key=lambda child: (child.order, child.title.casefold()))
    match sort_mode:
        case "title":
            return sorted(items, key=lambda child: child.title.casefold())
        case "date-desc":
            dated = [child for child in by_order if child.date]
            dated.sort(key=lambda child: child.date, reverse=True)
            return dated + [child for child in by_order if not child.date]
        case "date-asc":
            dated = [child for child in by_order if child.date]
            dated.sort(key=lambda child: child.date)
            return dated + [child for child in by_order if not child.date]
        case _:
            return by_order


def expand_children_directive(
    body: str,
    children: cabc.Sequence[ChildPage],
    sort_mode: str | None = None,
    *,
    components: ComponentRegistry | None = None,
) -> str:
    """Replace every ``:::children`` block in ``body`` with a listing.

    Directives inside code blocks and code spans are left as written.

    Parameters
    ----------
    body : str
        Markdown body of the parent page.
    children : Sequence[ChildPage]
        The parent's direct children.
    sort_mode : str, optional
        Mode used when a directive does not name one with ``sort=``.
    components : ComponentRegistry, optional
        Registry providing ``children-listing``; defaults to the built-ins.

    Returns
    -------
    str
        The body with each directive replaced by a raw HTML fence.
    """
    parts = components or default_components()

    def _replace(match: re.Match[str]) -> str:
        options = dict(parse_attributes(match.group(1) or ""))
        mode = options.get("sort") or sort_mode
        ordered = sort_children(children, mode)
        listing = parts.render(
            "children-listing", children=[_listing_item(child) for child in ordered]
        )
        return f":::html\n{listing}\n:::"

    return sub_outside_code(DIRECTIVE_PATTERN, _replace, body)


def _listing_item(child: ChildPage) -> dict[str, str]:
    meta = [format_date(child.date)] if child.date else []
    if child.category:
        meta.append(child.category)
    return {
        "title": child.title,
        "url": child.url,
        "description": child.description,
        "meta": " · ".join(meta),
    }


__all__ = [
    "ChildPage",
    "expand_children_directive",
    "has_children_directive",
    "sort_children",
]
