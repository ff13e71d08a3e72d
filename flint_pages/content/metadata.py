r"""Normalize document headers into typed page metadata.

Headers are free-form YAML mappings. This module turns the fields Flint cares
about (``Short-URI``, ``Type``, ``Parent``, ``Order`` and friends) into a
:class:`PageMetadata` record, applying defaults and rejecting values that
would leave the content tree structurally broken.

Example
-------
>>> from flint_pages.content.metadata import parse_page_metadata
>>> meta = parse_page_metadata({"Short-URI": "blog", "Order": 2})
>>> meta.short_uri, meta.parent, meta.order
('blog', 'root', 2)
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import re
import typing as typ

from flint_pages._constants import (
    DEFAULT_ORDER,
    DEFAULT_TEMPLATE,
    PAGE_TYPES,
    ROOT_PARENT,
)

SHORT_URI_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

PageType = typ.Literal["page", "post", "section"]


class PageValidationError(ValueError):
    """Raised when page metadata would break the content tree."""

    def __init__(self, message: str, *, short_uri: str | None = None) -> None:
        super().__init__(message)
        self.short_uri = short_uri


class MissingShortUriError(PageValidationError):
    """Raised when a header carries no ``Short-URI`` field."""


class InvalidShortUriError(PageValidationError):
    """Raised when a ``Short-URI`` is empty, reserved, or malformed."""


class InvalidPageTypeError(PageValidationError):
    """Raised when ``Type`` is not one of the supported page types."""


class DuplicateShortUriError(PageValidationError):
    """Raised when two documents claim the same ``Short-URI``."""


@dc.dataclass(frozen=True, slots=True)
class PageMetadata:
    """Typed view of a document header.

    Attributes
    ----------
    short_uri : str
        Stable identifier used for parent references and cross-links.
    title : str
        Display title; falls back to ``short_uri``.
    type : str
        One of ``"page"``, ``"post"`` or ``"section"``.
    category : str
        Primary classification; empty when unset.
    labels : tuple[str, ...]
        Free-form tags.
    parent : str
        ``"root"`` or the ``short_uri`` of the parent page.
    order : int
        Sort key among siblings; unordered pages sort last.
    author : str
        Byline text.
    date : datetime.date or None
        Publication date, normalized to a UTC calendar date.
    description : str
        Meta description and listing blurb.
    keywords : tuple[str, ...]
        Meta keywords.
    template : str
        Name of the layout template used to render the page.
    """

    short_uri: str
    title: str = ""
    type: PageType = "page"
    category: str = ""
    labels: tuple[str, ...] = ()
    parent: str = ROOT_PARENT
    order: int = DEFAULT_ORDER
    author: str = ""
    date: dt.date | None = None
    description: str = ""
    keywords: tuple[str, ...] = ()
    template: str = DEFAULT_TEMPLATE

    @property
    def is_root_level(self) -> bool:
        """Return True when the page hangs directly off the synthetic root."""
        return self.parent == ROOT_PARENT


def parse_page_metadata(data: typ.Mapping[str, typ.Any]) -> PageMetadata:
    """Build a :class:`PageMetadata` from a parsed header mapping.

    Parameters
    ----------
    data : Mapping[str, Any]
        Header fields as produced by
        :func:`flint_pages.content.frontmatter.parse_frontmatter`.

    Returns
    -------
    PageMetadata
        Normalized metadata with defaults applied.

    Raises
    ------
    MissingShortUriError
        If ``Short-URI`` is absent or blank.
    InvalidShortUriError
        If ``Short-URI`` contains characters outside ``[A-Za-z0-9_-]`` or is
        the reserved ``root`` sentinel.
    InvalidPageTypeError
        If ``Type`` is not ``page``, ``post`` or ``section``.
    """
    raw_uri = data.get("Short-URI")
    short_uri = str(raw_uri).strip() if raw_uri is not None else ""
    if not short_uri:
        msg = "Short-URI is required"
        raise MissingShortUriError(msg)
    validate_short_uri(short_uri)

    page_type = _optional_text(data.get("Type")) or "page"
    if page_type not in PAGE_TYPES:
        msg = f"Invalid Type: {page_type!r}. Must be one of: {', '.join(PAGE_TYPES)}"
        raise InvalidPageTypeError(msg, short_uri=short_uri)

    parent = _optional_text(data.get("Parent")) or ROOT_PARENT
    title = (
        _optional_text(data.get("title"))
        or _optional_text(data.get("Title"))
        or short_uri
    )

    return PageMetadata(
        short_uri=short_uri,
        title=title,
        type=typ.cast("PageType", page_type),
        category=_optional_text(data.get("Category")),
        labels=parse_string_list(data.get("Labels")),
        parent=parent,
        order=_parse_order(data.get("Order")),
        author=_optional_text(data.get("Author")),
        date=parse_date(data.get("Date")),
        description=_optional_text(data.get("Description")),
        keywords=parse_string_list(data.get("Keywords")),
        template=_optional_text(data.get("Template")) or DEFAULT_TEMPLATE,
    )


def validate_short_uri(short_uri: str) -> None:
    """Raise :class:`InvalidShortUriError` when ``short_uri`` is unusable."""
    if not SHORT_URI_PATTERN.match(short_uri):
        msg = (
            f"Short-URI {short_uri!r} contains invalid characters. "
            "Use only letters, numbers, hyphens, and underscores."
        )
        raise InvalidShortUriError(msg, short_uri=short_uri)
    if short_uri == ROOT_PARENT:
        msg = f"Short-URI {short_uri!r} is reserved for the site root."
        raise InvalidShortUriError(msg, short_uri=short_uri)


def parse_string_list(value: object) -> tuple[str, ...]:
    """Normalize a scalar-or-list header value into a tuple of strings."""
    if value is None or value == "":
        return ()
    if isinstance(value, list | tuple):
        return tuple(str(item).strip() for item in value if str(item).strip())
    text = str(value).strip()
    return (text,) if text else ()


def parse_date(value: object) -> dt.date | None:
    """Return a UTC calendar date parsed from ``value``, or None."""
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            return value
        case str() as text:
            sanitized = text.strip()
            if not sanitized:
                return None
            if sanitized.endswith("Z"):
                sanitized = sanitized[:-1] + "+00:00"
            try:
                parsed = dt.datetime.fromisoformat(sanitized)
            except ValueError:
                return None
        case _:
            return None
    if parsed.tzinfo is None:
        return parsed.date()
    return parsed.astimezone(dt.UTC).date()


def generate_slug(text: str) -> str:
    """Convert ``text`` into a lowercase hyphen-separated slug."""
    return re.sub(r"[^a-z0-9]+", "-", text.lower().strip()).strip("-")


def generate_short_uri(title: str, existing: typ.Collection[str] = ()) -> str:
    """Return a slug for ``title`` that does not clash with ``existing``.

    Clashes are resolved by appending ``-2``, ``-3`` and so on.
    """
    base = generate_slug(title)
    candidate = base
    suffix = 2
    while candidate in existing:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def _optional_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_order(value: object) -> int:
    """Return ``value`` as an int, or the default order when not numeric."""
    if value is None or isinstance(value, bool):
        return DEFAULT_ORDER
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else DEFAULT_ORDER
    try:
        return int(str(value).strip())
    except ValueError:
        return DEFAULT_ORDER


__all__ = [
    "DuplicateShortUriError",
    "InvalidPageTypeError",
    "InvalidShortUriError",
    "MissingShortUriError",
    "PageMetadata",
    "PageType",
    "PageValidationError",
    "generate_short_uri",
    "generate_slug",
    "parse_date",
    "parse_page_metadata",
    "parse_string_list",
    "validate_short_uri",
]
