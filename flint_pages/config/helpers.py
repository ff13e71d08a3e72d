"""Utility helpers shared by the Flint configuration loader."""

from __future__ import annotations

from pathlib import Path

from .models import SiteConfigError

SITE_URL_SCHEMES = ("http://", "https://")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_path(value: object | None) -> Path | None:
    """Return ``value`` as a Path, or None when unset."""
    text = _optional_str(value)
    return Path(text) if text else None


def normalize_base_path(value: object | None) -> str:
    """Return ``value`` as ``""`` or ``"/segment[/segment...]"``.

    Examples
    --------
    >>> normalize_base_path("docs/")
    '/docs'
    >>> normalize_base_path("/")
    ''
    """
    text = _optional_str(value)
    if not text:
        return ""
    stripped = text.strip("/")
    return f"/{stripped}" if stripped else ""


def normalize_site_url(value: object | None) -> str | None:
    """Validate an absolute site origin and drop any trailing slash."""
    text = _optional_str(value)
    if text is None:
        return None
    if not text.startswith(SITE_URL_SCHEMES):
        msg = f"site_url must start with http:// or https://, got {text!r}"
        raise SiteConfigError(msg)
    return text.rstrip("/")


def _string_list(value: object | None, *, field: str) -> list[str]:
    """Normalize a YAML list (or a single string) into non-empty strings."""
    match value:
        case None:
            return []
        case str():
            return [value] if value.strip() else []
        case list():
            return [str(item).strip() for item in value if str(item).strip()]
        case _:
            msg = f"'{field}' must be a list of strings."
            raise SiteConfigError(msg)


def _flag(value: object | None, *, field: str) -> bool:
    """Return a YAML boolean, treating an absent value as False."""
    if value is None:
        return False
    if not isinstance(value, bool):
        msg = f"'{field}' must be true or false."
        raise SiteConfigError(msg)
    return value
