"""Load ``flint.yaml`` into a :class:`BuildConfig`."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from flint_pages._constants import DEFAULT_TITLE

from .helpers import (
    _flag,
    _optional_path,
    _optional_str,
    _string_list,
    normalize_base_path,
    normalize_site_url,
)
from .models import BuildConfig, SiteConfigError

DEFAULT_CONFIG = Path("flint.yaml")
KNOWN_KEYS = frozenset(
    {
        "content_dir",
        "output_dir",
        "templates_dir",
        "static_dir",
        "base_path",
        "site_url",
        "default_title",
        "pygments_style",
        "css_files",
        "js_files",
        "nav_hx_boost",
    }
)


def load_site_config(path: Path) -> BuildConfig:
    """Load the YAML file describing a Flint build.

    Relative directories in the file are resolved against the file's own
    directory so a build behaves the same from any working directory.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (usually ``flint.yaml``).

    Returns
    -------
    BuildConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the YAML cannot be parsed, is not a mapping, names unknown keys, or
        holds invalid values.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_site_config(Path("flint.yaml"))  # doctest: +SKIP
    >>> config.base_path  # doctest: +SKIP
    '/docs'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise SiteConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    unknown = sorted(set(raw) - KNOWN_KEYS)
    if unknown:
        msg = f"Unknown configuration keys in '{path}': {', '.join(unknown)}"
        raise SiteConfigError(msg)

    root = path.resolve().parent
    defaults = BuildConfig()
    return BuildConfig(
        content_dir=_resolve(root, raw.get("content_dir"))
        or root / defaults.content_dir,
        output_dir=_resolve(root, raw.get("output_dir")) or root / defaults.output_dir,
        templates_dir=_resolve(root, raw.get("templates_dir")),
        static_dir=_resolve(root, raw.get("static_dir")),
        base_path=normalize_base_path(raw.get("base_path")),
        site_url=normalize_site_url(raw.get("site_url")),
        default_title=_optional_str(raw.get("default_title")) or DEFAULT_TITLE,
        pygments_style=_optional_str(raw.get("pygments_style"))
        or defaults.pygments_style,
        css_files=_string_list(raw.get("css_files"), field="css_files"),
        js_files=_string_list(raw.get("js_files"), field="js_files"),
        nav_hx_boost=_flag(raw.get("nav_hx_boost"), field="nav_hx_boost"),
    )


def _resolve(root: Path, value: object | None) -> Path | None:
    """Return ``value`` as a path anchored at ``root`` when relative."""
    path = _optional_path(value)
    if path is None:
        return None
    return path if path.is_absolute() else root / path


__all__ = ["DEFAULT_CONFIG", "load_site_config"]
