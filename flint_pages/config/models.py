"""Typed dataclasses describing a Flint build."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from flint_pages._constants import DEFAULT_TITLE


class SiteConfigError(ValueError):
    """Raised when the build configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class BuildConfig:
    """Everything :class:`~flint_pages.builder.SiteBuilder` needs for one build.

    Attributes
    ----------
    content_dir : Path
        Root of the Markdown sources; scanned recursively.
    output_dir : Path
        Destination for rendered pages and generated artifacts.
    templates_dir : Path or None
        Directory of ``<name>.html`` layouts; ``None`` uses the bundled ones.
    static_dir : Path or None
        Directory mirrored verbatim into ``output_dir``.
    base_path : str
        URL prefix for subpath hosting, ``""`` or ``"/prefix"``.
    site_url : str or None
        Absolute origin; enables ``robots.txt`` and ``sitemap.xml``.
    default_title : str
        Title for documents without one of their own.
    pygments_style : str
        Style used for highlighted code blocks.
    css_files : list[str]
        Extra stylesheets linked from every page.
    js_files : list[str]
        Extra scripts loaded from every page.
    nav_hx_boost : bool
        Mark navigation links with ``hx-boost="true"``.
    """

    content_dir: Path = Path("content")
    output_dir: Path = Path("dist")
    templates_dir: Path | None = None
    static_dir: Path | None = None
    base_path: str = ""
    site_url: str | None = None
    default_title: str = DEFAULT_TITLE
    pygments_style: str = "monokai"
    css_files: list[str] = dc.field(default_factory=list)
    js_files: list[str] = dc.field(default_factory=list)
    nav_hx_boost: bool = False


__all__ = ["BuildConfig", "SiteConfigError"]
