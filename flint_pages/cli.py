"""Cyclopts CLI entrypoint for building Flint sites.

The ``flint`` console script renders a directory of Markdown documents into
static HTML. Settings come from an optional ``flint.yaml``; command-line flags
and the ``BASE_PATH``/``SITE_URL`` environment variables take precedence.

Examples
--------
Build the site described by ``flint.yaml`` in the working directory:

>>> from flint_pages.cli import main
>>> main()  # doctest: +SKIP

Build for subpath hosting into a custom directory:

>>> from flint_pages.cli import app
>>> app.run(
...     ["build", "--base-path", "/docs", "--output-dir", "public"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from .builder import SiteBuilder
from .config import (
    DEFAULT_CONFIG,
    BuildConfig,
    load_site_config,
    normalize_base_path,
    normalize_site_url,
)

app = App(name="flint", help="Build a static site from Markdown documents.")


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def resolve_build_config(
    config: Path | None = None,
    **overrides: typ.Any,
) -> BuildConfig:
    """Merge the configuration file with command-line overrides.

    Parameters
    ----------
    config : Path or None, optional
        Explicit configuration file. When ``None``, ``flint.yaml`` in the
        working directory is used if present.
    **overrides : Any
        :class:`BuildConfig` fields; ``None`` values are ignored.

    Returns
    -------
    BuildConfig
        The effective configuration.
    """
    if config is not None:
        base = load_site_config(config)
    elif DEFAULT_CONFIG.exists():
        base = load_site_config(DEFAULT_CONFIG)
    else:
        base = BuildConfig()

    changes = {key: value for key, value in overrides.items() if value is not None}
    if "base_path" in changes:
        changes["base_path"] = normalize_base_path(changes["base_path"])
    if "site_url" in changes:
        changes["site_url"] = normalize_site_url(changes["site_url"])
    return dc.replace(base, **changes)


@app.command(help="Render every Markdown document into the output directory.")
def build(
    *,
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to flint.yaml", env_var="FLINT_CONFIG"),
    ] = None,
    content_dir: typ.Annotated[
        Path | None, Parameter(help="Directory of Markdown sources")
    ] = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Directory for the generated site")
    ] = None,
    templates_dir: typ.Annotated[
        Path | None, Parameter(help="Directory of <name>.html layout templates")
    ] = None,
    static_dir: typ.Annotated[
        Path | None, Parameter(help="Directory copied verbatim into the output")
    ] = None,
    base_path: typ.Annotated[
        str | None,
        Parameter(help="URL prefix for subpath hosting", env_var="BASE_PATH"),
    ] = None,
    site_url: typ.Annotated[
        str | None,
        Parameter(help="Absolute site origin for the sitemap", env_var="SITE_URL"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log every file as it is written")
    ] = False,
) -> None:
    """Build the site and report each artifact.

    Parameters
    ----------
    config : Path or None, optional
        Configuration file; defaults to ``flint.yaml`` when it exists.
    content_dir, output_dir, templates_dir, static_dir : Path or None, optional
        Override the corresponding configuration values.
    base_path : str or None, optional
        URL prefix such as ``/docs`` (overridable via ``BASE_PATH``).
    site_url : str or None, optional
        Absolute origin enabling ``robots.txt`` and ``sitemap.xml``
        (overridable via ``SITE_URL``).
    verbose : bool, optional
        Emit debug logging.

    Returns
    -------
    None
        Writes the site and prints ``wrote <path>`` per file and
        ``skipped <path>: <reason>`` per document left out.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    build_config = resolve_build_config(
        config,
        content_dir=content_dir,
        output_dir=output_dir,
        templates_dir=templates_dir,
        static_dir=static_dir,
        base_path=base_path,
        site_url=site_url,
    )
    result = SiteBuilder(build_config).build()
    for path in result.written:
        print(f"wrote {_format_path(path)}")
    for skipped in result.skipped:
        print(f"skipped {skipped.relative_path}: {skipped.reason}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``flint`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
