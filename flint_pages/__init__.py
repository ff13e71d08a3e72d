"""Build static sites from Markdown documents with YAML headers.

Flint reads a tree of Markdown files, validates the parent/child structure
their headers describe, and renders every document through tag-based layout
templates. It also writes a JSON page index, label and category listings,
and, when a site URL is configured, ``robots.txt`` and ``sitemap.xml``.

Exports
-------
- ``app``: Cyclopts application behind the ``flint`` console script.
- ``main``: Convenience function that invokes the app.

Examples
--------
>>> from flint_pages import main
>>> main()  # doctest: +SKIP
>>> from flint_pages import app
>>> app.name[0]
'flint'
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
