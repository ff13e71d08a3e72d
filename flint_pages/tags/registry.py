"""Named layout templates rendered through the tag engine.

Content authors pick a layout with the ``Template`` header field. Layouts are
HTML files using ``{{tag}}`` syntax, loaded from a directory where each
``<name>.html`` file registers as ``name``.

Example
-------
>>> from flint_pages.tags.models import RenderContext
>>> registry = TemplateRegistry()
>>> registry.register("bare", "<title>{{title}}</title>")
>>> registry.render("bare", RenderContext(title="Home"))
'<title>Home</title>'
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .engine import process_template

if typ.TYPE_CHECKING:
    from .components import ComponentRegistry
    from .models import RenderContext

TEMPLATE_SUFFIX = ".html"
LAYOUTS_DIR = Path(__file__).resolve().parents[1] / "layouts"


class TemplateNotFoundError(LookupError):
    """Raised when rendering with a template name that was never registered."""


class TemplateRegistry:
    """Registry of layout template bodies keyed by name."""

    def __init__(self, components: ComponentRegistry | None = None) -> None:
        self._templates: dict[str, str] = {}
        self._components = components

    def register(self, name: str, body: str) -> None:
        """Register ``body`` as ``name``, overwriting an existing entry."""
        self._templates[name] = body

    def get(self, name: str) -> str | None:
        """Return the raw template body for ``name`` or None."""
        return self._templates.get(name)

    def has(self, name: str) -> bool:
        """Return True when ``name`` is registered."""
        return name in self._templates

    def names(self) -> list[str]:
        """Return registered names in insertion order."""
        return list(self._templates)

    def render(self, name: str, ctx: RenderContext) -> str:
        """Render template ``name`` against ``ctx``.

        Raises
        ------
        TemplateNotFoundError
            If ``name`` is not registered; the message lists the available
            templates.
        """
        body = self._templates.get(name)
        if body is None:
            available = ", ".join(self.names()) or "(none)"
            msg = f"Template {name!r} is not registered. Available: {available}"
            raise TemplateNotFoundError(msg)
        return process_template(body, ctx, self._components)


def load_templates_from_dir(
    directory: Path, *, components: ComponentRegistry | None = None
) -> TemplateRegistry:
    """Load every ``*.html`` file in ``directory`` into a new registry.

    Files are registered in sorted filename order under their stem. Other
    files are ignored, and a missing directory yields an empty registry.
    """
    registry = TemplateRegistry(components)
    if not directory.is_dir():
        return registry
    for path in sorted(directory.iterdir()):
        if path.is_file() and path.suffix == TEMPLATE_SUFFIX:
            registry.register(path.stem, path.read_text(encoding="utf-8"))
    return registry


__all__ = [
    "LAYOUTS_DIR",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "load_templates_from_dir",
]
