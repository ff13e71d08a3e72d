"""Tag-based layout templates, their registry, and HTML components.

Layouts are plain HTML files with ``{{tag}}`` placeholders and
``{{#if tag}}...{{/if}}`` blocks. To add one, drop ``<name>.html`` into the
templates directory and set ``Template: <name>`` in a document header.
"""

from .components import ComponentNotFoundError, ComponentRegistry, default_components
from .engine import (
    estimate_reading_time,
    format_date,
    is_tag_truthy,
    process_template,
    resolve_tag,
)
from .models import RenderContext
from .registry import TemplateNotFoundError, TemplateRegistry, load_templates_from_dir

__all__ = [
    "ComponentNotFoundError",
    "ComponentRegistry",
    "RenderContext",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "default_components",
    "estimate_reading_time",
    "format_date",
    "is_tag_truthy",
    "load_templates_from_dir",
    "process_template",
    "resolve_tag",
]
