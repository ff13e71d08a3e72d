r"""Split a Markdown document into its YAML front matter and body.

The header is the block between a leading ``---`` line and the next ``---``
line. Documents without that block have an empty header and keep their whole
text as the body.

Example
-------
>>> from flint_pages.content.frontmatter import parse_frontmatter
>>> parsed = parse_frontmatter("---\ntitle: Home\n---\n# Welcome")
>>> parsed.data["title"], parsed.body
('Home', '# Welcome')
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

FENCE = "---"


class FrontmatterError(ValueError):
    """Raised when a document header is present but cannot be parsed."""


@dc.dataclass(frozen=True, slots=True)
class ParsedDocument:
    """Header mapping and Markdown body of a single document."""

    data: dict[str, typ.Any]
    body: str


def parse_frontmatter(text: str) -> ParsedDocument:
    """Return the header mapping and body for ``text``.

    Parameters
    ----------
    text : str
        Full document text, optionally starting with a ``---`` fenced YAML
        header.

    Returns
    -------
    ParsedDocument
        Parsed header (empty when absent) and the remaining body with leading
        blank lines removed.

    Raises
    ------
    FrontmatterError
        If the header is not valid YAML or does not describe a mapping.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != FENCE:
        return ParsedDocument(data={}, body=text)

    end_idx = None
    for idx in range(1, len(lines)):
        if lines[idx].strip() == FENCE:
            end_idx = idx
            break
    if end_idx is None:
        return ParsedDocument(data={}, body=text)

    header = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :]).lstrip("\n")
    if not header.strip():
        return ParsedDocument(data={}, body=body)

    loader = YAML(typ="safe")
    try:
        loaded = loader.load(header)
    except YAMLError as exc:
        msg = f"Malformed front matter: {exc}"
        raise FrontmatterError(msg) from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = "Front matter must be a mapping of field names to values."
        raise FrontmatterError(msg)
    return ParsedDocument(data=dict(loaded), body=body)


__all__ = ["FrontmatterError", "ParsedDocument", "parse_frontmatter"]
