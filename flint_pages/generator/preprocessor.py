r"""Shield raw HTML and hypermedia links from the Markdown compiler.

Two constructs in a document body must reach the final HTML untouched:

Raw HTML fences
    A ``:::html`` line, verbatim HTML, and a closing ``:::`` line.
Hypermedia links
    ``[text](url){attrs}``: a Markdown link followed by an attribute block
    such as ``{post target=#result swap=outerHTML}``.

:func:`protect` swaps each of them for a placeholder and records the
replacement HTML in a :class:`RawBlockTable`; after compilation
:func:`restore` puts the HTML back. Each table belongs to a single document.

Fences become HTML comments on their own paragraph, which Markdown passes
through as a block. Links become alphanumeric words, which Markdown treats as
ordinary inline text, so they stay inside their paragraph. Code spans and
code blocks are never rewritten; their text is shown as written.

Example
-------
>>> masked, table = protect(":::html\n<div>raw</div>\n:::")
>>> restore(f"<p>{masked.strip()}</p>", table)
'<div>raw</div>'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import hashlib
import re
from html import escape

RAW_FENCE_PATTERN = re.compile(
    r"^:::html[ \t]*\n(?P<html>.*?)\n?^:::[ \t]*$", re.MULTILINE | re.DOTALL
)
HYPERMEDIA_LINK_PATTERN = re.compile(
    r"(?<!!)\[([^\]\n]+)\]\(([^)\s]+)\)\{([^}\n]*)\}"
)
ATTRIBUTE_PATTERN = re.compile(r'([^\s=]+)(?:=(?:"([^"]*)"|(\S+)))?')
CODE_REGION_PATTERN = re.compile(
    # fenced block, closed by a matching fence or the end of the body
    r"^[ ]{0,3}(?P<fence>`{3,}|~{3,})[^\n]*\n"
    r"(?:.*?^[ ]{0,3}(?P=fence)[`~]*[ \t]*$|.*\Z)"
    # indented block after a blank line
    r"|(?:\A|(?<=\n\n))(?:(?:[ ]{4}|\t)[^\n]*(?:\n|\Z))+"
    # code span, never crossing a blank line
    r"|(?P<ticks>`+)(?!`)(?:(?!\n[ \t]*\n).)+?(?<!`)(?P=ticks)(?!`)",
    re.MULTILINE | re.DOTALL,
)
# Raw fences first, so indented HTML inside a fence is never taken for code.
SHIELDED_PATTERN = re.compile(
    rf"(?P<raw>{RAW_FENCE_PATTERN.pattern})|{CODE_REGION_PATTERN.pattern}",
    re.MULTILINE | re.DOTALL,
)

HTMX_KEYS = frozenset(
    {
        "get",
        "post",
        "put",
        "patch",
        "delete",
        "target",
        "swap",
        "trigger",
        "select",
        "confirm",
        "push-url",
        "indicator",
        "vals",
        "include",
        "boost",
    }
)
VERB_KEYS = frozenset({"get", "post", "put", "patch", "delete"})
CONTROL_KEYS = frozenset({"post", "put", "patch", "delete", "trigger"})
PASSTHROUGH_KEYS = frozenset({"class", "id", "title", "rel"})
PASSTHROUGH_PREFIXES = ("hx-", "data-", "aria-")


@dc.dataclass(slots=True)
class RawBlockTable:
    """Placeholder tokens mapped to the HTML they stand in for.

    Block tokens are ``<!--flint-raw-<nonce>-<n>-->``; inline tokens are
    ``flintraw<nonce>i<n>x``. ``n`` counts both kinds from zero.
    """

    nonce: str
    blocks: dict[str, str] = dc.field(default_factory=dict)

    def add(self, html: str, *, inline: bool = False) -> str:
        """Store ``html`` and return the placeholder that replaces it."""
        index = len(self.blocks)
        if inline:
            token = f"flintraw{self.nonce}i{index}x"
        else:
            token = f"<!--flint-raw-{self.nonce}-{index}-->"
        self.blocks[token] = html
        return token

    def __len__(self) -> int:
        return len(self.blocks)


def sub_outside_code(
    pattern: re.Pattern[str],
    repl: cabc.Callable[[re.Match[str]], str],
    text: str,
) -> str:
    """Apply ``pattern.sub(repl, ...)`` to ``text`` except inside code.

    Fenced and indented code blocks, inline code spans and raw HTML fences are
    copied through unchanged.
    """
    parts: list[str] = []
    last = 0
    for match in SHIELDED_PATTERN.finditer(text):
        parts.append(pattern.sub(repl, text[last : match.start()]))
        parts.append(match.group(0))
        last = match.end()
    parts.append(pattern.sub(repl, text[last:]))
    return "".join(parts)


def parse_attributes(text: str) -> list[tuple[str, str | None]]:
    """Split an attribute block into ``(key, value)`` pairs.

    Tokens are ``key``, ``key=value`` or ``key="quoted value"``; a bare
    ``key`` yields ``None`` as its value.
    """
    pairs: list[tuple[str, str | None]] = []
    for match in ATTRIBUTE_PATTERN.finditer(text):
        key, quoted, bare = match.groups()
        value = quoted if quoted is not None else bare
        pairs.append((key, value))
    return pairs


def render_hypermedia_link(text: str, url: str, attributes: str) -> str:
    """Render ``[text](url){attributes}`` as an anchor or a button.

    Mutating verbs (``post``, ``put``, ``patch``, ``delete``) and an explicit
    ``trigger`` produce ``<button type="button">``; everything else stays an
    ``<a>`` keeping ``href``.
    """
    pairs = parse_attributes(attributes)
    keys = {key for key, _value in pairs}
    is_control = bool(keys & CONTROL_KEYS)

    rendered: list[str] = []
    if is_control:
        rendered.append('type="button"')
        if not keys & VERB_KEYS:
            rendered.append(f'hx-get="{escape(url, quote=True)}"')
    else:
        rendered.append(f'href="{escape(url, quote=True)}"')

    for key, value in pairs:
        attribute = _map_attribute(key, value, url)
        if attribute:
            rendered.append(attribute)

    tag = "button" if is_control else "a"
    return f"<{tag} {' '.join(rendered)}>{escape(text, quote=False)}</{tag}>"


def _map_attribute(key: str, value: str | None, url: str) -> str | None:
    if key in HTMX_KEYS:
        name = f"hx-{key}"
        if value is None:
            value = url if key in VERB_KEYS else "true"
    elif key in PASSTHROUGH_KEYS or key.startswith(PASSTHROUGH_PREFIXES):
        name = key
        if value is None:
            return name
    else:
        return None
    return f'{name}="{escape(value, quote=True)}"'


def protect(body: str) -> tuple[str, RawBlockTable]:
    """Replace raw HTML fences and hypermedia links with placeholders.

    Parameters
    ----------
    body : str
        Markdown source for one document.

    Returns
    -------
    tuple[str, RawBlockTable]
        The masked Markdown and the table needed by :func:`restore`.
    """
    nonce = hashlib.sha1(body.encode("utf-8")).hexdigest()[:12]  # noqa: S324
    table = RawBlockTable(nonce=nonce)

    def _fence(match: re.Match[str]) -> str:
        if match.group("raw") is None:
            return match.group(0)
        return f"\n\n{table.add(match.group('html'))}\n\n"

    def _link(match: re.Match[str]) -> str:
        text, url, attributes = match.groups()
        return table.add(render_hypermedia_link(text, url, attributes), inline=True)

    masked = SHIELDED_PATTERN.sub(_fence, body)
    masked = sub_outside_code(HYPERMEDIA_LINK_PATTERN, _link, masked)
    return masked, table


def restore(html: str, table: RawBlockTable) -> str:
    """Swap every placeholder in ``html`` back to its stored HTML.

    A block placeholder that the compiler wrapped in its own paragraph is
    unwrapped so block-level HTML never ends up inside ``<p>``. Inline
    placeholders keep the paragraph they sit in.
    """
    if not table.blocks:
        return html
    nonce = re.escape(table.nonce)
    pattern = re.compile(
        rf"<p>\s*(<!--flint-raw-{nonce}-\d+-->)\s*</p>"
        rf"|(<!--flint-raw-{nonce}-\d+-->)"
        rf"|(flintraw{nonce}i\d+x)"
    )

    def _replace(match: re.Match[str]) -> str:
        token = match.group(1) or match.group(2) or match.group(3)
        return table.blocks.get(token, token)

    return pattern.sub(_replace, html)


__all__ = [
    "CODE_REGION_PATTERN",
    "RawBlockTable",
    "SHIELDED_PATTERN",
    "parse_attributes",
    "protect",
    "render_hypermedia_link",
    "restore",
    "sub_outside_code",
]
