"""Compile document bodies from Markdown into HTML.

:class:`HtmlContentRenderer` wraps Python-Markdown with the extensions Flint
relies on. :class:`RawBlockExtension` hooks the reversible preprocessor into
the Markdown pipeline, so raw HTML fences and hypermedia links survive
compilation byte for byte.
"""

from __future__ import annotations

import re
from html import escape

from markdown import Markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from markdown.preprocessors import Preprocessor
from pygments.formatters import HtmlFormatter

from .preprocessor import RawBlockTable, protect, restore

MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")
FENCE_OPEN_PATTERN = re.compile(
    r"^[ ]{0,3}(?P<fence>[`~]{3,})(?P<lang>[A-Za-z0-9_+#.-]+)?(?P<extra>[^\n]*)$",
    re.MULTILINE,
)
HIGHLIGHT_OPEN_TAG = '<div class="codehilite">'


class RawBlockExtension(Extension):
    """Mask raw HTML and hypermedia links before Markdown and unmask after.

    The preprocessor runs ahead of ``fenced_code`` and the raw HTML stash; the
    postprocessor runs once the stash has been put back, so every placeholder
    is visible in the final text.
    """

    def __init__(self) -> None:
        super().__init__()
        self.table = RawBlockTable(nonce="")

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the masking and restoring stages on ``md``."""
        md.preprocessors.register(ProtectPreprocessor(md, self), "flint_protect", 28)
        md.postprocessors.register(
            RestorePostprocessor(md, self), "flint_restore", 25
        )


class ProtectPreprocessor(Preprocessor):
    """Swap raw fences and hypermedia links for placeholders."""

    def __init__(self, md: Markdown, extension: RawBlockExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, lines: list[str]) -> list[str]:
        """Mask the document and keep its table on the extension."""
        masked, self.extension.table = protect("\n".join(lines))
        return masked.split("\n")


class RestorePostprocessor(Postprocessor):
    """Put the stored HTML back in place of each placeholder."""

    def __init__(self, md: Markdown, extension: RawBlockExtension) -> None:
        super().__init__(md)
        self.extension = extension

    def run(self, text: str) -> str:
        """Restore every placeholder recorded for this document."""
        return restore(text, self.extension.table)


class HtmlContentRenderer:
    """Render Markdown bodies with consistent extensions and styling."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        """Initialize a renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used by ``codehilite``. Defaults to
            ``"monokai"``.
        """
        self.pygments_style = pygments_style

    @property
    def stylesheet(self) -> str:
        """Return CSS rules for highlighted blocks in the configured style."""
        formatter = HtmlFormatter(style=self.pygments_style)
        return formatter.get_style_defs(".codehilite")

    def compile(self, body: str) -> str:
        """Return the final HTML for a document body.

        A blank body compiles to ``""``. Each call builds a fresh Markdown
        instance, so placeholder tables never leak between documents.
        """
        source = normalize_fences(body)
        if not source.strip():
            return ""
        extensions: list[Extension | str] = [*MARKDOWN_EXTENSIONS]
        extensions.append(RawBlockExtension())
        md = Markdown(
            extensions=extensions,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
            output_format="html",
        )
        return label_code_languages(md.convert(source), source)


def normalize_fences(text: str) -> str:
    """Pull fences back to column zero and drop anything after the language.

    ``fenced_code`` ignores fences indented by one to three spaces and fence
    labels such as ``rust,ignore``.
    """

    def _normalize(match: re.Match[str]) -> str:
        if match.group("extra").startswith(","):
            return f"{match.group('fence')}{match.group('lang') or ''}"
        return match.group(0).lstrip(" ")

    return FENCE_OPEN_PATTERN.sub(_normalize, text)


def label_code_languages(html: str, source: str) -> str:
    """Add ``data-language`` to each highlighted block, in source order."""
    languages = _fence_languages(source)
    if not languages:
        return html
    pieces = html.split(HIGHLIGHT_OPEN_TAG)
    labelled = [pieces[0]]
    for index, piece in enumerate(pieces[1:]):
        lang = languages[index] if index < len(languages) else "text"
        labelled.append(
            f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
        )
        labelled.append(piece)
    return "".join(labelled)


def _fence_languages(source: str) -> list[str]:
    languages: list[str] = []
    closing: str | None = None
    for match in FENCE_OPEN_PATTERN.finditer(source):
        fence = match.group("fence")
        if closing is None:
            closing = fence
            languages.append(match.group("lang") or "text")
        elif fence.startswith(closing) and not match.group("lang"):
            closing = None
    return languages


__all__ = [
    "HtmlContentRenderer",
    "RawBlockExtension",
    "label_code_languages",
    "normalize_fences",
]
