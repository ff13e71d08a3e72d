"""Turn a directory of Markdown documents into a static site.

:class:`SiteBuilder` runs in two phases. The first loads every document,
parses its header and validates the page tree, producing a :class:`SiteIndex`
(hierarchy, navigation, labels, children and the page index). The second
renders each document against that index: expand ``:::children`` directives,
compile the body, fill a :class:`~flint_pages.tags.RenderContext` and render it
through the document's layout template. Site-wide artifacts follow: the page
index JSON, label and category listings, and the SEO files.

Example
-------
>>> from pathlib import Path
>>> from flint_pages.builder import SiteBuilder
>>> from flint_pages.config import BuildConfig
>>> config = BuildConfig(content_dir=Path("content"), output_dir=Path("dist"))
>>> result = SiteBuilder(config).build()  # doctest: +SKIP
>>> [str(path) for path in result.written][:1]  # doctest: +SKIP
['dist/index.html']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import shutil
import typing as typ
from pathlib import Path

import msgspec

from flint_pages._constants import (
    CATEGORY_DIR,
    DEFAULT_TEMPLATE,
    LABEL_DIR,
    PAGE_INDEX_PATH,
    PYGMENTS_CSS_PATH,
    ROOT_PARENT,
)
from flint_pages.content.children import ChildPage, expand_children_directive
from flint_pages.content.frontmatter import FrontmatterError, parse_frontmatter
from flint_pages.content.hierarchy import (
    PageNode,
    breadcrumbs,
    build_hierarchy,
    iter_nodes,
)
from flint_pages.content.metadata import (
    DuplicateShortUriError,
    MissingShortUriError,
    PageMetadata,
    PageValidationError,
    parse_page_metadata,
)
from flint_pages.content.page_index import (
    NavItem,
    PageIndexEntry,
    collect_site_labels,
    encode_page_index,
    generate_navigation,
    generate_page_index,
    group_by_category,
    group_by_label,
    label_slug,
    listing_groups,
)
from flint_pages.content.paths import is_active_path, output_path, url_path
from flint_pages.generator import HtmlContentRenderer
from flint_pages.seo import generate_robots_txt, generate_sitemap
from flint_pages.tags import (
    ComponentRegistry,
    RenderContext,
    TemplateRegistry,
    default_components,
    format_date,
    load_templates_from_dir,
)
from flint_pages.tags.registry import LAYOUTS_DIR

if typ.TYPE_CHECKING:
    from flint_pages.config import BuildConfig

logger = logging.getLogger(__name__)

CONTENT_GLOB = "*.md"


@dc.dataclass(frozen=True, slots=True)
class ContentFile:
    """A Markdown source found by :meth:`SiteBuilder.scan_content`."""

    path: Path
    relative_path: str


@dc.dataclass(slots=True)
class SourceDocument:
    """A loaded document waiting to be rendered.

    ``metadata`` is None for plain documents, whose header carries no
    ``Short-URI``; they are rendered but stay out of the page tree.
    """

    relative_path: str
    data: dict[str, typ.Any]
    body: str
    metadata: PageMetadata | None = None


@dc.dataclass(frozen=True, slots=True)
class SkippedDocument:
    """A document left out of the build, with the reason why."""

    relative_path: str
    reason: str


@dc.dataclass(slots=True)
class ProcessedFile:
    """Rendered HTML for one document and where it belongs."""

    html: str
    data: dict[str, typ.Any]
    output_path: str


@dc.dataclass(slots=True)
class BuildResult:
    """Outcome of :meth:`SiteBuilder.build`."""

    written: list[Path] = dc.field(default_factory=list)
    skipped: list[SkippedDocument] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class SiteIndex:
    """Site-wide state shared by every page render."""

    hierarchy: PageNode
    navigation: list[NavItem] = dc.field(default_factory=list)
    site_labels: list[str] = dc.field(default_factory=list)
    children: dict[str, list[ChildPage]] = dc.field(default_factory=dict)
    page_index: list[PageIndexEntry] = dc.field(default_factory=list)
    paths: dict[str, str] = dc.field(default_factory=dict)


class SiteBuilder:
    """Build a static site from the sources described by a :class:`BuildConfig`."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        templates: TemplateRegistry | None = None,
        components: ComponentRegistry | None = None,
        renderer: HtmlContentRenderer | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : BuildConfig
            Source and output locations plus site-wide settings.
        templates : TemplateRegistry, optional
            Layout templates; loaded from ``config.templates_dir`` (or the
            bundled layouts) when omitted.
        components : ComponentRegistry, optional
            HTML components used by tags and listing pages.
        renderer : HtmlContentRenderer, optional
            Markdown compiler for document bodies.
        """
        self.config = config
        self.components = components or default_components()
        self.templates = templates or load_templates_from_dir(
            config.templates_dir or LAYOUTS_DIR, components=self.components
        )
        self.renderer = renderer or HtmlContentRenderer(config.pygments_style)

    def scan_content(self) -> list[ContentFile]:
        """Return every Markdown file under the content directory, sorted."""
        root = self.config.content_dir
        if not root.is_dir():
            return []
        return [
            ContentFile(path=path, relative_path=path.relative_to(root).as_posix())
            for path in sorted(root.rglob(CONTENT_GLOB))
            if path.is_file()
        ]

    def output_path(self, relative_path: str) -> str:
        """Return the output file, relative to the output directory."""
        return output_path(relative_path)

    def load_document(self, content: str, relative_path: str) -> SourceDocument:
        """Parse one document's header and metadata.

        Raises
        ------
        FrontmatterError
            If the header is present but malformed.
        PageValidationError
            If the header names an invalid ``Short-URI`` or ``Type``. The
            message is prefixed with ``relative_path``.
        """
        parsed = parse_frontmatter(content)
        try:
            metadata = parse_page_metadata(parsed.data)
        except MissingShortUriError:
            metadata = None
        except PageValidationError as exc:
            raise _locate(exc, relative_path) from exc
        return SourceDocument(
            relative_path=relative_path,
            data=parsed.data,
            body=parsed.body,
            metadata=metadata,
        )

    def index_site(self, documents: cabc.Sequence[SourceDocument]) -> SiteIndex:
        """Validate the page tree and derive the shared site state.

        Raises
        ------
        PageValidationError
            If two documents share a ``Short-URI``, a parent is missing, or
            parent references loop. The message names the offending document.
        """
        base_path = self.config.base_path
        pages: list[tuple[str, PageMetadata]] = []
        paths: dict[str, str] = {}
        for document in documents:
            metadata = document.metadata
            if metadata is None:
                continue
            first = paths.get(metadata.short_uri)
            if first is not None:
                msg = (
                    f"{document.relative_path}: Duplicate Short-URI "
                    f"{metadata.short_uri!r} (already used by {first})"
                )
                raise DuplicateShortUriError(msg, short_uri=metadata.short_uri)
            paths[metadata.short_uri] = document.relative_path
            pages.append((document.relative_path, metadata))

        try:
            hierarchy = build_hierarchy(metadata for _path, metadata in pages)
        except PageValidationError as exc:
            raise _locate(exc, paths.get(exc.short_uri or "", "")) from exc

        children: dict[str, list[ChildPage]] = {}
        for node in iter_nodes(hierarchy):
            children[node.short_uri] = [
                _child_page(child, url_path(paths[child.short_uri], base_path))
                for child in node.children
                if child.metadata is not None
            ]

        return SiteIndex(
            hierarchy=hierarchy,
            navigation=generate_navigation(
                pages, base_path, hx_boost=self.config.nav_hx_boost
            ),
            site_labels=collect_site_labels(metadata for _path, metadata in pages),
            children=children,
            page_index=generate_page_index(pages, base_path),
            paths=paths,
        )

    def process_file(
        self, content: str, relative_path: str, site: SiteIndex | None = None
    ) -> ProcessedFile:
        """Render a single document.

        Parameters
        ----------
        content : str
            Full document text including its header.
        relative_path : str
            Location of the document relative to the content directory.
        site : SiteIndex, optional
            Shared site state. Without it the page renders with no
            navigation, breadcrumbs, labels or children.

        Returns
        -------
        ProcessedFile
            Final HTML, the raw header, and the output path.
        """
        document = self.load_document(content, relative_path)
        if site is None:
            site = SiteIndex(hierarchy=PageNode(short_uri=ROOT_PARENT, title=""))
        return self.render_document(document, site)

    def render_document(
        self, document: SourceDocument, site: SiteIndex
    ) -> ProcessedFile:
        """Render an already loaded document against ``site``."""
        config = self.config
        metadata = document.metadata
        children = site.children.get(metadata.short_uri, []) if metadata else []
        body = expand_children_directive(
            document.body, children, components=self.components
        )
        content = self.renderer.compile(body)

        navigation = [
            msgspec.structs.replace(
                item,
                active=is_active_path(
                    item.href, document.relative_path, config.base_path
                ),
            )
            for item in site.navigation
        ]
        ctx = RenderContext(
            title=self._title_for(document),
            content=content,
            base_path=config.base_path,
            navigation=navigation,
            site_labels=list(site.site_labels),
            frontmatter=document.data,
            css_files=list(config.css_files),
            js_files=list(config.js_files),
        )
        if metadata is not None:
            ctx.description = metadata.description
            ctx.keywords = ", ".join(metadata.keywords)
            ctx.author = metadata.author
            ctx.date = metadata.date
            ctx.category = metadata.category
            ctx.labels = list(metadata.labels)
            ctx.type = metadata.type
            ctx.breadcrumbs = self._breadcrumb_trail(metadata, site)
            template = metadata.template
        else:
            template = str(document.data.get("Template") or DEFAULT_TEMPLATE)

        return ProcessedFile(
            html=self.templates.render(template, ctx),
            data=document.data,
            output_path=self.output_path(document.relative_path),
        )

    def build(self) -> BuildResult:
        """Render the whole site into the output directory.

        Returns
        -------
        BuildResult
            Every file written, in write order, and every document skipped
            because its header could not be parsed.

        Raises
        ------
        PageValidationError
            If any document breaks the page tree; nothing is written.
        TemplateNotFoundError
            If a document asks for a layout that is not registered.
        """
        result = BuildResult()
        documents: list[SourceDocument] = []
        for source in self.scan_content():
            content = source.path.read_text(encoding="utf-8")
            try:
                documents.append(self.load_document(content, source.relative_path))
            except FrontmatterError as exc:
                logger.warning("Skipping %s: %s", source.relative_path, exc)
                result.skipped.append(
                    SkippedDocument(relative_path=source.relative_path, reason=str(exc))
                )

        site = self.index_site(documents)

        for document in documents:
            processed = self.render_document(document, site)
            result.written.append(self._write(processed.output_path, processed.html))

        result.written.append(
            self._write(PYGMENTS_CSS_PATH, self.renderer.stylesheet)
        )
        result.written.append(
            self._write(PAGE_INDEX_PATH, encode_page_index(site.page_index))
        )
        result.written.extend(self._write_listings(site))
        result.written.extend(self._write_seo(site))
        if self.config.static_dir is not None:
            result.written.extend(
                copy_static_assets(self.config.static_dir, self.config.output_dir)
            )
        logger.info(
            "Built %d files (%d skipped)", len(result.written), len(result.skipped)
        )
        return result

    def _title_for(self, document: SourceDocument) -> str:
        if document.metadata is not None:
            return document.metadata.title
        title = document.data.get("title") or document.data.get("Title")
        return str(title).strip() if title else self.config.default_title

    def _breadcrumb_trail(
        self, metadata: PageMetadata, site: SiteIndex
    ) -> list[dict[str, str]]:
        if metadata.short_uri not in site.paths:
            return []
        return [
            {
                "title": crumb.title,
                "href": url_path(site.paths[crumb.short_uri], self.config.base_path),
            }
            for crumb in breadcrumbs(site.hierarchy, metadata.short_uri)
        ]

    def _write_listings(self, site: SiteIndex) -> list[Path]:
        """Write a listing page per label and category shared by 2+ pages."""
        written: list[Path] = []
        labels = listing_groups(group_by_label(site.page_index))
        for label, entries in labels.items():
            html = self._render_listing(
                site,
                heading=f"Label: {label}",
                description=f'All pages tagged with "{label}"',
                entries=entries,
            )
            target = f"{LABEL_DIR}/{label_slug(label)}/index.html"
            written.append(self._write(target, html))

        categories = listing_groups(group_by_category(site.page_index))
        for category, entries in categories.items():
            html = self._render_listing(
                site,
                heading=f"Category: {category}",
                description=f'All pages in the "{category}" category',
                entries=entries,
            )
            target = f"{CATEGORY_DIR}/{label_slug(category)}/index.html"
            written.append(self._write(target, html))
        return written

    def _render_listing(
        self,
        site: SiteIndex,
        *,
        heading: str,
        description: str,
        entries: cabc.Sequence[PageIndexEntry],
    ) -> str:
        content = self.components.render(
            "listing-index", heading=heading, pages=_listing_pages(entries)
        )
        ctx = RenderContext(
            title=heading,
            content=content,
            description=description,
            base_path=self.config.base_path,
            navigation=list(site.navigation),
            site_labels=list(site.site_labels),
            css_files=list(self.config.css_files),
            js_files=list(self.config.js_files),
        )
        return self.templates.render(DEFAULT_TEMPLATE, ctx)

    def _write_seo(self, site: SiteIndex) -> list[Path]:
        site_url = self.config.site_url
        if not site_url:
            return []
        base_path = self.config.base_path
        return [
            self._write("robots.txt", generate_robots_txt(site_url, base_path)),
            self._write(
                "sitemap.xml", generate_sitemap(site.page_index, site_url, base_path)
            ),
        ]

    def _write(self, relative: str, payload: str | bytes) -> Path:
        target = self.config.output_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, bytes):
            target.write_bytes(payload)
        else:
            target.write_text(payload, encoding="utf-8")
        logger.debug("Wrote %s", target)
        return target


def copy_static_assets(static_dir: Path, output_dir: Path) -> list[Path]:
    """Mirror ``static_dir`` into ``output_dir`` and list the copied files.

    A missing static directory copies nothing.
    """
    if not static_dir.is_dir():
        return []
    shutil.copytree(static_dir, output_dir, dirs_exist_ok=True)
    return [
        output_dir / path.relative_to(static_dir)
        for path in sorted(static_dir.rglob("*"))
        if path.is_file()
    ]


def _locate(exc: PageValidationError, relative_path: str) -> PageValidationError:
    """Return a copy of ``exc`` whose message starts with the document path."""
    if not relative_path:
        return exc
    return type(exc)(f"{relative_path}: {exc}", short_uri=exc.short_uri)


def _child_page(node: PageNode, url: str) -> ChildPage:
    metadata = typ.cast("PageMetadata", node.metadata)
    return ChildPage(
        title=metadata.title,
        url=url,
        short_uri=metadata.short_uri,
        description=metadata.description,
        date=metadata.date,
        category=metadata.category,
        labels=metadata.labels,
        author=metadata.author,
        type=metadata.type,
        order=metadata.order,
    )


def _listing_pages(entries: cabc.Iterable[PageIndexEntry]) -> list[dict[str, str]]:
    pages: list[dict[str, str]] = []
    for entry in entries:
        date_iso = entry.date or ""
        pages.append(
            {
                "url": entry.url,
                "title": entry.title,
                "description": entry.description,
                "category": entry.category,
                "date_iso": date_iso,
                "date": format_date(_iso_date(date_iso)) if date_iso else "",
            }
        )
    return pages


def _iso_date(text: str) -> dt.date:
    return dt.date.fromisoformat(text[:10])


__all__ = [
    "BuildResult",
    "ContentFile",
    "ProcessedFile",
    "SiteBuilder",
    "SiteIndex",
    "SkippedDocument",
    "SourceDocument",
    "copy_static_assets",
]
