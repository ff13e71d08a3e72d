"""Assemble flat page metadata into a validated parent/child tree.

Every page names its parent by ``Short-URI`` (or the ``root`` sentinel). The
builder indexes pages, rejects duplicate identifiers, orphans and parent
cycles, and returns a single synthetic root node whose descendants are sorted
by ``Order`` and then by title.

Example
-------
>>> from flint_pages.content.hierarchy import build_hierarchy, breadcrumbs
>>> from flint_pages.content.metadata import PageMetadata
>>> root = build_hierarchy([
...     PageMetadata(short_uri="blog", title="Blog"),
...     PageMetadata(short_uri="post", title="Post", parent="blog"),
... ])
>>> [crumb.short_uri for crumb in breadcrumbs(root, "post")]
['blog', 'post']
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

from flint_pages._constants import ROOT_PARENT

from .metadata import DuplicateShortUriError, PageValidationError, validate_short_uri

if typ.TYPE_CHECKING:
    from .metadata import PageMetadata


class OrphanPageError(PageValidationError):
    """Raised when a page's parent does not resolve to any known page."""


class CircularReferenceError(PageValidationError):
    """Raised when parent references form a cycle."""


@dc.dataclass(slots=True)
class PageNode:
    """A page in the content tree.

    The synthetic root carries ``short_uri == "root"`` and no metadata.
    """

    short_uri: str
    title: str
    metadata: PageMetadata | None = None
    children: list[PageNode] = dc.field(default_factory=list)

    @property
    def order(self) -> int:
        """Return the sibling sort key, treating the root as first."""
        return self.metadata.order if self.metadata else 0


@dc.dataclass(frozen=True, slots=True)
class Crumb:
    """One step of a breadcrumb trail."""

    short_uri: str
    title: str


def build_hierarchy(pages: cabc.Iterable[PageMetadata]) -> PageNode:
    """Build the page tree rooted at a synthetic ``root`` node.

    Parameters
    ----------
    pages : Iterable[PageMetadata]
        Flat metadata for every page in the site.

    Returns
    -------
    PageNode
        The synthetic root. Each input page appears exactly once beneath it.

    Raises
    ------
    DuplicateShortUriError
        If two pages share a ``short_uri``.
    InvalidShortUriError
        If a page claims the reserved ``root`` identifier.
    OrphanPageError
        If a page's ``parent`` is neither ``root`` nor a known ``short_uri``.
    CircularReferenceError
        If following ``parent`` references from any page revisits a page.
    """
    root = PageNode(short_uri=ROOT_PARENT, title="")
    index: dict[str, PageNode] = {}
    for page in pages:
        validate_short_uri(page.short_uri)
        if page.short_uri in index:
            msg = f"Duplicate Short-URI {page.short_uri!r}"
            raise DuplicateShortUriError(msg, short_uri=page.short_uri)
        index[page.short_uri] = PageNode(
            short_uri=page.short_uri, title=page.title, metadata=page
        )

    for node in index.values():
        parent = _parent_of(node)
        if parent != ROOT_PARENT and parent not in index:
            msg = f"Page {node.short_uri!r} has unknown parent {parent!r}"
            raise OrphanPageError(msg, short_uri=node.short_uri)

    _check_cycles(index)

    for node in index.values():
        parent = _parent_of(node)
        target = root if parent == ROOT_PARENT else index[parent]
        target.children.append(node)

    _sort_children(root)
    return root


def breadcrumbs(root: PageNode, short_uri: str) -> list[Crumb]:
    """Return the trail from the top-level ancestor down to ``short_uri``.

    Raises
    ------
    LookupError
        If no page with ``short_uri`` exists beneath ``root``.
    """
    path = _find_path(root, short_uri)
    if path is None:
        msg = f"Unknown Short-URI {short_uri!r}"
        raise LookupError(msg)
    return [Crumb(short_uri=node.short_uri, title=node.title) for node in path]


def find_node(root: PageNode, short_uri: str) -> PageNode | None:
    """Return the node for ``short_uri`` or None when absent."""
    for node in iter_nodes(root):
        if node.short_uri == short_uri:
            return node
    return None


def iter_nodes(root: PageNode) -> cabc.Iterator[PageNode]:
    """Yield every page beneath ``root`` in depth-first, sorted order."""
    for child in root.children:
        yield child
        yield from iter_nodes(child)


def _parent_of(node: PageNode) -> str:
    return node.metadata.parent if node.metadata else ROOT_PARENT


def _check_cycles(index: dict[str, PageNode]) -> None:
    """Walk each parent chain, failing on the first revisited page."""
    settled: set[str] = set()
    for start in index:
        chain: list[str] = []
        seen: set[str] = set()
        current = start
        while current != ROOT_PARENT and current not in settled:
            if current in seen:
                loop = [*chain[chain.index(current) :], current]
                msg = "Circular parent reference: " + " -> ".join(loop)
                raise CircularReferenceError(msg, short_uri=current)
            seen.add(current)
            chain.append(current)
            current = _parent_of(index[current])
        settled.update(chain)


def _sort_children(node: PageNode) -> None:
    node.children.sort(key=lambda child: (child.order, child.title.casefold()))
    for child in node.children:
        _sort_children(child)


def _find_path(node: PageNode, short_uri: str) -> list[PageNode] | None:
    for child in node.children:
        if child.short_uri == short_uri:
            return [child]
        found = _find_path(child, short_uri)
        if found is not None:
            return [child, *found]
    return None


__all__ = [
    "CircularReferenceError",
    "Crumb",
    "OrphanPageError",
    "PageNode",
    "breadcrumbs",
    "build_hierarchy",
    "find_node",
    "iter_nodes",
]
