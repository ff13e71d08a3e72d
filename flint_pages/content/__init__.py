"""Document metadata, page hierarchy, paths, and site-wide indexes.

Import submodules directly, e.g. ``flint_pages.content.hierarchy``.
"""
