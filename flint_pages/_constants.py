"""Common literal values used across flint_pages.

These constants keep reserved identifiers and artifact paths centralized so
the builder, the index generators, and tests import the same values without
drifting. Intended for internal use within the flint_pages package.

Examples
--------
>>> from flint_pages import _constants
>>> _constants.PAGE_INDEX_PATH
'fragments/page-index.json'
>>> _constants.ROOT_PARENT
'root'
"""

ROOT_PARENT = "root"
DEFAULT_ORDER = 999
DEFAULT_TEMPLATE = "default"
DEFAULT_TITLE = "Untitled"
PAGE_TYPES = ("page", "post", "section")
PAGE_INDEX_PATH = "fragments/page-index.json"
PYGMENTS_CSS_PATH = "assets/pygments.css"
LABEL_DIR = "label"
CATEGORY_DIR = "category"
