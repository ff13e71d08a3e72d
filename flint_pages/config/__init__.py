"""Load and validate Flint build configuration.

A build is described by a :class:`BuildConfig`. It can be constructed directly,
or read from an optional ``flint.yaml`` with :func:`load_site_config`; the CLI
layers command-line flags and the ``BASE_PATH``/``SITE_URL`` environment
variables on top.

Examples
--------
>>> from pathlib import Path
>>> from flint_pages.config import BuildConfig
>>> BuildConfig(content_dir=Path("content"), base_path="/docs").base_path
'/docs'
"""

from .helpers import normalize_base_path, normalize_site_url
from .loader import DEFAULT_CONFIG, load_site_config
from .models import BuildConfig, SiteConfigError

__all__ = [
    "DEFAULT_CONFIG",
    "BuildConfig",
    "SiteConfigError",
    "load_site_config",
    "normalize_base_path",
    "normalize_site_url",
]
