"""Load and validate site configuration YAML for folio builds.

This subpackage parses the project's ``folio.yaml`` file, resolves every
directory against the file's location, and produces a :class:`SiteConfig`
that the site builder consumes. The primary entry point is
:func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from folio_pages.config import load_site_config
>>> site = load_site_config(Path("folio.yaml"))  # doctest: +SKIP
>>> site.render_options.root  # doctest: +SKIP
PosixPath('src/pages')
"""

from .loader import load_site_config
from .models import DEFAULT_PAGE_EXTENSIONS, SiteConfig, SiteConfigError

__all__ = [
    "DEFAULT_PAGE_EXTENSIONS",
    "SiteConfig",
    "SiteConfigError",
    "load_site_config",
]
