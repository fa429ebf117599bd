"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import _normalize_extensions, _resolve_path, _string_mapping
from .models import DEFAULT_PAGE_EXTENSIONS, SiteConfig, SiteConfigError


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing a site's sources and layouts.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``folio.yaml``). Relative directories inside it are resolved against
        the file's own directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with every directory resolved.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If ``root`` is missing or a field has the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from folio_pages.config import load_site_config
    >>> config = load_site_config(Path("folio.yaml"))  # doctest: +SKIP
    >>> config.page_layouts  # doctest: +SKIP
    {'blog': 'post'}
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    root_value = raw.get("root")
    if not root_value:
        msg = "Site configuration must define 'root'."
        raise SiteConfigError(msg)

    base_dir = path.parent
    defaults = SiteConfig(root=Path(str(root_value)))
    return SiteConfig(
        root=_resolve_path(base_dir, root_value, defaults.root),
        layouts_dir=_resolve_path(base_dir, raw.get("layouts"), defaults.layouts_dir),
        partials_dir=_resolve_path(
            base_dir, raw.get("partials"), defaults.partials_dir
        ),
        data_dir=_resolve_path(base_dir, raw.get("data"), defaults.data_dir),
        output_dir=_resolve_path(base_dir, raw.get("output"), defaults.output_dir),
        page_layouts=_string_mapping(raw.get("page_layouts"), "page_layouts"),
        page_extensions=_normalize_extensions(
            raw.get("page_extensions"), DEFAULT_PAGE_EXTENSIONS
        ),
        pygments_style=str(raw.get("pygments_style") or defaults.pygments_style),
    )


__all__ = ["load_site_config"]
