"""Typed dataclasses describing folio site configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from folio_pages.errors import SiteConfigError
from folio_pages.render.models import RenderOptions

DEFAULT_PAGE_EXTENSIONS = (".html", ".hbs", ".jinja")


@dc.dataclass(slots=True)
class SiteConfig:
    """A fully resolved site definition sourced from ``folio.yaml``.

    Attributes
    ----------
    root : Path
        Directory holding page sources.
    layouts_dir : Path
        Directory of layout templates, one per file, named by file stem.
    partials_dir : Path
        Directory of permanent fragments, searched recursively.
    data_dir : Path
        Directory of ``.yaml``/``.yml``/``.json`` global data files.
    output_dir : Path
        Directory receiving rendered pages.
    page_layouts : dict[str, str]
        Folder (relative to ``root``) to layout name.
    page_extensions : tuple[str, ...]
        Suffixes of files under ``root`` treated as pages.
    pygments_style : str
        Pygments style used by the ``markdown`` and ``highlight`` filters.
    """

    root: Path
    layouts_dir: Path = Path("src/layouts")
    partials_dir: Path = Path("src/partials")
    data_dir: Path = Path("src/data")
    output_dir: Path = Path("dist")
    page_layouts: dict[str, str] = dc.field(default_factory=dict)
    page_extensions: tuple[str, ...] = DEFAULT_PAGE_EXTENSIONS
    pygments_style: str = "monokai"

    @property
    def render_options(self) -> RenderOptions:
        """Return the subset of settings the page renderer consumes."""
        return RenderOptions(root=self.root, page_layouts=dict(self.page_layouts))

    def output_path_for(self, page_path: Path) -> Path:
        """Return where the rendered ``page_path`` is written."""
        relative = page_path.relative_to(self.root)
        return (self.output_dir / relative).with_suffix(".html")


__all__ = ["DEFAULT_PAGE_EXTENSIONS", "SiteConfig", "SiteConfigError"]
