"""Build every page of a site through one shared rendering pipeline.

This module turns a :class:`~folio_pages.config.SiteConfig` into rendered
files. :class:`SiteBuilder` compiles the layouts, registers partials as
permanent fragments, loads global data files, then walks the page tree and
feeds the pages to a single :class:`~folio_pages.render.PageRenderer` one at a
time. Pages that fail still get their fallback output written; the failures
are collected in the returned :class:`BuildReport`.

Typical usage pairs the loader with a site config:

>>> from pathlib import Path
>>> from folio_pages.config import load_site_config
>>> from folio_pages.site import SiteBuilder
>>> site = load_site_config(Path("folio.yaml"))  # doctest: +SKIP
>>> report = SiteBuilder(site).run()  # doctest: +SKIP
>>> report.ok  # doctest: +SKIP
True

Side effects include reading the source tree and writing UTF-8 HTML under the
configured output directory.
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import typing as typ

from ruamel.yaml import YAML

from .errors import PageRenderError
from .render import Document, MarkupHelpers, PageRenderer, TemplateEngine
from .render.front_matter import strip_bom

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Template

    from .config import SiteConfig

logger = logging.getLogger(__name__)

DATA_SUFFIXES = (".yaml", ".yml", ".json")


@dc.dataclass(slots=True)
class PageFailure:
    """A page that was written with an error page instead of its content."""

    path: Path
    output: Path
    message: str


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a site build."""

    written: list[Path] = dc.field(default_factory=list)
    failures: list[PageFailure] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return ``True`` when every page rendered without falling back."""
        return not self.failures


class SiteBuilder:
    """Render a site's pages into its output directory."""

    def __init__(
        self, config: SiteConfig, *, engine: TemplateEngine | None = None
    ) -> None:
        """Initialize the builder and its rendering pipeline.

        Parameters
        ----------
        config : SiteConfig
            Resolved site configuration.
        engine : TemplateEngine, optional
            Engine to render with; a fresh one is created when omitted. The
            ``markdown`` and ``highlight`` filters are installed on it before
            any template is compiled.
        """
        self.config = config
        self.engine = engine or TemplateEngine()
        self.markup = MarkupHelpers(config.pygments_style)
        self.markup.install(self.engine)
        self.renderer = PageRenderer(
            {}, options=config.render_options, engine=self.engine
        )

    def load_layouts(self) -> dict[str, Template]:
        """Compile every file in the layouts directory, keyed by file stem."""
        layouts: dict[str, Template] = {}
        layouts_dir = self.config.layouts_dir
        if not layouts_dir.is_dir():
            logger.warning("layouts directory %s does not exist", layouts_dir)
            return layouts
        for path in sorted(p for p in layouts_dir.iterdir() if p.is_file()):
            source = strip_bom(path.read_text(encoding="utf-8"))
            layouts[path.stem] = self.engine.compile(source)
        return layouts

    def load_partials(self) -> list[str]:
        """Register every partial file as a permanent fragment.

        Returns
        -------
        list[str]
            Names of the registered partials. Files whose stem starts with the
            transient ``layout-`` prefix are skipped, since they would be
            dropped before the first page rendered. Partials are keyed by stem
            across subdirectories; when two files share a stem the first in
            path order is kept and the other is skipped with a warning.
        """
        partials_dir = self.config.partials_dir
        if not partials_dir.is_dir():
            return []
        sources: dict[str, Path] = {}
        for path in sorted(p for p in partials_dir.rglob("*") if p.is_file()):
            name = path.stem
            if self.engine.registry.is_transient(name):
                logger.warning("skipping partial %s: reserved name prefix", path)
                continue
            if name in sources:
                logger.warning(
                    "skipping partial %s: %r is already defined by %s",
                    path,
                    name,
                    sources[name],
                )
                continue
            sources[name] = path
            source = strip_bom(path.read_text(encoding="utf-8"))
            self.engine.register_fragment(name, source)
        return list(sources)

    def load_data(self) -> dict[str, typ.Any]:
        """Load global data files, keyed by file stem.

        Raises
        ------
        YAMLError
            If a YAML data file cannot be parsed.
        json.JSONDecodeError
            If a JSON data file cannot be parsed.
        """
        data: dict[str, typ.Any] = {}
        data_dir = self.config.data_dir
        if not data_dir.is_dir():
            return data
        loader = YAML(typ="safe")
        loader.version = (1, 2)
        for path in sorted(data_dir.iterdir()):
            suffix = path.suffix.lower()
            if not path.is_file() or suffix not in DATA_SUFFIXES:
                continue
            with path.open("r", encoding="utf-8") as handle:
                if suffix == ".json":
                    data[path.stem] = json.load(handle)
                else:
                    data[path.stem] = loader.load(handle)
        return data

    def refresh(self) -> None:
        """Reload layouts, partials, and data from disk."""
        self.renderer.layouts = self.load_layouts()
        self.load_partials()
        self.renderer.data = self.load_data()

    def discover_pages(self) -> list[Path]:
        """Return page sources under the root, sorted by path."""
        root = self.config.root
        if not root.is_dir():
            msg = f"Page root '{root}' is not a directory."
            raise FileNotFoundError(msg)
        suffixes = self.config.page_extensions
        return sorted(
            path
            for path in root.rglob("*")
            if path.is_file() and path.suffix.lower() in suffixes
        )

    def run(self) -> BuildReport:
        """Render every page and write the results.

        Returns
        -------
        BuildReport
            Paths written and pages that fell back to an error page.

        Notes
        -----
        A failing page does not stop the build: its fallback output is written
        like any other page and the failure is recorded in the report.
        """
        self.refresh()
        report = BuildReport()

        def _write(document: Document) -> None:
            output_path = self.config.output_path_for(document.path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(document.contents)
            report.written.append(output_path)

        for page_path in self.discover_pages():
            document = Document(path=page_path, contents=page_path.read_bytes())
            try:
                self.renderer.render(document, emit=_write)
            except PageRenderError as exc:
                report.failures.append(
                    PageFailure(
                        path=page_path,
                        output=self.config.output_path_for(page_path),
                        message=str(exc.error),
                    )
                )
        return report


__all__ = ["BuildReport", "PageFailure", "SiteBuilder"]
