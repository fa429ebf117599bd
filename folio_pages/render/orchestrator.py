"""Render one page at a time inside its layout.

:class:`PageRenderer` runs the per-document sequence: reset the document-scoped
fragments, split the front matter, pick and look up the layout, extract the
page's inline fragments, compile the body, compose the data context, bind the
page helpers, publish the body as the ``body`` fragment, and render the
layout.

The sequence runs in two phases. Failures in the first phase (before a layout
template is in hand) produce a bare HTML error document. Failures in the
second phase re-render the same layout with an error message in place of the
body, so the page shell (stylesheets, live-reload scripts) survives. Either
way the document is emitted once with some output and a
:class:`~folio_pages.errors.PageRenderError` is raised afterwards.

Example
-------
>>> from pathlib import Path
>>> from folio_pages.render import Document, PageRenderer, RenderOptions
>>> renderer = PageRenderer({}, options=RenderOptions(root=Path("src/pages")))
>>> renderer.layouts["default"] = renderer.engine.compile(
...     "<main>{% include 'body' %}</main>"
... )
>>> doc = Document(Path("src/pages/index.html"), b"---\\ntitle: Hi\\n---\\n{{ title }}")
>>> renderer.render(doc).contents
b'<main>Hi\\n</main>'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ
from html import escape

from folio_pages._constants import BODY_FRAGMENT, ERROR_BODY_TEMPLATE, ERROR_PAGE_TITLE
from folio_pages.errors import PageRenderError
from folio_pages.render.data import compose_context
from folio_pages.render.engine import TemplateEngine
from folio_pages.render.fragments import FragmentExtractor
from folio_pages.render.front_matter import split_front_matter
from folio_pages.render.layouts import (
    lookup_layout,
    page_name,
    relative_root,
    resolve_layout,
)
from folio_pages.render.models import (
    Document,
    ParsedPage,
    Rendered,
    RenderFailure,
    RenderOptions,
    RenderOutcome,
)

if typ.TYPE_CHECKING:
    from jinja2 import Template

logger = logging.getLogger(__name__)

Emit = cabc.Callable[[Document], None]


@dc.dataclass(slots=True)
class _ResolvedPage:
    """State reached once the layout template is known."""

    page: ParsedPage
    layout_name: str
    layout: Template


def error_document(error: BaseException) -> str:
    """Return a standalone HTML page describing ``error``."""
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{ERROR_PAGE_TITLE}</title>"
        f"</head><body><pre>{escape(str(error))}</pre></body></html>"
    )


class PageRenderer:
    """Render documents inside their layouts, recovering from failures."""

    def __init__(
        self,
        layouts: cabc.MutableMapping[str, Template],
        *,
        options: RenderOptions,
        engine: TemplateEngine | None = None,
        data: typ.Mapping[str, typ.Any] | None = None,
    ) -> None:
        """Initialize a renderer.

        Parameters
        ----------
        layouts : MutableMapping[str, Template]
            Compiled layouts keyed by name; ``default`` must be present for
            pages that do not pick another layout.
        options : RenderOptions
            Page source root and folder-to-layout mapping.
        engine : TemplateEngine, optional
            Engine owning the fragment registry and helpers. A fresh engine is
            created when omitted; pass one to share loaded partials.
        data : Mapping[str, Any], optional
            Global data merged beneath every page's own data. The attribute
            may be replaced between renders.
        """
        self.layouts = layouts
        self.options = options
        self.engine = engine or TemplateEngine()
        self.data: typ.Mapping[str, typ.Any] = data if data is not None else {}
        self.extractor = FragmentExtractor(self.engine)

    def render(self, document: Document, emit: Emit | None = None) -> Document:
        """Render ``document`` in place and hand it to ``emit`` exactly once.

        Parameters
        ----------
        document : Document
            Page to render; its ``contents`` are replaced with the output.
        emit : Callable[[Document], None], optional
            Downstream handoff, called once whether or not rendering failed.

        Returns
        -------
        Document
            The same document, now holding rendered HTML.

        Raises
        ------
        PageRenderError
            If any step failed. The document has already been given an error
            page and emitted.
        """
        outcome = self._run(document)
        if isinstance(outcome, Rendered):
            document.contents = outcome.html.encode("utf-8")
        else:
            document.contents = self._recover(outcome).encode("utf-8")
            logger.warning("rendering %s failed: %s", document.path, outcome.error)
        if emit is not None:
            emit(document)
        if isinstance(outcome, RenderFailure):
            raise PageRenderError(document, outcome.error) from outcome.error
        return document

    def _run(self, document: Document) -> RenderOutcome:
        self.engine.clear_transient_fragments()
        try:
            resolved = self._resolve(document)
        except Exception as exc:  # noqa: BLE001 - reported through the error page
            return RenderFailure(exc)
        try:
            html = self._render_in_layout(document, resolved)
        except Exception as exc:  # noqa: BLE001 - reported through the error page
            return RenderFailure(exc, layout=resolved.layout)
        return Rendered(html)

    def _resolve(self, document: Document) -> _ResolvedPage:
        page = split_front_matter(document.text)
        layout_name = resolve_layout(
            document.path,
            page.attributes,
            self.options.page_layouts,
            self.options.root,
        )
        layout = lookup_layout(self.layouts, layout_name)
        logger.debug("%s uses layout %s", document.path, layout_name)
        return _ResolvedPage(page=page, layout_name=layout_name, layout=layout)

    def _render_in_layout(self, document: Document, resolved: _ResolvedPage) -> str:
        page = resolved.page
        page.body = self.extractor.extract(page.body)
        page_template = self.engine.compile(page.body + "\n")

        context = compose_context(
            self.data,
            document.data,
            page.attributes,
            page=page_name(document.path),
            layout=resolved.layout_name,
            root=relative_root(document.path, self.options.root),
        )
        self._register_page_helpers(context["page"])
        self.engine.register_fragment(BODY_FRAGMENT, page_template)
        return self.engine.render(resolved.layout, context)

    def _register_page_helpers(self, current_page: str) -> None:
        """Bind ``ifpage`` and ``unlesspage`` to the page being rendered."""

        def ifpage(*pages: str) -> bool:
            return current_page in pages

        def unlesspage(*pages: str) -> bool:
            return current_page not in pages

        self.engine.register_helper("ifpage", ifpage)
        self.engine.register_helper("unlesspage", unlesspage)

    def _recover(self, failure: RenderFailure) -> str:
        """Return the best error page available for ``failure``."""
        if failure.layout is not None:
            try:
                self.engine.register_fragment(BODY_FRAGMENT, ERROR_BODY_TEMPLATE)
                return self.engine.render(failure.layout, {"error": failure.error})
            except Exception as exc:  # noqa: BLE001 - fall through to the bare page
                logger.warning("layout could not render the error page: %s", exc)
        return error_document(failure.error)


__all__ = ["PageRenderer", "error_document"]
