"""Exception hierarchy shared by the renderer, the config loader, and the CLI."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from .render.models import Document


class FolioError(Exception):
    """Base class for errors raised by folio_pages."""


class ConfigurationError(FolioError, ValueError):
    """Raised when the site or layout configuration is unusable."""


class SiteConfigError(ConfigurationError):
    """Raised when ``folio.yaml`` is invalid or incomplete."""


class LayoutNotFoundError(ConfigurationError):
    """Raised when the resolved layout name has no compiled template.

    Attributes
    ----------
    layout : str
        Layout name that was requested.
    is_default : bool
        ``True`` when the missing layout is the ``default`` fallback, which
        every site must provide.
    """

    def __init__(self, layout: str, *, is_default: bool) -> None:
        self.layout = layout
        self.is_default = is_default
        if is_default:
            msg = f'You must have a layout named "{layout}".'
        else:
            msg = f'No layout named "{layout}" exists.'
        super().__init__(msg)


class FrontMatterError(FolioError):
    """Raised when a page's front matter block cannot be parsed."""


class PageRenderError(FolioError):
    """Raised after a page fell back to an error rendering.

    The document has already been given fallback contents and emitted when
    this is raised; callers decide whether to log, count, or abort.
    """

    def __init__(self, document: Document, error: BaseException) -> None:
        self.document = document
        self.error = error
        super().__init__(f"Rendering error occurred.\n{error}")


__all__ = [
    "ConfigurationError",
    "FolioError",
    "FrontMatterError",
    "LayoutNotFoundError",
    "PageRenderError",
    "SiteConfigError",
]
