"""Shared dataclasses used by the page rendering pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path
from types import MappingProxyType

if typ.TYPE_CHECKING:
    from jinja2 import Template


@dc.dataclass(slots=True)
class Document:
    """A single page travelling through the build.

    Attributes
    ----------
    path : Path
        Source path of the page; used for the page name, the folder layout
        key, and the relative root prefix.
    contents : bytes
        Raw front matter plus body on the way in, rendered UTF-8 HTML on the
        way out.
    data : Mapping[str, Any] or None
        Optional per-document context injected upstream of the renderer.
    """

    path: Path
    contents: bytes
    data: typ.Mapping[str, typ.Any] | None = None

    @property
    def text(self) -> str:
        """Return ``contents`` decoded as UTF-8."""
        return self.contents.decode("utf-8")


@dc.dataclass(slots=True)
class ParsedPage:
    """Front matter attributes and template body split from a document.

    ``attributes`` is frozen into a read-only mapping; ``body`` is replaced by
    the fragment extractor before the page is compiled.
    """

    attributes: typ.Mapping[str, typ.Any]
    body: str

    def __post_init__(self) -> None:
        if not isinstance(self.attributes, MappingProxyType):
            self.attributes = MappingProxyType(dict(self.attributes))


@dc.dataclass(frozen=True, slots=True)
class InlineFragment:
    """An inline ``layout-`` declaration found in a page body.

    Attributes
    ----------
    name : str
        Fragment name, always starting with ``layout-``.
    body : str
        Template source between the opening and closing tags.
    start : int
        Offset of the opening ``{{`` in the scanned text.
    end : int
        Offset just past the closing tag and any trailing whitespace.
    """

    name: str
    body: str
    start: int
    end: int


@dc.dataclass(frozen=True, slots=True)
class RenderOptions:
    """Site-level settings the renderer needs for each document."""

    root: Path
    page_layouts: typ.Mapping[str, str] = dc.field(default_factory=dict)


@dc.dataclass(frozen=True, slots=True)
class Rendered:
    """Successful pipeline outcome."""

    html: str


@dc.dataclass(frozen=True, slots=True)
class RenderFailure:
    """Failed pipeline outcome.

    ``layout`` holds the layout template when one had been resolved before the
    failure; the renderer uses it to choose between wrapping the error in the
    layout and emitting a bare error document.
    """

    error: Exception
    layout: Template | None = None


RenderOutcome = Rendered | RenderFailure


__all__ = [
    "Document",
    "InlineFragment",
    "ParsedPage",
    "RenderFailure",
    "RenderOptions",
    "RenderOutcome",
    "Rendered",
]
