"""Decide which layout wraps a page and where the page sits in the site."""

from __future__ import annotations

import os
import typing as typ
from pathlib import Path

from folio_pages._constants import DEFAULT_LAYOUT
from folio_pages.errors import LayoutNotFoundError

if typ.TYPE_CHECKING:
    from jinja2 import Template


def _relative_posix(target: Path | str, start: Path | str) -> str:
    relative = os.path.relpath(target, start)
    if relative == os.curdir:
        return ""
    return relative.replace(os.sep, "/")


def folder_key(document_path: Path | str, root: Path | str) -> str:
    """Return the page's directory relative to ``root`` (``""`` at the root)."""
    return _relative_posix(Path(document_path).parent, root)


def relative_root(document_path: Path | str, root: Path | str) -> str:
    """Return the prefix that leads from the page's directory back to ``root``.

    Examples
    --------
    >>> relative_root("src/pages/index.html", "src/pages")
    ''
    >>> relative_root("src/pages/blog/post.html", "src/pages")
    '../'
    """
    prefix = _relative_posix(root, Path(document_path).parent)
    return f"{prefix}/" if prefix else ""


def page_name(document_path: Path | str) -> str:
    """Return the page's file name without its final extension."""
    return Path(document_path).stem


def resolve_layout(
    document_path: Path | str,
    attributes: typ.Mapping[str, typ.Any],
    page_layouts: typ.Mapping[str, str] | None,
    root: Path | str,
) -> str:
    """Return the layout name for a page.

    Parameters
    ----------
    document_path : Path or str
        Source path of the page.
    attributes : Mapping[str, Any]
        Parsed front matter; an explicit ``layout`` key wins.
    page_layouts : Mapping[str, str], optional
        Folder key (see :func:`folder_key`) to layout name.
    root : Path or str
        Page source root used to compute the folder key.

    Returns
    -------
    str
        The front matter layout, else the folder layout, else ``"default"``.
    """
    explicit = attributes.get("layout")
    if explicit:
        return str(explicit)
    if page_layouts:
        folder_layout = page_layouts.get(folder_key(document_path, root))
        if folder_layout:
            return folder_layout
    return DEFAULT_LAYOUT


def lookup_layout(layouts: typ.Mapping[str, Template], name: str) -> Template:
    """Return the compiled layout ``name``.

    Raises
    ------
    LayoutNotFoundError
        If no layout of that name was loaded.
    """
    try:
        return layouts[name]
    except KeyError as exc:
        raise LayoutNotFoundError(name, is_default=name == DEFAULT_LAYOUT) from exc


__all__ = [
    "folder_key",
    "lookup_layout",
    "page_name",
    "relative_root",
    "resolve_layout",
]
