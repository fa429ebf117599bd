r"""Split page sources into front matter attributes and a template body.

A page may open with a YAML block fenced by ``---`` lines (``= yaml =`` is
accepted as an alternate fence and ``...`` as an alternate terminator). The
block is parsed with ruamel.yaml's safe loader; everything after it is the
template body. Pages without a block get empty attributes.

Example
-------
>>> from folio_pages.render.front_matter import split_front_matter
>>> page = split_front_matter("---\ntitle: Home\n---\n<h1>{{ title }}</h1>\n")
>>> page.attributes["title"], page.body
('Home', '<h1>{{ title }}</h1>\n')
"""

from __future__ import annotations

import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from folio_pages.errors import FrontMatterError
from folio_pages.render.models import ParsedPage

BYTE_ORDER_MARK = "\ufeff"
FRONT_MATTER_PATTERN = re.compile(
    r"\A(?P<fence>= yaml =|---)[ \t]*\r?\n"
    r"(?P<yaml>.*?)"
    r"^(?:(?P=fence)|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def strip_bom(text: str) -> str:
    """Drop a leading byte order mark, if present."""
    return text.removeprefix(BYTE_ORDER_MARK)


def _build_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def split_front_matter(text: str) -> ParsedPage:
    """Separate ``text`` into parsed attributes and the remaining body.

    Parameters
    ----------
    text : str
        Full page source. A leading byte order mark is ignored.

    Returns
    -------
    ParsedPage
        Attributes from the YAML block (empty when there is none) and the body
        that follows it.

    Raises
    ------
    FrontMatterError
        If the block is not valid YAML or does not describe a mapping.
    """
    source = strip_bom(text)
    match = FRONT_MATTER_PATTERN.match(source)
    if match is None:
        return ParsedPage(attributes={}, body=source)

    try:
        loaded = _build_loader().load(match.group("yaml")) or {}
    except YAMLError as exc:
        msg = f"Invalid front matter: {exc}"
        raise FrontMatterError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Front matter must be a mapping, got {type(loaded).__name__}."
        raise FrontMatterError(msg)

    attributes: dict[str, typ.Any] = {str(key): value for key, value in loaded.items()}
    return ParsedPage(attributes=attributes, body=source[match.end() :])


__all__ = ["FRONT_MATTER_PATTERN", "split_front_matter", "strip_bom"]
