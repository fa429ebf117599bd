r"""Extract inline ``layout-`` fragments declared in page bodies.

Pages can hand markup to their layout by declaring an inline block::

    {{#*inline "layout-nav"}}<a href="/">Home</a>{{/inline}}

The block is cut out of the page and registered as the fragment
``layout-nav``, which the layout pulls in with
``{% include "layout-nav" %}``. The scanner walks the body once, skipping
``{{!-- ... --}}`` comments, and pairs every opening tag with its own closing
tag by nesting depth. Removals are applied by position, so a declaration that
also appears verbatim inside a comment is only removed where it was matched.

Example
-------
>>> from folio_pages.render.fragments import extract_inline_fragments
>>> body, found = extract_inline_fragments(
...     '{{#*inline "layout-nav"}}Hi{{/inline}}\n<p>Page</p>'
... )
>>> body, [(fragment.name, fragment.body) for fragment in found]
('<p>Page</p>', [('layout-nav', 'Hi')])
"""

from __future__ import annotations

import logging
import re
import typing as typ

from folio_pages._constants import (
    COMMENT_CLOSE,
    COMMENT_OPEN,
    INLINE_MARKERS,
    TRANSIENT_FRAGMENT_PREFIX,
)
from folio_pages.render.models import InlineFragment

if typ.TYPE_CHECKING:
    from folio_pages.render.engine import TemplateEngine

logger = logging.getLogger(__name__)

# Any inline opener or comment opener; used to find the next point of interest.
TOKEN_PATTERN = re.compile(r"\{\{!--|\{\{~?#\*inline\b")
# Tokens that affect nesting while looking for the matching closing tag.
NESTING_PATTERN = re.compile(r"\{\{!--|\{\{~?#\*inline\b|\{\{~?/inline\s*~?\}\}")
OPEN_TAG_PATTERN = re.compile(
    r"\{\{~?#\*inline\s+"
    rf"(?P<quote>[\"'])(?P<name>{re.escape(TRANSIENT_FRAGMENT_PREFIX)}[0-9A-Za-z_-]*)"
    r"(?P=quote)\s*~?\}\}"
)
TRAILING_WHITESPACE = re.compile(r"\s*")


def has_inline_marker(body: str) -> bool:
    """Return ``True`` when ``body`` may contain an inline declaration."""
    return any(marker in body for marker in INLINE_MARKERS)


def _skip_comment(text: str, start: int) -> int | None:
    """Return the offset after the comment opening at ``start``, if closed."""
    end = text.find(COMMENT_CLOSE, start + len(COMMENT_OPEN))
    if end == -1:
        return None
    return end + len(COMMENT_CLOSE)


def _find_close(text: str, pos: int) -> re.Match[str] | None:
    """Find the closing tag that pairs with an opener ending at ``pos``."""
    depth = 1
    while True:
        token = NESTING_PATTERN.search(text, pos)
        if token is None:
            return None
        lexeme = token.group()
        if lexeme == COMMENT_OPEN:
            after = _skip_comment(text, token.start())
            pos = after if after is not None else token.end()
            continue
        if "/inline" in lexeme:
            depth -= 1
            if depth == 0:
                return token
        else:
            depth += 1
        pos = token.end()


def scan_inline_fragments(text: str) -> list[InlineFragment]:
    """Return the ``layout-`` declarations in ``text`` from left to right.

    Parameters
    ----------
    text : str
        Template source to scan.

    Returns
    -------
    list[InlineFragment]
        One entry per well-formed declaration outside comments. Declarations
        with a non ``layout-`` name, mismatched quotes, or no closing tag are
        not reported and stay in the text untouched.
    """
    found: list[InlineFragment] = []
    pos = 0
    while True:
        token = TOKEN_PATTERN.search(text, pos)
        if token is None:
            return found
        if token.group() == COMMENT_OPEN:
            after = _skip_comment(text, token.start())
            pos = after if after is not None else token.end()
            continue

        opener = OPEN_TAG_PATTERN.match(text, token.start())
        if opener is None:
            pos = token.end()
            continue
        closer = _find_close(text, opener.end())
        if closer is None:
            pos = token.end()
            continue

        end = TRAILING_WHITESPACE.match(text, closer.end()).end()
        found.append(
            InlineFragment(
                name=opener.group("name"),
                body=text[opener.end() : closer.start()],
                start=token.start(),
                end=end,
            )
        )
        pos = end


def extract_inline_fragments(body: str) -> tuple[str, list[InlineFragment]]:
    """Remove ``layout-`` declarations from ``body``.

    Bodies without an inline marker are returned unchanged without scanning.

    Returns
    -------
    tuple[str, list[InlineFragment]]
        The body with each declaration (and the whitespace after it) cut out,
        and the declarations in source order.
    """
    if not has_inline_marker(body):
        return body, []
    fragments = scan_inline_fragments(body)
    if not fragments:
        return body, []

    pieces: list[str] = []
    cursor = 0
    for fragment in fragments:
        pieces.append(body[cursor : fragment.start])
        cursor = fragment.end
    pieces.append(body[cursor:])
    return "".join(pieces), fragments


class FragmentExtractor:
    """Register a page's inline fragments with a template engine."""

    def __init__(self, engine: TemplateEngine) -> None:
        self.engine = engine

    def extract(self, body: str) -> str:
        """Register every inline ``layout-`` fragment and return the rest.

        Fragment bodies are extracted recursively, so a declaration nested in
        another one is registered in its own right. Each body is compiled with
        a trailing newline; later declarations of a name replace earlier ones.

        Raises
        ------
        jinja2.TemplateSyntaxError
            If a fragment body is not a valid template.
        """
        remaining, fragments = extract_inline_fragments(body)
        for fragment in fragments:
            fragment_body = self.extract(fragment.body)
            self.engine.register_fragment(fragment.name, fragment_body + "\n")
            logger.debug("registered inline fragment %s", fragment.name)
        return remaining


__all__ = [
    "FragmentExtractor",
    "extract_inline_fragments",
    "has_inline_marker",
    "scan_inline_fragments",
]
