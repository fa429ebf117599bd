"""Markdown and syntax-highlighting filters available to every template.

Templates call ``{{ text | markdown }}`` (or wrap a block in
``{% filter markdown %}...{% endfilter %}``) and ``{{ code | highlight("py") }}``.
Both return :class:`markupsafe.Markup` so autoescaping leaves the HTML intact.
Every highlighted block is a ``div.codehilite`` carrying a ``data-language``
attribute, so layouts can label or style blocks per language.
"""

from __future__ import annotations

import collections.abc as cabc
import re
import textwrap
import typing as typ
from html import escape

from markdown import Markdown
from markupsafe import Markup
from pygments import highlight as pygments_highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

if typ.TYPE_CHECKING:
    from folio_pages.render.engine import TemplateEngine

HIGHLIGHT_CLASS = "codehilite"
PLAIN_LANGUAGE = "text"
HIGHLIGHT_DIV = re.compile(rf'<div class="{HIGHLIGHT_CLASS}">')
FENCE_OPEN = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^\n]*)$")
MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


def fence_languages(source: str) -> list[str]:
    """Return the language of each fenced code block in ``source``.

    The language is the first word of the fence's info string, cut at a comma
    (``rust,no_run`` is ``rust``). Fences without one are ``text``.
    """
    languages: list[str] = []
    closing: str | None = None
    for line in source.splitlines():
        if closing is not None:
            if line.strip() == closing:
                closing = None
            continue
        match = FENCE_OPEN.match(line)
        if match is None:
            continue
        closing = match.group("fence")
        info = match.group("info").strip().lstrip("{.")
        language = re.split(r"[\s,}]", info, maxsplit=1)[0] if info else ""
        languages.append(language or PLAIN_LANGUAGE)
    return languages


def tag_languages(html: str, languages: cabc.Iterable[str]) -> str:
    """Add ``data-language`` to highlighted blocks, one language per block."""
    remaining = iter(languages)

    def _tag(match: re.Match[str]) -> str:
        language = next(remaining, None)
        if language is None:
            return match.group()
        return (
            f'<div class="{HIGHLIGHT_CLASS}" '
            f'data-language="{escape(language, quote=True)}">'
        )

    return HIGHLIGHT_DIV.sub(_tag, html)


class MarkupHelpers:
    """Render markdown and code snippets with one Pygments style."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass=HIGHLIGHT_CLASS)
        self._markdown = Markdown(
            extensions=list(MARKDOWN_EXTENSIONS),
            extension_configs={
                "codehilite": {
                    "css_class": HIGHLIGHT_CLASS,
                    "guess_lang": False,
                    "linenums": False,
                    "pygments_style": pygments_style,
                }
            },
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS for highlighted blocks in the configured style."""
        return self._formatter.get_style_defs(f".{HIGHLIGHT_CLASS}")

    def markdown(self, text: str) -> Markup:
        """Render markdown into HTML.

        Common leading indentation is removed first, so markdown nested inside
        indented layout markup renders as if it started at column zero.
        """
        source = textwrap.dedent(str(text)).strip("\n")
        if not source.strip():
            return Markup("")
        html = self._markdown.reset().convert(source)
        return Markup(tag_languages(html, fence_languages(source)))

    def highlight(self, code: str, language: str | None = None) -> Markup:
        """Render ``code`` as a highlighted block tagged with ``language``.

        Unknown or missing languages use the plain ``text`` lexer; the block
        keeps the requested name in ``data-language``.
        """
        name = language or PLAIN_LANGUAGE
        try:
            lexer = get_lexer_by_name(name)
        except ClassNotFound:
            lexer = get_lexer_by_name(PLAIN_LANGUAGE)
        html = pygments_highlight(str(code), lexer, self._formatter)
        return Markup(tag_languages(html, [name]))

    def install(self, engine: TemplateEngine) -> None:
        """Register the filters and the ``pygments_css`` global on ``engine``."""
        engine.register_filter("markdown", self.markdown)
        engine.register_filter("highlight", self.highlight)
        engine.env.globals["pygments_css"] = Markup(self.stylesheet)


__all__ = ["MarkupHelpers", "fence_languages", "tag_languages"]
