"""Tests for the ``markdown`` and ``highlight`` template filters."""

from __future__ import annotations

from bs4 import BeautifulSoup
from markupsafe import Markup

from folio_pages.render import MarkupHelpers, TemplateEngine
from folio_pages.render.markup import fence_languages


def test_markdown_renders_dedented_source() -> None:
    """Indented markdown renders as if it started at column zero."""
    html = MarkupHelpers().markdown(
        """
        ## Install

        - run `folio build`
        """
    )
    soup = BeautifulSoup(html, "html.parser")
    assert soup.h2 is not None
    assert soup.h2.get_text() == "Install"
    assert soup.select_one("li code").get_text() == "folio build"


def test_markdown_tags_fenced_code_with_its_language() -> None:
    """Fenced blocks are highlighted and carry ``data-language``."""
    html = MarkupHelpers().markdown("```python\nprint('hi')\n```\n")
    soup = BeautifulSoup(html, "html.parser")
    block = soup.select_one("div.codehilite")
    assert block is not None, html
    assert block.get("data-language") == "python"
    assert "print" in block.get_text()


def test_blank_markdown_renders_nothing() -> None:
    """Whitespace-only input produces empty markup."""
    assert MarkupHelpers().markdown("   \n  ") == Markup("")


def test_highlight_falls_back_to_plain_text() -> None:
    """Unknown languages are highlighted with the text lexer."""
    html = MarkupHelpers().highlight("<b>x</b>", "not-a-language")
    soup = BeautifulSoup(html, "html.parser")
    block = soup.select_one("div.codehilite")
    assert block is not None
    assert block.get("data-language") == "not-a-language"
    assert block.get_text().strip() == "<b>x</b>"


def test_filters_are_not_escaped_by_templates() -> None:
    """Installed filters return markup that survives autoescaping."""
    engine = TemplateEngine()
    MarkupHelpers().install(engine)
    template = engine.compile(
        "{{ text | markdown }}|{{ code | highlight('python') }}"
    )
    html = template.render(text="*hi*", code="x = 1")
    assert html.startswith("<p><em>hi</em></p>|"), html
    assert '<div class="codehilite" data-language="python">' in html


def test_stylesheet_is_published_as_a_global() -> None:
    """Layouts can embed the Pygments CSS without escaping it."""
    engine = TemplateEngine()
    helpers = MarkupHelpers("friendly")
    helpers.install(engine)
    rendered = engine.compile("<style>{{ pygments_css }}</style>").render()
    assert helpers.stylesheet in rendered
    assert ".codehilite" in helpers.stylesheet


def test_fence_languages_read_the_first_word_of_the_info_string() -> None:
    """Attributes after a comma and unlabelled fences are handled."""
    source = (
        "```rust,no_run\nfn main() {}\n```\n\n"
        "~~~\n```python\nnot a fence\n```\n~~~\n\n"
        "``` {.toml}\nkey = 1\n```\n"
    )
    assert fence_languages(source) == ["rust", "text", "toml"]


def test_markdown_tags_each_block_in_order() -> None:
    """Multiple fenced blocks get their own ``data-language`` values."""
    html = MarkupHelpers().markdown("```rust\nfn main() {}\n```\n\n```\nplain\n```\n")
    soup = BeautifulSoup(html, "html.parser")
    blocks = soup.select("div.codehilite")
    languages = [block.get("data-language") for block in blocks]
    assert languages == ["rust", "text"], html
