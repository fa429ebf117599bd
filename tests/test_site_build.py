"""End-to-end tests for building a folio site from disk.

The ``site_dir`` fixture lays out a small site under ``tmp_path``: two
layouts, a permanent partial, a global data file, and pages spread over the
root and a ``blog`` folder that maps to its own layout. One page is
deliberately broken so the build exercises layout-wrapped error pages next to
successful renders.

Usage
-----
Run ``pytest tests/test_site_build.py -v``. The tests only touch
``tmp_path``; no network or external tools are needed.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from folio_pages.cli import build
from folio_pages.config import load_site_config
from folio_pages.site import SiteBuilder

SITE_FILES: dict[str, str] = {
    "folio.yaml": (
        "root: src/pages\n"
        "output: dist\n"
        "page_layouts:\n"
        "  blog: post\n"
    ),
    "src/layouts/default.html": (
        "<!DOCTYPE html><html><head><title>{{ title }}</title>"
        "<style>{{ pygments_css }}</style></head><body>"
        "{% include 'layout-nav' ignore missing %}"
        "{% include 'header' %}"
        "<main>{% include 'body' %}</main></body></html>"
    ),
    "src/layouts/post.html": (
        '<article data-root="{{ root }}">'
        "{% include 'layout-nav' ignore missing %}"
        "{% include 'body' %}</article>"
    ),
    "src/partials/header.html": "<header>{{ site.name }}</header>",
    "src/partials/layout-reserved.html": "<nav>never used</nav>",
    "src/data/site.yaml": "name: Folio\n",
    "src/pages/index.html": (
        "---\n"
        "title: Home\n"
        "---\n"
        "{% filter markdown %}\n"
        "## Welcome\n"
        "{% endfilter %}\n"
        "{{ 'x = 1' | highlight('python') }}\n"
    ),
    "src/pages/blog/first.html": (
        "---\n"
        "title: First\n"
        "---\n"
        '{{#*inline "layout-nav"}}<nav>Blog</nav>{{/inline}}\n'
        "<p>{{ site.name }} post</p>\n"
    ),
    "src/pages/blog/broken.html": "<p>{% if %}</p>\n",
    "src/pages/notes.txt": "not a page\n",
}


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Write the sample site and return its directory."""
    for relative, text in SITE_FILES.items():
        target = tmp_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    return tmp_path


@pytest.fixture
def builder(site_dir: Path) -> SiteBuilder:
    """Return a builder for the sample site."""
    return SiteBuilder(load_site_config(site_dir / "folio.yaml"))


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def test_every_page_is_written_even_when_one_fails(
    builder: SiteBuilder, site_dir: Path
) -> None:
    """The broken page is written and reported without stopping the build."""
    report = builder.run()
    dist = site_dir / "dist"
    assert sorted(report.written) == sorted(
        [
            dist / "blog" / "broken.html",
            dist / "blog" / "first.html",
            dist / "index.html",
        ]
    )
    assert not report.ok
    assert [failure.path.name for failure in report.failures] == ["broken.html"]
    assert report.failures[0].output == dist / "blog" / "broken.html"


def test_root_page_uses_default_layout_partials_and_data(
    builder: SiteBuilder, site_dir: Path
) -> None:
    """Partials see global data and filters render markdown and code."""
    builder.run()
    soup = _soup(site_dir / "dist" / "index.html")
    assert soup.title is not None
    assert soup.title.get_text() == "Home"
    assert soup.header is not None
    assert soup.header.get_text() == "Folio"
    assert soup.select_one("main h2").get_text() == "Welcome"
    code = soup.select_one('main div.codehilite[data-language="python"]')
    assert code is not None, "expected a highlighted python block"
    assert ".codehilite" in soup.style.get_text()


def test_folder_layout_and_inline_fragment(
    builder: SiteBuilder, site_dir: Path
) -> None:
    """Pages in ``blog`` use the ``post`` layout and their own nav fragment."""
    builder.run()
    soup = _soup(site_dir / "dist" / "blog" / "first.html")
    article = soup.article
    assert article is not None
    assert article.get("data-root") == "../"
    assert article.nav is not None
    assert article.nav.get_text() == "Blog"
    assert article.p is not None
    assert article.p.get_text() == "Folio post"


def test_inline_fragment_does_not_reach_later_pages(
    builder: SiteBuilder, site_dir: Path
) -> None:
    """``index.html`` renders after the blog pages but has no nav."""
    builder.run()
    soup = _soup(site_dir / "dist" / "index.html")
    assert soup.nav is None, "blog nav fragment leaked into the home page"


def test_broken_page_keeps_its_layout(builder: SiteBuilder, site_dir: Path) -> None:
    """A page that fails to compile is shown inside its folder layout."""
    builder.run()
    html = (site_dir / "dist" / "blog" / "broken.html").read_text(encoding="utf-8")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.article is not None, html
    assert "Template could not be parsed" in soup.article.get_text()
    assert soup.article.pre is not None


def test_reserved_partial_names_are_skipped(
    builder: SiteBuilder, caplog: pytest.LogCaptureFixture
) -> None:
    """Partials named like transient fragments are not registered."""
    with caplog.at_level(logging.WARNING, logger="folio_pages.site"):
        names = builder.load_partials()
    assert names == ["header"]
    assert "layout-reserved" not in builder.engine.registry
    assert "reserved name prefix" in caplog.text


def test_only_configured_extensions_are_pages(builder: SiteBuilder) -> None:
    """Files with other suffixes are left alone."""
    names = [path.name for path in builder.discover_pages()]
    assert names == ["broken.html", "first.html", "index.html"]


def test_missing_page_root_raises(builder: SiteBuilder, site_dir: Path) -> None:
    """A site without its page directory cannot be built."""
    builder.config.root = site_dir / "missing"
    with pytest.raises(FileNotFoundError, match="not a directory"):
        builder.discover_pages()


def test_json_data_files_are_loaded(builder: SiteBuilder, site_dir: Path) -> None:
    """Global data may also be written as JSON."""
    (site_dir / "src" / "data" / "menu.json").write_text(
        '{"items": ["home", "blog"]}', encoding="utf-8"
    )
    data = builder.load_data()
    assert data == {"menu": {"items": ["home", "blog"]}, "site": {"name": "Folio"}}


def test_cli_build_reports_failures(
    site_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The command lists written pages and exits 1 after a failed page."""
    with pytest.raises(SystemExit) as excinfo:
        build(config=site_dir / "folio.yaml")
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert captured.out.count("wrote ") == 3
    assert "failed " in captured.err
    assert "broken.html" in captured.err


def test_cli_build_succeeds_with_output_override(
    site_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A clean site builds into the requested output directory."""
    (site_dir / "src" / "pages" / "blog" / "broken.html").unlink()
    output_dir = tmp_path / "public"
    build(config=site_dir / "folio.yaml", output_dir=output_dir)
    captured = capsys.readouterr()
    assert len(captured.out.splitlines()) == 2
    assert (output_dir / "index.html").is_file()
    assert (output_dir / "blog" / "first.html").is_file()


def test_duplicate_partial_names_keep_the_first_file(
    builder: SiteBuilder, site_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Two partials with one stem do not silently replace each other."""
    nested = site_dir / "src" / "partials" / "nested" / "header.html"
    nested.parent.mkdir()
    nested.write_text("<header>nested</header>", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="folio_pages.site"):
        names = builder.load_partials()
    assert names == ["header"]
    rendered = builder.engine.registry["header"].render(site={"name": "Folio"})
    assert rendered == "<header>Folio</header>", "nested partial replaced the first"
    assert "already defined" in caplog.text
