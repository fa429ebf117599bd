"""Unit tests for layout resolution and page location helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from folio_pages.errors import LayoutNotFoundError
from folio_pages.render.layouts import (
    folder_key,
    lookup_layout,
    page_name,
    relative_root,
    resolve_layout,
)

ROOT = Path("src/pages")


def test_default_layout_without_front_matter_or_folder_mapping() -> None:
    """Pages that say nothing about layouts get ``default``."""
    assert resolve_layout(ROOT / "index.html", {}, None, ROOT) == "default"
    assert resolve_layout(ROOT / "blog/post.html", {}, {}, ROOT) == "default"


def test_folder_mapping_applies_to_pages_in_that_folder() -> None:
    """A folder entry in ``page_layouts`` selects the layout for its pages."""
    page_layouts = {"blog": "post", "": "home"}
    assert resolve_layout(ROOT / "blog/first.html", {}, page_layouts, ROOT) == "post"
    assert resolve_layout(ROOT / "index.html", {}, page_layouts, ROOT) == "home"


def test_front_matter_layout_overrides_folder_mapping() -> None:
    """An explicit ``layout`` attribute always wins."""
    actual = resolve_layout(
        ROOT / "blog/first.html", {"layout": "wide"}, {"blog": "post"}, ROOT
    )
    assert actual == "wide", f"expected front matter layout, got {actual!r}"


def test_nested_folders_use_forward_slash_keys() -> None:
    """Folder keys join nested directories with ``/``."""
    assert folder_key(ROOT / "blog/2024/post.html", ROOT) == "blog/2024"
    assert folder_key(ROOT / "index.html", ROOT) == ""


@pytest.mark.parametrize(
    ("page", "expected"),
    [
        ("index.html", ""),
        ("about/index.html", "../"),
        ("blog/2024/post.html", "../../"),
    ],
)
def test_relative_root_prefix(page: str, expected: str) -> None:
    """The root prefix climbs one ``../`` per folder level."""
    assert relative_root(ROOT / page, ROOT) == expected


def test_page_name_drops_only_the_final_extension() -> None:
    """Page names are the file name without its last suffix."""
    assert page_name(ROOT / "about/team.html") == "team"
    assert page_name(ROOT / "notes.v2.html") == "notes.v2"


def test_lookup_reports_missing_default_layout() -> None:
    """A missing ``default`` layout is flagged as such."""
    with pytest.raises(LayoutNotFoundError) as excinfo:
        lookup_layout({}, "default")
    assert excinfo.value.is_default is True
    assert 'layout named "default"' in str(excinfo.value)


def test_lookup_reports_missing_named_layout() -> None:
    """A missing named layout says which name was requested."""
    with pytest.raises(LayoutNotFoundError) as excinfo:
        lookup_layout({}, "gallery")
    assert excinfo.value.is_default is False
    assert str(excinfo.value) == 'No layout named "gallery" exists.'
