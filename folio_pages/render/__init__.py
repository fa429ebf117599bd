"""Utilities for splitting, composing, and rendering pages inside layouts."""

from .data import compose_context, deep_merge
from .engine import FragmentRegistry, TemplateEngine
from .fragments import FragmentExtractor, extract_inline_fragments
from .front_matter import split_front_matter
from .layouts import page_name, relative_root, resolve_layout
from .markup import MarkupHelpers
from .models import Document, ParsedPage, RenderOptions
from .orchestrator import PageRenderer

__all__ = [
    "Document",
    "FragmentExtractor",
    "FragmentRegistry",
    "MarkupHelpers",
    "PageRenderer",
    "ParsedPage",
    "RenderOptions",
    "TemplateEngine",
    "compose_context",
    "deep_merge",
    "extract_inline_fragments",
    "page_name",
    "relative_root",
    "resolve_layout",
    "split_front_matter",
]
