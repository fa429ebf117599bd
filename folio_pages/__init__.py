"""Render static site pages inside shared layouts.

This package turns a tree of page sources (front matter plus a Jinja body)
into finished HTML by wrapping each page in a named layout. It exposes the
CLI entry points used by the ``folio`` console script.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from folio_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
