"""Layer global, upstream, and page data into a single render context.

Example
-------
>>> from folio_pages.render.data import compose_context
>>> context = compose_context(
...     {"site": {"name": "Folio"}, "a": 1},
...     None,
...     {"site": {"tagline": "Pages"}, "a": 2},
...     page="index",
...     layout="default",
...     root="",
... )
>>> context["site"], context["a"], context["page"]
({'name': 'Folio', 'tagline': 'Pages'}, 2, 'index')
"""

from __future__ import annotations

import collections.abc as cabc
import copy
import typing as typ


def deep_merge(
    base: typ.Mapping[str, typ.Any], override: typ.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Return a new mapping with ``override`` merged over ``base``.

    Mappings present on both sides are merged key by key; every other value
    (scalars, lists) from ``override`` replaces the one in ``base``. Neither
    argument is modified and the result shares no containers with them.
    """
    merged: dict[str, typ.Any] = {
        key: copy.deepcopy(value) for key, value in base.items()
    }
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, cabc.Mapping) and isinstance(value, cabc.Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def compose_context(
    global_data: typ.Mapping[str, typ.Any] | None,
    upstream_data: typ.Mapping[str, typ.Any] | None,
    attributes: typ.Mapping[str, typ.Any] | None,
    *,
    page: str,
    layout: str,
    root: str,
) -> dict[str, typ.Any]:
    """Build the context handed to a page's layout.

    Layers are applied in order, each deep-merged over the previous one:
    global data, upstream per-document data, front matter attributes, and
    finally the computed ``page``, ``layout`` and ``root`` values, which the
    page cannot override.
    """
    context: dict[str, typ.Any] = {}
    for layer in (global_data, upstream_data, attributes):
        if layer:
            context = deep_merge(context, layer)
    return deep_merge(context, {"page": page, "layout": layout, "root": root})


__all__ = ["compose_context", "deep_merge"]
