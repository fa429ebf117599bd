"""Jinja environment and fragment registry shared by one rendering pipeline.

Fragments (partials) are compiled templates stored by name in a
:class:`FragmentRegistry`. The Jinja environment built by
:class:`TemplateEngine` loads templates straight from that registry, so a
layout reaches the page body with ``{% include "body" %}`` and an inline
fragment with ``{% include "layout-nav" %}``. Helpers are plain callables
published as Jinja globals; templates compiled earlier see helpers registered
later because Jinja chains template globals onto the environment's.

Comments use the ``{{!-- ... --}}`` delimiters so that inline declarations
commented out in a page body compile to nothing.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

from jinja2 import BaseLoader, Environment, Template, TemplateNotFound

from folio_pages._constants import (
    COMMENT_CLOSE,
    COMMENT_OPEN,
    TRANSIENT_FRAGMENT_PREFIX,
)

logger = logging.getLogger(__name__)


class FragmentRegistry(cabc.MutableMapping[str, Template]):
    """Mutable mapping of fragment names to compiled templates.

    Entries whose name starts with ``layout-`` are transient: they belong to
    the document currently being rendered and are dropped by
    :meth:`clear_transient` before the next one starts. Every other entry
    lives as long as the registry.
    """

    def __init__(self, transient_prefix: str = TRANSIENT_FRAGMENT_PREFIX) -> None:
        self.transient_prefix = transient_prefix
        self._fragments: dict[str, Template] = {}

    def __getitem__(self, name: str) -> Template:
        return self._fragments[name]

    def __setitem__(self, name: str, template: Template) -> None:
        self._fragments[name] = template

    def __delitem__(self, name: str) -> None:
        del self._fragments[name]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def is_transient(self, name: str) -> bool:
        """Return ``True`` when ``name`` is scoped to a single document."""
        return name.startswith(self.transient_prefix)

    def clear_transient(self) -> list[str]:
        """Remove every transient fragment and return the removed names."""
        removed = [name for name in self._fragments if self.is_transient(name)]
        for name in removed:
            del self._fragments[name]
        return removed


class FragmentLoader(BaseLoader):
    """Jinja loader that hands out already compiled fragments."""

    has_source_access = False

    def __init__(self, registry: FragmentRegistry) -> None:
        self.registry = registry

    def load(
        self,
        environment: Environment,
        name: str,
        globals: cabc.MutableMapping[str, typ.Any] | None = None,  # noqa: A002
    ) -> Template:
        """Return the fragment registered as ``name``."""
        try:
            return self.registry[name]
        except KeyError as exc:
            raise TemplateNotFound(name) from exc

    def list_templates(self) -> list[str]:
        """Return registered fragment names in sorted order."""
        return sorted(self.registry)


class TemplateEngine:
    """Compile templates and manage the fragments and helpers they can use."""

    def __init__(self, registry: FragmentRegistry | None = None) -> None:
        """Initialize a Jinja environment bound to ``registry``.

        Parameters
        ----------
        registry : FragmentRegistry, optional
            Fragment store consulted by ``{% include %}``; a fresh registry is
            created when omitted.
        """
        self.registry = registry if registry is not None else FragmentRegistry()
        # Fragments change between documents, so Jinja must not cache lookups.
        self.env = Environment(
            loader=FragmentLoader(self.registry),
            autoescape=True,
            comment_start_string=COMMENT_OPEN,
            comment_end_string=COMMENT_CLOSE,
            cache_size=0,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def compile(self, source: str) -> Template:
        """Compile ``source`` into a renderable, autoescaping template.

        Parameters
        ----------
        source : str
            Template source text.

        Raises
        ------
        jinja2.TemplateSyntaxError
            If ``source`` is not a valid template.
        """
        return self.env.from_string(source)

    def register_fragment(self, name: str, template: Template | str) -> Template:
        """Register ``template`` (compiling it first when given as text)."""
        if isinstance(template, str):
            template = self.compile(template)
        self.registry[name] = template
        logger.debug("registered fragment %s", name)
        return template

    def clear_transient_fragments(self) -> list[str]:
        """Drop document-scoped fragments left over from the previous page."""
        removed = self.registry.clear_transient()
        if removed:
            logger.debug("cleared transient fragments: %s", ", ".join(removed))
        return removed

    def register_helper(self, name: str, helper: cabc.Callable[..., typ.Any]) -> None:
        """Expose ``helper`` to every template as a global callable."""
        self.env.globals[name] = helper

    def register_filter(self, name: str, func: cabc.Callable[..., typ.Any]) -> None:
        """Expose ``func`` to every template as a filter."""
        self.env.filters[name] = func

    @staticmethod
    def render(template: Template, context: typ.Mapping[str, typ.Any]) -> str:
        """Render ``template`` against ``context``."""
        return template.render(context)


__all__ = ["FragmentLoader", "FragmentRegistry", "TemplateEngine"]
