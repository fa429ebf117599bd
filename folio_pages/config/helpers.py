"""Utility helpers shared by the folio configuration loader."""

from __future__ import annotations

from pathlib import Path

from folio_pages.errors import SiteConfigError


def _resolve_path(base_dir: Path, value: object | None, default: Path) -> Path:
    """Return ``value`` as a path relative to ``base_dir`` (absolute kept)."""
    raw = default if value is None or value == "" else Path(str(value))
    if raw.is_absolute():
        return raw
    return base_dir / raw


def _normalize_extensions(
    value: str | list[object] | None, default: tuple[str, ...]
) -> tuple[str, ...]:
    """Normalize suffixes to lower-case strings with a leading dot."""
    if value is None:
        return default
    items = value.split() if isinstance(value, str) else list(value)
    normalized: list[str] = []
    for item in items:
        text = str(item).strip().lower()
        if not text:
            continue
        normalized.append(text if text.startswith(".") else f".{text}")
    if not normalized:
        msg = "'page_extensions' must list at least one suffix."
        raise SiteConfigError(msg)
    return tuple(normalized)


def _string_mapping(value: object | None, field: str) -> dict[str, str]:
    """Return ``value`` as a ``str`` to ``str`` mapping with clean folder keys."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"'{field}' must be a mapping, got {type(value).__name__}."
        raise SiteConfigError(msg)
    mapping: dict[str, str] = {}
    for key, layout in value.items():
        folder = str(key).replace("\\", "/").strip("/")
        if folder == ".":
            folder = ""
        mapping[folder] = str(layout)
    return mapping


__all__ = ["_normalize_extensions", "_resolve_path", "_string_mapping"]
