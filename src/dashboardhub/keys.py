"""Key derivation, display and sort helpers shared by both pipelines."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeVar

T = TypeVar("T")


def root_code(code: str | None) -> str | None:
    """Return the token preceding the first space of a condition code."""

    if not code:
        return None
    return code.split(" ")[0]


def platform_display_value(platform: str | None, display_map: Mapping[str, str]) -> str | None:
    """Return the display name for a platform code, matching keys case-insensitively."""

    if not platform:
        return platform
    return display_map.get(platform.upper()) or platform


def join_platforms(platforms: Iterable[str], display_map: Mapping[str, str]) -> str:
    return ", ".join(
        platform_display_value(platform, display_map) or "" for platform in platforms
    )


def _field_value(item: Any, key: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def sort_by_keys(items: Sequence[T], *keys: str, ignore_case: bool = False) -> list[T]:
    """Stable sort by ``keys`` in priority order.

    Values are read as attributes, or as keys for mappings. ``None`` sorts
    ahead of every other value.
    """

    if not keys:
        raise ValueError("sort_by_keys requires at least one key")

    def sort_key(item: T) -> tuple[tuple[bool, Any], ...]:
        parts = []
        for key in keys:
            value = _field_value(item, key)
            if ignore_case and isinstance(value, str):
                value = value.casefold()
            parts.append((value is not None, value if value is not None else ""))
        return tuple(parts)

    return sorted(items, key=sort_key)
