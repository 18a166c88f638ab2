"""List normalization utilities for environment variables."""

from __future__ import annotations

from typing import Sequence

_SEPARATOR = ","


class ListNormalizer:
    """Normalizes comma separated list values from environment variables."""

    @staticmethod
    def split_and_normalize(raw_value: str) -> list[str]:
        """Split *raw_value* on commas, stripping items and dropping blanks."""
        normalized_items: list[str] = []
        for item in raw_value.split(_SEPARATOR):
            candidate = item.strip()
            if candidate:
                normalized_items.append(candidate)
        return normalized_items

    @staticmethod
    def deduplicate_preserving_order(items: Sequence[str]) -> tuple[str, ...]:
        seen: set[str] = set()
        deduped: list[str] = []
        for item in items:
            if item not in seen:
                deduped.append(item)
                seen.add(item)
        return tuple(deduped)
