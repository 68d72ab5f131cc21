"""Nested mapping helper that walks key paths and coerces leaf values."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def _as_number(value: Any) -> int | float | None:
    """Return ``value`` if it is a real number (booleans excluded)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


class Dictionary(dict):
    """A dict whose values can be looked up along a path of nested keys."""

    def unwind_value(self, *keys: str) -> Any:
        """Follow ``keys`` through nested mappings.

        Returns ``None`` if a key is missing. If a non-mapping value is met
        before the path ends, that value is returned as is.
        """
        current: Mapping = self
        for key in keys:
            if key not in current:
                return None
            value = current[key]
            if isinstance(value, Mapping):
                current = value
            else:
                return value
        if isinstance(current, Dictionary):
            return current
        return Dictionary(current)

    def unwind_string(self, *keys: str) -> str:
        value = self.unwind_value(*keys)
        return value if isinstance(value, str) else ""

    def unwind_bool(self, *keys: str) -> bool:
        value = self.unwind_value(*keys)
        return value if isinstance(value, bool) else False

    def unwind_float(self, *keys: str) -> float:
        number = _as_number(self.unwind_value(*keys))
        return float(number) if number is not None else 0.0

    def unwind_int(self, *keys: str) -> int:
        """Return the value as an int, truncating floats toward zero."""
        number = _as_number(self.unwind_value(*keys))
        if number is None or (isinstance(number, float) and not math.isfinite(number)):
            return 0
        return int(number)

    def unwind_uint(self, *keys: str) -> int:
        """Return the value as a non-negative int; anything else gives 0."""
        value = self.unwind_int(*keys)
        return value if value >= 0 else 0

    def unwind_slice(self, *keys: str) -> list | None:
        value = self.unwind_value(*keys)
        return value if isinstance(value, list) else None

    def unwind_map(self, *keys: str) -> Dictionary | None:
        value = self.unwind_value(*keys)
        if isinstance(value, Dictionary):
            return value
        if isinstance(value, Mapping):
            return Dictionary(value)
        return None