"""Typed accessors over the schemaless per-level ``config`` map.

Level configs are edited by hand in the admin tooling, so any key may be
missing or carry the wrong type. Every accessor returns a documented default
in that case instead of raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class LevelConfig:
    """Read-only view of one level's config blob."""

    def __init__(self, raw: Mapping[str, Any] | None = None) -> None:
        self._raw: dict[str, Any] = dict(raw or {})

    def __contains__(self, key: str) -> bool:
        return self._raw.get(key) is not None

    def __repr__(self) -> str:
        return f"LevelConfig({self._raw!r})"

    def as_dict(self) -> dict[str, Any]:
        return dict(self._raw)

    # -- generic helpers ---------------------------------------------------

    def get_int(self, key: str, default: int | None = None) -> int | None:
        value = self._raw.get(key)
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return default

    def get_str(self, key: str, default: str | None = None) -> str | None:
        value = self._raw.get(key)
        return value if isinstance(value, str) else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._raw.get(key)
        return value if isinstance(value, bool) else default

    def get_int_list(self, key: str) -> tuple[int, ...]:
        value = self._raw.get(key)
        if not isinstance(value, (list, tuple)):
            return ()
        return tuple(v for v in value if isinstance(v, int) and not isinstance(v, bool))

    # -- known keys --------------------------------------------------------

    @property
    def min(self) -> int | None:
        return self.get_int("min")

    @property
    def max(self) -> int | None:
        return self.get_int("max")

    @property
    def range_label(self) -> str | None:
        return self.get_str("range")

    @property
    def operation(self) -> int | str | None:
        """Step size (escala) or operation name (calculos)."""
        value = self._raw.get("operation")
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, str)):
            return value
        return None

    @property
    def color(self) -> str | None:
        return self.get_str("color")

    @property
    def icon(self) -> str | None:
        return self.get_str("icon")

    @property
    def numbers_count(self) -> int | None:
        return self.get_int("numbersCount")

    @property
    def min_result(self) -> int | None:
        return self.get_int("minResult")

    @property
    def max_result(self) -> int | None:
        return self.get_int("maxResult")

    @property
    def has_unknown(self) -> bool:
        return self.get_bool("hasUnknown")

    @property
    def multipliers(self) -> tuple[int, ...]:
        return self.get_int_list("multiplier")

    def numeric_range(self) -> tuple[int, int] | None:
        """Return ``(min, max)`` when both bounds are configured."""
        low, high = self.min, self.max
        if low is None or high is None:
            return None
        return low, high
