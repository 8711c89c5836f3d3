"""Value/range primitives shared by every derivation.

A ``ValueRange`` is a quantity at level 1 (``base``) and at max level (``max``).
Once any side is known, the other side is filled in, so a range is either fully
empty or fully populated.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .constants import EPSILON


_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


@dataclass(frozen=True)
class ValueRange:
    """Level-1 and max-level value of a quantity."""

    base: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.base is None and self.max is None


EMPTY_RANGE = ValueRange()


def parse_numeric_value(value: Any) -> Optional[float]:
    """Parse an asset-API value into a float.

    Numbers pass through; strings yield their first signed decimal literal
    (``"-12.5m"`` -> -12.5). Anything else, including NaN, is None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else float(value)
    if isinstance(value, str):
        match = _NUMBER_PATTERN.search(value)
        return float(match.group(0)) if match else None
    return None


def _normalize(value: Optional[float]) -> Optional[float]:
    if value is None or math.isnan(value):
        return None
    return value


def to_value_range(base: Optional[float], max_value: Optional[float]) -> ValueRange:
    """Build a range, filling a missing side from the other."""
    base = _normalize(base)
    max_value = _normalize(max_value)
    if base is None and max_value is None:
        return EMPTY_RANGE
    if base is None:
        return ValueRange(max_value, max_value)
    if max_value is None:
        return ValueRange(base, base)
    return ValueRange(base, max_value)


def is_approximately_zero(value: Optional[float], epsilon: float = EPSILON) -> bool:
    """True for None and for |value| <= epsilon."""
    if value is None:
        return True
    return abs(value) <= epsilon


def prune_zero_range(value_range: Optional[ValueRange]) -> Optional[ValueRange]:
    """Null out near-zero sides; None when nothing is left."""
    if value_range is None:
        return None
    base = None if is_approximately_zero(value_range.base) else value_range.base
    max_value = None if is_approximately_zero(value_range.max) else value_range.max
    if base is None and max_value is None:
        return None
    return ValueRange(base, max_value)


def get_max_range(ranges: Iterable[Optional[ValueRange]]) -> Optional[ValueRange]:
    """Element-wise maximum across ranges, ignoring near-zero sides.

    Returns:
        The combined range with missing sides filled, or None when every
        side of every range is empty or near zero.
    """
    base: Optional[float] = None
    max_value: Optional[float] = None

    for value_range in ranges:
        if value_range is None:
            continue
        if not is_approximately_zero(value_range.base):
            base = value_range.base if base is None else max(base, value_range.base)
        if not is_approximately_zero(value_range.max):
            max_value = value_range.max if max_value is None else max(max_value, value_range.max)

    if base is None and max_value is None:
        return None
    if base is None:
        base = max_value
    if max_value is None:
        max_value = base
    return ValueRange(base, max_value)


def compute_damage_value(
    intercept: Optional[float],
    scaling: Optional[float],
    spirit: float,
) -> Optional[float]:
    """``intercept + scaling * spirit``; None only when both terms are unknown."""
    if intercept is None and scaling is None:
        return None
    return (intercept or 0.0) + (scaling or 0.0) * spirit


def primary_value(value_range: Optional[ValueRange]) -> Optional[float]:
    """The larger-magnitude side of a range."""
    if value_range is None or value_range.is_empty:
        return None
    if value_range.base is None:
        return value_range.max
    if value_range.max is None:
        return value_range.base
    return value_range.max if abs(value_range.max) >= abs(value_range.base) else value_range.base


def interpolate(base: Optional[float], max_value: Optional[float], ratio: float) -> Optional[float]:
    """Linear blend between level-1 and max-level values, missing sides filled."""
    if base is None and max_value is None:
        return None
    start = base if base is not None else max_value
    end = max_value if max_value is not None else base
    return start + (end - start) * ratio


def range_at_level(value_range: Optional[ValueRange], ratio: float) -> Optional[float]:
    if value_range is None:
        return None
    return interpolate(value_range.base, value_range.max, ratio)


def level_ratio(level: float, max_level: float) -> float:
    """Position of ``level`` between 1 and ``max_level``, 0 for single-level heroes."""
    if max_level <= 1:
        return 0.0
    return min(max((level - 1) / (max_level - 1), 0.0), 1.0)
