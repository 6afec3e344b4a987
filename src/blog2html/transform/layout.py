"""Proportional width layout for rows of images.

Images shown side by side are scaled to a common height. Each image then gets
a width share of the row expressed as a reduced integer ratio, so rows whose
images have the same proportions (at any pixel size) end up with the same CSS
class and share one rule in the generated stylesheet.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from functools import reduce

from blog2html.model.content import RowLayoutUnit

logger = logging.getLogger(__name__)


def gcd_of(values: Iterable[int]) -> int:
    """Greatest common divisor of all values; 1 for an empty or all-zero list."""
    result = reduce(math.gcd, values, 0)
    return result or 1


def reduce_ratio(dividend: int, divisor: int) -> tuple[int, int]:
    """Reduce ``dividend/divisor`` to lowest terms."""
    if divisor <= 0:
        raise ValueError("divisor must be positive")
    g = gcd_of([dividend, divisor])
    return dividend // g, divisor // g


def css_class_name(width_share: int, total_share: int, image_count: int) -> str:
    return f"scale{width_share}-{total_share}-{image_count}"


def layout_row(images: Sequence[tuple[int, int]]) -> list[RowLayoutUnit]:
    """Compute the width share of each ``(width, height)`` image in a row.

    Every image is scaled to the smallest height in the row; its share is its
    scaled width over the summed scaled widths, kept as exact integers.
    """
    if not images:
        return []
    for width, height in images:
        if width <= 0 or height <= 0:
            raise ValueError(f"image dimensions must be positive, got {width}x{height}")

    # One shared divisor keeps all images in comparable units.
    g = gcd_of(v for pair in images for v in pair)
    reduced = [(w // g, h // g) for w, h in images]
    min_height = min(h for _, h in reduced)

    ratios = [reduce_ratio(w * min_height, h) for w, h in reduced]
    mul = math.prod(divisor for _, divisor in ratios)

    contributions = [mul * dividend // divisor for dividend, divisor in ratios]
    total = sum(contributions)
    g = gcd_of([*contributions, total])
    total //= g

    count = len(images)
    units = [
        RowLayoutUnit(
            css_class_name=css_class_name(share // g, total, count),
            width_share=share // g,
            total_share_in_group=total,
            image_count=count,
        )
        for share in contributions
    ]
    logger.debug(
        "Row layout for %s: %s",
        images,
        ", ".join(f"{u.width_share}/{u.total_share_in_group}" for u in units),
    )
    return units


class CssRegistry:
    """Ordered, de-duplicated collection of the row CSS rules of one run."""

    def __init__(self) -> None:
        self._rules: dict[str, str] = {}

    def register(self, unit: RowLayoutUnit) -> str:
        if unit.css_class_name not in self._rules:
            self._rules[unit.css_class_name] = unit.css
        return unit.css_class_name

    @property
    def class_names(self) -> list[str]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def render(self) -> str:
        if not self._rules:
            return ""
        return "\n\n".join(self._rules.values()) + "\n"


__all__ = [
    "CssRegistry",
    "css_class_name",
    "gcd_of",
    "layout_row",
    "reduce_ratio",
]
