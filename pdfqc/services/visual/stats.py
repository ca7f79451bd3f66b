"""
Small numeric helpers shared by the visual analyzers.
"""
import math
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from pdfqc.models.layout import BoundingBox, TextElement


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2).

    Python's ``round`` uses banker's rounding, which would move elements
    sitting exactly between two bands into alternating bands.
    """
    return math.floor(value + 0.5)


def quantize(value: float, band: float) -> float:
    """Snap ``value`` to the nearest multiple of ``band``."""
    return round_half_up(value / band) * band


def frequency_mode(values: Iterable[int]) -> Optional[int]:
    """Most frequent value; ties go to the smallest value."""
    counts = Counter(values)
    if not counts:
        return None
    return max(counts.items(), key=lambda kv: (kv[1], -kv[0]))[0]


def group_by_band(
    elements: Sequence[TextElement],
    coordinate: str,
    band: float
) -> Dict[float, List[TextElement]]:
    """Group elements by the quantized value of ``coordinate`` ("x" or "y").

    Bands are returned in ascending order; members keep input order.
    """
    groups: Dict[float, List[TextElement]] = {}
    for el in elements:
        groups.setdefault(quantize(getattr(el, coordinate), band), []).append(el)
    return {key: groups[key] for key in sorted(groups)}


def union_box(elements: Iterable[TextElement]) -> BoundingBox:
    return BoundingBox.union(el.bbox for el in elements)
