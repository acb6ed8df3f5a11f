"""Colour and view encodings for the pydeck layers."""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from food_inspections.common.models import RESULT_CATEGORIES, InspectionRecord

Color = List[int]

GREEN: Color = [72, 187, 120]
RED: Color = [245, 101, 101]
GREY: Color = [113, 128, 150]

RESULT_COLORS: Dict[str, Color] = dict(
    zip(
        RESULT_CATEGORIES,
        [GREEN, RED, [236, 201, 75], [160, 174, 192], [159, 122, 234], GREY],
    )
)

COLOR_MODES: Dict[str, str] = {
    "criticalFound": "Critical Violation",
    "passFlag": "Pass/Fail",
    "results": "Results",
}

CRITICAL_RATE_DOMAIN = (0.0, 30.0)
_RAMP_LOW = (254, 229, 217)
_RAMP_HIGH = (165, 15, 21)


def point_color(record: InspectionRecord, mode: str) -> Color:
    """Fill colour of one scatter point; unknown modes fall back to criticalFound."""

    if mode == "passFlag":
        return list(GREEN if record.pass_flag else RED)
    if mode == "results":
        return list(RESULT_COLORS.get(record.result, GREY))
    return list(RED if record.critical_found else GREEN)


def critical_rate_color(rate: float, alpha: int = 200) -> Color:
    low, high = CRITICAL_RATE_DOMAIN
    share = (min(max(rate, low), high) - low) / (high - low)
    channels = [round(a + (b - a) * share) for a, b in zip(_RAMP_LOW, _RAMP_HIGH)]
    return channels + [alpha]


def embedding_view(records: Sequence[InspectionRecord], viewport_px: float = 500.0) -> Tuple[float, float, float]:
    """Centre (x, y) and orthographic zoom that fit every embedding point."""

    if not records:
        return 0.0, 0.0, 0.0
    xs = [record.embedding_x for record in records]
    ys = [record.embedding_y for record in records]
    center_x = (min(xs) + max(xs)) / 2
    center_y = (min(ys) + max(ys)) / 2
    span = max(max(xs) - min(xs), max(ys) - min(ys))
    zoom = math.log2(viewport_px / span) if span > 0 else 0.0
    return center_x, center_y, zoom
