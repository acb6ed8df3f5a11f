"""Column schema for the inspection CSV exports."""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Dict, Mapping, Optional


class ColumnKind(str, Enum):
    NUMERIC = "numeric"
    TEXT = "text"


NUMERIC_COLUMNS = (
    "Inspection_ID",
    "License",
    "Latitude",
    "Longitude",
    "criticalFound",
    "pass_flag",
    "fail_flag",
    "criticalCount",
    "seriousCount",
    "minorCount",
    "tsne_x",
    "tsne_y",
    "umap_x",
    "umap_y",
    "area_num",
)

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

INSPECTION_SCHEMA: Dict[str, ColumnKind] = {name: ColumnKind.NUMERIC for name in NUMERIC_COLUMNS}


def column_kind(schema: Mapping[str, ColumnKind], column: str) -> ColumnKind:
    """Columns absent from the schema are kept as text."""

    return schema.get(column, ColumnKind.TEXT)


def coerce_number(value: Optional[str]) -> float:
    """Parse the leading number of a cell ("42abc" is 42); no number (or missing) becomes 0.0."""

    if value is None:
        return 0.0
    match = _LEADING_NUMBER.match(str(value).strip())
    if match is None:
        return 0.0
    number = float(match.group(0))
    if not math.isfinite(number):
        return 0.0
    return number
