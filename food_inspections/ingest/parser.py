"""Parse the delimited inspection exports into typed records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from food_inspections.common.models import InspectionRecord
from food_inspections.common.schema import (
    INSPECTION_SCHEMA,
    ColumnKind,
    coerce_number,
    column_kind,
)

DELIMITER = ","
QUOTE = '"'
_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%Y %I:%M:%S %p")
EPOCH = datetime(1970, 1, 1)


def split_line(line: str, delimiter: str = DELIMITER) -> List[str]:
    """Split one line, treating delimiters inside a quoted span as literal text.

    Every quote character toggles the quoted state and is dropped from the
    output; doubled quotes are not treated as escapes.
    """

    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    return fields


def parse_rows(
    raw_text: str,
    schema: Mapping[str, ColumnKind] = INSPECTION_SCHEMA,
    delimiter: str = DELIMITER,
) -> List[Dict[str, Any]]:
    """Return one dict per data line, numeric columns coerced per ``schema``."""

    text = raw_text.strip()
    if not text:
        return []
    lines = [line.rstrip("\r") for line in text.split("\n")]
    headers = [header.strip() for header in lines[0].split(delimiter)]

    rows: List[Dict[str, Any]] = []
    for line in lines[1:]:
        values = split_line(line, delimiter)
        row: Dict[str, Any] = {}
        for index, header in enumerate(headers):
            value = values[index] if index < len(values) else None
            if column_kind(schema, header) is ColumnKind.NUMERIC:
                row[header] = coerce_number(value)
            else:
                row[header] = value if value is not None else ""
        rows.append(row)
    return rows


def parse(raw_text: str) -> List[InspectionRecord]:
    """Parse an embedding export into InspectionRecords."""

    return [to_record(row) for row in parse_rows(raw_text)]


def to_record(row: Mapping[str, Any]) -> InspectionRecord:
    # UMAP exports may name their coordinates umap_x/umap_y instead of tsne_x/tsne_y.
    x_col = "tsne_x" if "tsne_x" in row else "umap_x"
    y_col = "tsne_y" if "tsne_y" in row else "umap_y"
    return InspectionRecord(
        inspection_id=int(row.get("Inspection_ID", 0.0)),
        business_name=str(row.get("DBA_Name", "")),
        address=str(row.get("Address", "")),
        facility_type=str(row.get("Facility_Type", "")),
        inspection_date=parse_date(row.get("Inspection_Date")),
        result=str(row.get("Results", "")),
        pass_flag=int(row.get("pass_flag", 0.0)),
        critical_found=int(row.get("criticalFound", 0.0)),
        community_name=str(row.get("community_name", "")),
        latitude=float(row.get("Latitude", 0.0)),
        longitude=float(row.get("Longitude", 0.0)),
        embedding_x=float(row.get(x_col, 0.0)),
        embedding_y=float(row.get(y_col, 0.0)),
        license=int(row.get("License", 0.0)),
        fail_flag=int(row.get("fail_flag", 0.0)),
        critical_count=int(row.get("criticalCount", 0.0)),
        serious_count=int(row.get("seriousCount", 0.0)),
        minor_count=int(row.get("minorCount", 0.0)),
        area_num=int(row.get("area_num", 0.0)),
        raw=dict(row),
    )


def parse_date(value: Optional[str]) -> datetime:
    """Convert inspection dates (ISO or MM/DD/YYYY) into datetime objects."""

    if not value:
        return EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        pass
    else:
        # Offsets are normalised to UTC so mixed-offset timestamps order by instant.
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    # Some exports append a time part, fall back to the leading date token.
    head = value.split("T")[0].split(" ")[0]
    for fmt in _DATE_FORMATS[:2]:
        try:
            return datetime.strptime(head, fmt)
        except ValueError:
            continue
    return EPOCH
