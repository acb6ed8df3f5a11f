"""Geospatial helpers for the community boundary map."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from .models import CommunityBoundary


def iter_positions(geometry: Mapping[str, Any]) -> Iterator[Tuple[float, float]]:
    """Yield (longitude, latitude) pairs from a Polygon/MultiPolygon geometry."""

    gtype = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if gtype == "Polygon":
        rings = coords
    elif gtype == "MultiPolygon":
        rings = [ring for polygon in coords for ring in polygon]
    else:
        return
    for ring in rings:
        for position in ring:
            if len(position) >= 2:
                yield float(position[0]), float(position[1])


def boundary_center(boundaries: Iterable[CommunityBoundary]) -> Optional[Tuple[float, float]]:
    """Mean (latitude, longitude) over all boundary vertices, or None when empty."""

    lat_sum = lon_sum = 0.0
    count = 0
    for boundary in boundaries:
        for lon, lat in iter_positions(boundary.geometry):
            lat_sum += lat
            lon_sum += lon
            count += 1
    if count == 0:
        return None
    return round(lat_sum / count, 6), round(lon_sum / count, 6)
