"""Fetch the static inputs (CSV exports, community GeoJSON, quarterly JSON)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import requests

from food_inspections.common.models import CommunityBoundary, QuarterlyFailure

log = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30


def read_text(location: str, session: Optional[requests.Session] = None) -> str:
    """Return the raw text behind a local path or an http(s) URL."""

    if location.startswith(("http://", "https://")):
        getter = session or requests
        response = getter.get(location, timeout=REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.text
    return Path(location).read_text(encoding="utf-8")


def parse_boundaries(raw_text: str) -> List[CommunityBoundary]:
    """Read a GeoJSON FeatureCollection whose features carry ``community_name``."""

    payload = json.loads(raw_text)
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise ValueError("Boundary file must be a GeoJSON FeatureCollection.")

    boundaries: List[CommunityBoundary] = []
    for feature in payload["features"]:
        if not isinstance(feature, dict):
            raise ValueError("Boundary features must be GeoJSON Feature objects.")
        properties = feature.get("properties") or {}
        geometry = feature.get("geometry") or {}
        if not isinstance(properties, dict) or not isinstance(geometry, dict):
            raise ValueError("Boundary feature properties and geometry must be objects.")
        properties = dict(properties)
        boundaries.append(
            CommunityBoundary(
                community_name=str(properties.get("community_name") or ""),
                geometry=geometry,
                properties=properties,
            )
        )
    return boundaries


def parse_quarterly(raw_text: str) -> List[QuarterlyFailure]:
    """Read the quarterly worst-performer records written by the offline job."""

    payload = json.loads(raw_text)
    if not isinstance(payload, list):
        raise ValueError("Quarterly failure file must contain a list of records.")
    return [_quarterly_record(item) for item in payload]


def _quarterly_record(item: Any) -> QuarterlyFailure:
    if not isinstance(item, dict):
        raise ValueError("Quarterly failure records must be objects.")
    return QuarterlyFailure(
        quarter=str(item.get("Year-Quarter", "")),
        facility_type=str(item.get("Facility_Type") or "Unknown"),
        failure_rate=float(item.get("Failure_Rate") or 0.0),
        failures=int(item.get("Failures") or 0),
        total=int(item.get("Total") or 0),
    )
