"""Dataclasses shared between the ingestion and analytics layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

RESULT_CATEGORIES = (
    "Pass",
    "Fail",
    "Pass w/ Conditions",
    "No Entry",
    "Not Ready",
    "Out of Business",
)
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class InspectionRecord:
    inspection_id: int
    business_name: str
    address: str
    facility_type: str
    inspection_date: datetime
    result: str
    pass_flag: int
    critical_found: int
    community_name: str
    latitude: float
    longitude: float
    embedding_x: float
    embedding_y: float
    license: int = 0
    fail_flag: int = 0
    critical_count: int = 0
    serious_count: int = 0
    minor_count: int = 0
    area_num: int = 0
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def safe_facility_type(self) -> str:
        """Empty facility types are reported as "Unknown"."""

        return self.facility_type or UNKNOWN

    @property
    def has_community(self) -> bool:
        return bool(self.community_name) and self.community_name != UNKNOWN


@dataclass(frozen=True)
class CommunityBoundary:
    """A community area polygon keyed by community name."""

    community_name: str
    geometry: Mapping[str, Any]
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CommunityStatistic:
    total: int = 0
    critical: int = 0
    passed: int = 0
    critical_rate: float = 0.0
    pass_rate: float = 0.0


@dataclass(frozen=True)
class FacilityFailureCount:
    facility_type: str
    count: int


@dataclass(frozen=True)
class QuarterlyFailure:
    """Worst-performing facility type for one quarter (precomputed offline)."""

    quarter: str
    facility_type: str
    failure_rate: float
    failures: int
    total: int
