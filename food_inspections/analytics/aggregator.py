"""Aggregations that feed the map and the facility chart."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from food_inspections.common.models import (
    CommunityBoundary,
    CommunityStatistic,
    FacilityFailureCount,
    InspectionRecord,
)

FAIL_RESULT = "Fail"
ZERO_STATISTIC = CommunityStatistic()


def community_statistics(records: Iterable[InspectionRecord]) -> Dict[str, CommunityStatistic]:
    """Per-community totals and rates; "Unknown"/blank communities are skipped."""

    counts: Dict[str, Tuple[int, int, int]] = {}
    for record in records:
        if not record.has_community:
            continue
        total, critical, passed = counts.get(record.community_name, (0, 0, 0))
        counts[record.community_name] = (
            total + 1,
            critical + record.critical_found,
            passed + record.pass_flag,
        )

    return {
        name: CommunityStatistic(
            total=total,
            critical=critical,
            passed=passed,
            critical_rate=_rate(critical, total),
            pass_rate=_rate(passed, total),
        )
        for name, (total, critical, passed) in counts.items()
    }


def join_boundaries(
    boundaries: Sequence[CommunityBoundary],
    stats: Mapping[str, CommunityStatistic],
) -> List[Tuple[CommunityBoundary, CommunityStatistic]]:
    """Attach statistics to every boundary; unmatched boundaries get zeros."""

    return [(boundary, stats.get(boundary.community_name, ZERO_STATISTIC)) for boundary in boundaries]


def feature_collection(
    joined: Sequence[Tuple[CommunityBoundary, CommunityStatistic]],
    selected_community: Optional[str] = None,
) -> dict:
    """GeoJSON FeatureCollection with the statistics merged into each feature's properties."""

    features = []
    for boundary, stat in joined:
        properties = dict(boundary.properties)
        properties.update(
            community_name=boundary.community_name,
            total=stat.total,
            critical=stat.critical,
            passed=stat.passed,
            criticalRate=stat.critical_rate,
            passRate=stat.pass_rate,
            isSelected=bool(selected_community) and boundary.community_name == selected_community,
        )
        features.append({"type": "Feature", "geometry": dict(boundary.geometry), "properties": properties})
    return {"type": "FeatureCollection", "features": features}


def top_facilities(
    records: Iterable[InspectionRecord],
    selected_community: Optional[str] = None,
    limit: int = 10,
) -> List[FacilityFailureCount]:
    """Facility types with the most "Fail" results, most failures first."""

    counts: Dict[str, int] = {}
    for record in records:
        if selected_community and record.community_name != selected_community:
            continue
        if record.result != FAIL_RESULT:
            continue
        facility = record.safe_facility_type
        counts[facility] = counts.get(facility, 0) + 1

    # dicts keep insertion order and sorted() is stable: ties stay first-seen first.
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [FacilityFailureCount(facility_type=name, count=count) for name, count in ranked[: max(limit, 0)]]


def _rate(count: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return 100.0 * count / total
