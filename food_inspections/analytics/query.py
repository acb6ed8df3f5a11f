"""Rank-and-filter query run on every dashboard interaction."""

from __future__ import annotations

from typing import Iterable, List, Optional

from food_inspections.common.models import InspectionRecord


def most_recent(records: Iterable[InspectionRecord], recency_bound: Optional[int]) -> List[InspectionRecord]:
    """Newest-first records, truncated to ``recency_bound`` (None keeps all)."""

    # sorted() is stable with reverse=True, so same-day inspections keep file order.
    ranked = sorted(records, key=lambda record: record.inspection_date, reverse=True)
    if recency_bound is None:
        return ranked
    return ranked[: max(int(recency_bound), 0)]


def filter_community(records: Iterable[InspectionRecord], community: Optional[str]) -> List[InspectionRecord]:
    if not community:
        return list(records)
    return [record for record in records if record.community_name == community]


def apply(
    dataset: Iterable[InspectionRecord],
    recency_bound: Optional[int],
    selected_community: Optional[str] = None,
) -> List[InspectionRecord]:
    """Take the N most recent inspections city-wide, then narrow to the selected community.

    Truncation happens before the community filter: a selection only ever
    shrinks the window, it never reaches further back in time.
    """

    return filter_community(most_recent(dataset, recency_bound), selected_community)
