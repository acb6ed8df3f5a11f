"""Dashboard session: current inputs plus a full recompute of every derived view."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from food_inspections.analytics import aggregator, query
from food_inspections.analytics.selection import SelectionState
from food_inspections.common.models import (
    CommunityBoundary,
    CommunityStatistic,
    FacilityFailureCount,
    InspectionRecord,
)
from food_inspections.ingest.registry import DEFAULT_SOURCE, DatasetRegistry


@dataclass(frozen=True)
class DashboardView:
    source_key: str
    selected_community: Optional[str]
    dataset_size: int
    records: List[InspectionRecord]
    community_stats: Dict[str, CommunityStatistic]
    boundaries: List[Tuple[CommunityBoundary, CommunityStatistic]]
    top_facilities: List[FacilityFailureCount]

    @property
    def has_failures(self) -> bool:
        return bool(self.top_facilities)


class DashboardSession:
    """Owns the mutable inputs (source, recency bound, selection) of one analyst session."""

    def __init__(
        self,
        registry: DatasetRegistry,
        source_key: str = DEFAULT_SOURCE,
        recency_bound: Optional[int] = 5000,
        facility_limit: int = 10,
        selection: Optional[SelectionState] = None,
    ) -> None:
        self.registry = registry
        self.source_key = source_key
        self.recency_bound = recency_bound
        self.facility_limit = facility_limit
        self.selection = selection or SelectionState()

    def set_source(self, key: str) -> None:
        # Selections are dropped whenever the embedding source changes.
        self.source_key = key
        self.selection.clear()

    def set_recency_bound(self, recency_bound: Optional[int]) -> None:
        self.recency_bound = recency_bound

    def select_community(self, name: Optional[str]) -> Optional[str]:
        return self.selection.select(name)

    def clear_selection(self) -> None:
        self.selection.clear()

    @property
    def dataset(self) -> Tuple[InspectionRecord, ...]:
        return self.registry.select(self.source_key)

    def view(self) -> DashboardView:
        dataset = self.dataset
        selected = self.selection.selected
        records = query.apply(dataset, self.recency_bound, selected)
        stats = aggregator.community_statistics(records)
        return DashboardView(
            source_key=self.source_key,
            selected_community=selected,
            dataset_size=len(dataset),
            records=records,
            community_stats=stats,
            boundaries=aggregator.join_boundaries(self.registry.boundaries, stats),
            top_facilities=aggregator.top_facilities(records, selected, self.facility_limit),
        )
