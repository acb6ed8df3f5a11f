"""Hold the four embedding datasets and the community boundaries."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Sequence, Tuple

from food_inspections.common.config import DatasetConfig
from food_inspections.common.models import CommunityBoundary, InspectionRecord, QuarterlyFailure
from food_inspections.ingest import parser, sources

log = logging.getLogger(__name__)

DEFAULT_SOURCE = "violations_umap"

# Display order matches the source picker.
SOURCE_LABELS: Dict[str, str] = {
    "violations_umap": "Violations Text (UMAP)",
    "violations_tsne": "Violations Text (t-SNE)",
    "direct": "Feature-based (t-SNE)",
    "mlp": "MLP Hidden Layer (t-SNE)",
}


class IngestionError(RuntimeError):
    """A required input could not be fetched or parsed."""


@dataclass(frozen=True)
class DatasetRegistry:
    datasets: Mapping[str, Tuple[InspectionRecord, ...]]
    boundaries: Tuple[CommunityBoundary, ...] = ()
    quarterly: Tuple[QuarterlyFailure, ...] = ()

    def __post_init__(self) -> None:
        frozen = MappingProxyType({key: tuple(records) for key, records in self.datasets.items()})
        object.__setattr__(self, "datasets", frozen)
        object.__setattr__(self, "boundaries", tuple(self.boundaries))
        object.__setattr__(self, "quarterly", tuple(self.quarterly))

    def select(self, key: str) -> Tuple[InspectionRecord, ...]:
        """Return the dataset for ``key``; unknown keys fall back to violations_umap."""

        if key in self.datasets:
            return self.datasets[key]
        return self.datasets.get(DEFAULT_SOURCE, ())

    @staticmethod
    def keys() -> List[str]:
        return list(SOURCE_LABELS)

    @staticmethod
    def label(key: str) -> str:
        return SOURCE_LABELS.get(key, SOURCE_LABELS[DEFAULT_SOURCE])


def load_registry(
    config: DatasetConfig,
    fetch: Callable[[str], str] = sources.read_text,
    max_workers: int = 5,
) -> DatasetRegistry:
    """Fetch every input concurrently, then parse; any failure is fatal."""

    locations: Dict[str, str] = {
        "violations_tsne": config.violations_tsne_path,
        "violations_umap": config.violations_umap_path,
        "direct": config.direct_tsne_path,
        "mlp": config.mlp_tsne_path,
        "boundaries": config.boundaries_path,
        "quarterly": config.quarterly_path,
    }

    with ThreadPoolExecutor(max_workers=max_workers) as ex:
        futures = {name: ex.submit(fetch, location) for name, location in locations.items()}
        texts: Dict[str, str] = {}
        for name, future in futures.items():
            try:
                texts[name] = future.result()
            except Exception as exc:
                raise IngestionError(f"Failed to load {name} from {locations[name]}: {exc}") from exc

    datasets: Dict[str, Sequence[InspectionRecord]] = {}
    for key in SOURCE_LABELS:
        datasets[key] = parser.parse(texts[key])
        log.info("Loaded %d inspections for %s", len(datasets[key]), key)

    try:
        boundaries = sources.parse_boundaries(texts["boundaries"])
        quarterly = sources.parse_quarterly(texts["quarterly"])
    except (ValueError, TypeError) as exc:
        raise IngestionError(str(exc)) from exc
    log.info("Loaded %d community boundaries and %d quarters", len(boundaries), len(quarterly))

    return DatasetRegistry(datasets=datasets, boundaries=boundaries, quarterly=quarterly)
