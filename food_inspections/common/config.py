"""Configuration helpers for the food inspection explorer."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class DatasetConfig:
    """Paths (or URLs) of the static inputs loaded at startup."""

    violations_tsne_path: str = "./data/tsne_violations_with_community.csv"
    violations_umap_path: str = "./data/umap_violations_with_community.csv"
    direct_tsne_path: str = "./data/tsne_direct_with_community.csv"
    mlp_tsne_path: str = "./data/tsne_mlp_with_community.csv"
    boundaries_path: str = "./data/chicago_communities.geojson"
    quarterly_path: str = "./data/quarterly_failure_rates.json"


@dataclass(frozen=True)
class QueryConfig:
    """Recency slider bounds."""

    default_recency_bound: int = 5000
    min_recency_bound: int = 500
    recency_step: int = 500


@dataclass(frozen=True)
class DashboardConfig:
    """Dashboard defaults."""

    default_source: str = "violations_umap"
    default_color_mode: str = "passFlag"
    facility_limit: int = 10


@dataclass(frozen=True)
class QuarterlyConfig:
    """Offline quarterly failure job parameters."""

    source_path: str = "./data/umap_violations_with_community.csv"
    output_path: str = "./data/quarterly_failure_rates.json"
    min_inspections: int = 20


@dataclass(frozen=True)
class AppConfig:
    """Aggregated configuration model."""

    dataset: DatasetConfig
    query: QueryConfig
    dashboard: DashboardConfig
    quarterly: QuarterlyConfig


def load_config(path: str | Path) -> AppConfig:
    """Parse a YAML config file into an AppConfig dataclass."""

    raw = _load_yaml(path)
    dataset_cfg = raw.get("dataset") or {}
    query_cfg = raw.get("query") or {}
    dashboard_cfg = raw.get("dashboard") or {}
    quarterly_cfg = raw.get("quarterly") or {}

    defaults = DatasetConfig()
    dataset = DatasetConfig(
        violations_tsne_path=str(dataset_cfg.get("violations_tsne_path", defaults.violations_tsne_path)),
        violations_umap_path=str(dataset_cfg.get("violations_umap_path", defaults.violations_umap_path)),
        direct_tsne_path=str(dataset_cfg.get("direct_tsne_path", defaults.direct_tsne_path)),
        mlp_tsne_path=str(dataset_cfg.get("mlp_tsne_path", defaults.mlp_tsne_path)),
        boundaries_path=str(dataset_cfg.get("boundaries_path", defaults.boundaries_path)),
        quarterly_path=str(dataset_cfg.get("quarterly_path", defaults.quarterly_path)),
    )
    query = QueryConfig(
        default_recency_bound=int(query_cfg.get("default_recency_bound", 5000)),
        min_recency_bound=max(int(query_cfg.get("min_recency_bound", 500)), 1),
        recency_step=max(int(query_cfg.get("recency_step", 500)), 1),
    )
    dashboard = DashboardConfig(
        default_source=str(dashboard_cfg.get("default_source", "violations_umap")),
        default_color_mode=str(dashboard_cfg.get("default_color_mode", "passFlag")),
        facility_limit=max(int(dashboard_cfg.get("facility_limit", 10)), 1),
    )
    quarterly = QuarterlyConfig(
        source_path=str(quarterly_cfg.get("source_path", dataset.violations_umap_path)),
        output_path=str(quarterly_cfg.get("output_path", dataset.quarterly_path)),
        min_inspections=max(int(quarterly_cfg.get("min_inspections", 20)), 1),
    )
    return AppConfig(dataset=dataset, query=query, dashboard=dashboard, quarterly=quarterly)


def _load_yaml(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a top-level mapping.")
    return data

