import json

import pytest

from food_inspections.common.config import DatasetConfig
from food_inspections.ingest.registry import DatasetRegistry, IngestionError, load_registry
from food_inspections.ingest.sources import parse_boundaries, parse_quarterly, read_text

CSV = "Inspection_ID,Inspection_Date,community_name\n{idx},2024-01-0{idx},Loop\n"
GEOJSON = json.dumps(
    {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"community_name": "Loop"},
                "geometry": {"type": "Polygon", "coordinates": [[[-87.6, 41.8], [-87.7, 41.9], [-87.6, 41.8]]]},
            }
        ],
    }
)
QUARTERLY = json.dumps(
    [{"Year-Quarter": "2024-Q1", "Facility_Type": "Bakery", "Failure_Rate": 31.5, "Failures": 63, "Total": 200}]
)


def _fake_sources() -> dict:
    return {
        "tsne_v.csv": CSV.format(idx=1),
        "umap_v.csv": CSV.format(idx=2),
        "direct.csv": CSV.format(idx=3),
        "mlp.csv": CSV.format(idx=4),
        "communities.geojson": GEOJSON,
        "quarterly.json": QUARTERLY,
    }


def _config() -> DatasetConfig:
    return DatasetConfig(
        violations_tsne_path="tsne_v.csv",
        violations_umap_path="umap_v.csv",
        direct_tsne_path="direct.csv",
        mlp_tsne_path="mlp.csv",
        boundaries_path="communities.geojson",
        quarterly_path="quarterly.json",
    )


def test_load_registry_parses_every_source():
    registry = load_registry(_config(), fetch=_fake_sources().__getitem__)

    assert registry.select("violations_tsne")[0].inspection_id == 1
    assert registry.select("violations_umap")[0].inspection_id == 2
    assert registry.select("direct")[0].inspection_id == 3
    assert registry.select("mlp")[0].inspection_id == 4
    assert [b.community_name for b in registry.boundaries] == ["Loop"]
    assert registry.quarterly[0].facility_type == "Bakery"
    assert registry.quarterly[0].failures == 63


def test_unknown_key_falls_back_to_violations_umap():
    registry = load_registry(_config(), fetch=_fake_sources().__getitem__)
    assert registry.select("pca") == registry.select("violations_umap")
    assert DatasetRegistry.label("pca") == DatasetRegistry.label("violations_umap")
    assert DatasetRegistry.keys()[0] == "violations_umap"


def test_missing_source_raises_single_ingestion_error():
    sources = _fake_sources()
    del sources["mlp.csv"]

    with pytest.raises(IngestionError, match="mlp"):
        load_registry(_config(), fetch=sources.__getitem__)


def test_malformed_boundary_file_is_an_ingestion_error():
    sources = _fake_sources()
    sources["communities.geojson"] = "[]"

    with pytest.raises(IngestionError):
        load_registry(_config(), fetch=sources.__getitem__)


def test_registry_datasets_are_read_only():
    registry = DatasetRegistry(datasets={"violations_umap": []})
    with pytest.raises(TypeError):
        registry.datasets["mlp"] = ()


def test_read_text_reads_local_files(tmp_path):
    path = tmp_path / "quarterly.json"
    path.write_text(QUARTERLY, encoding="utf-8")
    assert parse_quarterly(read_text(str(path)))[0].quarter == "2024-Q1"


def test_parse_boundaries_keeps_properties():
    boundaries = parse_boundaries(GEOJSON)
    assert boundaries[0].properties == {"community_name": "Loop"}
    assert boundaries[0].geometry["type"] == "Polygon"


def test_non_object_boundary_feature_is_an_ingestion_error():
    sources = _fake_sources()
    sources["communities.geojson"] = json.dumps({"type": "FeatureCollection", "features": ["oops"]})

    with pytest.raises(IngestionError):
        load_registry(_config(), fetch=sources.__getitem__)


def test_non_object_quarterly_record_is_an_ingestion_error():
    sources = _fake_sources()
    sources["quarterly.json"] = json.dumps([["2024-Q1", "Bakery"]])

    with pytest.raises(IngestionError):
        load_registry(_config(), fetch=sources.__getitem__)


def test_non_numeric_quarterly_values_are_an_ingestion_error():
    sources = _fake_sources()
    sources["quarterly.json"] = json.dumps([{"Year-Quarter": "2024-Q1", "Failures": ["x"]}])

    with pytest.raises(IngestionError):
        load_registry(_config(), fetch=sources.__getitem__)
