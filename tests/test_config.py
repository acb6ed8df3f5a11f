import pytest

from food_inspections.common.config import load_config


def test_load_config_applies_defaults(tmp_path):
    path = tmp_path / "local.yaml"
    path.write_text(
        "dataset:\n"
        "  violations_umap_path: /data/umap.csv\n"
        "query:\n"
        "  default_recency_bound: 1500\n",
        encoding="utf-8",
    )
    config = load_config(path)

    assert config.dataset.violations_umap_path == "/data/umap.csv"
    assert config.dataset.mlp_tsne_path.endswith("tsne_mlp_with_community.csv")
    assert config.query.default_recency_bound == 1500
    assert config.query.recency_step == 500
    assert config.dashboard.default_source == "violations_umap"
    assert config.dashboard.facility_limit == 10
    # The quarterly job reads the UMAP export unless told otherwise.
    assert config.quarterly.source_path == "/data/umap.csv"
    assert config.quarterly.min_inspections == 20


def test_empty_config_file_uses_all_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    config = load_config(path)
    assert config.dashboard.default_color_mode == "passFlag"


def test_non_mapping_config_is_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
