"""Streamlit dashboard for the food inspection embedding explorer."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd
import pydeck as pdk
import streamlit as st

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from food_inspections.analytics.aggregator import feature_collection
from food_inspections.analytics.session import DashboardSession, DashboardView
from food_inspections.common.config import AppConfig, load_config
from food_inspections.common.geo import boundary_center
from food_inspections.common.models import InspectionRecord
from food_inspections.dashboard.encodings import (
    COLOR_MODES,
    critical_rate_color,
    embedding_view,
    point_color,
)
from food_inspections.ingest.registry import DatasetRegistry, IngestionError, load_registry

SESSION_KEY = "dashboard_session"
SOURCE_KEY = "embedding_source"
MAP_KEY = "community_map"
SCATTER_KEY = "embedding_scatter"
MAP_LAYER_ID = "communities"
SCATTER_LAYER_ID = "embedding-points"
SELECTED_OUTLINE = [37, 99, 235]


@st.cache_resource(show_spinner="Loading Chicago food inspection data...")
def get_registry(config_path: str) -> DatasetRegistry:
    return load_registry(load_config(config_path).dataset)


def picked_community(event: Any, layer_id: str) -> Optional[str]:
    """Community name of the first object picked on ``layer_id`` in a pydeck selection event."""

    if not event:
        return None
    objects = (event.get("selection") or {}).get("objects") or {}
    picked = objects.get(layer_id) or []
    if not picked:
        return None
    item = picked[0]
    properties = item.get("properties") if isinstance(item.get("properties"), dict) else item
    return properties.get("community_name") or None


def apply_pick(session: DashboardSession, event: Any, layer_id: str) -> Optional[str]:
    """Route a pydeck selection event into the session; an empty pick clears the selection."""

    name = picked_community(event, layer_id)
    if name:
        return session.select_community(name)
    session.clear_selection()
    return None


def _session() -> DashboardSession:
    return st.session_state[SESSION_KEY]


def _on_source_change() -> None:
    _session().set_source(st.session_state[SOURCE_KEY])


def _on_map_select() -> None:
    apply_pick(_session(), st.session_state.get(MAP_KEY), MAP_LAYER_ID)


def _on_scatter_select() -> None:
    apply_pick(_session(), st.session_state.get(SCATTER_KEY), SCATTER_LAYER_ID)


def points_frame(records: List[InspectionRecord], color_mode: str, selected: Optional[str]) -> pd.DataFrame:
    rows = []
    for record in records:
        in_focus = selected is None or record.community_name == selected
        rows.append(
            {
                "x": record.embedding_x,
                "y": record.embedding_y,
                "color": point_color(record, color_mode) + [179 if in_focus else 38],
                "radius": 5 if selected else 3,
                "business": record.business_name,
                "address": record.address,
                "result": record.result,
                "date": record.inspection_date.date().isoformat(),
                "community_name": record.community_name,
                "facility": record.safe_facility_type,
            }
        )
    return pd.DataFrame(rows)


def render_scatter(view: DashboardView, color_mode: str) -> None:
    if not view.records:
        st.info("No inspections in current selection.")
        return
    center_x, center_y, zoom = embedding_view(view.records)
    layer = pdk.Layer(
        "ScatterplotLayer",
        id=SCATTER_LAYER_ID,
        data=points_frame(view.records, color_mode, view.selected_community),
        get_position="[x, y]",
        get_fill_color="color",
        get_radius="radius",
        radius_units="pixels",
        stroked=True,
        get_line_color=[51, 51, 51],
        line_width_min_pixels=0.5,
        auto_highlight=True,
        pickable=True,
    )
    deck = pdk.Deck(
        layers=[layer],
        views=[pdk.View(type="OrthographicView", controller=True)],
        initial_view_state=pdk.ViewState(target=[center_x, center_y, 0], zoom=zoom),
        map_style=None,
        tooltip={
            "text": "{business}\n{address}\nResult: {result}\nDate: {date}\n"
            "Community: {community_name}\nFacility: {facility}"
        },
    )
    st.pydeck_chart(deck, on_select=_on_scatter_select, selection_mode="single-object", key=SCATTER_KEY)


def render_map(view: DashboardView, registry: DatasetRegistry) -> None:
    collection = feature_collection(view.boundaries, view.selected_community)
    for feature in collection["features"]:
        props = feature["properties"]
        alpha = 255 if props["isSelected"] else (100 if view.selected_community else 200)
        props["fillColor"] = critical_rate_color(props["criticalRate"], alpha=alpha)
        props["lineColor"] = SELECTED_OUTLINE if props["isSelected"] else [255, 255, 255]
        props["lineWidth"] = 3 if props["isSelected"] else 1
        props["criticalRateLabel"] = f"{props['criticalRate']:.1f}"
        props["passRateLabel"] = f"{props['passRate']:.1f}"

    center = boundary_center(registry.boundaries) or (41.8781, -87.6298)
    layer = pdk.Layer(
        "GeoJsonLayer",
        id=MAP_LAYER_ID,
        data=collection,
        get_fill_color="properties.fillColor",
        get_line_color="properties.lineColor",
        get_line_width="properties.lineWidth",
        line_width_units="pixels",
        stroked=True,
        filled=True,
        auto_highlight=True,
        pickable=True,
    )
    deck = pdk.Deck(
        map_style=None,
        initial_view_state=pdk.ViewState(latitude=center[0], longitude=center[1], zoom=9.3),
        layers=[layer],
        tooltip={
            "text": "Community: {community_name}\nTotal Inspections: {total}\n"
            "Critical Violations: {critical}\nCritical Rate (%): {criticalRateLabel}\n"
            "Pass Rate (%): {passRateLabel}"
        },
    )
    st.pydeck_chart(deck, on_select=_on_map_select, selection_mode="single-object", key=MAP_KEY)


def render_facilities(view: DashboardView) -> None:
    if not view.has_failures:
        st.info("No failed inspections in current selection")
        return
    facilities = pd.DataFrame(
        [{"Facility Type": item.facility_type, "Failed Inspections": item.count} for item in view.top_facilities]
    )
    st.bar_chart(facilities.set_index("Facility Type")["Failed Inspections"], horizontal=True)


def render_quarterly(registry: DatasetRegistry) -> None:
    if not registry.quarterly:
        st.info("No quarterly failure data available.")
        return
    quarterly = pd.DataFrame(
        [
            {
                "Year-Quarter": item.quarter,
                "Worst Performing": item.facility_type,
                "Max Failure Rate (%)": item.failure_rate,
                "Failures": item.failures,
                "Inspections": item.total,
            }
            for item in registry.quarterly
        ]
    )
    st.line_chart(quarterly.set_index("Year-Quarter")["Max Failure Rate (%)"])
    st.dataframe(quarterly, use_container_width=True, hide_index=True)


def recency_control(config: AppConfig, session: DashboardSession, dataset_size: int) -> None:
    min_bound = config.query.min_recency_bound
    if dataset_size <= min_bound:
        session.set_recency_bound(dataset_size)
        st.sidebar.caption(f"Showing all {dataset_size:,} inspections.")
        return
    current = min(session.recency_bound or dataset_size, dataset_size)
    bound = st.sidebar.slider(
        "Show latest inspections",
        min_value=min_bound,
        max_value=dataset_size,
        value=max(current, min_bound),
        step=config.query.recency_step,
    )
    session.set_recency_bound(int(bound))
    st.sidebar.caption(f"{min(int(bound), dataset_size):,} / {dataset_size:,} inspections")


def main() -> None:
    config_path = os.environ.get("FOOD_INSPECTIONS_CONFIG", "config/local.yaml")
    config = load_config(Path(config_path))

    st.set_page_config(page_title="Chicago Food Inspection Embedding Explorer", layout="wide")
    st.title("Chicago Food Inspection Embedding Explorer")

    if st.sidebar.button("Reload data"):
        get_registry.clear()
        st.rerun()

    try:
        registry = get_registry(config_path)
    except IngestionError as exc:
        st.error(f"Error loading data: {exc}")
        st.caption("Make sure to run the preprocessing step first:")
        st.code(f"python -m food_inspections.batch.quarterly_job --config {config_path}")
        st.stop()

    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = DashboardSession(
            registry,
            source_key=config.dashboard.default_source,
            recency_bound=config.query.default_recency_bound,
            facility_limit=config.dashboard.facility_limit,
        )
    session = _session()
    session.registry = registry

    st.sidebar.selectbox(
        "Embedding source",
        options=registry.keys(),
        format_func=registry.label,
        index=registry.keys().index(session.source_key) if session.source_key in registry.keys() else 0,
        key=SOURCE_KEY,
        on_change=_on_source_change,
    )
    recency_control(config, session, len(session.dataset))
    mode_options = list(COLOR_MODES)
    color_mode = st.sidebar.radio(
        "Color by",
        options=mode_options,
        format_func=COLOR_MODES.get,
        index=mode_options.index(config.dashboard.default_color_mode)
        if config.dashboard.default_color_mode in mode_options
        else 0,
    )
    if session.selection.selected:
        st.sidebar.info(f"Selected: {session.selection.selected}")
        st.sidebar.button("Clear selection", on_click=session.clear_selection)

    view = session.view()
    st.caption(f"Analyzing {len(view.records):,} food inspections")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Embedding Space")
        render_scatter(view, color_mode)
    with col2:
        st.subheader("Chicago Community Areas")
        render_map(view, registry)

    col3, col4 = st.columns(2)
    with col3:
        title = "Failed Inspections by Facility Type"
        if view.selected_community:
            title = f"{title} - {view.selected_community}"
        st.subheader(title)
        render_facilities(view)
    with col4:
        st.subheader("Peak Failure Rate per Quarter")
        render_quarterly(registry)

    st.caption(
        "Data source: [Chicago Data Portal - Food Inspections]"
        "(https://data.cityofchicago.org/Health-Human-Services/Food-Inspections/4ijn-s7e5)"
    )


if __name__ == "__main__":
    main()
