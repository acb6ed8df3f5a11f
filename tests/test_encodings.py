from datetime import datetime

from food_inspections.common.models import InspectionRecord
from food_inspections.dashboard.encodings import (
    GREEN,
    GREY,
    RED,
    critical_rate_color,
    embedding_view,
    point_color,
)


def _inspection(result: str = "Pass", critical: int = 0, x: float = 0.0, y: float = 0.0) -> InspectionRecord:
    return InspectionRecord(
        inspection_id=1,
        business_name="Sample",
        address="",
        facility_type="Restaurant",
        inspection_date=datetime(2024, 1, 1),
        result=result,
        pass_flag=1 if result == "Pass" else 0,
        critical_found=critical,
        community_name="Loop",
        latitude=0.0,
        longitude=0.0,
        embedding_x=x,
        embedding_y=y,
    )


def test_point_color_modes():
    failed = _inspection(result="Fail", critical=1)
    assert point_color(failed, "passFlag") == RED
    assert point_color(failed, "criticalFound") == RED
    assert point_color(_inspection(), "passFlag") == GREEN
    assert point_color(_inspection(result="Mystery"), "results") == GREY
    assert point_color(failed, "no-such-mode") == RED


def test_critical_rate_color_clamps_to_domain():
    assert critical_rate_color(-5) == critical_rate_color(0)
    assert critical_rate_color(99) == critical_rate_color(30)
    assert critical_rate_color(30, alpha=255) == [165, 15, 21, 255]


def test_embedding_view_centres_points():
    records = [_inspection(x=-10, y=0), _inspection(x=10, y=5)]
    center_x, center_y, zoom = embedding_view(records, viewport_px=80)
    assert (center_x, center_y) == (0.0, 2.5)
    assert abs(zoom - 2.0) < 1e-9
    assert embedding_view([]) == (0.0, 0.0, 0.0)
