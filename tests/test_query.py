from datetime import datetime, timedelta

from food_inspections.analytics import query
from food_inspections.common.models import InspectionRecord


def _inspection(idx: int, day: int, community: str = "Loop") -> InspectionRecord:
    return InspectionRecord(
        inspection_id=idx,
        business_name=f"Biz {idx}",
        address="1 N State St",
        facility_type="Restaurant",
        inspection_date=datetime(2024, 1, 1) + timedelta(days=day),
        result="Pass",
        pass_flag=1,
        critical_found=0,
        community_name=community,
        latitude=41.88,
        longitude=-87.63,
        embedding_x=float(idx),
        embedding_y=float(-idx),
    )


def test_recency_bound_keeps_newest_records():
    records = [_inspection(i, day=i) for i in range(10)]
    result = query.apply(records, recency_bound=4)

    assert [r.inspection_id for r in result] == [9, 8, 7, 6]
    excluded = [r for r in records if r not in result]
    assert min(r.inspection_date for r in result) >= max(r.inspection_date for r in excluded)


def test_bound_larger_than_dataset_returns_everything_sorted():
    records = [_inspection(i, day=i % 3) for i in range(5)]
    result = query.apply(records, recency_bound=100)

    assert len(result) == 5
    dates = [r.inspection_date for r in result]
    assert dates == sorted(dates, reverse=True)


def test_sort_is_stable_for_same_day_inspections():
    records = [_inspection(i, day=0) for i in range(6)]
    result = query.apply(records, recency_bound=3)

    assert [r.inspection_id for r in result] == [0, 1, 2]


def test_community_filter_applies_after_truncation():
    records = [
        _inspection(1, day=0, community="Loop"),
        _inspection(2, day=5, community="Uptown"),
        _inspection(3, day=6, community="Loop"),
        _inspection(4, day=7, community="Uptown"),
    ]
    result = query.apply(records, recency_bound=2, selected_community="Loop")

    # Only the two newest city-wide records are eligible; the older Loop record stays out.
    assert [r.inspection_id for r in result] == [3]
    assert all(r.community_name == "Loop" for r in result)


def test_community_match_is_exact_and_case_sensitive():
    records = [_inspection(1, day=1, community="Loop"), _inspection(2, day=2, community="loop")]
    assert [r.inspection_id for r in query.apply(records, 10, "Loop")] == [1]


def test_no_bound_and_non_positive_bound():
    records = [_inspection(i, day=i) for i in range(3)]
    assert len(query.apply(records, None)) == 3
    assert query.apply(records, 0) == []
    assert query.apply(records, -5) == []


def test_input_order_is_not_mutated():
    records = [_inspection(i, day=i) for i in range(3)]
    query.apply(records, 2)
    assert [r.inspection_id for r in records] == [0, 1, 2]
