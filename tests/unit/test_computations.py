from types import SimpleNamespace

import pytest

from libadmin.db.repositories.shelves import compute_accuracy
from libadmin.services.analytics_service import default_range, parse_day, summarize
from libadmin.services.storage_service import fit_dimensions


@pytest.mark.parametrize(
    "capacity,count,expected",
    [(10, 5, 50.0), (0, 5, 0.0), (4, 8, 100.0), (10, 0, 0.0), (3, 1, 100 / 3)],
)
def test_compute_accuracy(capacity, count, expected):
    assert compute_accuracy(capacity, count) == pytest.approx(expected)


def test_fit_dimensions_landscape_bounded_by_width_only():
    assert fit_dimensions(4000, 2000, 1920, 1080) == (1920, 960)
    # Height above max_height is kept for landscape images
    assert fit_dimensions(3000, 2500, 2000, 1000) == (2000, 1667)


def test_fit_dimensions_portrait_bounded_by_height_only():
    assert fit_dimensions(1000, 3000, 500, 1500) == (500, 1500)
    assert fit_dimensions(2000, 2000, 800, 1000) == (1000, 1000)


def test_fit_dimensions_small_images_untouched():
    assert fit_dimensions(300, 200, 1920, 1080) == (300, 200)


def test_parse_day_and_default_range():
    assert parse_day("2025-01-31").isoformat() == "2025-01-31"
    with pytest.raises(ValueError):
        parse_day("31/01/2025")
    start, end = default_range(parse_day("2025-03-07"))
    assert (start, end) == ("2025-03-01", "2025-03-07")


def _row(day, scans, accuracy, misplaced=0, shelves=None):
    return SimpleNamespace(
        date=day,
        metrics={
            "total_scans": scans,
            "total_corrections": 1,
            "total_misplaced_books": misplaced,
            "total_books_scanned": scans * 10,
            "average_accuracy": accuracy,
        },
        top_misplaced_shelves=shelves or [],
        top_scanned_books=[],
    )


def test_summarize_sums_and_averages():
    rows = [
        _row("2025-01-02", 3, 80.0, 2, [{"shelf_id": "s2", "shelf_name": "B", "error_count": 2}]),
        _row("2025-01-01", 1, 90.0, 1, [{"shelf_id": "s1", "shelf_name": "A", "error_count": 1}]),
    ]
    summary = summarize(rows, "2025-01-01", "2025-01-07")
    assert summary["total_scans"] == 4
    assert summary["total_corrections"] == 2
    assert summary["total_misplaced_books"] == 3
    assert summary["total_books_scanned"] == 40
    assert summary["average_accuracy"] == pytest.approx(85.0)
    assert [p["date"] for p in summary["trend"]] == ["2025-01-01", "2025-01-02"]
    assert summary["top_misplaced_shelves"][0]["shelf_id"] == "s2"


def test_summarize_empty_range():
    summary = summarize([], "2025-01-01", "2025-01-07")
    assert summary["total_scans"] == 0
    assert summary["average_accuracy"] == 0.0
    assert summary["trend"] == []
