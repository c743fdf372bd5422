"""
Analytics service: dashboard aggregation and daily rollups.

`summarize` reduces stored daily rows for the dashboard. `rollup_day` builds a
daily row from raw scans and corrections.
"""
import logging
from collections import Counter, defaultdict
from datetime import date as date_cls, datetime, timedelta, timezone
from typing import Optional, Dict, Any, List, Iterable, Tuple

from sqlalchemy.orm import Session

from libadmin.db import models
from libadmin.db.repositories import analytics as analytics_repo
from libadmin.db.repositories import books as book_repo
from libadmin.db.repositories import corrections as correction_repo
from libadmin.db.repositories import libraries as library_repo
from libadmin.db.repositories import scans as scan_repo
from libadmin.db.repositories import shelves as shelf_repo

logger = logging.getLogger("libadmin.analytics")

TOP_N = 5
RECENT_SCAN_WINDOW = 50


def parse_day(value: str) -> date_cls:
    """Parse YYYY-MM-DD; raises ValueError on anything else."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def default_range(today: Optional[date_cls] = None) -> tuple[str, str]:
    """Last 7 days ending today, inclusive."""
    today = today or datetime.now(timezone.utc).date()
    return (today - timedelta(days=6)).isoformat(), today.isoformat()


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def summarize(rows: Iterable[Any], start_date: str, end_date: str) -> Dict[str, Any]:
    """Aggregate daily analytics rows.

    Totals are sums over the range; average_accuracy is the mean of the daily
    averages. Top lists come from the latest day in the range.
    """
    rows = sorted(rows, key=lambda r: r.date)
    totals = {
        "total_scans": 0,
        "total_corrections": 0,
        "total_misplaced_books": 0,
        "total_books_scanned": 0,
    }
    accuracies: List[float] = []
    trend: List[Dict[str, Any]] = []
    for row in rows:
        metrics = row.metrics or {}
        for key in totals:
            totals[key] += int(metrics.get(key) or 0)
        accuracy = float(metrics.get("average_accuracy") or 0.0)
        accuracies.append(accuracy)
        trend.append({
            "date": row.date,
            "scans": int(metrics.get("total_scans") or 0),
            "corrections": int(metrics.get("total_corrections") or 0),
            "accuracy": accuracy,
        })
    latest = rows[-1] if rows else None
    return {
        "start_date": start_date,
        "end_date": end_date,
        **totals,
        "average_accuracy": _mean(accuracies),
        "trend": trend,
        "top_misplaced_shelves": list(latest.top_misplaced_shelves or []) if latest else [],
        "top_scanned_books": list(latest.top_scanned_books or []) if latest else [],
    }


def _day_bounds(day: date_cls):
    start = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class AnalyticsService:
    """Service class for analytics rollups and the dashboard overview."""

    def __init__(self, db: Session):
        self.db = db

    def rollup_day(self, day: str, library_id: Optional[str] = None) -> models.DailyAnalytics:
        start, end = _day_bounds(parse_day(day))
        scans = scan_repo.get_scans_between(self.db, start, end, library_id)
        corrections = correction_repo.get_corrections_between(self.db, start, end, library_id)

        misplaced = 0
        shelf_errors: Dict[Tuple[str, str], int] = defaultdict(int)
        book_counts: Counter = Counter()
        book_titles: Dict[str, str] = {}
        for scan in scans:
            items = scan.scanned_books or []
            errors = sum(1 for item in items if not item.get("is_correct")) if items else (scan.error_count or 0)
            misplaced += errors
            shelf_errors[(scan.library_id, scan.shelf_id)] += errors
            for item in items:
                isbn = item.get("isbn")
                if not isbn:
                    continue
                book_counts[isbn] += 1
                if item.get("title"):
                    book_titles.setdefault(isbn, item["title"])

        users = {s.user_id for s in scans if s.user_id} | {c.user_id for c in corrections if c.user_id}
        metrics = {
            "total_scans": len(scans),
            "total_corrections": len(corrections),
            "total_books_scanned": sum(s.total_scanned or 0 for s in scans),
            "average_accuracy": _mean([float(s.accuracy or 0.0) for s in scans]),
            "total_misplaced_books": misplaced,
            "corrections_completed": sum(1 for c in corrections if c.status == "completed"),
            "active_users": len(users),
        }

        ranked_shelves = sorted(
            ((key, count) for key, count in shelf_errors.items() if count > 0),
            key=lambda pair: (-pair[1], pair[0][1], pair[0][0]),
        )[:TOP_N]
        top_shelves = []
        for (shelf_library_id, shelf_id), count in ranked_shelves:
            shelf = shelf_repo.get_shelf_by_id(self.db, shelf_library_id, shelf_id)
            top_shelves.append({
                "shelf_id": shelf_id,
                "shelf_name": shelf.name if shelf else "",
                "error_count": count,
            })

        ranked_books = sorted(book_counts.items(), key=lambda pair: (-pair[1], pair[0]))[:TOP_N]
        top_books = []
        for isbn, count in ranked_books:
            title = book_titles.get(isbn)
            if title is None:
                book = book_repo.get_book(self.db, isbn)
                title = book.title if book else ""
            top_books.append({"isbn": isbn, "title": title, "scan_count": count})

        row = analytics_repo.upsert_daily(
            self.db,
            date=day,
            library_id=library_id,
            metrics=metrics,
            top_misplaced_shelves=top_shelves,
            top_scanned_books=top_books,
        )
        logger.info("Analytics rollup for %s (library=%s): %d scans", day, library_id or "all", len(scans))
        return row

    def dashboard_overview(self) -> Dict[str, Any]:
        recent = scan_repo.get_recent_scans(self.db, None, RECENT_SCAN_WINDOW)
        return {
            "total_libraries": library_repo.count_active_libraries(self.db),
            "total_books": book_repo.count_active_books(self.db),
            "recent_scans": len(recent),
            "average_accuracy": _mean([float(s.accuracy or 0.0) for s in recent]),
        }
