from __future__ import annotations

from datetime import date

from matplotlib.figure import Figure

from models import HistoryEntry
from reports import plot_revenue, revenue_by_day, save_revenue_chart, sum_revenue


def _entries():
    return [
        HistoryEntry(1, 1, 1, [1], "2026-01-10 09:00:00", 1200, -1, 0, 1200, "Completed"),
        HistoryEntry(2, 2, 2, [2], "2026-01-10 15:30:00", 800, -1, 0, 800, "Pending"),
        HistoryEntry(3, 1, 1, [5], "2026-01-12 11:00:00", 2000, 2, 15, 1700, "Pending"),
        HistoryEntry(4, 3, 3, [4], "garbage", 500, -1, 0, 500, "Completed"),
    ]


def test_sum_revenue_filters():
    rows = _entries()
    assert sum_revenue(rows) == 4200
    assert sum_revenue(rows, customer_id=1) == 2900
    assert sum_revenue(rows, status="Pending") == 2500
    assert sum_revenue(rows, start_ts="2026-01-11 00:00:00", end_ts="2026-01-12 23:59:59") == 1700


def test_revenue_by_day_skips_unparseable_dates():
    series = revenue_by_day(_entries())
    assert series == [(date(2026, 1, 10), 2000), (date(2026, 1, 12), 1700)]


def test_plot_revenue_empty_series():
    ax = Figure().add_subplot(111)
    plot_revenue(ax, [])
    assert ax.get_title() == "No bookings in range"


def test_plot_revenue_draws_bars():
    ax = Figure().add_subplot(111)
    plot_revenue(ax, revenue_by_day(_entries()))
    assert len(ax.patches) == 2


def test_save_revenue_chart(tmp_path):
    out = tmp_path / "revenue.png"
    save_revenue_chart(_entries(), str(out))
    assert out.exists()
    assert out.stat().st_size > 0
