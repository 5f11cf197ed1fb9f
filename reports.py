# reports.py
from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from matplotlib.figure import Figure

from models import HistoryEntry
from utils import parse_ts


def _filtered(entries: Iterable[HistoryEntry], start_ts: Optional[str] = None, end_ts: Optional[str] = None,
              customer_id: Optional[int] = None, status: Optional[str] = None):
    for h in entries:
        ts = h.date_time
        if start_ts and ts < start_ts:
            continue
        if end_ts and ts > end_ts:
            continue
        if customer_id is not None and h.customer_id != customer_id:
            continue
        if status and h.status != status:
            continue
        yield h


def sum_revenue(entries: Iterable[HistoryEntry], start_ts: Optional[str] = None, end_ts: Optional[str] = None,
                customer_id: Optional[int] = None, status: Optional[str] = None) -> float:
    return sum(h.total for h in _filtered(entries, start_ts, end_ts, customer_id, status))


def revenue_by_day(entries: Iterable[HistoryEntry], start_ts: Optional[str] = None, end_ts: Optional[str] = None,
                   status: Optional[str] = None) -> List[Tuple[date, float]]:
    totals: Dict[date, float] = defaultdict(float)
    for h in _filtered(entries, start_ts, end_ts, None, status):
        try:
            day = parse_ts(h.date_time).date()
        except ValueError:
            continue
        totals[day] += h.total
    return sorted(totals.items())


def plot_revenue(ax, series: List[Tuple[date, float]], title: str = "Revenue per day") -> None:
    ax.clear()
    if not series:
        ax.set_title("No bookings in range")
        return
    xs = [d for d, _ in series]
    ys = [v for _, v in series]
    ax.bar(xs, ys)
    ax.set_title(title)
    ax.set_xlabel("Date")
    ax.set_ylabel("Total (Rs.)")


def save_revenue_chart(entries: Iterable[HistoryEntry], path: str, start_ts: Optional[str] = None,
                       end_ts: Optional[str] = None) -> str:
    fig = Figure(figsize=(10, 5), dpi=100)
    ax = fig.add_subplot(111)
    plot_revenue(ax, revenue_by_day(entries, start_ts, end_ts))
    fig.autofmt_xdate()
    fig.savefig(path)
    return path
