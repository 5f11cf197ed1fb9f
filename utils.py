# utils.py
from __future__ import annotations

import os
import json
import shutil
from datetime import datetime, date
from typing import Any, Dict, Iterable, Optional

TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def now_str() -> str:
    return datetime.now().strftime(TS_FORMAT)


def parse_ts(s: str) -> datetime:
    return datetime.strptime(s.strip(), TS_FORMAT)


def parse_date_yyyy_mm_dd(s: str) -> date:
    # "2026-01-11"
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def day_range(from_s: str, to_s: str):
    """
    "YYYY-MM-DD" (either may be blank) -> (start_ts, end_ts) strings usable for
    plain string comparison against history timestamps.
    """
    start_ts = None
    end_ts = None
    if from_s.strip():
        start_ts = datetime.combine(parse_date_yyyy_mm_dd(from_s), datetime.min.time()).strftime(TS_FORMAT)
    if to_s.strip():
        end_ts = datetime.combine(parse_date_yyyy_mm_dd(to_s), datetime.max.time()).strftime(TS_FORMAT)
    return start_ts, end_ts


def safe_int(s: str, default: int = 0) -> int:
    try:
        return int(str(s).strip())
    except Exception:
        return default


def safe_float(s: str, default: float = 0.0) -> float:
    try:
        return float(str(s).strip())
    except Exception:
        return default


def atomic_write_json(path: str, data: Dict[str, Any]) -> None:
    tmp = path + ".tmp"
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    os.replace(tmp, path)


def load_json_or_default(path: str, default: Dict[str, Any]) -> Dict[str, Any]:
    if not os.path.exists(path):
        return default
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def format_money(value: float, *, mode: str = "int", decimals: int = 2) -> str:
    """
    mode:
      - "int": whole rupees (rounded)
      - "float": ``decimals`` places
    Thousands are always comma separated.
    """
    if mode == "float":
        try:
            return f"{float(value):,.{int(decimals)}f}"
        except Exception:
            return str(value)

    # int
    try:
        return f"{int(round(float(value))):,}"
    except Exception:
        return str(value)


def make_backup(paths: Iterable[str], backup_dir: Optional[str] = None) -> str:
    """
    Copy every existing file in ``paths`` into a fresh timestamped folder and
    return that folder. By default the folder is created next to the first file.
    """
    paths = [p for p in paths if os.path.exists(p)]
    if not paths:
        raise FileNotFoundError("no data files to back up")

    base_dir = backup_dir or os.path.dirname(paths[0]) or "."
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    dst = os.path.join(base_dir, f"backup_{ts}")
    os.makedirs(dst, exist_ok=True)
    for p in paths:
        shutil.copy2(p, os.path.join(dst, os.path.basename(p)))
    return dst
