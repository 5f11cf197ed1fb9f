from __future__ import annotations

import json
import logging
import os

import pytest

from logging_config import setup_logging
from settings import SettingsStore
from utils import day_range, format_money, make_backup, safe_int


def test_settings_defaults_and_persistence(tmp_path):
    s = SettingsStore.in_dir(str(tmp_path))
    assert s.get("price_mode") == "int"
    assert s.get("danger_confirm_phrase") == "DELETE"

    s.set("price_mode", "float")
    again = SettingsStore.in_dir(str(tmp_path))
    assert again.get("price_mode") == "float"


def test_settings_fill_missing_keys(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"theme": "clam", "custom": 1}), encoding="utf-8")
    s = SettingsStore(str(path))
    assert s.get("theme") == "clam"
    assert s.get("custom") == 1
    assert s.get("log_level") == "INFO"


def test_settings_reset_and_money(tmp_path):
    s = SettingsStore.in_dir(str(tmp_path))
    assert s.money_str(1234.5) == "1,234"
    s.set("price_mode", "float")
    assert s.money_str(1234.5) == "1,234.50"
    s.reset()
    assert s.get("price_mode") == "int"


def test_format_money():
    assert format_money(2430) == "2,430"
    assert format_money(12.345, mode="float", decimals=1) == "12.3"


def test_safe_int():
    assert safe_int(" 12 ") == 12
    assert safe_int("x", -1) == -1


def test_day_range():
    assert day_range("", "") == (None, None)
    start, end = day_range("2026-01-10", "2026-01-12")
    assert start == "2026-01-10 00:00:00"
    assert end == "2026-01-12 23:59:59"
    with pytest.raises(ValueError):
        day_range("10/01/2026", "")


def test_make_backup(tmp_path):
    a = tmp_path / "customers.txt"
    a.write_text("1|A||\n", encoding="utf-8")
    missing = tmp_path / "vehicles.txt"

    dst = make_backup([str(a), str(missing)])
    assert os.path.isdir(dst)
    assert os.listdir(dst) == ["customers.txt"]

    with pytest.raises(FileNotFoundError):
        make_backup([str(missing)])


def test_setup_logging_is_configured_once(tmp_path):
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    try:
        setup_logging("DEBUG", str(tmp_path / "app.log"))
        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG
        setup_logging("INFO")
        assert len(root.handlers) == 2
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
