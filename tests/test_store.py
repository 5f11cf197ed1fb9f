"""
Record store behaviour shared by every record kind: load, save, next id, seeding.
"""
from __future__ import annotations

import logging
import os

import pytest

from models import Customer, Vehicle, ServiceItem, Discount, HistoryEntry


def _write(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def _read(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


@pytest.mark.parametrize("kind", ["customers", "vehicles", "services", "discounts", "history"])
def test_missing_and_truncated_files_load_empty(stores, kind):
    store = getattr(stores, kind)
    assert store.load_all() == []
    assert store.next_id() == 1

    _write(store.path, "")
    assert store.load_all() == []
    assert store.next_id() == 1


def test_next_id_follows_file_not_memory(stores):
    store = stores.customers
    store.save_all([Customer(1, "John", "1234567890", "john@example.com"),
                    Customer(2, "Jane", "0987654321", "jane@example.com")])
    assert store.next_id() == 3

    rows = store.load_all()
    rows.append(Customer(3, "Unsaved"))
    assert store.next_id() == 3


def test_next_id_ignores_bad_and_blank_lines(stores):
    _write(stores.vehicles.path, "abc|x\n\n5|1|KA01|Swift|Red\n2|1|KA02|City|Blue\n")
    assert stores.vehicles.next_id() == 6


def test_save_keeps_first_duplicate(stores):
    store = stores.customers
    store.save_all([Customer(1, "John"), Customer(1, "Jane")])
    rows = store.load_all()
    assert len(rows) == 1
    assert rows[0].name == "John"


def test_save_writes_ascending_ids(stores):
    store = stores.services
    store.save_all([ServiceItem(3, "C", 30), ServiceItem(1, "A", 10), ServiceItem(2, "B", 20)])
    assert _read(store.path) == "1|A|10\n2|B|20\n3|C|30\n"
    assert [s.id for s in store.load_all()] == [1, 2, 3]


def test_load_preserves_file_order(stores):
    _write(stores.customers.path, "3|C||\n1|A||\n")
    assert [c.id for c in stores.customers.load_all()] == [3, 1]


def test_malformed_lines_are_dropped(stores, caplog):
    _write(
        stores.customers.path,
        "1|John|1234567890|john@example.com\n"
        "2||0987654321|anon@example.com\n"
        "invalid|data\n",
    )
    with caplog.at_level(logging.DEBUG, logger="store"):
        rows = stores.customers.load_all()
    assert len(rows) == 2
    assert rows[1].name == ""
    assert "skipped malformed customer line" in caplog.text


def test_crlf_line_endings_are_tolerated(stores):
    _write(stores.discounts.path, "1|Promo|10|note\r\n")
    assert stores.discounts.load_all() == [Discount(1, "Promo", 10, "note")]


def test_save_load_round_trip_is_stable(stores):
    store = stores.vehicles
    store.save_all([
        Vehicle(2, 1, "KA01AB1234", "Swift", "Red"),
        Vehicle(1, 1, "KA01AB1234", "City", ""),
    ])
    first = store.load_all()
    first_text = _read(store.path)

    store.save_all(first)
    assert store.load_all() == first
    assert _read(store.path) == first_text


def test_history_round_trip(stores):
    store = stores.history
    entries = [
        HistoryEntry(1, 1, 1, [1, 2], "2026-01-11 10:00:00", 2000, -1, 0, 2000, "Pending"),
        HistoryEntry(2, 1, 1, [], "2026-01-12 09:30:00", 0, -1, 0, 0, "Completed"),
        HistoryEntry(3, 2, 3, [5], "2026-01-12 11:00:00", 2000, 2, 15, 1700, "Pending"),
    ]
    store.save_all(entries)

    lines = _read(store.path).splitlines()
    assert lines[0] == "1|1|1|1,2|2026-01-11 10:00:00|2000|-1|0|2000|Pending"
    assert "||" in lines[1]

    loaded = store.load_all()
    assert [h.service_ids for h in loaded] == [[1, 2], [], [5]]
    assert loaded == entries


def test_history_is_deduplicated_like_other_kinds(stores):
    store = stores.history
    store.save_all([
        HistoryEntry(1, 1, 1, [1], "2026-01-11 10:00:00", 1200, -1, 0, 1200, "Pending"),
        HistoryEntry(1, 9, 9, [2], "2026-01-11 10:00:00", 800, -1, 0, 800, "Pending"),
    ])
    rows = store.load_all()
    assert len(rows) == 1
    assert rows[0].customer_id == 1


def test_delete_by_filter_then_save(stores):
    store = stores.customers
    store.save_all([Customer(1, "A", "1", "a@x"), Customer(2, "B", "2", "b@x"), Customer(3, "C", "3", "c@x")])

    rows = [c for c in store.load_all() if c.id != 2]
    store.save_all(rows)

    after = store.load_all()
    assert [c.id for c in after] == [1, 3]
    assert after == [Customer(1, "A", "1", "a@x"), Customer(3, "C", "3", "c@x")]


def test_save_creates_missing_directory(tmp_path):
    from store import open_stores

    stores = open_stores(str(tmp_path / "nested" / "dir"))
    stores.customers.save_all([Customer(1, "A")])
    assert stores.customers.load_all() == [Customer(1, "A")]


def test_io_errors_propagate(tmp_path):
    from codec import CUSTOMER_CODEC
    from store import RecordStore

    # the path is a directory, so opening it as a file fails
    store = RecordStore(str(tmp_path), CUSTOMER_CODEC)
    with pytest.raises(OSError):
        store.save_all([Customer(1, "A")])


# -------------------------
# Default seeding
# -------------------------
def test_default_services_seeded_once(stores):
    assert stores.services.ensure_defaults() is True
    rows = stores.services.load_all()
    assert len(rows) == 6
    assert rows[0] == ServiceItem(1, "Oil Change", 1200)
    assert rows[-1] == ServiceItem(6, "General Service", 1500)

    assert stores.services.ensure_defaults() is False
    assert len(stores.services.load_all()) == 6


def test_default_discounts(stores):
    stores.discounts.ensure_defaults()
    rows = stores.discounts.load_all()
    assert [(d.id, d.name, d.percent) for d in rows] == [
        (1, "New Year Offer", 10),
        (2, "Diwali Special", 15),
        (3, "Summer Sale", 5),
    ]
    assert rows[2].note == "Flat 5% summer discount"


def test_seeding_skips_non_empty_catalog(stores):
    stores.services.save_all([ServiceItem(10, "Detailing", 3000)])
    assert stores.services.ensure_defaults() is False
    assert stores.services.load_all() == [ServiceItem(10, "Detailing", 3000)]


def test_seeding_treats_only_malformed_lines_as_empty(stores):
    _write(stores.services.path, "bad line\n")
    assert stores.services.ensure_defaults() is True
    assert len(stores.services.load_all()) == 6


def _write_bytes(path, data):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)


def test_non_utf8_line_is_skipped_not_the_file(stores, caplog):
    # second line carries a cp1252 "é"
    _write_bytes(stores.customers.path, b"1|John|1|a@x\n2|Jos\xe9|2|b@x\n3|Ann|3|c@x\n")
    with caplog.at_level(logging.DEBUG, logger="store"):
        rows = stores.customers.load_all()
    assert [c.id for c in rows] == [1, 3]
    assert "not UTF-8" in caplog.text


def test_next_id_reads_id_of_non_utf8_line(stores):
    _write_bytes(stores.customers.path, b"1|John|1|a@x\n2|Jos\xe9|2|b@x\n")
    assert stores.customers.next_id() == 3


def test_catalog_of_only_non_utf8_lines_is_seeded(stores):
    _write_bytes(stores.services.path, b"1|Lavage \xe0 la main|500\n")
    assert stores.services.ensure_defaults() is True
    assert len(stores.services.load_all()) == 6
