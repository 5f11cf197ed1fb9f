# store.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Generic, Iterable, List, Sequence, TypeVar

from codec import (
    LineCodec,
    read_leading_id,
    CUSTOMER_CODEC,
    VEHICLE_CODEC,
    SERVICE_CODEC,
    DISCOUNT_CODEC,
    HISTORY_CODEC,
)
from models import Customer, Vehicle, ServiceItem, Discount, HistoryEntry

logger = logging.getLogger(__name__)

R = TypeVar("R")

CUSTOMERS_FILE = "customers.txt"
VEHICLES_FILE = "vehicles.txt"
SERVICES_FILE = "services.txt"
DISCOUNTS_FILE = "discounts.txt"
HISTORY_FILE = "service_history.txt"

RECORD_FILES = (CUSTOMERS_FILE, VEHICLES_FILE, SERVICES_FILE, DISCOUNTS_FILE, HISTORY_FILE)


def _default_services() -> List[ServiceItem]:
    return [
        ServiceItem(1, "Oil Change", 1200),
        ServiceItem(2, "Brake Inspection", 800),
        ServiceItem(3, "Wheel Alignment", 600),
        ServiceItem(4, "Car Wash", 500),
        ServiceItem(5, "Engine Tune-up", 2000),
        ServiceItem(6, "General Service", 1500),
    ]


def _default_discounts() -> List[Discount]:
    return [
        Discount(1, "New Year Offer", 10, "New Year 10% off"),
        Discount(2, "Diwali Special", 15, "Festival offer"),
        Discount(3, "Summer Sale", 5, "Flat 5% summer discount"),
    ]


class RecordStore(Generic[R]):
    """
    One record kind backed by one flat file, one record per line.

    Every call reads or rewrites the whole file. Nothing is cached between
    calls, so a store instance can be shared freely; callers serialize their
    own load -> mutate -> save sequences.
    """

    def __init__(self, path: str, codec: LineCodec[R]):
        self.path = path
        self.codec = codec

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r}, kind={self.codec.kind!r})"

    # -------------------------
    # Internal
    # -------------------------
    def _read_lines(self) -> List[bytes]:
        # raw bytes; each line is decoded on its own so one bad byte only costs that line
        if not os.path.exists(self.path):
            return []
        with open(self.path, "rb") as f:
            return [ln.rstrip(b"\r\n") for ln in f]

    # -------------------------
    # Public
    # -------------------------
    def load_all(self) -> List[R]:
        out: List[R] = []
        for lineno, raw in enumerate(self._read_lines(), start=1):
            if not raw:
                continue
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("%s:%d: skipped %s line that is not UTF-8", self.path, lineno, self.codec.kind)
                continue
            rec = self.codec.decode(line)
            if rec is None:
                logger.debug("%s:%d: skipped malformed %s line", self.path, lineno, self.codec.kind)
                continue
            out.append(rec)
        return out

    def save_all(self, records: Iterable[R]) -> None:
        key = self.codec.key
        unique: Dict[int, R] = {}
        for rec in records:
            # first occurrence of an id wins
            unique.setdefault(key(rec), rec)

        # written in ascending id order whatever the input order was
        rows = sorted(unique.values(), key=key)

        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8", newline="\n") as f:
            for rec in rows:
                f.write(self.codec.encode(rec) + "\n")
        logger.debug("saved %d %s record(s) to %s", len(rows), self.codec.kind, self.path)

    def next_id(self) -> int:
        max_id = 0
        for raw in self._read_lines():
            if not raw:
                continue
            # only the leading id has to be readable
            rid = read_leading_id(raw.decode("utf-8", errors="replace"))
            if rid is not None and rid > max_id:
                max_id = rid
        return max_id + 1


class CatalogStore(RecordStore[R]):
    """A RecordStore that fills itself with a canonical catalog when empty."""

    def __init__(self, path: str, codec: LineCodec[R], defaults: Sequence[R]):
        super().__init__(path, codec)
        self.defaults = list(defaults)

    def ensure_defaults(self) -> bool:
        rows = self.load_all()
        if rows:
            return False
        rows.extend(self.defaults)
        self.save_all(rows)
        logger.info("seeded %d default %s record(s) into %s", len(self.defaults), self.codec.kind, self.path)
        return True


@dataclass
class ShopStores:
    data_dir: str
    customers: RecordStore[Customer]
    vehicles: RecordStore[Vehicle]
    services: CatalogStore[ServiceItem]
    discounts: CatalogStore[Discount]
    history: RecordStore[HistoryEntry]

    def ensure_defaults(self) -> None:
        self.services.ensure_defaults()
        self.discounts.ensure_defaults()

    def paths(self) -> List[str]:
        return [s.path for s in (self.customers, self.vehicles, self.services, self.discounts, self.history)]


def open_stores(data_dir: str) -> ShopStores:
    def p(name: str) -> str:
        return os.path.join(data_dir, name)

    return ShopStores(
        data_dir=data_dir,
        customers=RecordStore(p(CUSTOMERS_FILE), CUSTOMER_CODEC),
        vehicles=RecordStore(p(VEHICLES_FILE), VEHICLE_CODEC),
        services=CatalogStore(p(SERVICES_FILE), SERVICE_CODEC, _default_services()),
        discounts=CatalogStore(p(DISCOUNTS_FILE), DISCOUNT_CODEC, _default_discounts()),
        history=RecordStore(p(HISTORY_FILE), HISTORY_CODEC),
    )
