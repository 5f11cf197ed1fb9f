# codec.py
"""
One record <-> one pipe-delimited line.

Field order per kind is fixed and is the on-disk format:

    customers.txt        id|name|phone|email
    vehicles.txt         id|customerId|regNo|model|color
    services.txt         id|name|price
    discounts.txt        id|name|percent|note
    service_history.txt  historyId|customerId|vehicleId|s1,s2,...|dateTime|subtotal|discountId|discountPercent|total|status

String fields are written as-is. A "|" or a newline inside one breaks the line.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from models import Customer, Vehicle, ServiceItem, Discount, HistoryEntry

FIELD_SEP = "|"
LIST_SEP = ","

R = TypeVar("R")


class DecodeError(ValueError):
    """A field could not be converted; the whole line is skipped."""


@dataclass(frozen=True)
class LineCodec(Generic[R]):
    kind: str
    encode: Callable[[R], str]
    decode: Callable[[str], Optional[R]]
    key: Callable[[R], int]


# -------------------------
# Field helpers
# -------------------------
# plain ASCII decimal text only: no "1_000", no non-ASCII digits
_INT_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_int(s: str) -> int:
    s = s.strip()
    if not s:
        raise DecodeError("empty integer field")
    if not _INT_RE.fullmatch(s):
        raise DecodeError(f"not an integer: {s!r}")
    return int(s)


def parse_decimal(s: str) -> float:
    # accepts "1200" as well as "1200.0" / "12.5"
    s = s.strip()
    if not s:
        raise DecodeError("empty decimal field")
    if not _DECIMAL_RE.fullmatch(s):
        raise DecodeError(f"not a number: {s!r}")
    return float(s)


def format_number(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def encode_id_list(ids: Sequence[int]) -> str:
    return LIST_SEP.join(str(int(i)) for i in ids)


def decode_id_list(s: str) -> List[int]:
    return [parse_int(tok) for tok in s.split(LIST_SEP) if tok]


def split_fields(line: str, count: int) -> List[str]:
    """Split a line into exactly ``count`` fields; absent trailing ones become ""."""
    parts = line.split(FIELD_SEP)
    if len(parts) < count:
        parts.extend([""] * (count - len(parts)))
    return parts[:count]


def read_leading_id(line: str) -> Optional[int]:
    try:
        return parse_int(line.split(FIELD_SEP, 1)[0])
    except DecodeError:
        return None


def _skip_on_error(fn: Callable[[str], R]) -> Callable[[str], Optional[R]]:
    @wraps(fn)
    def wrapper(line: str) -> Optional[R]:
        try:
            return fn(line)
        except DecodeError:
            return None
    return wrapper


def _join(fields: Sequence[str]) -> str:
    return FIELD_SEP.join(fields)


# -------------------------
# Customer
# -------------------------
def encode_customer(c: Customer) -> str:
    return _join([str(c.id), c.name, c.phone, c.email])


@_skip_on_error
def decode_customer(line: str) -> Customer:
    f = split_fields(line, 4)
    return Customer(id=parse_int(f[0]), name=f[1], phone=f[2], email=f[3])


# -------------------------
# Vehicle
# -------------------------
def encode_vehicle(v: Vehicle) -> str:
    return _join([str(v.id), str(v.customer_id), v.reg_no, v.model, v.color])


@_skip_on_error
def decode_vehicle(line: str) -> Vehicle:
    f = split_fields(line, 5)
    return Vehicle(
        id=parse_int(f[0]),
        customer_id=parse_int(f[1]),
        reg_no=f[2],
        model=f[3],
        color=f[4],
    )


# -------------------------
# Service catalog
# -------------------------
def encode_service(s: ServiceItem) -> str:
    return _join([str(s.id), s.name, format_number(s.price)])


@_skip_on_error
def decode_service(line: str) -> ServiceItem:
    f = split_fields(line, 3)
    return ServiceItem(id=parse_int(f[0]), name=f[1], price=parse_decimal(f[2]))


# -------------------------
# Discounts
# -------------------------
def encode_discount(d: Discount) -> str:
    return _join([str(d.id), d.name, format_number(d.percent), d.note])


@_skip_on_error
def decode_discount(line: str) -> Discount:
    f = split_fields(line, 4)
    return Discount(id=parse_int(f[0]), name=f[1], percent=parse_decimal(f[2]), note=f[3])


# -------------------------
# Service history
# -------------------------
def encode_history(h: HistoryEntry) -> str:
    return _join([
        str(h.history_id),
        str(h.customer_id),
        str(h.vehicle_id),
        encode_id_list(h.service_ids),
        h.date_time,
        format_number(h.subtotal),
        str(h.discount_id),
        format_number(h.discount_percent),
        format_number(h.total),
        h.status,
    ])


@_skip_on_error
def decode_history(line: str) -> HistoryEntry:
    f = split_fields(line, 10)
    return HistoryEntry(
        history_id=parse_int(f[0]),
        customer_id=parse_int(f[1]),
        vehicle_id=parse_int(f[2]),
        service_ids=decode_id_list(f[3]),
        date_time=f[4],
        subtotal=parse_decimal(f[5]),
        discount_id=parse_int(f[6]),
        discount_percent=parse_decimal(f[7]),
        total=parse_decimal(f[8]),
        status=f[9],
    )


CUSTOMER_CODEC: LineCodec[Customer] = LineCodec("customer", encode_customer, decode_customer, lambda c: c.id)
VEHICLE_CODEC: LineCodec[Vehicle] = LineCodec("vehicle", encode_vehicle, decode_vehicle, lambda v: v.id)
SERVICE_CODEC: LineCodec[ServiceItem] = LineCodec("service", encode_service, decode_service, lambda s: s.id)
DISCOUNT_CODEC: LineCodec[Discount] = LineCodec("discount", encode_discount, decode_discount, lambda d: d.id)
HISTORY_CODEC: LineCodec[HistoryEntry] = LineCodec("history", encode_history, decode_history, lambda h: h.history_id)
