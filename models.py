# models.py
from dataclasses import dataclass, field
from typing import List

STATUS_PENDING = "Pending"
STATUS_COMPLETED = "Completed"

NO_DISCOUNT = -1


@dataclass
class Customer:
    id: int
    name: str
    phone: str = ""
    email: str = ""


@dataclass
class Vehicle:
    id: int
    customer_id: int
    reg_no: str
    model: str = ""
    color: str = ""


@dataclass
class ServiceItem:
    id: int
    name: str
    price: float


@dataclass
class Discount:
    id: int
    name: str
    percent: float
    note: str = ""


@dataclass
class HistoryEntry:
    history_id: int
    customer_id: int
    vehicle_id: int
    service_ids: List[int] = field(default_factory=list)
    date_time: str = ""
    subtotal: float = 0.0
    discount_id: int = NO_DISCOUNT
    discount_percent: float = 0.0
    total: float = 0.0
    status: str = STATUS_PENDING
