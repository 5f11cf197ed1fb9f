# shop.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from models import (
    Customer, Vehicle, ServiceItem, Discount, HistoryEntry,
    STATUS_PENDING, STATUS_COMPLETED, NO_DISCOUNT,
)
from store import ShopStores
from utils import now_str

logger = logging.getLogger(__name__)


def _check_text(label: str, value: str) -> str:
    # the line format has no escaping
    if "|" in value or "\n" in value or "\r" in value:
        raise ValueError(f"{label} must not contain '|' or line breaks")
    return value


def _keep(old, new):
    if new is None:
        return old
    if isinstance(new, str) and new == "":
        return old
    return new


def _find(rows, rid: int, key=lambda r: r.id):
    for r in rows:
        if key(r) == rid:
            return r
    return None


@dataclass
class Bill:
    entry: HistoryEntry
    customer: Optional[Customer]
    vehicle: Optional[Vehicle]
    lines: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def discount_amount(self) -> float:
        return self.entry.subtotal - self.entry.total


class ShopService:
    """
    Customer, vehicle, catalog and booking operations on top of the record stores.

    Every mutating call is load -> mutate -> save on one store. User errors
    (unknown ids, bad prices, empty bookings) raise ValueError.
    """

    def __init__(self, stores: ShopStores):
        self.stores = stores

    # -------------------------
    # Customers
    # -------------------------
    def list_customers(self) -> List[Customer]:
        return self.stores.customers.load_all()

    def find_customer(self, customer_id: int) -> Optional[Customer]:
        return _find(self.list_customers(), customer_id)

    def get_customer(self, customer_id: int) -> Customer:
        c = self.find_customer(customer_id)
        if c is None:
            raise ValueError(f"Customer not found: {customer_id}")
        return c

    def search_customers(self, text: str) -> List[Customer]:
        q = text.strip().lower()
        if not q:
            return self.list_customers()
        return [
            c for c in self.list_customers()
            if q in c.name.lower() or q in c.phone.lower() or q in c.email.lower()
        ]

    def add_customer(self, name: str, phone: str = "", email: str = "") -> Customer:
        store = self.stores.customers
        rows = store.load_all()
        c = Customer(
            id=store.next_id(),
            name=_check_text("Name", name),
            phone=_check_text("Phone", phone),
            email=_check_text("Email", email),
        )
        rows.append(c)
        store.save_all(rows)
        logger.info("added customer %d", c.id)
        return c

    def update_customer(self, customer_id: int, name: Optional[str] = None,
                        phone: Optional[str] = None, email: Optional[str] = None) -> Customer:
        store = self.stores.customers
        rows = store.load_all()
        c = _find(rows, customer_id)
        if c is None:
            raise ValueError(f"Customer not found: {customer_id}")
        c.name = _check_text("Name", _keep(c.name, name))
        c.phone = _check_text("Phone", _keep(c.phone, phone))
        c.email = _check_text("Email", _keep(c.email, email))
        store.save_all(rows)
        return c

    def delete_customer(self, customer_id: int) -> None:
        store = self.stores.customers
        rows = store.load_all()
        kept = [c for c in rows if c.id != customer_id]
        if len(kept) == len(rows):
            raise ValueError(f"Customer not found: {customer_id}")
        store.save_all(kept)
        logger.info("deleted customer %d", customer_id)

    # -------------------------
    # Vehicles
    # -------------------------
    def list_vehicles(self, customer_id: Optional[int] = None) -> List[Vehicle]:
        rows = self.stores.vehicles.load_all()
        if customer_id is None:
            return rows
        return [v for v in rows if v.customer_id == customer_id]

    def get_vehicle(self, vehicle_id: int) -> Vehicle:
        v = _find(self.list_vehicles(), vehicle_id)
        if v is None:
            raise ValueError(f"Vehicle not found: {vehicle_id}")
        return v

    def register_vehicle(self, customer_id: int, reg_no: str, model: str = "", color: str = "") -> Vehicle:
        # owner is not checked against the customer list
        store = self.stores.vehicles
        rows = store.load_all()
        v = Vehicle(
            id=store.next_id(),
            customer_id=int(customer_id),
            reg_no=_check_text("Registration number", reg_no),
            model=_check_text("Model", model),
            color=_check_text("Color", color),
        )
        rows.append(v)
        store.save_all(rows)
        logger.info("registered vehicle %d for customer %d", v.id, v.customer_id)
        return v

    def update_vehicle(self, vehicle_id: int, customer_id: Optional[int] = None, reg_no: Optional[str] = None,
                       model: Optional[str] = None, color: Optional[str] = None) -> Vehicle:
        store = self.stores.vehicles
        rows = store.load_all()
        v = _find(rows, vehicle_id)
        if v is None:
            raise ValueError(f"Vehicle not found: {vehicle_id}")
        v.customer_id = int(_keep(v.customer_id, customer_id))
        v.reg_no = _check_text("Registration number", _keep(v.reg_no, reg_no))
        v.model = _check_text("Model", _keep(v.model, model))
        v.color = _check_text("Color", _keep(v.color, color))
        store.save_all(rows)
        return v

    def delete_vehicle(self, vehicle_id: int) -> None:
        store = self.stores.vehicles
        rows = store.load_all()
        kept = [v for v in rows if v.id != vehicle_id]
        if len(kept) == len(rows):
            raise ValueError(f"Vehicle not found: {vehicle_id}")
        store.save_all(kept)
        logger.info("deleted vehicle %d", vehicle_id)

    def delete_vehicles_for_customer(self, customer_id: int) -> int:
        store = self.stores.vehicles
        rows = store.load_all()
        kept = [v for v in rows if v.customer_id != customer_id]
        removed = len(rows) - len(kept)
        if removed:
            store.save_all(kept)
            logger.info("deleted %d vehicle(s) of customer %d", removed, customer_id)
        return removed

    # -------------------------
    # Service catalog
    # -------------------------
    def list_services(self) -> List[ServiceItem]:
        self.stores.services.ensure_defaults()
        return self.stores.services.load_all()

    def get_service(self, service_id: int) -> ServiceItem:
        s = _find(self.list_services(), service_id)
        if s is None:
            raise ValueError(f"Service not found: {service_id}")
        return s

    def add_service(self, name: str, price: float) -> ServiceItem:
        if price < 0:
            raise ValueError("Price must be 0 or more")
        store = self.stores.services
        rows = store.load_all()
        s = ServiceItem(id=store.next_id(), name=_check_text("Service name", name), price=float(price))
        rows.append(s)
        store.save_all(rows)
        return s

    def update_service(self, service_id: int, name: Optional[str] = None, price: Optional[float] = None) -> ServiceItem:
        if price is not None and price < 0:
            raise ValueError("Price must be 0 or more")
        store = self.stores.services
        rows = store.load_all()
        s = _find(rows, service_id)
        if s is None:
            raise ValueError(f"Service not found: {service_id}")
        s.name = _check_text("Service name", _keep(s.name, name))
        s.price = float(_keep(s.price, price))
        store.save_all(rows)
        return s

    def delete_service(self, service_id: int) -> None:
        store = self.stores.services
        rows = store.load_all()
        kept = [s for s in rows if s.id != service_id]
        if len(kept) == len(rows):
            raise ValueError(f"Service not found: {service_id}")
        store.save_all(kept)

    # -------------------------
    # Discounts
    # -------------------------
    def list_discounts(self) -> List[Discount]:
        self.stores.discounts.ensure_defaults()
        return self.stores.discounts.load_all()

    def find_discount(self, discount_id: int) -> Optional[Discount]:
        return _find(self.list_discounts(), discount_id)

    def add_discount(self, name: str, percent: float, note: str = "") -> Discount:
        if not 0 <= percent <= 100:
            raise ValueError("Percent must be between 0 and 100")
        store = self.stores.discounts
        rows = store.load_all()
        d = Discount(
            id=store.next_id(),
            name=_check_text("Discount name", name),
            percent=float(percent),
            note=_check_text("Note", note),
        )
        rows.append(d)
        store.save_all(rows)
        return d

    def update_discount(self, discount_id: int, name: Optional[str] = None,
                        percent: Optional[float] = None, note: Optional[str] = None) -> Discount:
        if percent is not None and not 0 <= percent <= 100:
            raise ValueError("Percent must be between 0 and 100")
        store = self.stores.discounts
        rows = store.load_all()
        d = _find(rows, discount_id)
        if d is None:
            raise ValueError(f"Discount not found: {discount_id}")
        d.name = _check_text("Discount name", _keep(d.name, name))
        d.percent = float(_keep(d.percent, percent))
        d.note = _check_text("Note", _keep(d.note, note))
        store.save_all(rows)
        return d

    def delete_discount(self, discount_id: int) -> None:
        store = self.stores.discounts
        rows = store.load_all()
        kept = [d for d in rows if d.id != discount_id]
        if len(kept) == len(rows):
            raise ValueError(f"Discount not found: {discount_id}")
        store.save_all(kept)

    # -------------------------
    # Booking / history
    # -------------------------
    def book_service(self, customer_id: int, vehicle_id: int, service_ids: Sequence[int],
                     discount_id: Optional[int] = None) -> HistoryEntry:
        self.get_customer(customer_id)
        vehicle = _find(self.list_vehicles(), vehicle_id)
        if vehicle is None or vehicle.customer_id != customer_id:
            raise ValueError(f"Vehicle {vehicle_id} is not registered to customer {customer_id}")
        if not service_ids:
            raise ValueError("Select at least one service")

        catalog = {s.id: s for s in self.list_services()}
        missing = [sid for sid in service_ids if sid not in catalog]
        if missing:
            raise ValueError(f"Service not found: {', '.join(str(m) for m in missing)}")
        subtotal = sum(catalog[sid].price for sid in service_ids)

        disc = self.find_discount(discount_id) if discount_id not in (None, 0, NO_DISCOUNT) else None
        pct = disc.percent if disc else 0.0
        total = subtotal - subtotal * (pct / 100.0)

        store = self.stores.history
        rows = store.load_all()
        h = HistoryEntry(
            history_id=store.next_id(),
            customer_id=customer_id,
            vehicle_id=vehicle_id,
            service_ids=list(service_ids),
            date_time=now_str(),
            subtotal=subtotal,
            discount_id=disc.id if disc else NO_DISCOUNT,
            discount_percent=pct,
            total=total,
            status=STATUS_PENDING,
        )
        rows.append(h)
        store.save_all(rows)
        logger.info("booked history %d: customer %d, vehicle %d, total %s",
                    h.history_id, customer_id, vehicle_id, total)
        return h

    def list_history(self, customer_id: Optional[int] = None) -> List[HistoryEntry]:
        rows = self.stores.history.load_all()
        if customer_id is None:
            return rows
        return [h for h in rows if h.customer_id == customer_id]

    def get_history(self, history_id: int) -> HistoryEntry:
        h = _find(self.list_history(), history_id, key=lambda r: r.history_id)
        if h is None:
            raise ValueError(f"History entry not found: {history_id}")
        return h

    def mark_completed(self, history_id: int) -> HistoryEntry:
        store = self.stores.history
        rows = store.load_all()
        h = _find(rows, history_id, key=lambda r: r.history_id)
        if h is None:
            raise ValueError(f"History entry not found: {history_id}")
        h.status = STATUS_COMPLETED
        store.save_all(rows)
        return h

    def build_bill(self, history_id: int) -> Bill:
        h = self.get_history(history_id)
        catalog = {s.id: s for s in self.list_services()}
        lines = [(catalog[sid].name, catalog[sid].price) for sid in h.service_ids if sid in catalog]
        return Bill(
            entry=h,
            customer=self.find_customer(h.customer_id),
            vehicle=_find(self.list_vehicles(), h.vehicle_id),
            lines=lines,
        )

    def checkout_customer(self, customer_id: int) -> bool:
        """
        Complete every pending booking of the customer, then drop the customer
        and their vehicles. Nothing happens when there is no pending booking.
        """
        store = self.stores.history
        rows = store.load_all()
        found = False
        for h in rows:
            if h.customer_id == customer_id and h.status == STATUS_PENDING:
                h.status = STATUS_COMPLETED
                found = True
        if not found:
            return False
        store.save_all(rows)
        self.delete_vehicles_for_customer(customer_id)
        customers = self.stores.customers
        kept = [c for c in customers.load_all() if c.id != customer_id]
        customers.save_all(kept)
        logger.info("checked out customer %d", customer_id)
        return True
