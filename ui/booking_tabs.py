# ui/booking_tabs.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
from datetime import datetime, timedelta
from typing import List

import matplotlib
matplotlib.use("TkAgg")
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from codec import format_number, encode_id_list
from models import STATUS_PENDING
from reports import sum_revenue, revenue_by_day, plot_revenue
from ui.common import IdCombobox, make_table, selected_id
from utils import day_range


class BookingTabs(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)

        nb = ttk.Notebook(self)
        nb.pack(fill="both", expand=True)

        self.tab_book = BookingInputFrame(nb, shop, settings)
        self.tab_history = HistoryFrame(nb, shop, settings)
        self.tab_revenue = RevenueFrame(nb, shop, settings)

        nb.add(self.tab_book, text="Book service")
        nb.add(self.tab_history, text="Service history")
        nb.add(self.tab_revenue, text="Revenue")

    def refresh_all(self):
        self.tab_book.refresh()
        self.tab_history.refresh()
        self.tab_revenue.refresh()


class BookingInputFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings
        self.chosen: List[int] = []

        top = ttk.LabelFrame(self, text="Customer and vehicle")
        top.pack(fill="x", padx=8, pady=8)

        ttk.Label(top, text="Customer").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        self.cb_customer = IdCombobox(top, width=36)
        self.cb_customer.grid(row=0, column=1, sticky="w", padx=4, pady=2)
        self.cb_customer.bind("<<ComboboxSelected>>", lambda e: self._refresh_vehicles())

        ttk.Label(top, text="Vehicle").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        self.cb_vehicle = IdCombobox(top, width=36)
        self.cb_vehicle.grid(row=0, column=3, sticky="w", padx=4, pady=2)

        ttk.Label(top, text="Service").grid(row=1, column=0, sticky="w", padx=4, pady=2)
        self.cb_service = IdCombobox(top, width=36)
        self.cb_service.grid(row=1, column=1, sticky="w", padx=4, pady=2)
        ttk.Button(top, text="Add service", command=self.on_add_line).grid(row=1, column=2, sticky="w", padx=6, pady=2)
        ttk.Button(top, text="Clear services", command=self.on_clear_lines).grid(row=1, column=3, sticky="w", padx=4, pady=2)

        mid = ttk.LabelFrame(self, text="Chosen services")
        mid.pack(fill="both", expand=True, padx=8, pady=8)
        self.tree = make_table(mid, [("id", 60), ("name", 280), ("price", 140)], height=10)

        bot = ttk.Frame(self)
        bot.pack(fill="x", padx=8, pady=8)
        ttk.Label(bot, text="Discount").pack(side="left", padx=4)
        self.cb_discount = IdCombobox(bot, width=36)
        self.cb_discount.pack(side="left", padx=4)
        self.cb_discount.bind("<<ComboboxSelected>>", lambda e: self._update_total())

        self.var_total = tk.StringVar(value="Subtotal: 0  Total: 0")
        ttk.Label(bot, textvariable=self.var_total).pack(side="left", padx=12)
        ttk.Button(bot, text="Book", command=self.on_book).pack(side="right", padx=4)

        self.refresh()

    def _refresh_vehicles(self):
        cid = self.cb_customer.selected_id()
        vehicles = self.shop.list_vehicles(cid) if cid is not None else []
        self.cb_vehicle.set_choices((v.id, f"{v.reg_no} {v.model}".strip()) for v in vehicles)

    def on_add_line(self):
        sid = self.cb_service.selected_id()
        if sid is None:
            messagebox.showwarning("Service", "Select a service", parent=self)
            return
        try:
            s = self.shop.get_service(sid)
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)
            return
        self.chosen.append(s.id)
        self.tree.insert("", "end", values=(s.id, s.name, self.settings.money_str(s.price)))
        self._update_total()

    def on_clear_lines(self):
        self.chosen = []
        self.tree.delete(*self.tree.get_children())
        self._update_total()

    def _update_total(self):
        prices = {s.id: s.price for s in self.shop.list_services()}
        subtotal = sum(prices.get(sid, 0) for sid in self.chosen)
        pct = 0.0
        did = self.cb_discount.selected_id()
        if did:
            d = self.shop.find_discount(did)
            pct = d.percent if d else 0.0
        total = subtotal - subtotal * (pct / 100.0)
        self.var_total.set(f"Subtotal: {self.settings.money_str(subtotal)}  Total: {self.settings.money_str(total)}")

    def on_book(self):
        cid = self.cb_customer.selected_id()
        vid = self.cb_vehicle.selected_id()
        if cid is None or vid is None:
            messagebox.showwarning("Book", "Select a customer and one of their vehicles", parent=self)
            return
        try:
            h = self.shop.book_service(cid, vid, self.chosen, self.cb_discount.selected_id())
            messagebox.showinfo(
                "Booked",
                f"Booking {h.history_id} saved.\nTotal: Rs.{self.settings.money_str(h.total)}",
                parent=self,
            )
            self.on_clear_lines()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def refresh(self):
        self.cb_customer.set_choices((c.id, c.name) for c in self.shop.list_customers())
        self._refresh_vehicles()
        self.cb_service.set_choices((s.id, s.name) for s in self.shop.list_services())
        discounts = [(0, "No discount")]
        discounts += [(d.id, f"{d.name} ({format_number(d.percent)}%)") for d in self.shop.list_discounts()]
        self.cb_discount.set_choices(discounts)
        self._update_total()


class HistoryFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings

        top = ttk.Frame(self)
        top.pack(fill="x", padx=8, pady=6)
        ttk.Button(top, text="Mark completed", command=self.on_complete).pack(side="left", padx=4)
        ttk.Button(top, text="Show bill", command=self.on_bill).pack(side="left", padx=6)
        ttk.Button(top, text="Check out customer", command=self.on_checkout).pack(side="left", padx=12)

        filterf = ttk.LabelFrame(self, text="Date range (YYYY-MM-DD)")
        filterf.pack(fill="x", padx=8, pady=6)

        self.var_from = tk.StringVar(value="")
        self.var_to = tk.StringVar(value="")
        ttk.Label(filterf, text="From").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        ttk.Entry(filterf, textvariable=self.var_from, width=16).grid(row=0, column=1, sticky="w", padx=4, pady=2)
        ttk.Label(filterf, text="To").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        ttk.Entry(filterf, textvariable=self.var_to, width=16).grid(row=0, column=3, sticky="w", padx=4, pady=2)
        ttk.Button(filterf, text="Show", command=self.refresh).grid(row=0, column=4, sticky="w", padx=6, pady=2)

        table = ttk.Frame(self)
        table.pack(fill="both", expand=True, padx=8, pady=8)
        self.tree = make_table(table, [
            ("id", 60), ("customer", 80), ("vehicle", 80), ("services", 120), ("date_time", 160),
            ("subtotal", 100), ("discount%", 80), ("total", 100), ("status", 100),
        ], height=18)

        self.refresh()

    def on_complete(self):
        hid = selected_id(self.tree)
        if hid is None:
            messagebox.showwarning("History", "Select a booking", parent=self)
            return
        try:
            self.shop.mark_completed(hid)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_bill(self):
        hid = selected_id(self.tree)
        if hid is None:
            messagebox.showwarning("History", "Select a booking", parent=self)
            return
        try:
            bill = self.shop.build_bill(hid)
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)
            return
        h = bill.entry
        money = self.settings.money_str
        out = [f"Bill #{h.history_id}  {h.date_time}"]
        if bill.customer:
            out.append(f"Customer: {bill.customer.name} ({bill.customer.phone})")
        if bill.vehicle:
            out.append(f"Vehicle: {bill.vehicle.reg_no} {bill.vehicle.model}")
        out.append("")
        out += [f" - {name} : Rs.{money(price)}" for name, price in bill.lines]
        out.append("")
        out.append(f"Subtotal: Rs.{money(h.subtotal)}")
        out.append(f"Discount ({format_number(h.discount_percent)}%): Rs.{money(bill.discount_amount)}")
        out.append(f"Total: Rs.{money(h.total)}")
        out.append(f"Status: {h.status}")
        messagebox.showinfo("Bill", "\n".join(out), parent=self)

    def on_checkout(self):
        hid = selected_id(self.tree)
        if hid is None:
            messagebox.showwarning("History", "Select a booking of the customer", parent=self)
            return
        try:
            cid = self.shop.get_history(hid).customer_id
            if not messagebox.askyesno(
                "Check out",
                f"Complete all pending bookings of customer {cid} and remove the customer and their vehicles?",
                parent=self,
            ):
                return
            if self.shop.checkout_customer(cid):
                messagebox.showinfo("Check out", f"Customer {cid} checked out", parent=self)
            else:
                messagebox.showinfo("Check out", "No pending bookings for this customer", parent=self)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def refresh(self):
        self.tree.delete(*self.tree.get_children())
        try:
            start_ts, end_ts = day_range(self.var_from.get(), self.var_to.get())
        except ValueError:
            messagebox.showerror("Input error", "Dates must be YYYY-MM-DD", parent=self)
            start_ts, end_ts = None, None

        money = self.settings.money_str
        for h in self.shop.list_history():
            if start_ts and h.date_time < start_ts:
                continue
            if end_ts and h.date_time > end_ts:
                continue
            self.tree.insert("", "end", values=(
                h.history_id,
                h.customer_id,
                h.vehicle_id,
                encode_id_list(h.service_ids),
                h.date_time,
                money(h.subtotal),
                format_number(h.discount_percent),
                money(h.total),
                h.status,
            ))


class RevenueFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings

        top = ttk.LabelFrame(self, text="Revenue (date range)")
        top.pack(fill="x", padx=8, pady=8)

        self.var_from = tk.StringVar(value="")
        self.var_to = tk.StringVar(value="")
        ttk.Label(top, text="From (YYYY-MM-DD)").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        ttk.Entry(top, textvariable=self.var_from, width=16).grid(row=0, column=1, sticky="w", padx=4, pady=2)
        ttk.Label(top, text="To (YYYY-MM-DD)").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        ttk.Entry(top, textvariable=self.var_to, width=16).grid(row=0, column=3, sticky="w", padx=4, pady=2)

        ttk.Button(top, text="Show", command=self.refresh).grid(row=0, column=4, sticky="w", padx=6, pady=2)
        ttk.Button(top, text="7 days", command=lambda: self._preset_days(7)).grid(row=0, column=5, sticky="w", padx=4, pady=2)
        ttk.Button(top, text="30 days", command=lambda: self._preset_days(30)).grid(row=0, column=6, sticky="w", padx=4, pady=2)

        self.var_totals = tk.StringVar(value="")
        ttk.Label(top, textvariable=self.var_totals).grid(row=1, column=0, columnspan=7, sticky="w", padx=4, pady=4)

        fig = Figure(figsize=(10, 5), dpi=100)
        self.ax = fig.add_subplot(111)
        self.canvas = FigureCanvasTkAgg(fig, master=self)
        self.canvas.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=8)
        self.fig = fig

        self.refresh()

    def _preset_days(self, days: int):
        end = datetime.now()
        start = end - timedelta(days=days)
        self.var_from.set(start.strftime("%Y-%m-%d"))
        self.var_to.set(end.strftime("%Y-%m-%d"))
        self.refresh()

    def refresh(self):
        try:
            start_ts, end_ts = day_range(self.var_from.get(), self.var_to.get())
        except ValueError:
            messagebox.showerror("Input error", "Dates must be YYYY-MM-DD", parent=self)
            return

        history = self.shop.list_history()
        money = self.settings.money_str
        total = sum_revenue(history, start_ts, end_ts)
        pending = sum_revenue(history, start_ts, end_ts, status=STATUS_PENDING)
        self.var_totals.set(f"Total: Rs.{money(total)}   Pending: Rs.{money(pending)}")

        plot_revenue(self.ax, revenue_by_day(history, start_ts, end_ts))
        self.fig.autofmt_xdate()
        self.canvas.draw()
