# ui/catalog_tabs.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox

from codec import format_number
from ui.common import confirm_dangerous_delete, make_table, selected_id, selected_row
from utils import safe_float


class CatalogTabs(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)

        nb = ttk.Notebook(self)
        nb.pack(fill="both", expand=True)

        self.tab_services = ServiceFrame(nb, shop, settings)
        self.tab_discounts = DiscountFrame(nb, shop, settings)

        nb.add(self.tab_services, text="Services")
        nb.add(self.tab_discounts, text="Discounts")

    def refresh_all(self):
        self.tab_services.refresh()
        self.tab_discounts.refresh()


class ServiceFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings

        frm = ttk.LabelFrame(self, text="Add / update service")
        frm.pack(fill="x", padx=8, pady=8)

        self.var_name = tk.StringVar()
        self.var_price = tk.StringVar()

        ttk.Label(frm, text="Name").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_name, width=30).grid(row=0, column=1, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Price").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_price, width=12).grid(row=0, column=3, sticky="w", padx=4, pady=2)

        ttk.Button(frm, text="Add", command=self.on_add).grid(row=0, column=4, sticky="w", padx=6, pady=2)
        ttk.Button(frm, text="Update selected", command=self.on_update).grid(row=0, column=5, sticky="w", padx=4, pady=2)

        table = ttk.LabelFrame(self, text="Service catalog")
        table.pack(fill="both", expand=True, padx=8, pady=8)
        self.tree = make_table(table, [("id", 60), ("name", 280), ("price", 140)])
        self.tree.bind("<<TreeviewSelect>>", self.on_select)

        ops = ttk.Frame(table)
        ops.pack(fill="x", padx=4, pady=4)
        ttk.Button(ops, text="Delete (type to confirm)", command=self.on_delete).pack(side="left", padx=4)

        self.refresh()

    def _price(self):
        s = self.var_price.get().strip()
        if not s:
            return None
        p = safe_float(s, -1.0)
        if p < 0:
            raise ValueError("Invalid price. Enter a number >= 0")
        return p

    def on_select(self, _e=None):
        sid = selected_id(self.tree)
        if sid is None:
            return
        s = self.shop.get_service(sid)
        self.var_name.set(s.name)
        self.var_price.set(format_number(s.price))

    def on_add(self):
        try:
            price = self._price()
            if price is None:
                raise ValueError("Enter a price")
            s = self.shop.add_service(self.var_name.get(), price)
            messagebox.showinfo("Saved", f"Service added with ID: {s.id}", parent=self)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_update(self):
        sid = selected_id(self.tree)
        if sid is None:
            messagebox.showwarning("Update", "Select a service", parent=self)
            return
        try:
            self.shop.update_service(sid, self.var_name.get(), self._price())
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_delete(self):
        sid = selected_id(self.tree)
        if sid is None:
            messagebox.showwarning("Delete", "Select a service", parent=self)
            return
        phrase = self.settings.get("danger_confirm_phrase", "DELETE")
        if not confirm_dangerous_delete(self, phrase=phrase, title="Delete service"):
            return
        try:
            self.shop.delete_service(sid)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def refresh(self):
        self.tree.delete(*self.tree.get_children())
        for s in self.shop.list_services():
            self.tree.insert("", "end", values=(s.id, s.name, self.settings.money_str(s.price)))


class DiscountFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings

        frm = ttk.LabelFrame(self, text="Add / update discount")
        frm.pack(fill="x", padx=8, pady=8)

        self.var_name = tk.StringVar()
        self.var_percent = tk.StringVar()
        self.var_note = tk.StringVar()

        ttk.Label(frm, text="Name").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_name, width=24).grid(row=0, column=1, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Percent").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_percent, width=8).grid(row=0, column=3, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Note").grid(row=0, column=4, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_note, width=32).grid(row=0, column=5, sticky="w", padx=4, pady=2)

        ttk.Button(frm, text="Add", command=self.on_add).grid(row=1, column=1, sticky="w", padx=4, pady=4)
        ttk.Button(frm, text="Update selected", command=self.on_update).grid(row=1, column=3, sticky="w", padx=4, pady=4)

        table = ttk.LabelFrame(self, text="Discounts")
        table.pack(fill="both", expand=True, padx=8, pady=8)
        self.tree = make_table(table, [("id", 60), ("name", 200), ("percent", 80), ("note", 300)])
        self.tree.bind("<<TreeviewSelect>>", self.on_select)

        ops = ttk.Frame(table)
        ops.pack(fill="x", padx=4, pady=4)
        ttk.Button(ops, text="Delete (type to confirm)", command=self.on_delete).pack(side="left", padx=4)

        self.refresh()

    def _percent(self):
        s = self.var_percent.get().strip()
        if not s:
            return None
        return safe_float(s, -1.0)

    def on_select(self, _e=None):
        row = selected_row(self.tree)
        if not row:
            return
        self.var_name.set(row[1])
        self.var_percent.set(row[2].rstrip("%"))
        self.var_note.set(row[3])

    def on_add(self):
        try:
            pct = self._percent()
            if pct is None:
                raise ValueError("Enter a percent")
            d = self.shop.add_discount(self.var_name.get(), pct, self.var_note.get())
            messagebox.showinfo("Saved", f"Discount added with ID: {d.id}", parent=self)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_update(self):
        did = selected_id(self.tree)
        if did is None:
            messagebox.showwarning("Update", "Select a discount", parent=self)
            return
        try:
            self.shop.update_discount(did, self.var_name.get(), self._percent(), self.var_note.get())
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_delete(self):
        did = selected_id(self.tree)
        if did is None:
            messagebox.showwarning("Delete", "Select a discount", parent=self)
            return
        phrase = self.settings.get("danger_confirm_phrase", "DELETE")
        if not confirm_dangerous_delete(self, phrase=phrase, title="Delete discount"):
            return
        try:
            self.shop.delete_discount(did)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def refresh(self):
        self.tree.delete(*self.tree.get_children())
        for d in self.shop.list_discounts():
            self.tree.insert("", "end", values=(d.id, d.name, f"{format_number(d.percent)}%", d.note))
