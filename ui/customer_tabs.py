# ui/customer_tabs.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox

from ui.common import IdCombobox, id_label, confirm_dangerous_delete, make_table, selected_id, selected_row


class CustomerTabs(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)

        nb = ttk.Notebook(self)
        nb.pack(fill="both", expand=True)

        self.tab_customers = CustomerFrame(nb, shop, settings)
        self.tab_vehicles = VehicleFrame(nb, shop, settings)

        nb.add(self.tab_customers, text="Customers")
        nb.add(self.tab_vehicles, text="Vehicles")

    def refresh_all(self):
        self.tab_customers.refresh()
        self.tab_vehicles.refresh()


class CustomerFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings

        frm = ttk.LabelFrame(self, text="Add / update customer")
        frm.pack(fill="x", padx=8, pady=8)

        self.var_id = tk.StringVar()
        self.var_name = tk.StringVar()
        self.var_phone = tk.StringVar()
        self.var_email = tk.StringVar()

        ttk.Label(frm, text="ID").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_id, width=8, state="readonly").grid(row=0, column=1, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Name").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_name, width=28).grid(row=0, column=3, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Phone").grid(row=0, column=4, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_phone, width=18).grid(row=0, column=5, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Email").grid(row=0, column=6, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_email, width=28).grid(row=0, column=7, sticky="w", padx=4, pady=2)

        ttk.Button(frm, text="Add", command=self.on_add).grid(row=1, column=1, sticky="w", padx=4, pady=4)
        ttk.Button(frm, text="Update selected", command=self.on_update).grid(row=1, column=3, sticky="w", padx=4, pady=4)
        ttk.Button(frm, text="Clear", command=self.on_reset).grid(row=1, column=5, sticky="w", padx=4, pady=4)

        table = ttk.LabelFrame(self, text="Customers")
        table.pack(fill="both", expand=True, padx=8, pady=8)

        search = ttk.Frame(table)
        search.pack(fill="x", padx=4, pady=2)
        self.var_search = tk.StringVar()
        ttk.Label(search, text="Search").pack(side="left", padx=4)
        ttk.Entry(search, textvariable=self.var_search, width=30).pack(side="left", padx=4)
        ttk.Button(search, text="Find", command=self.refresh).pack(side="left", padx=4)

        self.tree = make_table(table, [("id", 60), ("name", 220), ("phone", 140), ("email", 240)])
        self.tree.bind("<<TreeviewSelect>>", self.on_select)

        ops = ttk.Frame(table)
        ops.pack(fill="x", padx=4, pady=4)
        ttk.Button(ops, text="Delete (type to confirm)", command=self.on_delete).pack(side="left", padx=4)

        self.refresh()

    def on_reset(self):
        for v in (self.var_id, self.var_name, self.var_phone, self.var_email):
            v.set("")

    def on_select(self, _e=None):
        row = selected_row(self.tree)
        if not row:
            return
        self.var_id.set(row[0])
        self.var_name.set(row[1])
        self.var_phone.set(row[2])
        self.var_email.set(row[3])

    def on_add(self):
        try:
            c = self.shop.add_customer(self.var_name.get(), self.var_phone.get(), self.var_email.get())
            messagebox.showinfo("Saved", f"Customer added with ID: {c.id}", parent=self)
            self.on_reset()
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_update(self):
        cid = selected_id(self.tree)
        if cid is None:
            messagebox.showwarning("Update", "Select a customer", parent=self)
            return
        try:
            self.shop.update_customer(cid, self.var_name.get(), self.var_phone.get(), self.var_email.get())
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_delete(self):
        cid = selected_id(self.tree)
        if cid is None:
            messagebox.showwarning("Delete", "Select a customer", parent=self)
            return
        phrase = self.settings.get("danger_confirm_phrase", "DELETE")
        if not confirm_dangerous_delete(self, phrase=phrase, title="Delete customer"):
            return
        try:
            self.shop.delete_customer(cid)
            self.on_reset()
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def refresh(self):
        self.tree.delete(*self.tree.get_children())
        for c in self.shop.search_customers(self.var_search.get()):
            self.tree.insert("", "end", values=(c.id, c.name, c.phone, c.email))


class VehicleFrame(ttk.Frame):
    def __init__(self, parent, shop, settings):
        super().__init__(parent)
        self.shop = shop
        self.settings = settings

        frm = ttk.LabelFrame(self, text="Register / update vehicle")
        frm.pack(fill="x", padx=8, pady=8)

        self.var_reg = tk.StringVar()
        self.var_model = tk.StringVar()
        self.var_color = tk.StringVar()

        ttk.Label(frm, text="Owner").grid(row=0, column=0, sticky="w", padx=4, pady=2)
        self.cb_owner = IdCombobox(frm, width=32)
        self.cb_owner.grid(row=0, column=1, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Reg. no").grid(row=0, column=2, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_reg, width=16).grid(row=0, column=3, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Model").grid(row=0, column=4, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_model, width=20).grid(row=0, column=5, sticky="w", padx=4, pady=2)
        ttk.Label(frm, text="Color").grid(row=0, column=6, sticky="w", padx=4, pady=2)
        ttk.Entry(frm, textvariable=self.var_color, width=12).grid(row=0, column=7, sticky="w", padx=4, pady=2)

        ttk.Button(frm, text="Register", command=self.on_add).grid(row=1, column=1, sticky="w", padx=4, pady=4)
        ttk.Button(frm, text="Update selected", command=self.on_update).grid(row=1, column=3, sticky="w", padx=4, pady=4)

        table = ttk.LabelFrame(self, text="Vehicles")
        table.pack(fill="both", expand=True, padx=8, pady=8)

        self.tree = make_table(table, [("id", 60), ("customer", 200), ("reg_no", 140), ("model", 180), ("color", 100)])
        self.tree.bind("<<TreeviewSelect>>", self.on_select)

        ops = ttk.Frame(table)
        ops.pack(fill="x", padx=4, pady=4)
        ttk.Button(ops, text="Delete (type to confirm)", command=self.on_delete).pack(side="left", padx=4)

        self.refresh()

    def on_select(self, _e=None):
        vid = selected_id(self.tree)
        if vid is None:
            return
        try:
            v = self.shop.get_vehicle(vid)
        except ValueError:
            return
        owner = self.shop.find_customer(v.customer_id)
        self.cb_owner.var.set(id_label(v.customer_id, owner.name if owner else "(deleted customer)"))
        self.var_reg.set(v.reg_no)
        self.var_model.set(v.model)
        self.var_color.set(v.color)

    def on_add(self):
        cid = self.cb_owner.selected_id()
        if cid is None:
            messagebox.showwarning("Register", "Select the owner", parent=self)
            return
        try:
            v = self.shop.register_vehicle(cid, self.var_reg.get(), self.var_model.get(), self.var_color.get())
            messagebox.showinfo("Saved", f"Vehicle registered with ID: {v.id}", parent=self)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_update(self):
        vid = selected_id(self.tree)
        if vid is None:
            messagebox.showwarning("Update", "Select a vehicle", parent=self)
            return
        try:
            self.shop.update_vehicle(vid, self.cb_owner.selected_id(), self.var_reg.get(),
                                     self.var_model.get(), self.var_color.get())
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def on_delete(self):
        vid = selected_id(self.tree)
        if vid is None:
            messagebox.showwarning("Delete", "Select a vehicle", parent=self)
            return
        phrase = self.settings.get("danger_confirm_phrase", "DELETE")
        if not confirm_dangerous_delete(self, phrase=phrase, title="Delete vehicle"):
            return
        try:
            self.shop.delete_vehicle(vid)
            self.refresh()
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def refresh(self):
        customers = self.shop.list_customers()
        self.cb_owner.set_choices((c.id, c.name) for c in customers)
        names = {c.id: c.name for c in customers}

        self.tree.delete(*self.tree.get_children())
        for v in self.shop.list_vehicles():
            owner = id_label(v.customer_id, names.get(v.customer_id, "(deleted customer)"))
            self.tree.insert("", "end", values=(v.id, owner, v.reg_no, v.model, v.color))
