# ui/settings_tabs.py
from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk, messagebox

from utils import safe_int, make_backup


class SettingsTabs(ttk.Frame):
    def __init__(self, parent, settings, stores, *, style: ttk.Style, on_settings_changed=None):
        super().__init__(parent)
        self.settings = settings
        self.stores = stores
        self.style = style
        self.on_settings_changed = on_settings_changed

        outer = ttk.Frame(self)
        outer.pack(fill="both", expand=True, padx=10, pady=10)

        # ---- Appearance ----
        lf = ttk.LabelFrame(outer, text="Display (theme / prices)")
        lf.pack(fill="x", padx=6, pady=6)

        ttk.Label(lf, text="Theme").grid(row=0, column=0, sticky="w", padx=4, pady=4)
        self.var_theme = tk.StringVar(value=self.settings.get("theme", ""))
        themes = list(self.style.theme_names())
        self.cb_theme = ttk.Combobox(lf, textvariable=self.var_theme, values=themes, state="readonly", width=30)
        self.cb_theme.grid(row=0, column=1, sticky="w", padx=4, pady=4)
        ttk.Button(lf, text="Apply", command=self.apply_theme).grid(row=0, column=2, sticky="w", padx=6, pady=4)

        ttk.Label(lf, text="Prices").grid(row=1, column=0, sticky="w", padx=4, pady=4)
        self.var_price_mode = tk.StringVar(value=self.settings.get("price_mode", "int"))
        ttk.Radiobutton(lf, text="Whole (e.g. 1200)", variable=self.var_price_mode, value="int", command=self.save_price_mode).grid(row=1, column=1, sticky="w", padx=4, pady=2)
        ttk.Radiobutton(lf, text="Decimal (e.g. 1200.00)", variable=self.var_price_mode, value="float", command=self.save_price_mode).grid(row=2, column=1, sticky="w", padx=4, pady=2)

        self.var_decimals = tk.StringVar(value=str(self.settings.get("price_decimals", 2)))
        ttk.Label(lf, text="Decimal places").grid(row=2, column=0, sticky="w", padx=4, pady=4)
        self.sp_dec = ttk.Spinbox(lf, from_=0, to=6, textvariable=self.var_decimals, width=6, command=self.save_decimals)
        self.sp_dec.grid(row=2, column=2, sticky="w", padx=6, pady=2)
        ttk.Button(lf, text="Save", command=self.save_decimals).grid(row=2, column=3, sticky="w", padx=6, pady=2)

        # ---- Safety ----
        lf2 = ttk.LabelFrame(outer, text="Safety")
        lf2.pack(fill="x", padx=6, pady=6)

        ttk.Label(lf2, text="Delete confirmation word").grid(row=0, column=0, sticky="w", padx=4, pady=4)
        self.var_phrase = tk.StringVar(value=self.settings.get("danger_confirm_phrase", "DELETE"))
        ttk.Entry(lf2, textvariable=self.var_phrase, width=16).grid(row=0, column=1, sticky="w", padx=4, pady=4)
        ttk.Button(lf2, text="Save", command=self.save_phrase).grid(row=0, column=2, sticky="w", padx=6, pady=4)

        ttk.Label(lf2, text="Log level").grid(row=1, column=0, sticky="w", padx=4, pady=4)
        self.var_log_level = tk.StringVar(value=self.settings.get("log_level", "INFO"))
        ttk.Combobox(lf2, textvariable=self.var_log_level, values=["DEBUG", "INFO", "WARNING", "ERROR"],
                     state="readonly", width=12).grid(row=1, column=1, sticky="w", padx=4, pady=4)
        ttk.Button(lf2, text="Save", command=self.save_log_level).grid(row=1, column=2, sticky="w", padx=6, pady=4)

        # ---- Data ----
        lf3 = ttk.LabelFrame(outer, text="Data (backup / location)")
        lf3.pack(fill="x", padx=6, pady=6)

        ttk.Label(lf3, text="Data folder").grid(row=0, column=0, sticky="w", padx=4, pady=4)
        path_var = tk.StringVar(value=self.stores.data_dir)
        ttk.Entry(lf3, width=80, state="readonly", textvariable=path_var).grid(row=0, column=1, sticky="w", padx=4, pady=4)

        ttk.Button(lf3, text="Back up now", command=self.make_backup).grid(row=1, column=0, sticky="w", padx=4, pady=6)
        ttk.Button(lf3, text="Reset settings", command=self.reset_settings).grid(row=1, column=1, sticky="w", padx=4, pady=6)

        self._sync_controls()

    def _sync_controls(self):
        mode = self.var_price_mode.get()
        state = "normal" if mode == "float" else "disabled"
        self.sp_dec.configure(state=state)

    def _notify_changed(self):
        if callable(self.on_settings_changed):
            self.on_settings_changed()

    def apply_theme(self):
        theme = self.var_theme.get()
        if theme and theme in self.style.theme_names():
            try:
                self.style.theme_use(theme)
                self.settings.set("theme", theme)
                self._notify_changed()
            except Exception as e:
                messagebox.showerror("Error", str(e), parent=self)

    def save_price_mode(self):
        mode = self.var_price_mode.get()
        if mode not in ("int", "float"):
            mode = "int"
        self.settings.set("price_mode", mode)
        self._sync_controls()
        self._notify_changed()

    def save_decimals(self):
        dec = safe_int(self.var_decimals.get(), 2)
        dec = max(0, min(6, dec))
        self.var_decimals.set(str(dec))
        self.settings.set("price_decimals", dec)
        self._notify_changed()

    def save_phrase(self):
        phrase = (self.var_phrase.get() or "").strip()
        if not phrase:
            messagebox.showwarning("Input", "Confirmation word is empty", parent=self)
            return
        self.settings.set("danger_confirm_phrase", phrase)
        messagebox.showinfo("Saved", f"Confirmation word is now {phrase}", parent=self)

    def save_log_level(self):
        level = self.var_log_level.get() or "INFO"
        self.settings.set("log_level", level)
        logging.getLogger().setLevel(getattr(logging, level, logging.INFO))

    def make_backup(self):
        try:
            dst = make_backup(self.stores.paths() + [self.settings.path])
            messagebox.showinfo("Backup", f"Backup created:\n{dst}", parent=self)
        except Exception as e:
            messagebox.showerror("Error", str(e), parent=self)

    def reset_settings(self):
        if not messagebox.askyesno("Confirm", "Reset all settings?", parent=self):
            return
        self.settings.reset()
        self.var_theme.set(self.settings.get("theme", ""))
        self.var_price_mode.set(self.settings.get("price_mode", "int"))
        self.var_decimals.set(str(self.settings.get("price_decimals", 2)))
        self.var_phrase.set(self.settings.get("danger_confirm_phrase", "DELETE"))
        self.var_log_level.set(self.settings.get("log_level", "INFO"))
        self._sync_controls()
        self._notify_changed()
