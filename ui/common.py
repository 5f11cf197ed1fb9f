# ui/common.py
from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox, simpledialog
from typing import Iterable, List, Optional, Sequence, Tuple


def confirm_dangerous_delete(parent, phrase: str = "DELETE", title: str = "Confirm") -> bool:
    ok = messagebox.askyesno(
        title,
        "This cannot be undone.\n\nDo you really want to continue?",
        parent=parent
    )
    if not ok:
        return False
    s = simpledialog.askstring(title, f"Type {phrase} to continue.", parent=parent)
    return (s == phrase)


def id_label(rid: int, text: str) -> str:
    return f"{rid} | {text}"


def id_from_label(s: str) -> Optional[int]:
    if " | " not in s:
        return None
    head = s.split(" | ", 1)[0].strip()
    try:
        return int(head)
    except ValueError:
        return None


class IdCombobox(ttk.Combobox):
    """Readonly combobox over "id | text" labels."""

    def __init__(self, parent, width: int = 40):
        self.var = tk.StringVar(value="")
        super().__init__(parent, textvariable=self.var, state="readonly", width=width)

    def set_choices(self, choices: Iterable[Tuple[int, str]]) -> None:
        labels = [id_label(rid, text) for rid, text in choices]
        self["values"] = labels
        if labels:
            if self.var.get() not in labels:
                self.var.set(labels[0])
        else:
            self.var.set("")

    def selected_id(self) -> Optional[int]:
        return id_from_label(self.var.get())


def make_table(parent, columns: Sequence[Tuple[str, int]], height: int = 16) -> ttk.Treeview:
    cols = [c for c, _ in columns]
    tree = ttk.Treeview(parent, columns=cols, show="headings", height=height)
    for c, w in columns:
        tree.heading(c, text=c)
        tree.column(c, width=w, anchor="w")
    tree.pack(fill="both", expand=True, padx=4, pady=4)
    return tree


def selected_row(tree: ttk.Treeview) -> Optional[List[str]]:
    sel = tree.selection()
    if not sel:
        return None
    return [str(v) for v in tree.item(sel[0], "values")]


def selected_id(tree: ttk.Treeview) -> Optional[int]:
    row = selected_row(tree)
    if not row:
        return None
    try:
        return int(row[0])
    except ValueError:
        return None
