# app.py
import logging
import os
import sys
from pathlib import Path
import tkinter as tk
from tkinter import ttk, messagebox

from logging_config import setup_logging
from settings import SettingsStore
from shop import ShopService
from store import open_stores
from ui.booking_tabs import BookingTabs
from ui.catalog_tabs import CatalogTabs
from ui.customer_tabs import CustomerTabs
from ui.settings_tabs import SettingsTabs

APP_TITLE = "Car Service Records"

logger = logging.getLogger(__name__)


def get_data_dir(dirname: str = "data") -> str:
    """
    Where the record files live.
    - CAR_SERVICE_DATA_DIR, when set
    - frozen (PyInstaller): next to the exe
    - otherwise: next to app.py
    """
    override = os.environ.get("CAR_SERVICE_DATA_DIR")
    if override:
        return str(Path(override).resolve())
    if getattr(sys, "frozen", False):
        base_dir = Path(sys.executable).resolve().parent
    else:
        base_dir = Path(__file__).resolve().parent
    return str(base_dir / dirname)


def apply_theme(style: ttk.Style, theme_name: str) -> None:
    names = style.theme_names()
    if theme_name and theme_name in names:
        style.theme_use(theme_name)


def main():
    data_dir = get_data_dir()
    os.makedirs(data_dir, exist_ok=True)
    settings = SettingsStore.in_dir(data_dir)
    setup_logging(settings.get("log_level", "INFO"), logfile=os.path.join(data_dir, "car_service.log"))

    root = tk.Tk()
    root.title(APP_TITLE)
    root.geometry("1200x800")

    try:
        stores = open_stores(data_dir)
        stores.ensure_defaults()
    except Exception as e:
        logger.exception("could not open data folder %s", data_dir)
        messagebox.showerror("Startup error", f"Could not open the data files.\n\n{e}")
        return
    shop = ShopService(stores)
    logger.info("data folder: %s", data_dir)

    style = ttk.Style(root)
    apply_theme(style, settings.get("theme", ""))

    notebook = ttk.Notebook(root)
    notebook.pack(fill="both", expand=True)

    customers = CustomerTabs(notebook, shop, settings)
    catalog = CatalogTabs(notebook, shop, settings)
    bookings = BookingTabs(notebook, shop, settings)

    def refresh_all():
        customers.refresh_all()
        catalog.refresh_all()
        bookings.refresh_all()

    settings_tab = SettingsTabs(
        notebook,
        settings,
        stores,
        style=style,
        on_settings_changed=refresh_all,
    )

    notebook.add(customers, text="Customers")
    notebook.add(catalog, text="Catalog")
    notebook.add(bookings, text="Bookings")
    notebook.add(settings_tab, text="Settings")
    notebook.bind("<<NotebookTabChanged>>", lambda e: refresh_all())

    root.mainloop()


if __name__ == "__main__":
    main()
