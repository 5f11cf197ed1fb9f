# settings.py
from __future__ import annotations

import logging
import os
from typing import Any, Dict

from utils import atomic_write_json, load_json_or_default, format_money

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"


def _default_settings() -> Dict[str, Any]:
    return {
        "theme": "",                 # ttk theme name
        "price_mode": "int",         # "int" | "float"
        "price_decimals": 2,         # used when price_mode == "float"
        "danger_confirm_phrase": "DELETE",
        "log_level": "INFO",
    }


class SettingsStore:
    def __init__(self, path: str):
        self.path = path
        self.data: Dict[str, Any] = load_json_or_default(path, _default_settings())
        if not isinstance(self.data, dict):
            logger.warning("%s is not a JSON object, using defaults", path)
            self.data = _default_settings()
        self._normalize()

    @classmethod
    def in_dir(cls, data_dir: str) -> "SettingsStore":
        return cls(os.path.join(data_dir, SETTINGS_FILE))

    def _normalize(self) -> None:
        for k, v in _default_settings().items():
            self.data.setdefault(k, v)

    def _save(self) -> None:
        atomic_write_json(self.path, self.data)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value
        self._save()

    def reset(self) -> None:
        self.data = _default_settings()
        self._save()

    def money_str(self, value: float) -> str:
        mode = self.get("price_mode", "int")
        decimals = int(self.get("price_decimals", 2) or 2)
        return format_money(value, mode=mode, decimals=decimals)
