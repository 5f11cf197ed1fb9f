from __future__ import annotations

import sys
from pathlib import Path

import pytest

# make the top-level modules importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from shop import ShopService
from store import open_stores


@pytest.fixture()
def stores(tmp_path):
    return open_stores(str(tmp_path / "data"))


@pytest.fixture()
def shop(stores):
    return ShopService(stores)
