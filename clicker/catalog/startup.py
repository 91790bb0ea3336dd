from __future__ import annotations

import os
from pathlib import Path

from clicker.catalog.singleton import init_catalog


def init_catalog_for_app() -> None:
    raw = os.environ.get("CLICKER_CATALOG_DIR", "").strip()
    init_catalog(catalog_dir=Path(raw) if raw else None)
