from __future__ import annotations

from pathlib import Path

from clicker.catalog.registry import Catalog, load_catalog


_CATALOG: Catalog | None = None


def init_catalog(*, catalog_dir: Path | None = None) -> Catalog:
    """Load the catalog once and cache it.

    Safe to call multiple times; subsequent calls return the already loaded instance.
    """

    global _CATALOG
    if _CATALOG is None:
        _CATALOG = load_catalog(catalog_dir=catalog_dir)
    return _CATALOG


def reset_catalog_for_tests() -> None:
    """Reset the cached catalog singleton.

    This is intended for tests so they can initialize the catalog from fixture directories.
    """

    global _CATALOG
    _CATALOG = None


def get_catalog() -> Catalog:
    if _CATALOG is None:
        raise RuntimeError("Catalog not initialized. Call init_catalog() at startup.")
    return _CATALOG
