"""Write the built-in catalog to CSV files under a directory.

Contract
- Inputs: the built-in definition tables (`clicker.catalog.defaults`).
- Outputs: `buildings.csv`, `upgrades.csv`, `achievements.csv`, `coin_shop.csv`.
- The output directory can be pointed at with `CLICKER_CATALOG_DIR` and edited
  for balance passes without touching code.

Usage:
    uv run python scripts/export_catalog.py [out_dir]

This script is deterministic.
"""

from __future__ import annotations

import sys
from dataclasses import asdict
from pathlib import Path

import pandas as pd

from clicker.catalog.defaults import default_catalog
from clicker.catalog.registry import Catalog, DefinitionTable


def _frame(table: DefinitionTable) -> pd.DataFrame:
    rows = [asdict(d) for d in table]
    df = pd.DataFrame(rows)
    # Enum members -> their string values.
    for col in df.columns:
        if df[col].dtype == object:
            df[col] = df[col].map(lambda v: v.value if hasattr(v, "value") else v)
    return df


def export_catalog(catalog: Catalog, out_dir: Path) -> list[Path]:
    out_dir.mkdir(parents=True, exist_ok=True)
    tables = {
        "buildings.csv": catalog.buildings,
        "upgrades.csv": catalog.upgrades,
        "achievements.csv": catalog.achievements,
        "coin_shop.csv": catalog.coin_shop,
    }
    written: list[Path] = []
    for name, table in tables.items():
        path = out_dir / name
        _frame(table).to_csv(path, index=False)
        written.append(path)
    return written


def main(argv: list[str]) -> int:
    repo_root = Path(__file__).resolve().parents[1]
    out_dir = Path(argv[1]) if len(argv) > 1 else repo_root / "catalog"
    for path in export_catalog(default_catalog(), out_dir):
        print(f"wrote {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
