"""Create the schema or load demo data into the configured MySQL database.

    python scripts/manage_db.py init
    python scripts/manage_db.py seed
"""
from __future__ import annotations

import argparse
import importlib
from pathlib import Path

from config import get_settings_module

from src.chapelle.chapelle.database.bootstrap import (
    DEMO_ACCOUNTS,
    apply_schema,
    apply_seed_sql,
    ensure_demo_accounts,
    list_tables,
)

SQL_DIR = Path(__file__).resolve().parents[1] / "database"


def init(db_config: dict) -> None:
    apply_schema(db_config, schema_path=SQL_DIR / "schema.sql")
    print(f"{db_config.get('database')}: {', '.join(sorted(list_tables(db_config)))}")


def seed(db_config: dict) -> None:
    apply_seed_sql(db_config, seed_path=SQL_DIR / "seed.sql")
    ensure_demo_accounts(db_config)
    for _, email, password, role in DEMO_ACCOUNTS:
        print(f"{role.value:<10} {email} / {password}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Chapelle database setup")
    parser.add_argument("command", choices=["init", "seed"])
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    {"init": init, "seed": seed}[args.command](dict(settings.DB_CONFIG))


if __name__ == "__main__":
    main()
