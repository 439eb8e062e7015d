from __future__ import annotations

import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.employee_portal.employee_portal.database.bootstrap import apply_schema
from src.employee_portal.employee_portal.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    config = DBConfig.from_mapping(dict(settings.DB_CONFIG))

    schema_path = REPO_ROOT / "database" / "schema.sql"
    count = apply_schema(DatabaseConnection.get_instance(config), schema_path=schema_path)
    print(f"OK: Applied schema.sql -> {config.user}@{config.host}:{config.port}/{config.database} ({count} statements)")


if __name__ == "__main__":
    main()
