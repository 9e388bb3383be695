from __future__ import annotations

import importlib
from pathlib import Path

from dotenv import load_dotenv

from meal_registration.config import get_settings_module
from meal_registration.database.bootstrap import apply_schema, ensure_default_settings, list_tables


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(db_config, schema_path=schema_path)
    ensure_default_settings(db_config)
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql + default settings -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
