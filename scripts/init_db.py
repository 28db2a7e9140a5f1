from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.planning_system.planning_system.database.bootstrap import apply_schema, list_tables

EXPECTED_TABLES = {"employees", "events"}


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")

    missing = EXPECTED_TABLES - set(list_tables(db_config))
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    if missing:
        print(f"FAILED: {target} is missing table(s): {', '.join(sorted(missing))}")
        return 1

    print(f"OK: planning schema ready -> {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
