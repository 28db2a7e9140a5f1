from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.planning_system.planning_system.database.bootstrap import apply_seed_sql


def main() -> None:
    """Load demo employees and one planning shift (see database/seed.sql)."""
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    print(f"OK: demo roster seeded into {db_config.get('database')}")


if __name__ == "__main__":
    main()
