from __future__ import annotations

from src.planning_system.planning_system.container import build_container


def _db(database: str) -> dict:
    return {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": database}


def test_each_container_gets_its_own_connection_config():
    first = build_container(db_config=_db("planning_dev"))
    second = build_container(db_config=_db("planning_test"), fallback_color="#000000")

    assert first.conn.database == "planning_dev"
    assert second.conn.database == "planning_test"
    assert second.shift_defaults.fallback_color == "#000000"
