import asyncio

from src.planning_system.planning_system.roster.model import RosterEntry


def test_display_name_joins_first_and_last():
    assert RosterEntry(employee_id="u1", first_name="Alice", last_name="Martin").display_name == "Alice Martin"


def test_display_name_falls_back_to_available_parts():
    assert RosterEntry(employee_id="u1", first_name="Alice").display_name == "Alice"
    assert RosterEntry(employee_id="u1", last_name=" Martin ").display_name == "Martin"
    assert RosterEntry(employee_id="u1").display_name == "u1"


def test_roster_provider_orders_by_name(roster):
    entries = asyncio.run(roster.list())

    assert [e.employee_id for e in entries] == ["E1", "E2"]
