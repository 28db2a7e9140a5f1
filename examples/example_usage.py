"""Example: drive the planning service directly (no Flask).

Controllers are only a thin layer; the scheduling logic lives in PlanningService.
"""

import asyncio
import importlib

from config import get_settings_module

from src.planning_system.planning_system.container import build_container
from src.planning_system.planning_system.shifts.model import ShiftTemplate


async def run() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    svc = container.planning_service()

    await svc.load_roster()
    await svc.list_window()

    template = ShiftTemplate(title="Morning", start_time="09:00", end_time="13:00")
    created = await svc.create_recurring(template, svc.window.start, svc.window.next().next().start)
    print(f"created {len(created)} recurring shift(s)")

    for row in svc.grid().rows:
        print(row.label, [len(cell) for cell in row.cells])


if __name__ == "__main__":
    asyncio.run(run())
