from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import today_local
from ..core.constants import ALL_EMPLOYEES, DEFAULT_END_TIME, DEFAULT_START_TIME
from ..core.exceptions import BusyError, EventStoreError, ShiftNotFoundError, ValidationError
from ..container import Container
from ..roster.model import RosterEntry
from ..shifts.model import Shift, ShiftPatch, ShiftTemplate, coerce_date
from .grid import WeekGrid, WeekWindow

logger = logging.getLogger(__name__)


def shift_to_json(shift: Shift) -> Dict[str, Any]:
    return {
        "id": shift.shift_id,
        "title": shift.title,
        "date": shift.shift_date.isoformat(),
        "time": shift.time_range,
        "startTime": shift.start_time,
        "endTime": shift.end_time,
        "description": shift.description,
        "color": shift.color,
        "assignedTo": shift.assigned_to,
        "type": shift.kind.value,
    }


def roster_to_json(entry: RosterEntry) -> Dict[str, Any]:
    return {"id": entry.employee_id, "displayName": entry.display_name, "color": entry.color}


def grid_to_json(grid: WeekGrid) -> Dict[str, Any]:
    return {
        "weekStart": grid.window.start.isoformat(),
        "days": [d.isoformat() for d in grid.window.days],
        "rows": [
            {
                "employeeId": row.employee_id,
                "label": row.label,
                "color": row.color,
                "cells": [[shift_to_json(s) for s in cell] for cell in row.cells],
            }
            for row in grid.rows
        ],
    }


def _template_from_body(body: Dict[str, Any]) -> ShiftTemplate:
    return ShiftTemplate(
        title=str(body.get("title") or ""),
        start_time=str(body.get("startTime") or DEFAULT_START_TIME),
        end_time=str(body.get("endTime") or DEFAULT_END_TIME),
        description=body.get("description") or None,
        color=body.get("color") or None,
        assigned_to=body.get("assignedTo") or None,
    )


def _text(body: Dict[str, Any], key: str) -> Optional[str]:
    value = body.get(key)
    return None if value is None else str(value)


def _patch_from_body(body: Dict[str, Any]) -> ShiftPatch:
    assigned = body.get("assignedTo")
    return ShiftPatch(
        title=_text(body, "title"),
        shift_date=coerce_date(body["date"]) if body.get("date") else None,
        start_time=_text(body, "startTime"),
        end_time=_text(body, "endTime"),
        description=body.get("description"),
        color=body.get("color"),
        assigned_to=assigned or None,
        unassign="assignedTo" in body and not assigned,
    )


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def register(app: Flask, container: Container) -> None:
    def json_errors(view):
        @wraps(view)
        async def wrapper(*args, **kwargs):
            try:
                return await view(*args, **kwargs)
            except ValidationError as e:
                return _error(str(e), 400)
            except ShiftNotFoundError as e:
                return _error(str(e), 404)
            except BusyError as e:
                return _error(str(e), 409)
            except EventStoreError:
                return _error("Event store error", 500)

        return wrapper

    def _service():
        return container.planning_service(current_user_color=session.get("user_color"))

    def _body() -> Dict[str, Any]:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("A JSON object body is required")
        return body

    def _employee_filter() -> Optional[str]:
        value = (request.args.get("employee") or ALL_EMPLOYEES).strip()
        return value or ALL_EMPLOYEES

    @app.route("/api/planning/shifts", methods=["GET"], endpoint="planning_shifts")
    @json_errors
    async def planning_shifts():
        svc = _service()
        shifts = await svc.list_window()
        return jsonify([shift_to_json(s) for s in shifts])

    @app.route("/api/planning/roster", methods=["GET"], endpoint="planning_roster")
    @json_errors
    async def planning_roster():
        svc = _service()
        roster = await svc.load_roster()
        return jsonify([roster_to_json(e) for e in roster])

    @app.route("/api/planning/grid", methods=["GET"], endpoint="planning_grid")
    @json_errors
    async def planning_grid():
        week = request.args.get("week")
        window = WeekWindow(coerce_date(week, "Week")) if week else WeekWindow.current(today_local())

        svc = _service()
        await svc.load_roster()
        await svc.list_window()
        return jsonify(grid_to_json(svc.grid(_employee_filter(), window=window)))

    @app.route("/api/planning/shifts", methods=["POST"], endpoint="planning_create")
    @json_errors
    async def planning_create():
        body = _body()
        template = _template_from_body(body)
        shift_date = coerce_date(body.get("date") or "")

        svc = _service()
        if template.assigned_to and not template.color:
            await svc.load_roster()

        if body.get("endDate"):
            created = await svc.create_recurring(template, shift_date, body.get("endDate"))
            return jsonify([shift_to_json(s) for s in created]), 201

        created_one = await svc.create_single(template.at(shift_date))
        return jsonify(shift_to_json(created_one)), 201

    @app.route("/api/planning/shifts/<int:shift_id>", methods=["PUT"], endpoint="planning_update")
    @json_errors
    async def planning_update(shift_id: int):
        patch = _patch_from_body(_body())
        updated = await _service().update(shift_id, patch)
        return jsonify(shift_to_json(updated))

    @app.route("/api/planning/shifts/<int:shift_id>", methods=["DELETE"], endpoint="planning_delete")
    @json_errors
    async def planning_delete(shift_id: int):
        await _service().delete(shift_id)
        return jsonify({"success": True, "message": "Shift deleted"})

    @app.route("/api/planning/weeks/<week>/duplicate", methods=["POST"], endpoint="planning_duplicate")
    @json_errors
    async def planning_duplicate(week: str):
        target = WeekWindow(coerce_date(week, "Week"))

        svc = _service()
        await svc.list_window()
        result = await svc.duplicate_previous_week(target.start)
        if result.nothing_to_copy:
            logger.info("Nothing to copy into the week of %s", target.start)
        return jsonify(
            {
                "success": True,
                "nothingToCopy": result.nothing_to_copy,
                "copied": len(result.created),
                "shifts": [shift_to_json(s) for s in result.created],
            }
        )
