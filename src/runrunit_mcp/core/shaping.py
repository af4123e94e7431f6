"""Reduce raw Runrun.it task records to a stable, display-safe shape.

The remote task record has no fixed contract, so every field is read
defensively: primary key first, then alternates, then a placeholder.
"""

import math
from typing import Any, Dict, Mapping, Optional

TASK_LINK_TEMPLATE = "https://runrun.it/tasks/{id}"

NO_TITLE = "No title"
NO_DESCRIPTION = "No description"
UNKNOWN_STATUS = "Unknown"
UNASSIGNED = "Unassigned"
NO_PROJECT = "No project"
NO_CLIENT = "No client"
NO_TEAM = "No team"
NOT_SET = "Not set"

_OVERDUE_LABELS = {"on_schedule": "On schedule"}


def _first_present(raw: Mapping[str, Any], *keys: str, default: Any) -> Any:
    """Return the first value that is neither missing, None nor empty string."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return default


def _seconds(value: Any) -> float:
    """Coerce a raw seconds value; missing or non-numeric becomes 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        seconds = float(value if isinstance(value, (int, float)) else str(value).strip())
    except (ValueError, OverflowError):
        return 0.0
    return seconds if math.isfinite(seconds) else 0.0


def format_hours(seconds: Any) -> str:
    """Format a seconds value as hours with two decimals, e.g. "1.50h"."""
    return f"{_seconds(seconds) / 3600:.2f}h"


def overdue_label(value: Optional[Any]) -> Optional[Any]:
    """Replace known overdue tokens with labels; pass anything else through."""
    if isinstance(value, str):
        return _OVERDUE_LABELS.get(value, value)
    return value


def task_link(task_id: Any) -> str:
    return TASK_LINK_TEMPLATE.format(id=task_id)


def simplify_task(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Project a raw task onto the simplified task shape.

    Pure and total: any mapping, including an empty one, yields a dict with
    every key present.

    Args:
        raw: Task record as returned by the API

    Returns:
        Simplified task dict
    """
    task_id = raw.get("id")
    return {
        "id": task_id,
        "title": _first_present(raw, "title", default=NO_TITLE),
        "description": _first_present(raw, "description", default=NO_DESCRIPTION),
        "status": _first_present(
            raw,
            "task_status_name",
            "board_stage_name",
            "state",
            default=UNKNOWN_STATUS,
        ),
        "responsible": _first_present(
            raw, "responsible_name", "responsible_id", default=UNASSIGNED
        ),
        "project": _first_present(raw, "project_name", default=NO_PROJECT),
        "client": _first_present(raw, "client_name", default=NO_CLIENT),
        "team": _first_present(raw, "team_name", default=NO_TEAM),
        "overdue": overdue_label(raw.get("overdue")),
        "created_at": _first_present(raw, "created_at", default=NOT_SET),
        "desired_date": _first_present(
            raw, "desired_date", "desired_date_with_time", default=NOT_SET
        ),
        "close_date": _first_present(raw, "close_date", default=NOT_SET),
        "time_worked": format_hours(raw.get("time_worked")),
        "time_pending": format_hours(raw.get("time_pending")),
        "time_total": format_hours(raw.get("time_total")),
        "priority": _first_present(raw, "priority", default=NOT_SET),
        "is_closed": bool(raw.get("is_closed", False)),
        "link": task_link(task_id),
    }
