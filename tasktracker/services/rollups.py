"""
Rollup calculations.

Pure functions that derive aggregate statistics from raw child records
(plain dicts as returned by the entity store). Nothing here touches the
store, mutates its inputs or reads the clock; callers pass ``now`` where a
time window matters.
"""
import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from tasktracker.constants import ErrorMessages
from tasktracker.errors import ValidationError
from tasktracker.utils.formatting import format_minutes

COMPLETE = "complete"
DEFAULT_ACTIVE_WINDOW_DAYS = 30


def group_by(records: Iterable[dict], key: str) -> Dict[Any, List[dict]]:
    """
    Buckets records by the value of one field, keeping input order per bucket.
    """
    groups = defaultdict(list)
    for record in records:
        groups[record.get(key)].append(record)
    return groups


def task_tracked_minutes(entries: Iterable[dict]) -> int:
    return sum(entry["minutes"] for entry in entries)


def task_comment_count(comments: Iterable[dict]) -> int:
    return sum(1 for _ in comments)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def project_progress(tasks: Iterable[dict]) -> Dict[str, int]:
    """
    Task counts and completion percentage for a project.

    The percentage is 100 * completed / total rounded half-up, and 0 for a
    project with no tasks.
    """
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for t in tasks if t.get("status") == COMPLETE)
    percentage = _round_half_up(100 * completed / total) if total > 0 else 0
    return {
        "task_count": total,
        "completed_task_count": completed,
        "progress_percentage": percentage,
    }


def project_cost(tracked_minutes: int, hourly_rate: float) -> float:
    return (tracked_minutes / 60) * hourly_rate


def _latest(*values: Optional[datetime]) -> Optional[datetime]:
    present = [v for v in values if v is not None]
    return max(present) if present else None


def member_stats(assigned_tasks: Iterable[dict], member_entries: Iterable[dict]) -> Dict[str, Any]:
    """
    Statistics for one member from the tasks assigned to them and the time
    entries they logged.

    ``last_activity`` is the most recent task update or time entry, or None
    when the member has neither.
    """
    assigned_tasks = list(assigned_tasks)
    member_entries = list(member_entries)
    return {
        "tasks_assigned": len(assigned_tasks),
        "tasks_completed": sum(1 for t in assigned_tasks if t.get("status") == COMPLETE),
        "total_time_tracked_minutes": task_tracked_minutes(member_entries),
        "last_activity": _latest(
            *(t.get("updated_at") for t in assigned_tasks),
            *(e.get("created_at") for e in member_entries),
        ),
    }


def team_active_member_count(
    time_entries: Iterable[dict],
    completed_tasks: Iterable[dict],
    now: datetime,
    window_days: int = DEFAULT_ACTIVE_WINDOW_DAYS,
) -> int:
    """
    Number of distinct members who logged time or completed a task within
    ``window_days`` of ``now``. A member doing both counts once.
    """
    cutoff = now - timedelta(days=window_days)
    active = {
        e.get("user_id")
        for e in time_entries
        if e.get("user_id") and e.get("created_at") is not None and e["created_at"] >= cutoff
    }
    active.update(
        t.get("assignee_id")
        for t in completed_tasks
        if t.get("status") == COMPLETE
        and t.get("assignee_id")
        and t.get("updated_at") is not None
        and t["updated_at"] >= cutoff
    )
    return len(active)


def project_timesheet(
    tasks: Iterable[dict],
    time_entries: Iterable[dict],
    start_date: date,
    end_date: date,
) -> Dict[str, Any]:
    """
    Per-task, per-day minute totals for entries dated within
    [start_date, end_date].

    Every task is listed, including those with no time in range, so a
    caller can render the full roster.
    """
    if start_date > end_date:
        raise ValidationError(ErrorMessages.INVALID_DATE_RANGE)

    rows = {}
    for task in tasks:
        rows[task["id"]] = {
            "task_id": task["id"],
            "task_title": task.get("title"),
            "task_status": task.get("status"),
            "assignee_id": task.get("assignee_id"),
            "daily_time": {},
            "total_minutes": 0,
        }

    for entry in time_entries:
        row = rows.get(entry.get("task_id"))
        day = entry.get("entry_date")
        if row is None or day is None or not (start_date <= day <= end_date):
            continue
        key = day.isoformat()
        row["daily_time"][key] = row["daily_time"].get(key, 0) + entry["minutes"]
        row["total_minutes"] += entry["minutes"]

    task_rows = list(rows.values())
    return {
        "tasks": task_rows,
        "total_minutes": sum(r["total_minutes"] for r in task_rows),
    }


def member_activity_feed(
    created_tasks: Iterable[dict],
    completed_tasks: Iterable[dict],
    comments: Iterable[dict],
    time_entries: Iterable[dict],
    limit: int = 20,
) -> List[Dict[str, Any]]:
    """
    Merges a member's task creations, completions, comments and logged time
    into one feed, newest first.
    """
    activities = []
    for task in created_tasks:
        activities.append({
            "id": f"task_created_{task['id']}",
            "type": "task_created",
            "description": f'Created task "{task.get("title")}"',
            "created_at": task.get("created_at"),
            "task_id": task["id"],
        })
    for task in completed_tasks:
        activities.append({
            "id": f"task_completed_{task['id']}",
            "type": "task_completed",
            "description": f'Completed task "{task.get("title")}"',
            "created_at": task.get("updated_at"),
            "task_id": task["id"],
        })
    for comment in comments:
        activities.append({
            "id": f"comment_{comment['id']}",
            "type": "comment_added",
            "description": "Added a comment",
            "created_at": comment.get("created_at"),
            "task_id": comment.get("task_id"),
        })
    for entry in time_entries:
        activities.append({
            "id": f"time_{entry['id']}",
            "type": "time_tracked",
            "description": f"Tracked {format_minutes(entry['minutes'])}",
            "created_at": entry.get("created_at"),
            "task_id": entry.get("task_id"),
        })

    activities = [a for a in activities if a["created_at"] is not None]
    activities.sort(key=lambda a: a["created_at"], reverse=True)
    return activities[:limit]
