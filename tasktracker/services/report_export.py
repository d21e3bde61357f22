"""
Flat, row-oriented export of a task collection.

Rows follow the input order exactly; filter and sort before exporting.
"""
import csv
import io
from typing import Iterable, List

from tasktracker.constants import DEFAULT_PRIORITY_LABEL, UNASSIGNED_LABEL
from tasktracker.utils.formatting import format_locale_date, format_minutes

REPORT_HEADERS = [
    "Title",
    "Status",
    "Assignee",
    "Priority",
    "Due Date",
    "Estimated Time",
    "Tracked Time",
    "Comments",
    "Created At",
]


def task_to_row(task: dict) -> List[str]:
    assignee = task.get("assignee") or {}
    estimated = task.get("estimated_time_minutes")
    tracked = task.get("total_tracked_minutes")
    comments = task.get("comment_count")
    return [
        task.get("title") or "",
        task.get("status") or "",
        assignee.get("full_name") or UNASSIGNED_LABEL,
        task.get("priority") or DEFAULT_PRIORITY_LABEL,
        format_locale_date(task.get("due_date")),
        format_minutes(estimated) if estimated else "",
        format_minutes(tracked) if tracked else "0h",
        str(comments) if comments else "0",
        format_locale_date(task.get("created_at")),
    ]


def export_rows(tasks: Iterable[dict]) -> List[List[str]]:
    return [task_to_row(task) for task in tasks]


def render_csv(tasks: Iterable[dict]) -> str:
    """
    Exported rows as CSV text with a header line.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(REPORT_HEADERS)
    writer.writerows(export_rows(tasks))
    return buffer.getvalue()
