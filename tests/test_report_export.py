import csv
import io
from datetime import date, datetime

import pytest

from tasktracker.schemas.task_schema import TaskFilters
from tasktracker.services.report_export import REPORT_HEADERS, export_rows, render_csv, task_to_row
from tasktracker.services.task_filters import apply_task_filters
from tasktracker.utils.formatting import format_locale_date, format_minutes


@pytest.mark.parametrize(
    "minutes,expected",
    [
        (0, "0m"),
        (45, "45m"),
        (60, "1h"),
        (90, "1h 30m"),
        (125, "2h 5m"),
        (600, "10h"),
    ],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_format_locale_date():
    assert format_locale_date(date(2024, 3, 7)) == "3/7/2024"
    assert format_locale_date(datetime(2024, 12, 25, 18, 30)) == "12/25/2024"
    assert format_locale_date(None) == ""


def test_full_row_in_fixed_column_order():
    task = {
        "title": "Ship release",
        "status": "in_review",
        "assignee": {"full_name": "Ada Lovelace"},
        "priority": "high",
        "due_date": date(2024, 4, 1),
        "estimated_time_minutes": 150,
        "total_tracked_minutes": 75,
        "comment_count": 3,
        "created_at": datetime(2024, 3, 15, 8, 0),
    }
    assert task_to_row(task) == [
        "Ship release", "in_review", "Ada Lovelace", "high", "4/1/2024",
        "2h 30m", "1h 15m", "3", "3/15/2024",
    ]


def test_row_placeholders_for_missing_values():
    task = {
        "title": "Untriaged",
        "status": "todo",
        "assignee": None,
        "priority": None,
        "due_date": None,
        "estimated_time_minutes": None,
        "total_tracked_minutes": 0,
        "comment_count": None,
        "created_at": datetime(2024, 1, 2),
    }
    assert task_to_row(task) == [
        "Untriaged", "todo", "Unassigned", "normal", "", "", "0h", "0", "1/2/2024",
    ]


def test_export_keeps_pipeline_order():
    tasks = [
        {"id": str(n), "title": f"T{n}", "status": "todo", "priority": p, "created_at": datetime(2024, 1, n)}
        for n, p in enumerate(["low", "urgent", None, "high", "normal"], start=1)
    ]
    ordered = apply_task_filters(tasks, TaskFilters(sort_by="priority", sort_order="desc"))

    rows = export_rows(ordered)

    assert len(rows) == len(ordered)
    assert [r[0] for r in rows] == [t["title"] for t in ordered]
    assert [r[0] for r in rows] == ["T2", "T4", "T5", "T1", "T3"]


def test_render_csv_has_header_and_one_line_per_task():
    tasks = [
        {"title": "A, with comma", "status": "todo", "created_at": datetime(2024, 1, 1)},
        {"title": "B", "status": "complete", "created_at": datetime(2024, 1, 2)},
    ]
    parsed = list(csv.reader(io.StringIO(render_csv(tasks))))
    assert parsed[0] == REPORT_HEADERS
    assert [row[0] for row in parsed[1:]] == ["A, with comma", "B"]
