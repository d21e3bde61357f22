"""
Filter/sort pipeline over an enriched task collection.

One pass: every supplied criterion must hold (AND), then the survivors are
ordered by a single key. Equal keys get no secondary tiebreak.
"""
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from tasktracker.constants import PRIORITY_RANK, UNSET_PRIORITY_RANK
from tasktracker.schemas.task_schema import SortField, SortOrder, TaskFilters

# Tasks without a due date sort as if due at the epoch
EPOCH = date(1970, 1, 1)


def _value(field) -> Optional[str]:
    return field.value if hasattr(field, "value") else field


def _as_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def priority_rank(priority: Optional[str]) -> int:
    return PRIORITY_RANK.get(priority, UNSET_PRIORITY_RANK)


def assignee_name(task: dict) -> str:
    assignee = task.get("assignee") or {}
    return assignee.get("full_name") or ""


def matches(task: dict, criteria: TaskFilters) -> bool:
    if criteria.search and criteria.search.strip():
        needle = criteria.search.strip().lower()
        title = (task.get("title") or "").lower()
        description = (task.get("description") or "").lower()
        if needle not in title and needle not in description:
            return False

    if criteria.status and task.get("status") != _value(criteria.status):
        return False

    if criteria.assignee_id and task.get("assignee_id") != criteria.assignee_id:
        return False

    if criteria.priority and task.get("priority") != _value(criteria.priority):
        return False

    due = _as_date(task.get("due_date"))
    if criteria.due_date_from and (due is None or due < criteria.due_date_from):
        return False
    if criteria.due_date_to and (due is None or due > criteria.due_date_to):
        return False

    return True


_SORT_KEYS: Dict[SortField, Callable[[dict], Any]] = {
    SortField.created_at: lambda t: t.get("created_at") or datetime.min,
    SortField.priority: lambda t: priority_rank(t.get("priority")),
    SortField.due_date: lambda t: _as_date(t.get("due_date")) or EPOCH,
    SortField.assignee_name: assignee_name,
    SortField.assignee: assignee_name,
}


def apply_task_filters(tasks: Iterable[dict], criteria: Optional[TaskFilters] = None) -> List[dict]:
    """
    Returns the tasks matching ``criteria`` in the requested order.
    The input collection is left untouched.
    """
    criteria = criteria or TaskFilters()
    selected = [t for t in tasks if matches(t, criteria)]
    selected.sort(
        key=_SORT_KEYS[SortField(criteria.sort_by)],
        reverse=SortOrder(criteria.sort_order) == SortOrder.desc,
    )
    return selected
