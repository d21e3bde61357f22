import logging
from datetime import date
from typing import List

from tasktracker.constants import ErrorMessages
from tasktracker.database.store import EntityStore
from tasktracker.errors import NotAuthorized, NotFound, ValidationError
from tasktracker.services import enrichment, rollups
from tasktracker.services.task_service import get_task_or_404, require_actor

logger = logging.getLogger(__name__)


def add_time_entry(store: EntityStore, actor_id: str, task_id: str, minutes: int, entry_date: date) -> dict:
    """
    Logs ``minutes`` of work by the actor against a task.

    Raises:
        ValidationError: minutes is not a positive whole number
        NotFound: task does not exist
    """
    require_actor(actor_id)
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise ValidationError(ErrorMessages.INVALID_MINUTES)
    if entry_date is None:
        raise ValidationError("Entry date is required")

    get_task_or_404(store, task_id)
    return store.insert("time_entry", {
        "task_id": task_id,
        "user_id": actor_id,
        "minutes": minutes,
        "entry_date": entry_date,
    })


def list_time_entries(store: EntityStore, actor_id: str, task_id: str) -> List[dict]:
    require_actor(actor_id)
    entries = store.find("time_entry", {"task_id": task_id}, order_by=["-created_at"])
    return enrichment.attach_authors(store, entries)


def delete_time_entry(store: EntityStore, actor_id: str, entry_id: str) -> dict:
    """
    Deletes one of the actor's own time entries and returns the owning
    task's recomputed total.
    """
    require_actor(actor_id)
    entry = store.find_one("time_entry", {"id": entry_id})
    if not entry:
        raise NotFound(ErrorMessages.TIME_ENTRY_NOT_FOUND)
    if entry.get("user_id") != actor_id:
        raise NotAuthorized(ErrorMessages.NOT_AUTHORIZED_TIME_ENTRY)

    store.delete("time_entry", entry_id)
    remaining = store.find("time_entry", {"task_id": entry["task_id"]})
    logger.info("Time entry %s removed from task %s", entry_id, entry["task_id"])
    return {
        "task_id": entry["task_id"],
        "total_tracked_minutes": rollups.task_tracked_minutes(remaining),
    }

