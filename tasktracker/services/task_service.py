import logging
from typing import List, Optional

from tasktracker.constants import ErrorMessages
from tasktracker.database.store import EntityStore
from tasktracker.errors import NotAuthenticated, NotAuthorized, NotFound, ValidationError
from tasktracker.schemas.task_schema import TaskCreate, TaskFilters, TaskStatus, TaskUpdate
from tasktracker.services import enrichment, rollups
from tasktracker.services.task_filters import apply_task_filters
from tasktracker.utils.dates import utcnow

logger = logging.getLogger(__name__)

# Marker for "leave this field alone" where None is a meaningful value
UNSET = object()

# Fields a duplicate or template inherits from its source task
COPIED_FIELDS = ("team_id", "description", "assignee_id", "estimated_time_minutes", "priority", "due_date", "project_id")


def require_actor(actor_id: Optional[str]) -> str:
    if not actor_id:
        raise NotAuthenticated()
    return actor_id


def get_task_or_404(store: EntityStore, task_id: str) -> dict:
    task = store.find_one("task", {"id": task_id})
    if not task:
        raise NotFound(ErrorMessages.TASK_NOT_FOUND)
    return task


def can_modify_task(actor_id: str, task: dict) -> bool:
    """
    Only the assignee or the creator may change a task.
    """
    return actor_id in (task.get("assignee_id"), task.get("creator_id"))


def authorize_task(store: EntityStore, actor_id: str, task_id: str,
                   message: str = ErrorMessages.NOT_AUTHORIZED_TASK_UPDATE) -> dict:
    """
    Loads a task and verifies the actor may modify it.

    Raises:
        NotAuthenticated: no actor identity
        NotFound: task does not exist
        NotAuthorized: actor is neither assignee nor creator
    """
    require_actor(actor_id)
    task = get_task_or_404(store, task_id)
    if not can_modify_task(actor_id, task):
        raise NotAuthorized(message)
    return task


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def create_task(store: EntityStore, actor_id: str, team_id: str, data: TaskCreate) -> dict:
    """
    Creates a task in ``team_id`` with status todo and the actor as creator.
    """
    require_actor(actor_id)
    if not data.title.strip():
        raise ValidationError(ErrorMessages.EMPTY_TITLE)

    return store.insert("task", {
        "team_id": team_id,
        "title": data.title.strip(),
        "description": data.description or None,
        "assignee_id": data.assignee_id or None,
        "creator_id": actor_id,
        "status": TaskStatus.todo.value,
        "estimated_time_minutes": data.estimated_time_minutes or None,
        "priority": _enum_value(data.priority),
        "due_date": data.due_date,
        "project_id": data.project_id or None,
    })


def update_task_status(store: EntityStore, actor_id: str, task_id: str, status) -> dict:
    authorize_task(store, actor_id, task_id)
    status = TaskStatus(_enum_value(status)).value
    return store.update("task", task_id, {"status": status, "updated_at": utcnow()})


def update_task_description(store: EntityStore, actor_id: str, task_id: str, description: Optional[str]) -> dict:
    authorize_task(store, actor_id, task_id)
    return store.update("task", task_id, {"description": description or None, "updated_at": utcnow()})


def update_task(store: EntityStore, actor_id: str, task_id: str, data: TaskUpdate) -> dict:
    """
    Applies the fields explicitly set on ``data``; falsy values clear the
    field, except priority which is stored as given.
    """
    authorize_task(store, actor_id, task_id)

    changes = {"updated_at": utcnow()}
    for field in data.model_fields_set:
        value = _enum_value(getattr(data, field))
        if field == "title":
            if not value or not value.strip():
                raise ValidationError(ErrorMessages.EMPTY_TITLE)
            value = value.strip()
        elif field != "priority":
            value = value or None
        changes[field] = value

    return store.update("task", task_id, changes)


def delete_task(store: EntityStore, actor_id: str, task_id: str) -> None:
    """
    Deletes a task together with its time entries and comments.
    """
    authorize_task(store, actor_id, task_id, ErrorMessages.NOT_AUTHORIZED_TASK_DELETE)
    store.delete("task", task_id)
    logger.info("Task %s deleted by %s", task_id, actor_id)


def duplicate_task(store: EntityStore, actor_id: str, task_id: str) -> dict:
    require_actor(actor_id)
    original = get_task_or_404(store, task_id)

    fields = {key: original.get(key) for key in COPIED_FIELDS}
    fields.update({
        "title": f"Copy of {original['title']}",
        "creator_id": actor_id,
        "status": TaskStatus.todo.value,
    })
    return store.insert("task", fields)


def convert_task_to_template(store: EntityStore, actor_id: str, task_id: str) -> dict:
    """
    Copies a task as a reusable template: no assignee, no due date.
    """
    require_actor(actor_id)
    original = get_task_or_404(store, task_id)

    fields = {key: original.get(key) for key in COPIED_FIELDS}
    fields.update({
        "title": f"[Template] {original['title']}",
        "creator_id": actor_id,
        "status": TaskStatus.todo.value,
        "assignee_id": None,
        "due_date": None,
    })
    return store.insert("task", fields)


def bulk_update_tasks(store: EntityStore, actor_id: str, task_ids: List[str],
                      status=None, assignee_id=UNSET) -> List[dict]:
    """
    Applies one status and/or assignee change to every named task.

    All or nothing: each task must exist and be modifiable by the actor,
    otherwise the batch is rejected before anything is written.

    Raises:
        ValidationError: no tasks named, or nothing to change
        NotFound: a named task does not exist
        NotAuthorized: the actor may not modify one of the tasks
        StoreFailure: the write failed; no task was changed
    """
    require_actor(actor_id)
    ids = list(dict.fromkeys(task_ids))
    if not ids:
        raise ValidationError(ErrorMessages.NO_TASKS_SELECTED)

    changes = {}
    if status:
        changes["status"] = TaskStatus(_enum_value(status)).value
    if assignee_id is not UNSET:
        changes["assignee_id"] = assignee_id or None
    if not changes:
        raise ValidationError(ErrorMessages.NO_BULK_CHANGES)
    changes["updated_at"] = utcnow()

    found = {t["id"]: t for t in store.find("task", {"id__in": ids})}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFound(f"{ErrorMessages.TASK_NOT_FOUND}: {', '.join(missing)}")
    denied = [i for i in ids if not can_modify_task(actor_id, found[i])]
    if denied:
        raise NotAuthorized(f"{ErrorMessages.NOT_AUTHORIZED_TASK_UPDATE}: {', '.join(denied)}")

    updated = store.update_many("task", ids, changes)
    logger.info("Bulk updated %d tasks (%s) for %s", len(updated), ", ".join(sorted(changes)), actor_id)
    return updated


def get_task_details(store: EntityStore, actor_id: str, task_id: str) -> dict:
    """
    Task with assignee/creator profiles, time entries (newest first) and
    comments (oldest first), each child carrying its author's profile.
    """
    require_actor(actor_id)
    task = get_task_or_404(store, task_id)
    details = enrichment.enrich_tasks(store, [task])[0]

    entries = store.find("time_entry", {"task_id": task_id}, order_by=["-created_at"])
    comments = store.find("comment", {"task_id": task_id}, order_by=["created_at"])
    details["total_tracked_minutes"] = rollups.task_tracked_minutes(entries)
    details["comment_count"] = rollups.task_comment_count(comments)
    details["time_entries"] = enrichment.attach_authors(store, entries)
    details["comments"] = enrichment.attach_authors(store, comments)
    return details


def get_all_tasks(store: EntityStore, actor_id: str, team_id: str,
                  filters: Optional[TaskFilters] = None) -> List[dict]:
    """
    Team tasks, enriched, then narrowed and ordered by ``filters``.
    """
    require_actor(actor_id)
    tasks = store.find("task", {"team_id": team_id})
    return apply_task_filters(enrichment.enrich_tasks(store, tasks), filters)


def get_team_members(store: EntityStore, actor_id: str, team_id: str) -> List[dict]:
    """
    Members a task can be assigned to, with their profiles.

    Falls back to every named profile when the team has no membership rows.
    """
    require_actor(actor_id)
    members = store.find("team_member", {"team_id": team_id}, order_by=["created_at"])
    if members:
        profiles = enrichment.fetch_profiles(store, [m["user_id"] for m in members]) or {}
        return [
            {"user_id": m["user_id"], "role": m.get("role"), "profile": profiles.get(m["user_id"])}
            for m in members
        ]

    profiles = store.find("profile", {"full_name__isnull": False})
    return [
        {"user_id": p["user_id"], "role": None, "profile": enrichment.profile_summary(p)}
        for p in profiles
    ]

