import logging
from datetime import date
from typing import List, Optional

from tasktracker.config.settings import settings
from tasktracker.constants import ErrorMessages
from tasktracker.database.store import EntityStore
from tasktracker.errors import NotFound, ValidationError
from tasktracker.schemas.project_schema import ProjectCreate, ProjectUpdate
from tasktracker.services import enrichment, rollups
from tasktracker.services.task_service import require_actor
from tasktracker.utils.dates import utcnow

logger = logging.getLogger(__name__)


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def get_project_or_404(store: EntityStore, team_id: str, project_id: str) -> dict:
    project = store.find_one("project", {"id": project_id, "team_id": team_id})
    if not project:
        raise NotFound(ErrorMessages.PROJECT_NOT_FOUND)
    return project


def _check_dates(start_date, end_date):
    if start_date and end_date and start_date > end_date:
        raise ValidationError(ErrorMessages.INVALID_DATE_RANGE)


def with_stats(projects: List[dict], tasks: List[dict], entries: List[dict], hourly_rate: float) -> List[dict]:
    """
    Combines projects with their task and time rollups.

    ``tasks`` are all tasks of the given projects and ``entries`` all time
    entries of those tasks; both are grouped here rather than queried per
    project.
    """
    tasks_by_project = rollups.group_by(tasks, "project_id")
    entries_by_task = rollups.group_by(entries, "task_id")

    result = []
    for project in projects:
        project_tasks = tasks_by_project.get(project["id"], [])
        tracked = sum(
            rollups.task_tracked_minutes(entries_by_task.get(t["id"], [])) for t in project_tasks
        )
        result.append({
            **project,
            **rollups.project_progress(project_tasks),
            "total_tracked_minutes": tracked,
            "total_cost": rollups.project_cost(tracked, hourly_rate),
        })
    return result


def _load_stats(store: EntityStore, projects: List[dict], hourly_rate: float) -> List[dict]:
    project_ids = [p["id"] for p in projects]
    tasks = store.find("task", {"project_id__in": project_ids}) if project_ids else []
    task_ids = [t["id"] for t in tasks]
    entries = store.find("time_entry", {"task_id__in": task_ids}) if task_ids else []
    return with_stats(projects, tasks, entries, hourly_rate)


def create_project(store: EntityStore, actor_id: str, team_id: str, data: ProjectCreate) -> dict:
    require_actor(actor_id)
    _check_dates(data.start_date, data.end_date)
    project = store.insert("project", {
        "team_id": team_id,
        "name": data.name.strip(),
        "description": data.description or None,
        "start_date": data.start_date,
        "end_date": data.end_date,
        "budget": data.budget,
        "status": _enum_value(data.status),
    })
    logger.info("Project %s created in team %s", project["id"], team_id)
    return project


def update_project(store: EntityStore, actor_id: str, team_id: str, project_id: str,
                   data: ProjectUpdate) -> dict:
    require_actor(actor_id)
    current = get_project_or_404(store, team_id, project_id)

    changes = {"updated_at": utcnow()}
    for field in data.model_fields_set:
        value = _enum_value(getattr(data, field))
        if field in ("name", "status") and not value:
            continue
        if field in ("description", "start_date", "end_date"):
            value = value or None
        changes[field] = value

    _check_dates(changes.get("start_date", current.get("start_date")),
                 changes.get("end_date", current.get("end_date")))
    return store.update("project", project_id, changes)


def delete_project(store: EntityStore, actor_id: str, team_id: str, project_id: str) -> None:
    """
    Deletes a project. Its tasks survive with no project.
    """
    require_actor(actor_id)
    get_project_or_404(store, team_id, project_id)
    store.delete("project", project_id)
    logger.info("Project %s deleted by %s", project_id, actor_id)


def get_all_projects(store: EntityStore, actor_id: str, team_id: str,
                     hourly_rate: Optional[float] = None) -> List[dict]:
    require_actor(actor_id)
    rate = settings.HOURLY_RATE if hourly_rate is None else hourly_rate
    projects = store.find("project", {"team_id": team_id}, order_by=["-created_at"])
    return _load_stats(store, projects, rate)


def get_project(store: EntityStore, actor_id: str, team_id: str, project_id: str,
                hourly_rate: Optional[float] = None) -> dict:
    require_actor(actor_id)
    rate = settings.HOURLY_RATE if hourly_rate is None else hourly_rate
    project = get_project_or_404(store, team_id, project_id)
    return _load_stats(store, [project], rate)[0]


def get_project_tasks(store: EntityStore, actor_id: str, team_id: str, project_id: str) -> List[dict]:
    require_actor(actor_id)
    get_project_or_404(store, team_id, project_id)
    tasks = store.find("task", {"project_id": project_id}, order_by=["-created_at"])
    return enrichment.enrich_tasks(store, tasks)


def get_project_timesheet(store: EntityStore, actor_id: str, team_id: str, project_id: str,
                          start_date: date, end_date: date) -> dict:
    """
    Per-task daily minutes for a project between two dates, inclusive.
    """
    require_actor(actor_id)
    if start_date > end_date:
        raise ValidationError(ErrorMessages.INVALID_DATE_RANGE)
    get_project_or_404(store, team_id, project_id)

    tasks = store.find("task", {"project_id": project_id})
    task_ids = [t["id"] for t in tasks]
    entries = []
    if task_ids:
        entries = store.find("time_entry", {
            "task_id__in": task_ids,
            "entry_date__gte": start_date,
            "entry_date__lte": end_date,
        })
    return rollups.project_timesheet(tasks, entries, start_date, end_date)
