from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from tasktracker.auth.dependencies import get_current_user, get_store
from tasktracker.config.settings import settings
from tasktracker.constants import SuccessMessages
from tasktracker.database.store import SqlEntityStore
from tasktracker.schemas import (
    TaskCreate, TaskUpdate, TaskStatusUpdate, TaskDescriptionUpdate, BulkTaskUpdate,
    TaskFilters, TaskStatus, TaskPriority, SortField, SortOrder, TaskResponse,
    TaskWithMetadata, TaskDetails, TeamMemberOption
)
from tasktracker.services import task_service

router = APIRouter(prefix="/tasks", tags=["Tasks"])


def task_filters(
    search: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    assignee_id: Optional[str] = None,
    priority: Optional[TaskPriority] = None,
    due_date_from: Optional[date] = None,
    due_date_to: Optional[date] = None,
    sort_by: SortField = SortField.created_at,
    sort_order: SortOrder = SortOrder.desc,
) -> TaskFilters:
    """
    Collects filter and sort query parameters.
    """
    return TaskFilters(
        search=search,
        status=status,
        assignee_id=assignee_id,
        priority=priority,
        due_date_from=due_date_from,
        due_date_to=due_date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("", response_model=List[TaskWithMetadata])
def get_all_tasks(
    team_id: str = settings.DEFAULT_TEAM_ID,
    filters: TaskFilters = Depends(task_filters),
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Team tasks with tracked time and comment counts, filtered and sorted.
    """
    return task_service.get_all_tasks(store, actor_id, team_id, filters)


@router.post("", status_code=201, response_model=TaskResponse)
def create_task(
    task_data: TaskCreate,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return task_service.create_task(store, actor_id, team_id, task_data)


@router.get("/members", response_model=List[TeamMemberOption])
def get_team_members(
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Members tasks can be assigned to.
    """
    return task_service.get_team_members(store, actor_id, team_id)


@router.post("/bulk", response_model=List[TaskResponse])
def bulk_update_tasks(
    bulk: BulkTaskUpdate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Applies one status and/or assignee change to every listed task.
    The whole batch succeeds or nothing changes.
    """
    assignee_id = bulk.assignee_id if "assignee_id" in bulk.model_fields_set else task_service.UNSET
    return task_service.bulk_update_tasks(
        store, actor_id, bulk.task_ids, status=bulk.status, assignee_id=assignee_id
    )


@router.get("/{task_id}", response_model=TaskDetails)
def get_task_details(
    task_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return task_service.get_task_details(store, actor_id, task_id)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Updates a task. Restricted to its assignee or creator.
    """
    return task_service.update_task(store, actor_id, task_id, task_update)


@router.patch("/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: str,
    status_update: TaskStatusUpdate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return task_service.update_task_status(store, actor_id, task_id, status_update.status)


@router.patch("/{task_id}/description", response_model=TaskResponse)
def update_task_description(
    task_id: str,
    description_update: TaskDescriptionUpdate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return task_service.update_task_description(store, actor_id, task_id, description_update.description)


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Deletes a task with its comments and time entries.
    Restricted to its assignee or creator.
    """
    task_service.delete_task(store, actor_id, task_id)
    return {"message": SuccessMessages.TASK_DELETED}


@router.post("/{task_id}/duplicate", status_code=201, response_model=TaskResponse)
def duplicate_task(
    task_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return task_service.duplicate_task(store, actor_id, task_id)


@router.post("/{task_id}/template", status_code=201, response_model=TaskResponse)
def convert_task_to_template(
    task_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return task_service.convert_task_to_template(store, actor_id, task_id)
