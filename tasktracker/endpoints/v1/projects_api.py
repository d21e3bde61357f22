from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from tasktracker.auth.dependencies import get_current_user, get_store
from tasktracker.config.settings import settings
from tasktracker.constants import SuccessMessages
from tasktracker.database.store import SqlEntityStore
from tasktracker.schemas import (
    ProjectCreate, ProjectUpdate, ProjectResponse, ProjectWithStats, TaskWithMetadata, TimesheetResponse
)
from tasktracker.services import project_service

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=List[ProjectWithStats])
def get_all_projects(
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Team projects, newest first, with progress, tracked time and cost.
    """
    return project_service.get_all_projects(store, actor_id, team_id)


@router.post("", status_code=201, response_model=ProjectResponse)
def create_project(
    project_data: ProjectCreate,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return project_service.create_project(store, actor_id, team_id, project_data)


@router.get("/{project_id}", response_model=ProjectWithStats)
def get_project(
    project_id: str,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return project_service.get_project(store, actor_id, team_id, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    project_update: ProjectUpdate,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return project_service.update_project(store, actor_id, team_id, project_id, project_update)


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Deletes a project. Its tasks are kept and lose their project.
    """
    project_service.delete_project(store, actor_id, team_id, project_id)
    return {"message": SuccessMessages.PROJECT_DELETED}


@router.get("/{project_id}/tasks", response_model=List[TaskWithMetadata])
def get_project_tasks(
    project_id: str,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return project_service.get_project_tasks(store, actor_id, team_id, project_id)


@router.get("/{project_id}/timesheet", response_model=TimesheetResponse)
def get_project_timesheet(
    project_id: str,
    start_date: date,
    end_date: date,
    team_id: str = settings.DEFAULT_TEAM_ID,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Daily minutes per task between start_date and end_date, inclusive.
    """
    return project_service.get_project_timesheet(store, actor_id, team_id, project_id, start_date, end_date)
