from typing import List

from fastapi import APIRouter, Depends

from tasktracker.auth.dependencies import get_current_user, get_store
from tasktracker.database.store import SqlEntityStore
from tasktracker.schemas import (
    CommentCreate, CommentResponse, TimeEntryCreate, TimeEntryResponse, TaskTimeTotal
)
from tasktracker.services import comment_service, time_entry_service

router = APIRouter(tags=["Comments & Time"])


@router.get("/tasks/{task_id}/comments", response_model=List[CommentResponse])
def get_comments(
    task_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return comment_service.get_comments(store, actor_id, task_id)


@router.post("/tasks/{task_id}/comments", status_code=201, response_model=CommentResponse)
def add_comment(
    task_id: str,
    comment: CommentCreate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Adds a comment. Needs text or at least one attachment.
    """
    return comment_service.add_comment(store, actor_id, task_id, comment.content, comment.attachments)


@router.get("/tasks/{task_id}/time-entries", response_model=List[TimeEntryResponse])
def list_time_entries(
    task_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return time_entry_service.list_time_entries(store, actor_id, task_id)


@router.post("/tasks/{task_id}/time-entries", status_code=201, response_model=TimeEntryResponse)
def add_time_entry(
    task_id: str,
    entry: TimeEntryCreate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return time_entry_service.add_time_entry(store, actor_id, task_id, entry.minutes, entry.entry_date)


@router.delete("/time-entries/{entry_id}", response_model=TaskTimeTotal)
def delete_time_entry(
    entry_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Deletes one of the caller's time entries and returns the task's new total.
    """
    return time_entry_service.delete_time_entry(store, actor_id, entry_id)
