from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import Optional, List
from tasktracker.schemas.task_schema import ProfileSummary, TaskWithMetadata

class CommentAttachment(BaseModel):
    url: str
    name: str
    type: str
    size: int = Field(..., ge=0)

class CommentCreate(BaseModel):
    content: str = ""
    attachments: List[CommentAttachment] = []

class CommentResponse(BaseModel):
    id: str
    task_id: str
    user_id: Optional[str] = None
    content: Optional[str] = None
    attachments: Optional[List[CommentAttachment]] = None
    created_at: Optional[datetime] = None
    user: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True

class TimeEntryCreate(BaseModel):
    minutes: int = Field(..., gt=0)
    entry_date: date

class TimeEntryResponse(BaseModel):
    id: str
    task_id: str
    user_id: Optional[str] = None
    minutes: int
    entry_date: date
    created_at: Optional[datetime] = None
    user: Optional[ProfileSummary] = None

    class Config:
        from_attributes = True

class TaskTimeTotal(BaseModel):
    task_id: str
    total_tracked_minutes: int

class TaskDetails(TaskWithMetadata):
    """
    Task with its people and children, as shown on the task page.
    """
    time_entries: List[TimeEntryResponse] = []
    comments: List[CommentResponse] = []
