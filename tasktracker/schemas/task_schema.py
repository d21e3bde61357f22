from pydantic import BaseModel, Field
from datetime import datetime, date
from typing import Optional, List
from enum import Enum

class TaskStatus(str, Enum):
    todo = "todo"
    in_progress = "in_progress"
    in_review = "in_review"
    complete = "complete"

class TaskPriority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"
    urgent = "urgent"

class SortField(str, Enum):
    created_at = "created_at"
    priority = "priority"
    due_date = "due_date"
    assignee_name = "assignee_name"
    # Older clients send the short name
    assignee = "assignee"

class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"

class ProfileSummary(BaseModel):
    user_id: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    assignee_id: Optional[str] = None
    estimated_time_minutes: Optional[int] = Field(None, ge=0)
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    project_id: Optional[str] = None

class TaskUpdate(BaseModel):
    """
    Partial update. Only fields present in the request are applied;
    an empty value clears the field.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[str] = None
    estimated_time_minutes: Optional[int] = Field(None, ge=0)
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    project_id: Optional[str] = None

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskDescriptionUpdate(BaseModel):
    description: Optional[str] = None

class BulkTaskUpdate(BaseModel):
    task_ids: List[str]
    status: Optional[TaskStatus] = None
    # Present-but-null unassigns; absent leaves the assignee alone
    assignee_id: Optional[str] = None

class TaskFilters(BaseModel):
    search: Optional[str] = None
    status: Optional[TaskStatus] = None
    assignee_id: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date_from: Optional[date] = None
    due_date_to: Optional[date] = None
    sort_by: SortField = SortField.created_at
    sort_order: SortOrder = SortOrder.desc

class TaskResponse(BaseModel):
    id: str
    team_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    estimated_time_minutes: Optional[int] = None
    assignee_id: Optional[str] = None
    creator_id: Optional[str] = None
    project_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TaskWithMetadata(TaskResponse):
    assignee: Optional[ProfileSummary] = None
    creator: Optional[ProfileSummary] = None
    total_tracked_minutes: Optional[int] = None
    comment_count: Optional[int] = None

class TeamMemberOption(BaseModel):
    user_id: str
    role: Optional[str] = None
    profile: Optional[ProfileSummary] = None
