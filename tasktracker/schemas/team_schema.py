from pydantic import BaseModel
from datetime import datetime
from typing import Optional
from enum import Enum
from tasktracker.schemas.task_schema import ProfileSummary

class MemberRole(str, Enum):
    admin = "admin"
    member = "member"

class RoleUpdate(BaseModel):
    role: MemberRole

class RoleResponse(BaseModel):
    role: MemberRole

class TeamMemberWithStats(BaseModel):
    user_id: str
    role: Optional[str] = None
    profile: Optional[ProfileSummary] = None
    tasks_assigned: int = 0
    tasks_completed: int = 0
    total_time_tracked_minutes: int = 0
    last_activity: Optional[datetime] = None

class TeamStats(BaseModel):
    total_members: int
    total_tasks: int
    completed_tasks: int
    total_time_tracked_minutes: int
    active_members: int

class ActivityType(str, Enum):
    task_created = "task_created"
    task_completed = "task_completed"
    comment_added = "comment_added"
    time_tracked = "time_tracked"

class MemberActivity(BaseModel):
    id: str
    type: ActivityType
    description: str
    created_at: datetime
    task_id: Optional[str] = None
