from tasktracker.schemas.task_schema import (
    TaskStatus, TaskPriority, SortField, SortOrder, ProfileSummary, TaskCreate, TaskUpdate,
    TaskStatusUpdate, TaskDescriptionUpdate, BulkTaskUpdate, TaskFilters, TaskResponse,
    TaskWithMetadata, TeamMemberOption
)
from tasktracker.schemas.activity_schema import (
    CommentAttachment, CommentCreate, CommentResponse, TimeEntryCreate, TimeEntryResponse,
    TaskTimeTotal, TaskDetails
)
from tasktracker.schemas.project_schema import (
    ProjectStatus, ProjectCreate, ProjectUpdate, ProjectResponse, ProjectWithStats,
    TimesheetRow, TimesheetResponse
)
from tasktracker.schemas.team_schema import (
    MemberRole, RoleUpdate, RoleResponse, TeamMemberWithStats, TeamStats, ActivityType, MemberActivity
)

__all__ = [
    "TaskStatus",
    "TaskPriority",
    "SortField",
    "SortOrder",
    "ProfileSummary",
    "TaskCreate",
    "TaskUpdate",
    "TaskStatusUpdate",
    "TaskDescriptionUpdate",
    "BulkTaskUpdate",
    "TaskFilters",
    "TaskResponse",
    "TaskWithMetadata",
    "TeamMemberOption",
    "CommentAttachment",
    "CommentCreate",
    "CommentResponse",
    "TimeEntryCreate",
    "TimeEntryResponse",
    "TaskTimeTotal",
    "TaskDetails",
    "ProjectStatus",
    "ProjectCreate",
    "ProjectUpdate",
    "ProjectResponse",
    "ProjectWithStats",
    "TimesheetRow",
    "TimesheetResponse",
    "MemberRole",
    "RoleUpdate",
    "RoleResponse",
    "TeamMemberWithStats",
    "TeamStats",
    "ActivityType",
    "MemberActivity",
]
