from pydantic import BaseModel, Field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List, Dict
from enum import Enum

class ProjectStatus(str, Enum):
    planning = "planning"
    active = "active"
    on_hold = "on_hold"
    completed = "completed"
    cancelled = "cancelled"

class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    status: ProjectStatus = ProjectStatus.planning

class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    status: Optional[ProjectStatus] = None

class ProjectResponse(BaseModel):
    id: str
    team_id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProjectWithStats(ProjectResponse):
    task_count: int = 0
    completed_task_count: int = 0
    progress_percentage: int = 0
    total_tracked_minutes: int = 0
    total_cost: float = 0.0

class TimesheetRow(BaseModel):
    task_id: str
    task_title: str
    task_status: str
    assignee_id: Optional[str] = None
    daily_time: Dict[str, int] = {}
    total_minutes: int = 0

class TimesheetResponse(BaseModel):
    tasks: List[TimesheetRow] = []
    total_minutes: int = 0
