from tasktracker.models.team import Team, TeamMembership, Profile
from tasktracker.models.project import Project
from tasktracker.models.task import Task, TimeEntry, Comment

# Export everything for easy access
__all__ = [
    "Team",
    "TeamMembership",
    "Profile",
    "Project",
    "Task",
    "TimeEntry",
    "Comment",
]
