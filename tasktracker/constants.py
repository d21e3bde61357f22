class ErrorMessages:
    NOT_FOUND = "Not found"
    TASK_NOT_FOUND = "Task not found"
    PROJECT_NOT_FOUND = "Project not found"
    TEAM_NOT_FOUND = "Team not found"
    MEMBER_NOT_FOUND = "Team member not found"
    TIME_ENTRY_NOT_FOUND = "Time entry not found"

    # Auth
    NOT_AUTHENTICATED = "Not authenticated"
    ACCESS_DENIED = "Access denied"
    NOT_AUTHORIZED_TASK_UPDATE = "Not authorized to update this task"
    NOT_AUTHORIZED_TASK_DELETE = "Not authorized to delete this task"
    NOT_AUTHORIZED_TIME_ENTRY = "Not authorized to delete this time entry"
    ONLY_ADMINS_CHANGE_ROLES = "Only admins can change member roles"
    ONLY_ADMINS_REMOVE_MEMBERS = "Only admins can remove members"

    # Validation
    INVALID_INPUT = "Invalid input"
    EMPTY_COMMENT = "Comment cannot be empty"
    INVALID_MINUTES = "Minutes must be a positive whole number"
    INVALID_DATE_RANGE = "Start date must not be after end date"
    INVALID_ROLE = "Invalid role"
    EMPTY_TITLE = "Title cannot be empty"
    NO_TASKS_SELECTED = "No tasks selected"
    NO_BULK_CHANGES = "Nothing to update"
    CANNOT_REMOVE_SELF = "Cannot remove yourself"

    # Team invariants
    LAST_ADMIN = "Cannot remove the last admin"

    STORE_FAILURE = "Data store unavailable"

class SuccessMessages:
    TASK_DELETED = "Task deleted successfully"
    PROJECT_DELETED = "Project deleted successfully"
    MEMBER_REMOVED = "Member removed successfully"
    ROLE_UPDATED = "Member role updated successfully"

class Roles:
    ADMIN = "admin"
    MEMBER = "member"
    ALL_ROLES = [ADMIN, MEMBER]

# Sort rank for task priority; an unset priority ranks below "low"
PRIORITY_RANK = {"urgent": 4, "high": 3, "normal": 2, "low": 1}
UNSET_PRIORITY_RANK = 0

UNASSIGNED_LABEL = "Unassigned"
DEFAULT_PRIORITY_LABEL = "normal"
TEMP_ID_PREFIX = "temp-"
