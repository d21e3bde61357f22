import logging
from datetime import datetime
from typing import List, Optional

from tasktracker.config.settings import settings
from tasktracker.constants import ErrorMessages, Roles
from tasktracker.database.store import EntityStore
from tasktracker.errors import LastAdminError, NotAuthorized, NotFound, ValidationError
from tasktracker.services import enrichment, rollups
from tasktracker.services.task_service import require_actor
from tasktracker.utils.dates import utcnow

logger = logging.getLogger(__name__)


def get_membership(store: EntityStore, team_id: str, user_id: str) -> Optional[dict]:
    """
    Reads the member's current row. Roles are never cached; every privileged
    check goes through here.
    """
    return store.find_one("team_member", {"team_id": team_id, "user_id": user_id})


def is_team_admin(store: EntityStore, team_id: str, user_id: str) -> bool:
    membership = get_membership(store, team_id, user_id)
    return bool(membership) and membership.get("role") == Roles.ADMIN


def _require_admin(store: EntityStore, team_id: str, actor_id: str, message: str):
    if not is_team_admin(store, team_id, actor_id):
        raise NotAuthorized(message)


def _guard_last_admin(store: EntityStore, team_id: str, target: dict):
    """
    Refuses to take away the admin role from the team's only admin.
    """
    if target.get("role") != Roles.ADMIN:
        return
    admin_count = store.count("team_member", {"team_id": team_id, "role": Roles.ADMIN})
    if admin_count <= 1:
        raise LastAdminError()


def get_current_user_role(store: EntityStore, actor_id: str, team_id: str) -> dict:
    require_actor(actor_id)
    membership = get_membership(store, team_id, actor_id)
    if not membership:
        raise NotFound(ErrorMessages.MEMBER_NOT_FOUND)
    return {"role": membership.get("role") or Roles.MEMBER}


def get_team_members_with_stats(store: EntityStore, actor_id: str, team_id: str) -> List[dict]:
    """
    Members of a team with their assigned/completed task counts, tracked
    time and last activity.

    Tasks and time entries for the whole team are loaded once and grouped
    per member.
    """
    require_actor(actor_id)
    members = store.find("team_member", {"team_id": team_id}, order_by=["created_at"])
    if not members:
        return []

    user_ids = [m["user_id"] for m in members]
    profiles = enrichment.fetch_profiles(store, user_ids)
    tasks = store.find("task", {"team_id": team_id, "assignee_id__in": user_ids})
    entries = store.find("time_entry", {"user_id__in": user_ids})

    tasks_by_member = rollups.group_by(tasks, "assignee_id")
    entries_by_member = rollups.group_by(entries, "user_id")

    result = []
    for member in members:
        uid = member["user_id"]
        result.append({
            "user_id": uid,
            "role": member.get("role"),
            "profile": profiles.get(uid) if profiles is not None else None,
            **rollups.member_stats(tasks_by_member.get(uid, []), entries_by_member.get(uid, [])),
        })
    return result


def get_team_stats(store: EntityStore, actor_id: str, team_id: str, now: Optional[datetime] = None,
                   window_days: Optional[int] = None) -> dict:
    """
    Team-wide totals. ``now`` defaults to the current time and is the
    reference point for the active-member window.
    """
    require_actor(actor_id)
    now = now or utcnow()
    window = settings.ACTIVE_WINDOW_DAYS if window_days is None else window_days

    total_members = store.count("team_member", {"team_id": team_id})
    tasks = store.find("task", {"team_id": team_id})
    task_ids = [t["id"] for t in tasks]
    entries = store.find("time_entry", {"task_id__in": task_ids}) if task_ids else []
    completed = [t for t in tasks if t.get("status") == rollups.COMPLETE]

    return {
        "total_members": total_members,
        "total_tasks": len(tasks),
        "completed_tasks": len(completed),
        "total_time_tracked_minutes": rollups.task_tracked_minutes(entries),
        "active_members": rollups.team_active_member_count(entries, completed, now, window),
    }


def get_member_activity(store: EntityStore, actor_id: str, user_id: str, limit: Optional[int] = None) -> List[dict]:
    """
    Recent activity of one member, newest first.
    """
    require_actor(actor_id)
    limit = limit or settings.ACTIVITY_FEED_LIMIT

    created = store.find("task", {"creator_id": user_id}, order_by=["-created_at"], limit=limit)
    completed = store.find(
        "task",
        {"assignee_id": user_id, "status": rollups.COMPLETE},
        order_by=["-updated_at"],
        limit=limit,
    )
    comments = store.find("comment", {"user_id": user_id}, order_by=["-created_at"], limit=limit)
    entries = store.find("time_entry", {"user_id": user_id}, order_by=["-created_at"], limit=limit)
    return rollups.member_activity_feed(created, completed, comments, entries, limit)


def update_member_role(store: EntityStore, actor_id: str, team_id: str, user_id: str, new_role: str) -> dict:
    """
    Changes a member's role.

    Raises:
        NotAuthorized: actor is not currently an admin of the team
        ValidationError: unknown role
        NotFound: user is not a member of the team
        LastAdminError: the change would demote the team's only admin
    """
    require_actor(actor_id)
    new_role = getattr(new_role, "value", new_role)
    _require_admin(store, team_id, actor_id, ErrorMessages.ONLY_ADMINS_CHANGE_ROLES)
    if new_role not in Roles.ALL_ROLES:
        raise ValidationError(ErrorMessages.INVALID_ROLE)

    target = get_membership(store, team_id, user_id)
    if not target:
        raise NotFound(ErrorMessages.MEMBER_NOT_FOUND)
    if new_role != Roles.ADMIN:
        _guard_last_admin(store, team_id, target)

    updated = store.update("team_member", (team_id, user_id), {"role": new_role})
    logger.info("Role of %s in team %s set to %s by %s", user_id, team_id, new_role, actor_id)
    return updated


def remove_member(store: EntityStore, actor_id: str, team_id: str, user_id: str) -> None:
    """
    Removes a member from the team.

    Raises:
        NotAuthorized: actor is not currently an admin of the team
        NotFound: user is not a member of the team
        LastAdminError: user is the team's only admin
        ValidationError: actor tried to remove themselves
    """
    require_actor(actor_id)
    _require_admin(store, team_id, actor_id, ErrorMessages.ONLY_ADMINS_REMOVE_MEMBERS)

    target = get_membership(store, team_id, user_id)
    if not target:
        raise NotFound(ErrorMessages.MEMBER_NOT_FOUND)
    _guard_last_admin(store, team_id, target)
    if user_id == actor_id:
        raise ValidationError(ErrorMessages.CANNOT_REMOVE_SELF)

    store.delete("team_member", (team_id, user_id))
    logger.info("Member %s removed from team %s by %s", user_id, team_id, actor_id)
