from typing import List, Optional

from fastapi import APIRouter, Depends

from tasktracker.auth.dependencies import get_current_user, get_store
from tasktracker.constants import SuccessMessages
from tasktracker.database.store import SqlEntityStore
from tasktracker.schemas import RoleUpdate, RoleResponse, TeamMemberWithStats, TeamStats, MemberActivity
from tasktracker.services import team_service

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.get("/{team_id}/role", response_model=RoleResponse)
def get_current_user_role(
    team_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return team_service.get_current_user_role(store, actor_id, team_id)


@router.get("/{team_id}/members", response_model=List[TeamMemberWithStats])
def get_team_members_with_stats(
    team_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return team_service.get_team_members_with_stats(store, actor_id, team_id)


@router.get("/{team_id}/stats", response_model=TeamStats)
def get_team_stats(
    team_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return team_service.get_team_stats(store, actor_id, team_id)


@router.get("/{team_id}/members/{user_id}/activity", response_model=List[MemberActivity])
def get_member_activity(
    team_id: str,
    user_id: str,
    limit: Optional[int] = None,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    return team_service.get_member_activity(store, actor_id, user_id, limit)


@router.put("/{team_id}/members/{user_id}/role")
def update_member_role(
    team_id: str,
    user_id: str,
    role_update: RoleUpdate,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Changes a member's role.
    Restricted to Admins; the last admin cannot be demoted.
    """
    team_service.update_member_role(store, actor_id, team_id, user_id, role_update.role)
    return {"message": SuccessMessages.ROLE_UPDATED}


@router.delete("/{team_id}/members/{user_id}")
def remove_member(
    team_id: str,
    user_id: str,
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Removes a member from the team.
    Restricted to Admins; the last admin cannot be removed.
    """
    team_service.remove_member(store, actor_id, team_id, user_id)
    return {"message": SuccessMessages.MEMBER_REMOVED}
