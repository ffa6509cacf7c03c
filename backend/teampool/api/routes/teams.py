"""Team Routes — create, list, inspect, delete, and leave teams.

Invariants:
    - Every route requires a caller identity (get_caller)
    - Team details are visible to members only
    - Routes hold no business logic; typed service errors become JSON via global handlers
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from teampool.api.dependencies import (
    get_caller, get_membership_manager, get_team_registry,
)
from teampool.core.domain_types import Caller
from teampool.schemas.team import TeamCreate, TeamCreated
from teampool.services.membership import MembershipManager
from teampool.services.team_registry import TeamRegistry

router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


@router.post(
    "", response_model=TeamCreated, status_code=status.HTTP_201_CREATED,
)
async def create_team(
    body: TeamCreate,
    caller: Caller = Depends(get_caller),
    registry: TeamRegistry = Depends(get_team_registry),
):
    """Create a team owned by the caller."""
    team_id = await registry.create_team(body.name, caller.user_id, caller.profile)
    return TeamCreated(id=team_id)


@router.get("")
async def list_my_teams(
    caller: Caller = Depends(get_caller),
    registry: TeamRegistry = Depends(get_team_registry),
):
    """Teams the caller belongs to."""
    return {"teams": await registry.get_user_teams(caller.user_id)}


@router.get("/{team_id}")
async def get_team(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    registry: TeamRegistry = Depends(get_team_registry),
    membership: MembershipManager = Depends(get_membership_manager),
):
    """Team details with members and contribution summary."""
    await membership.require_member(team_id, caller.user_id)
    return await registry.get_team_details(team_id)


@router.delete("/{team_id}")
async def delete_team(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    registry: TeamRegistry = Depends(get_team_registry),
):
    await registry.delete_team(team_id, caller.user_id)
    return {"success": True}


@router.post("/{team_id}/leave")
async def leave_team(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    membership: MembershipManager = Depends(get_membership_manager),
):
    await membership.leave_team(team_id, caller.user_id)
    return {"success": True}
