"""Invitation Routes — mint invite tokens and redeem them.

Invariants:
    - Only the team creator can mint (enforced by MembershipManager)
    - The link is formatted here from settings.app_url; nothing is sent anywhere
    - Redeeming a token for an existing membership returns the team id again (idempotent)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from teampool.api.dependencies import get_caller, get_membership_manager
from teampool.config import get_settings
from teampool.core.domain_types import Caller
from teampool.schemas.team import InviteResponse, JoinResponse
from teampool.services.membership import MembershipManager

router = APIRouter(prefix="/api/v1", tags=["invitations"])


@router.post(
    "/teams/{team_id}/invitations",
    response_model=InviteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    membership: MembershipManager = Depends(get_membership_manager),
):
    invitation = await membership.generate_invite_link(team_id, caller.user_id)
    app_url = get_settings().app_url
    return InviteResponse(
        team_id=invitation["team_id"],
        token=invitation["token"],
        invite_link=f"{app_url}/join-team/{invitation['token']}",
        expires_at=invitation["expires_at"],
    )


@router.post("/invitations/{token}/join", response_model=JoinResponse)
async def join_team(
    token: str,
    caller: Caller = Depends(get_caller),
    membership: MembershipManager = Depends(get_membership_manager),
):
    team_id = await membership.join_team_with_invite(
        token, caller.user_id, caller.profile,
    )
    return JoinResponse(team_id=team_id)
