"""Team Access — ownership and membership lookups shared by every ledger service.

Invariants:
    - Ownership is decided solely by teams.created_by
    - Lookups never write; callers run them before opening a transaction scope

Design Decisions:
    - Module-level async helpers over a base class: each service reads ownership data
      directly instead of calling another service
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from teampool.core.errors import (
    ErrorContext, NotAMemberError, ResourceNotFoundError, UnauthorizedError,
)
from teampool.models.team import Team
from teampool.models.team_member import TeamMember

logger = logging.getLogger(__name__)


async def get_team_or_404(db: AsyncSession, team_id: UUID) -> Team:
    """Get team or raise ResourceNotFoundError."""
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if not team:
        raise ResourceNotFoundError(
            "Team", str(team_id), ErrorContext(team_id=str(team_id)),
        )
    return team


async def require_team_owner(
    db: AsyncSession, team_id: UUID, requester_id: str, action: str,
) -> Team:
    """Get team and verify requester is its creator."""
    team = await get_team_or_404(db, team_id)
    if team.created_by != requester_id:
        logger.warning(
            f"Refused non-owner attempt to {action}",
            extra={"team_id": team_id, "user_id": requester_id},
        )
        raise UnauthorizedError(
            action, ErrorContext(team_id=str(team_id), user_id=requester_id),
        )
    return team


async def is_member(db: AsyncSession, team_id: UUID, user_id: str) -> bool:
    result = await db.execute(
        select(TeamMember.user_id)
        .where(TeamMember.team_id == team_id)
        .where(TeamMember.user_id == user_id)
    )
    return result.scalar_one_or_none() is not None


async def require_member(db: AsyncSession, team_id: UUID, user_id: str) -> None:
    """Raise NotAMemberError unless user has a membership row in an existing team."""
    await get_team_or_404(db, team_id)
    if not await is_member(db, team_id, user_id):
        raise NotAMemberError(
            user_id, ErrorContext(team_id=str(team_id), user_id=user_id),
        )
