"""Team Registry — create, delete, list, and describe teams.

Invariants:
    - Team names are globally unique (pre-check plus unique constraint for races)
    - create_team inserts the team and the owner's membership in one transaction
    - delete_team is owner-only and removes participants, expenses, memberships,
      invitations, then the team, in one transaction (all or nothing)
    - get_user_teams reports is_creator and a live member_count per team

Design Decisions:
    - Explicit DELETE statements in dependency order, with ON DELETE CASCADE foreign keys
      as a second line: no reliance on ORM relationship cascades in async context
"""

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from teampool.core.domain_types import MemberProfile, TeamId
from teampool.core.errors import DuplicateNameError, ErrorContext
from teampool.core.validate_fields import require_text
from teampool.infrastructure.database import atomic
from teampool.models.expense import Expense
from teampool.models.expense_participant import ExpenseParticipant
from teampool.models.team import Team
from teampool.models.team_invitation import TeamInvitation
from teampool.models.team_member import TeamMember
from teampool.services.contribution_ledger import query_contribution_summary
from teampool.services.team_access import get_team_or_404, require_team_owner

logger = logging.getLogger(__name__)

TEAM_NAME_MAX_LENGTH = 255


def _team_to_dict(team: Team) -> dict:
    return {
        "id": team.id,
        "name": team.name,
        "created_by": team.created_by,
        "contribution_amount": team.contribution_amount,
        "created_at": team.created_at,
    }


class TeamRegistry:
    """Team lifecycle and creator-only privileges."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_team(
        self, name: str, owner_id: str, owner_profile: MemberProfile,
    ) -> TeamId:
        """Create a team and enroll its creator as the first member."""
        name = require_text(name, "name", TEAM_NAME_MAX_LENGTH)
        existing = await self.db.scalar(select(Team.id).where(Team.name == name))
        if existing is not None:
            raise DuplicateNameError(name, ErrorContext(user_id=owner_id))

        async with atomic(self.db):
            team = Team(name=name, created_by=owner_id)
            self.db.add(team)
            try:
                await self.db.flush()
            except IntegrityError as e:
                # Lost a race with a concurrent create of the same name
                raise DuplicateNameError(
                    name, ErrorContext(user_id=owner_id),
                ) from e
            self.db.add(TeamMember(
                team_id=team.id,
                user_id=owner_id,
                name=owner_profile.name,
                email=owner_profile.email,
            ))

        logger.info(
            f"Team '{name}' created", extra={"team_id": team.id, "user_id": owner_id},
        )
        return TeamId(team.id)

    async def delete_team(self, team_id: UUID, requester_id: str) -> None:
        """Delete a team and everything it owns. Owner only."""
        await require_team_owner(self.db, team_id, requester_id, "delete the team")

        async with atomic(self.db):
            await self.db.execute(
                delete(ExpenseParticipant).where(ExpenseParticipant.team_id == team_id)
            )
            await self.db.execute(delete(Expense).where(Expense.team_id == team_id))
            await self.db.execute(delete(TeamMember).where(TeamMember.team_id == team_id))
            await self.db.execute(
                delete(TeamInvitation).where(TeamInvitation.team_id == team_id)
            )
            await self.db.execute(delete(Team).where(Team.id == team_id))

        logger.info(
            "Team deleted", extra={"team_id": team_id, "user_id": requester_id},
        )

    async def get_user_teams(self, user_id: str) -> list[dict]:
        """Every team the user belongs to, with ownership flag and member count."""
        counted = aliased(TeamMember)
        member_count = (
            select(func.count(counted.user_id))
            .where(counted.team_id == Team.id)
            .correlate(Team)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Team, member_count.label("member_count"))
            .join(TeamMember, TeamMember.team_id == Team.id)
            .where(TeamMember.user_id == user_id)
            .order_by(Team.created_at.asc())
        )
        return [
            {
                **_team_to_dict(team),
                "is_creator": team.created_by == user_id,
                "member_count": count,
            }
            for team, count in result.all()
        ]

    async def get_team_details(self, team_id: UUID) -> dict:
        """Team, members in join order, and live contribution summary."""
        team = await get_team_or_404(self.db, team_id)
        result = await self.db.execute(
            select(TeamMember)
            .where(TeamMember.team_id == team_id)
            .order_by(TeamMember.joined_at.asc())
        )
        members = result.scalars().all()
        contribution = await query_contribution_summary(self.db, team_id)
        return {
            **_team_to_dict(team),
            "total_members": len(members),
            "members": [
                {
                    "user_id": m.user_id,
                    "name": m.name,
                    "email": m.email,
                    "has_paid": m.has_paid,
                    "joined_at": m.joined_at,
                }
                for m in members
            ],
            "contribution": contribution,
        }
