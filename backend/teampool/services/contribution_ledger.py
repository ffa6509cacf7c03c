"""Contribution Ledger — per-team contribution amount, paid flags, live totals.

Invariants:
    - Only the team creator changes the amount or a member's paid flag
    - Amount must be positive and numeric; stored amount unchanged on any failure
    - Changing the amount never touches existing has_paid flags
    - Summary values are derived from current rows in a single aggregated query, never stored

Design Decisions:
    - query_contribution_summary is module-level so TeamRegistry.get_team_details can embed
      the same numbers without calling this service
"""

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teampool.core.errors import (
    ErrorContext, InvalidFieldError, NotAMemberError, ResourceNotFoundError,
)
from teampool.core.validate_fields import parse_amount
from teampool.infrastructure.database import atomic
from teampool.models.team import Team
from teampool.models.team_member import TeamMember
from teampool.services.team_access import require_team_owner

logger = logging.getLogger(__name__)


async def query_contribution_summary(db: AsyncSession, team_id: UUID) -> dict:
    """Aggregate contribution totals for a team from live membership rows."""
    paid_count = func.coalesce(
        func.sum(case((TeamMember.has_paid.is_(True), 1), else_=0)), 0,
    )
    result = await db.execute(
        select(
            Team.contribution_amount,
            func.count(TeamMember.user_id),
            paid_count,
        )
        .select_from(Team)
        .outerjoin(TeamMember, TeamMember.team_id == Team.id)
        .where(Team.id == team_id)
        .group_by(Team.id, Team.contribution_amount)
    )
    row = result.one_or_none()
    if row is None:
        raise ResourceNotFoundError(
            "Team", str(team_id), ErrorContext(team_id=str(team_id)),
        )
    amount = row[0] if row[0] is not None else Decimal("0")
    total_members = int(row[1])
    paid_members = int(row[2])
    return {
        "amount": amount,
        "total_members": total_members,
        "paid_members": paid_members,
        "total_amount": amount * total_members,
        "collected_amount": amount * paid_members,
    }


class ContributionLedger:
    """Owner-gated contribution settings and live summaries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def set_contribution_amount(
        self, team_id: UUID, requester_id: str, amount: object,
    ) -> Decimal:
        await require_team_owner(
            self.db, team_id, requester_id, "set the contribution amount",
        )
        parsed = parse_amount(amount)
        async with atomic(self.db):
            await self.db.execute(
                update(Team)
                .where(Team.id == team_id)
                .values(contribution_amount=parsed)
            )
        logger.info(
            f"Contribution amount set to {parsed}",
            extra={"team_id": team_id, "user_id": requester_id},
        )
        return parsed

    async def update_payment_status(
        self, team_id: UUID, member_id: str, has_paid: bool, requester_id: str,
    ) -> None:
        await require_team_owner(
            self.db, team_id, requester_id, "update payment status",
        )
        if not isinstance(has_paid, bool):
            raise InvalidFieldError("has_paid must be a boolean", "has_paid")
        async with atomic(self.db):
            result = await self.db.execute(
                update(TeamMember)
                .where(TeamMember.team_id == team_id)
                .where(TeamMember.user_id == member_id)
                .values(has_paid=has_paid)
            )
            if result.rowcount == 0:
                raise NotAMemberError(
                    member_id,
                    ErrorContext(team_id=str(team_id), user_id=member_id),
                )
        logger.info(
            f"Payment status of {member_id} set to {has_paid}",
            extra={"team_id": team_id, "user_id": requester_id},
        )

    async def get_contribution_summary(self, team_id: UUID) -> dict:
        return await query_contribution_summary(self.db, team_id)
