"""Expense Ledger — shared expenses with participant sets, listings, and summaries.

Invariants:
    - An expense and its participant rows are written in one transaction (no partial expense)
    - update_expense replaces the participant set: after the call it equals the latest input exactly
    - Participants must be current members of the expense's team when written; a member who
      later leaves stays on the expenses they shared
    - Listings are ordered by expense_date descending (most recent first), then id descending
    - Summary over zero expenses yields count 0, total 0, and null dates (not an error)

Design Decisions:
    - Participant rows written with a parameterized executemany insert, never string-built SQL
    - Participant replacement via DELETE + INSERT statements: no identity-map conflicts when
      the new set overlaps the old one
"""

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from teampool.core.domain_types import ExpenseId
from teampool.core.errors import (
    ErrorContext, InvalidParticipantsError, ResourceNotFoundError,
)
from teampool.core.validate_fields import (
    parse_amount, parse_expense_date, parse_participant_ids, require_text,
)
from teampool.infrastructure.database import atomic
from teampool.models.expense import Expense
from teampool.models.expense_participant import ExpenseParticipant
from teampool.models.team_member import TeamMember
from teampool.services.team_access import get_team_or_404

logger = logging.getLogger(__name__)

DESCRIPTION_MAX_LENGTH = 2000


def _validate_expense(
    description: object, amount: object, expense_date: object, participant_user_ids: object,
) -> tuple[str, Decimal, date, list[str]]:
    return (
        require_text(description, "description", DESCRIPTION_MAX_LENGTH),
        parse_amount(amount),
        parse_expense_date(expense_date),
        parse_participant_ids(participant_user_ids),
    )


def _expense_to_dict(expense: Expense, participants: list[dict]) -> dict:
    return {
        "id": expense.id,
        "team_id": expense.team_id,
        "description": expense.description,
        "amount": expense.amount,
        "expense_date": expense.expense_date,
        "created_at": expense.created_at,
        "participants": participants,
        "participant_user_ids": [p["user_id"] for p in participants],
    }


class ExpenseLedger:
    """CRUD on shared expenses and their participant sets."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_expense(
        self,
        team_id: UUID,
        description: str,
        amount: object,
        expense_date: object,
        participant_user_ids: list[str],
    ) -> ExpenseId:
        """Record an expense shared by the given members."""
        await get_team_or_404(self.db, team_id)
        description, amount, expense_date, user_ids = _validate_expense(
            description, amount, expense_date, participant_user_ids,
        )
        await self._require_participants_are_members(team_id, user_ids)

        async with atomic(self.db):
            expense = Expense(
                team_id=team_id,
                description=description,
                amount=amount,
                expense_date=expense_date,
            )
            self.db.add(expense)
            await self.db.flush()
            expense_id = expense.id
            await self._insert_participants(expense_id, team_id, user_ids)

        logger.info(
            f"Expense recorded with {len(user_ids)} participant(s)",
            extra={"team_id": team_id, "expense_id": expense_id},
        )
        return ExpenseId(expense_id)

    async def update_expense(
        self,
        expense_id: int,
        description: str,
        amount: object,
        expense_date: object,
        participant_user_ids: list[str],
    ) -> None:
        """Overwrite expense fields and replace its participant set."""
        expense = await self._get_expense_or_404(expense_id)
        team_id = expense.team_id
        description, amount, expense_date, user_ids = _validate_expense(
            description, amount, expense_date, participant_user_ids,
        )
        await self._require_participants_are_members(team_id, user_ids)

        async with atomic(self.db):
            await self.db.execute(
                update(Expense)
                .where(Expense.id == expense_id)
                .values(
                    description=description,
                    amount=amount,
                    expense_date=expense_date,
                )
            )
            await self.db.execute(
                delete(ExpenseParticipant)
                .where(ExpenseParticipant.expense_id == expense_id)
            )
            await self._insert_participants(expense_id, team_id, user_ids)

        logger.info(
            "Expense updated", extra={"team_id": team_id, "expense_id": expense_id},
        )

    async def delete_expense(self, expense_id: int) -> None:
        expense = await self._get_expense_or_404(expense_id)
        team_id = expense.team_id
        async with atomic(self.db):
            await self.db.execute(
                delete(ExpenseParticipant)
                .where(ExpenseParticipant.expense_id == expense_id)
            )
            await self.db.execute(delete(Expense).where(Expense.id == expense_id))
        logger.info(
            "Expense deleted", extra={"team_id": team_id, "expense_id": expense_id},
        )

    async def require_visible_expense(self, expense_id: int, user_id: str) -> None:
        """Raise ResourceNotFoundError unless the expense exists in a team the user belongs to.

        Missing and foreign expenses fail identically, so outsiders learn nothing about ids.
        """
        team_id = await self.db.scalar(
            select(Expense.team_id)
            .join(
                TeamMember,
                and_(
                    TeamMember.team_id == Expense.team_id,
                    TeamMember.user_id == user_id,
                ),
            )
            .where(Expense.id == expense_id)
        )
        if team_id is None:
            raise ResourceNotFoundError(
                "Expense", str(expense_id),
                ErrorContext(expense_id=expense_id, user_id=user_id),
            )

    async def get_expense(self, expense_id: int) -> dict:
        expense = await self._get_expense_or_404(expense_id)
        participants = await self._load_participants([expense.id])
        return _expense_to_dict(expense, participants.get(expense.id, []))

    async def get_team_expenses(self, team_id: UUID) -> list[dict]:
        """All expenses of a team, most recent expense_date first."""
        await get_team_or_404(self.db, team_id)
        result = await self.db.execute(
            select(Expense)
            .where(Expense.team_id == team_id)
            .order_by(Expense.expense_date.desc(), Expense.id.desc())
            .execution_options(populate_existing=True)
        )
        expenses = result.scalars().all()
        participants = await self._load_participants([e.id for e in expenses])
        return [_expense_to_dict(e, participants.get(e.id, [])) for e in expenses]

    async def get_expenses_summary(self, team_id: UUID) -> dict:
        """Count, total, and date range of a team's expenses in one query."""
        await get_team_or_404(self.db, team_id)
        result = await self.db.execute(
            select(
                func.count(Expense.id),
                func.coalesce(func.sum(Expense.amount), 0),
                func.min(Expense.expense_date),
                func.max(Expense.expense_date),
            )
            .where(Expense.team_id == team_id)
        )
        count, total, earliest, latest = result.one()
        return {
            "count": int(count),
            "total_amount": Decimal(total or 0),
            "earliest_date": earliest,
            "latest_date": latest,
        }

    # -- internals -------------------------------------------------------------

    async def _get_expense_or_404(self, expense_id: int) -> Expense:
        result = await self.db.execute(
            select(Expense)
            .where(Expense.id == expense_id)
            .execution_options(populate_existing=True)
        )
        expense = result.scalar_one_or_none()
        if not expense:
            raise ResourceNotFoundError(
                "Expense", str(expense_id), ErrorContext(expense_id=expense_id),
            )
        return expense

    async def _require_participants_are_members(
        self, team_id: UUID, user_ids: list[str],
    ) -> None:
        result = await self.db.execute(
            select(TeamMember.user_id)
            .where(TeamMember.team_id == team_id)
            .where(TeamMember.user_id.in_(user_ids))
        )
        members = set(result.scalars().all())
        outsiders = [uid for uid in user_ids if uid not in members]
        if outsiders:
            raise InvalidParticipantsError(
                outsiders, ErrorContext(team_id=str(team_id)),
            )

    async def _insert_participants(
        self, expense_id: int, team_id: UUID, user_ids: list[str],
    ) -> None:
        await self.db.execute(
            insert(ExpenseParticipant),
            [
                {"expense_id": expense_id, "user_id": uid, "team_id": team_id}
                for uid in user_ids
            ],
        )

    async def _load_participants(self, expense_ids: list[int]) -> dict[int, list[dict]]:
        """Resolve participant ids to member display names, grouped by expense.

        Participants who have since left the team keep their row; their name is None.
        """
        if not expense_ids:
            return {}
        result = await self.db.execute(
            select(
                ExpenseParticipant.expense_id,
                ExpenseParticipant.user_id,
                TeamMember.name,
            )
            .outerjoin(
                TeamMember,
                and_(
                    TeamMember.team_id == ExpenseParticipant.team_id,
                    TeamMember.user_id == ExpenseParticipant.user_id,
                ),
            )
            .where(ExpenseParticipant.expense_id.in_(expense_ids))
            .order_by(
                func.coalesce(TeamMember.name, ExpenseParticipant.user_id).asc(),
                ExpenseParticipant.user_id.asc(),
            )
        )
        grouped: dict[int, list[dict]] = {}
        for expense_id, user_id, name in result.all():
            grouped.setdefault(expense_id, []).append(
                {"user_id": user_id, "name": name},
            )
        return grouped
