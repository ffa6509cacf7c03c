"""Expense Routes — team-scoped expense CRUD and summary.

Invariants:
    - Every expense route requires the caller to be a member of the expense's team
    - Routes by expense id answer 404 to non-members whether or not the id exists
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from teampool.api.dependencies import (
    get_caller, get_expense_ledger, get_membership_manager,
)
from teampool.core.domain_types import Caller
from teampool.schemas.expense import ExpenseCreated, ExpenseWrite
from teampool.services.expense_ledger import ExpenseLedger
from teampool.services.membership import MembershipManager

router = APIRouter(prefix="/api/v1", tags=["expenses"])


@router.post(
    "/teams/{team_id}/expenses",
    response_model=ExpenseCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    team_id: UUID,
    body: ExpenseWrite,
    caller: Caller = Depends(get_caller),
    ledger: ExpenseLedger = Depends(get_expense_ledger),
    membership: MembershipManager = Depends(get_membership_manager),
):
    await membership.require_member(team_id, caller.user_id)
    expense_id = await ledger.create_expense(
        team_id, body.description, body.amount,
        body.expense_date, body.participant_user_ids,
    )
    return ExpenseCreated(id=expense_id)


@router.get("/teams/{team_id}/expenses")
async def list_team_expenses(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    ledger: ExpenseLedger = Depends(get_expense_ledger),
    membership: MembershipManager = Depends(get_membership_manager),
):
    await membership.require_member(team_id, caller.user_id)
    return {"expenses": await ledger.get_team_expenses(team_id)}


@router.get("/teams/{team_id}/expenses/summary")
async def get_expenses_summary(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    ledger: ExpenseLedger = Depends(get_expense_ledger),
    membership: MembershipManager = Depends(get_membership_manager),
):
    await membership.require_member(team_id, caller.user_id)
    return await ledger.get_expenses_summary(team_id)


@router.get("/expenses/{expense_id}")
async def get_expense(
    expense_id: int,
    caller: Caller = Depends(get_caller),
    ledger: ExpenseLedger = Depends(get_expense_ledger),
):
    await ledger.require_visible_expense(expense_id, caller.user_id)
    return await ledger.get_expense(expense_id)


@router.put("/expenses/{expense_id}")
async def update_expense(
    expense_id: int,
    body: ExpenseWrite,
    caller: Caller = Depends(get_caller),
    ledger: ExpenseLedger = Depends(get_expense_ledger),
):
    await ledger.require_visible_expense(expense_id, caller.user_id)
    await ledger.update_expense(
        expense_id, body.description, body.amount,
        body.expense_date, body.participant_user_ids,
    )
    return {"success": True}


@router.delete("/expenses/{expense_id}")
async def delete_expense(
    expense_id: int,
    caller: Caller = Depends(get_caller),
    ledger: ExpenseLedger = Depends(get_expense_ledger),
):
    await ledger.require_visible_expense(expense_id, caller.user_id)
    await ledger.delete_expense(expense_id)
    return {"success": True}
