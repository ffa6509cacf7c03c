"""Contribution Routes — set the per-member amount, mark payments, read totals.

Invariants:
    - Writes are creator-only (enforced by ContributionLedger)
    - The summary is visible to team members only
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from teampool.api.dependencies import (
    get_caller, get_contribution_ledger, get_membership_manager,
)
from teampool.core.domain_types import Caller
from teampool.schemas.team import ContributionUpdate, PaymentStatusUpdate
from teampool.services.contribution_ledger import ContributionLedger
from teampool.services.membership import MembershipManager

router = APIRouter(prefix="/api/v1/teams/{team_id}", tags=["contributions"])


@router.put("/contribution")
async def set_contribution_amount(
    team_id: UUID,
    body: ContributionUpdate,
    caller: Caller = Depends(get_caller),
    ledger: ContributionLedger = Depends(get_contribution_ledger),
):
    amount = await ledger.set_contribution_amount(team_id, caller.user_id, body.amount)
    return {"success": True, "amount": amount}


@router.get("/contribution")
async def get_contribution_summary(
    team_id: UUID,
    caller: Caller = Depends(get_caller),
    ledger: ContributionLedger = Depends(get_contribution_ledger),
    membership: MembershipManager = Depends(get_membership_manager),
):
    await membership.require_member(team_id, caller.user_id)
    return await ledger.get_contribution_summary(team_id)


@router.put("/members/{member_id}/payment")
async def update_payment_status(
    team_id: UUID,
    member_id: str,
    body: PaymentStatusUpdate,
    caller: Caller = Depends(get_caller),
    ledger: ContributionLedger = Depends(get_contribution_ledger),
):
    await ledger.update_payment_status(team_id, member_id, body.has_paid, caller.user_id)
    return {"success": True}
