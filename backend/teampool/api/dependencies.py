"""Request Dependencies — caller identity and per-request service construction.

Invariants:
    - Identity comes from headers set by the upstream identity gateway; this service never
      authenticates credentials itself
    - A request without X-User-Id fails with AuthenticationRequiredError (401)
    - Each service instance wraps the request's own AsyncSession

Design Decisions:
    - Header-based identity keeps the identity provider outside this process
      (the gateway strips client-supplied X-User-* headers)
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from teampool.config import get_settings
from teampool.core.domain_types import Caller, MemberProfile, UserId
from teampool.core.errors import AuthenticationRequiredError
from teampool.infrastructure.database import get_db
from teampool.services.contribution_ledger import ContributionLedger
from teampool.services.expense_ledger import ExpenseLedger
from teampool.services.membership import MembershipManager
from teampool.services.team_registry import TeamRegistry


async def get_caller(
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    x_user_name: str | None = Header(None),
) -> Caller:
    """Resolve the authenticated caller from identity gateway headers."""
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationRequiredError()
    email = (x_user_email or "").strip()
    name = (x_user_name or "").strip() or email or x_user_id
    return Caller(
        user_id=UserId(x_user_id.strip()),
        profile=MemberProfile(name=name, email=email),
    )


def get_team_registry(db: AsyncSession = Depends(get_db)) -> TeamRegistry:
    return TeamRegistry(db)


def get_membership_manager(db: AsyncSession = Depends(get_db)) -> MembershipManager:
    settings = get_settings()
    return MembershipManager(
        db,
        invite_ttl_days=settings.invite_ttl_days,
        max_token_attempts=settings.invite_token_max_attempts,
    )


def get_contribution_ledger(db: AsyncSession = Depends(get_db)) -> ContributionLedger:
    return ContributionLedger(db)


def get_expense_ledger(db: AsyncSession = Depends(get_db)) -> ExpenseLedger:
    return ExpenseLedger(db)
