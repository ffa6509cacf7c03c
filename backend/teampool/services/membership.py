"""Membership & Invitation Manager — invite tokens, joining, and leaving teams.

Invariants:
    - Only the team creator mints invitations
    - A token is redeemable only while now < expires_at (checked in SQL)
    - Joining is idempotent: an existing membership is left untouched, never an error
    - The creator can never leave; they must delete the team instead
    - Token collisions are retried with a fresh identifier, then surfaced

Design Decisions:
    - Clock injected (clock: Callable[[], datetime]) so expiry is testable without sleeping
    - Membership snapshot (name/email) taken from the profile passed at join time
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from teampool.core.domain_types import MemberProfile, TeamId
from teampool.core.errors import (
    ConstraintViolationError, ErrorContext, InvalidOrExpiredInviteError,
    NotAMemberError, OwnerCannotLeaveError,
)
from teampool.core.invite_token import compute_expiry, mint_invite_token
from teampool.infrastructure.database import atomic
from teampool.models.team_invitation import TeamInvitation
from teampool.models.team_member import TeamMember
from teampool.services.team_access import (
    get_team_or_404, is_member, require_member, require_team_owner,
)

logger = logging.getLogger(__name__)

DEFAULT_INVITE_TTL_DAYS = 7
DEFAULT_TOKEN_ATTEMPTS = 3


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MembershipManager:
    """Join/leave flows and invitation token lifecycle."""

    def __init__(
        self,
        db: AsyncSession,
        invite_ttl_days: int = DEFAULT_INVITE_TTL_DAYS,
        max_token_attempts: int = DEFAULT_TOKEN_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.invite_ttl_days = invite_ttl_days
        self.max_token_attempts = max(1, max_token_attempts)
        self.clock = clock

    async def generate_invite_link(self, team_id: UUID, requester_id: str) -> dict:
        """Mint an invitation token for the team. Owner only."""
        await require_team_owner(self.db, team_id, requester_id, "invite members")

        for attempt in range(1, self.max_token_attempts + 1):
            issued_at = self.clock()
            invite_id = uuid.uuid4()
            token = mint_invite_token(invite_id, issued_at)
            expires_at = compute_expiry(issued_at, self.invite_ttl_days)
            try:
                async with atomic(self.db):
                    self.db.add(TeamInvitation(
                        id=invite_id,
                        team_id=team_id,
                        token=token,
                        created_at=issued_at,
                        expires_at=expires_at,
                    ))
            except ConstraintViolationError:
                if attempt == self.max_token_attempts:
                    raise
                logger.warning(
                    f"Invite token collision, retrying ({attempt}/{self.max_token_attempts})",
                    extra={"team_id": team_id},
                )
                continue

            logger.info(
                "Invitation issued", extra={"team_id": team_id, "user_id": requester_id},
            )
            return {"team_id": team_id, "token": token, "expires_at": expires_at}

    async def join_team_with_invite(
        self, token: str, user_id: str, profile: MemberProfile,
    ) -> TeamId:
        """Redeem a live token. Re-joining an already-joined team is a no-op."""
        now = self.clock()
        team_id = await self.db.scalar(
            select(TeamInvitation.team_id)
            .where(TeamInvitation.token == token)
            .where(TeamInvitation.expires_at > now)
        )
        if team_id is None:
            raise InvalidOrExpiredInviteError(ErrorContext(user_id=user_id))

        if await is_member(self.db, team_id, user_id):
            return TeamId(team_id)

        try:
            async with atomic(self.db):
                self.db.add(TeamMember(
                    team_id=team_id,
                    user_id=user_id,
                    name=profile.name,
                    email=profile.email,
                ))
        except ConstraintViolationError:
            # A concurrent redemption by the same user already inserted the row
            if await is_member(self.db, team_id, user_id):
                return TeamId(team_id)
            raise

        logger.info(
            "Member joined via invitation", extra={"team_id": team_id, "user_id": user_id},
        )
        return TeamId(team_id)

    async def leave_team(self, team_id: UUID, user_id: str) -> None:
        team = await get_team_or_404(self.db, team_id)
        context = ErrorContext(team_id=str(team_id), user_id=user_id)
        if team.created_by == user_id:
            raise OwnerCannotLeaveError(context)
        if not await is_member(self.db, team_id, user_id):
            raise NotAMemberError(user_id, context)

        async with atomic(self.db):
            await self.db.execute(
                delete(TeamMember)
                .where(TeamMember.team_id == team_id)
                .where(TeamMember.user_id == user_id)
            )
        logger.info("Member left team", extra={"team_id": team_id, "user_id": user_id})

    async def require_member(self, team_id: UUID, user_id: str) -> None:
        """Gate team-scoped reads and expense writes on membership."""
        await require_member(self.db, team_id, user_id)
