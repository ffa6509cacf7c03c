"""Membership Manager — invitation minting, redemption, expiry, and leaving.

Invariants:
    - Tokens are 64 hex chars and redeemable only strictly before expires_at
    - Joining twice with the same token is a no-op returning the same team id
    - The creator cannot leave; a non-member leaving is NotAMemberError
    - A token collision is retried with a fresh identifier
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from teampool.core.errors import (
    ConstraintViolationError, InvalidOrExpiredInviteError, NotAMemberError,
    OwnerCannotLeaveError, ResourceNotFoundError, UnauthorizedError,
)
from teampool.models.team_invitation import TeamInvitation
from teampool.models.team_member import TeamMember
from teampool.services.membership import MembershipManager
import teampool.services.membership as membership_module

from tests.services.ledger_fixtures import OWNER_ID, T0, profile_for


async def _member_count(db, team_id):
    return await db.scalar(
        select(func.count()).select_from(TeamMember).where(TeamMember.team_id == team_id)
    )


# -- generate_invite_link -------------------------------------------------------

async def test_invite_expires_seven_days_after_issue(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)

    assert invitation["team_id"] == team_id
    assert len(invitation["token"]) == 64
    int(invitation["token"], 16)
    assert invitation["expires_at"] == T0 + timedelta(days=7)


async def test_each_invite_gets_a_distinct_token(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    first = await manager.generate_invite_link(team_id, OWNER_ID)
    second = await manager.generate_invite_link(team_id, OWNER_ID)
    assert first["token"] != second["token"]


async def test_non_owner_cannot_invite(test_db, team_with_members, clock):
    manager = MembershipManager(test_db, clock=clock)
    with pytest.raises(UnauthorizedError):
        await manager.generate_invite_link(team_with_members, "u1")


async def test_token_collision_is_retried(test_db, team_id, clock, monkeypatch):
    manager = MembershipManager(test_db, clock=clock)
    taken = await manager.generate_invite_link(team_id, OWNER_ID)

    tokens = iter([taken["token"], "f" * 64])
    monkeypatch.setattr(
        membership_module, "mint_invite_token", lambda invite_id, issued_at: next(tokens),
    )

    invitation = await manager.generate_invite_link(team_id, OWNER_ID)
    assert invitation["token"] == "f" * 64
    count = await test_db.scalar(select(func.count()).select_from(TeamInvitation))
    assert count == 2


async def test_token_collision_surfaces_after_max_attempts(
    test_db, team_id, clock, monkeypatch,
):
    manager = MembershipManager(test_db, max_token_attempts=2, clock=clock)
    taken = await manager.generate_invite_link(team_id, OWNER_ID)
    monkeypatch.setattr(
        membership_module, "mint_invite_token",
        lambda invite_id, issued_at: taken["token"],
    )

    with pytest.raises(ConstraintViolationError):
        await manager.generate_invite_link(team_id, OWNER_ID)


# -- join_team_with_invite ------------------------------------------------------

async def test_join_creates_membership_with_profile_snapshot(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)

    joined = await manager.join_team_with_invite(
        invitation["token"], "u9", profile_for("u9"),
    )

    assert joined == team_id
    member = await test_db.get(TeamMember, (team_id, "u9"))
    assert member.name == "Name u9"
    assert member.email == "u9@example.com"
    assert member.has_paid is False


async def test_rejoin_is_idempotent(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)

    first = await manager.join_team_with_invite(invitation["token"], "u1", profile_for("u1"))
    second = await manager.join_team_with_invite(invitation["token"], "u1", profile_for("u1"))

    assert first == second == team_id
    assert await _member_count(test_db, team_id) == 2


async def test_token_redeemable_just_before_expiry(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)

    clock.now = T0 + timedelta(days=7) - timedelta(seconds=1)
    assert await manager.join_team_with_invite(
        invitation["token"], "u1", profile_for("u1"),
    ) == team_id


async def test_token_rejected_at_exact_expiry(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)

    clock.now = T0 + timedelta(days=7)
    with pytest.raises(InvalidOrExpiredInviteError):
        await manager.join_team_with_invite(invitation["token"], "u1", profile_for("u1"))
    assert await _member_count(test_db, team_id) == 1


async def test_unknown_token_rejected(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    with pytest.raises(InvalidOrExpiredInviteError):
        await manager.join_team_with_invite("0" * 64, "u1", profile_for("u1"))


async def test_owner_redeeming_own_invite_is_noop(test_db, team_id, clock):
    manager = MembershipManager(test_db, clock=clock)
    invitation = await manager.generate_invite_link(team_id, OWNER_ID)
    assert await manager.join_team_with_invite(
        invitation["token"], OWNER_ID, profile_for("other"),
    ) == team_id
    assert await _member_count(test_db, team_id) == 1


# -- leave_team -----------------------------------------------------------------

async def test_member_can_leave(test_db, team_with_members):
    manager = MembershipManager(test_db)
    await manager.leave_team(team_with_members, "u2")
    assert await test_db.get(TeamMember, (team_with_members, "u2")) is None
    assert await _member_count(test_db, team_with_members) == 3


async def test_owner_cannot_leave(test_db, team_with_members):
    with pytest.raises(OwnerCannotLeaveError):
        await MembershipManager(test_db).leave_team(team_with_members, OWNER_ID)
    assert await _member_count(test_db, team_with_members) == 4


async def test_non_member_cannot_leave(test_db, team_id):
    with pytest.raises(NotAMemberError):
        await MembershipManager(test_db).leave_team(team_id, "stranger")


async def test_leave_unknown_team_raises_not_found(test_db):
    from uuid import uuid4
    with pytest.raises(ResourceNotFoundError):
        await MembershipManager(test_db).leave_team(uuid4(), "u1")


async def test_require_member_gates_non_members(test_db, team_with_members):
    manager = MembershipManager(test_db)
    await manager.require_member(team_with_members, "u3")
    with pytest.raises(NotAMemberError):
        await manager.require_member(team_with_members, "stranger")
