"""Invite Tokens — tests for token minting and expiry arithmetic."""

import hashlib
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from teampool.core.invite_token import TOKEN_LENGTH, compute_expiry, mint_invite_token
from teampool.models.team_invitation import TeamInvitation

ISSUED = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def test_token_is_sha256_of_id_and_issue_millis():
    invite_id = UUID("12345678-1234-5678-1234-567812345678")
    millis = int(ISSUED.timestamp() * 1000)
    expected = hashlib.sha256(f"{invite_id}{millis}".encode()).hexdigest()
    assert mint_invite_token(invite_id, ISSUED) == expected


def test_token_is_64_hex_chars():
    token = mint_invite_token(uuid4(), ISSUED)
    assert len(token) == TOKEN_LENGTH == 64
    assert set(token) <= set("0123456789abcdef")


def test_fresh_ids_give_distinct_tokens():
    assert mint_invite_token(uuid4(), ISSUED) != mint_invite_token(uuid4(), ISSUED)


def test_expiry_is_ttl_days_after_issue():
    assert compute_expiry(ISSUED, 7) == ISSUED + timedelta(days=7)


def test_token_column_fits_minted_tokens():
    assert TeamInvitation.__table__.c.token.type.length == TOKEN_LENGTH
