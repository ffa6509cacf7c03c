"""Invite Tokens — minting and expiry for team invitation links.

Invariants:
    - Token is the SHA-256 hex digest of a fresh UUID4 plus the issuance time in ms
    - Token length is always 64 characters
    - Expiry is issued_at + ttl; redeemable only while now < expires_at
"""

import hashlib
from datetime import datetime, timedelta
from uuid import UUID

TOKEN_LENGTH = 64


def mint_invite_token(invite_id: UUID, issued_at: datetime) -> str:
    """Hash the invitation id with its issuance timestamp into an opaque token."""
    issued_ms = int(issued_at.timestamp() * 1000)
    return hashlib.sha256(f"{invite_id}{issued_ms}".encode()).hexdigest()


def compute_expiry(issued_at: datetime, ttl_days: int) -> datetime:
    return issued_at + timedelta(days=ttl_days)
