"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TeamId wraps UUID, UserId wraps the identity provider's opaque string id
    - ExpenseId is the sequential integer key of the expenses table
    - MemberProfile is a snapshot: copied into team_members at join time, never re-synced

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - MemberProfile frozen dataclass: profile snapshot cannot be mutated after capture
"""

from dataclasses import dataclass
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TeamId = NewType("TeamId", UUID)
UserId = NewType("UserId", str)
ExpenseId = NewType("ExpenseId", int)


# ─── Value Types ─────────────────────────────────────────────────

@dataclass(frozen=True)
class MemberProfile:
    """Display name and email issued by the identity provider."""
    name: str
    email: str


@dataclass(frozen=True)
class Caller:
    """Authenticated caller as supplied by the identity gateway."""
    user_id: UserId
    profile: MemberProfile
