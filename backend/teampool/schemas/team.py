"""Team Schemas — request bodies and responses for team, invitation, and contribution routes.

Invariants:
    - TeamCreate.name: 1-255 chars, stripped, non-empty
    - ContributionUpdate.amount must parse as a number; sign is checked by the ledger
    - PaymentStatusUpdate.has_paid is a strict boolean
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, field_validator


class TeamCreate(BaseModel):
    """Team creation — validates name length and whitespace."""
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class TeamCreated(BaseModel):
    id: UUID


class ContributionUpdate(BaseModel):
    amount: Decimal


class PaymentStatusUpdate(BaseModel):
    has_paid: StrictBool


class InviteResponse(BaseModel):
    """Invitation minted for a team — link is built from settings.app_url."""
    team_id: UUID
    token: str
    invite_link: str
    expires_at: datetime


class JoinResponse(BaseModel):
    team_id: UUID
