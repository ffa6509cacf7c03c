"""TeamInvitation ORM — a time-limited token that lets its bearer join a team.

Invariants:
    - token is unique across all invitations (collision = constraint violation)
    - Redeemable only while now < expires_at
    - Redemption does not consume or delete the row; it simply expires
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from teampool.core.invite_token import TOKEN_LENGTH
from teampool.db.base import Base


class TeamInvitation(Base):
    """Invitation entity — owner-issued join token."""
    __tablename__ = "team_invitations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
    )
    token: Mapped[str] = mapped_column(
        String(TOKEN_LENGTH), nullable=False, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
