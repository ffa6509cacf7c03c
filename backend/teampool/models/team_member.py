"""TeamMember ORM — membership of a user in a team, with payment flag.

Invariants:
    - Composite primary key (team_id, user_id): a user joins a team at most once
    - name/email are a snapshot of the profile at join time (not live-synced)
    - has_paid defaults to false and is only changed by the team owner

Design Decisions:
    - Profile snapshot over identity lookup: member names stay stable after provider-side edits
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from teampool.db.base import Base


class TeamMember(Base):
    """Membership entity — links a user to a team."""
    __tablename__ = "team_members"

    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    has_paid: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
