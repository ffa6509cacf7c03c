"""Team ORM — the aggregate root owning memberships, invitations, and expenses.

Invariants:
    - id is UUID primary key (application default)
    - name is globally unique and non-empty
    - created_by is the immutable owner; the owner always has a membership row
    - contribution_amount is NUMERIC(10,2), default 0

Design Decisions:
    - No ORM relationships: children are removed with explicit DELETE statements inside
      one transaction, backed by ON DELETE CASCADE foreign keys
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Numeric, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from teampool.db.base import Base


class Team(Base):
    """Team entity — a group of users pooling money."""
    __tablename__ = "teams"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    contribution_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
