"""ExpenseParticipant ORM — links an expense to a member who shares it.

Invariants:
    - Composite primary key (expense_id, user_id, team_id)
    - expense_id FK cascades: rows are removed only when the expense is deleted or its
      participant set is replaced
    - Membership is checked when the row is written, never enforced afterwards: a member
      leaving the team stays a participant of the expenses they shared

Design Decisions:
    - team_id denormalized (FK to teams): team-wide deletes and member lookups without
      joining expenses
"""

import uuid

from sqlalchemy import Integer, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from teampool.db.base import Base


class ExpenseParticipant(Base):
    """Participant entity — owned by its expense."""
    __tablename__ = "expense_participants"

    expense_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("expenses.id", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    team_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"),
        primary_key=True,
    )
