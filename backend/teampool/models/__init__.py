"""ORM Models — SQLAlchemy declarative models for all ledger entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Team is the aggregate root; every other row is scoped by team_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from teampool.models.team import Team  # noqa: F401
from teampool.models.team_member import TeamMember  # noqa: F401
from teampool.models.team_invitation import TeamInvitation  # noqa: F401
from teampool.models.expense import Expense  # noqa: F401
from teampool.models.expense_participant import ExpenseParticipant  # noqa: F401
