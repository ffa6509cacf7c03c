"""Declarative Base — metadata shared by every ledger table.

Invariants:
    - Every model inherits from Base; create_all and alembic autogenerate see one MetaData
    - Engines and sessions live in infrastructure/database.py, never here
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
