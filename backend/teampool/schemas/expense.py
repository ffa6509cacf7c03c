"""Expense Schemas — request body for creating and replacing an expense.

Invariants:
    - description: 1-2000 chars, stripped
    - expense_date resolves to a calendar date (ISO-8601)
    - participant_user_ids is an array with at least one id
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


class ExpenseWrite(BaseModel):
    """Create/update payload — update replaces every field and the participant set."""
    description: str = Field(min_length=1, max_length=2000)
    amount: Decimal
    expense_date: date
    participant_user_ids: list[str] = Field(min_length=1)

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty or whitespace")
        return v


class ExpenseCreated(BaseModel):
    id: int
