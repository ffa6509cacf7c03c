"""Field Validation — pure parsers for every writable ledger field.

Invariants:
    - Amounts are positive, finite, and fit NUMERIC(10,2); returned quantized to cents
    - Booleans are never accepted as amounts (True is not 1.00)
    - Expense dates resolve to a calendar date (date, datetime, or ISO-8601 string)
    - Participant lists are array-shaped, non-empty, de-duplicated in input order

Design Decisions:
    - Decimal over float: contribution totals are multiplied, float drift is visible in cents
    - Validation raises typed errors (core/errors.py) so callers never see ValueError
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from teampool.core.errors import InvalidAmountError, InvalidFieldError

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")  # NUMERIC(10,2)


def parse_amount(value: object) -> Decimal:
    """Parse a positive monetary amount, rejecting anything non-numeric."""
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidAmountError(value)
    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        raise InvalidAmountError(value)
    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    if amount <= 0 or amount > MAX_AMOUNT:
        raise InvalidAmountError(value)
    return amount


def parse_expense_date(value: object) -> date:
    """Resolve value to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise InvalidFieldError(
                f"expense_date '{value}' is not a valid date", "expense_date",
            )
    raise InvalidFieldError(
        "expense_date must be a date or ISO-8601 string", "expense_date",
    )


def parse_participant_ids(value: object) -> list[str]:
    """Validate an array of user ids; duplicates collapse to one entry."""
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        raise InvalidFieldError(
            "participant_user_ids must be an array of user ids",
            "participant_user_ids",
        )
    ids: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise InvalidFieldError(
                f"invalid participant id: {item!r}", "participant_user_ids",
            )
        if item not in ids:
            ids.append(item)
    if not ids:
        raise InvalidFieldError(
            "an expense needs at least one participant", "participant_user_ids",
        )
    return ids


def require_text(value: object, field: str, max_length: int) -> str:
    """Strip and validate a required text field."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidFieldError(f"{field} cannot be empty", field)
    text = value.strip()
    if len(text) > max_length:
        raise InvalidFieldError(
            f"{field} exceeds {max_length} characters", field,
        )
    return text
