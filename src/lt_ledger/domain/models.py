"""Domain models for lt_ledger — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class AccountBalance:
    user_id: int
    current_balance: int    # centavos, never negative
    total_loaded: int = 0   # centavos, lifetime loads
    total_used: int = 0     # centavos, purchases net of refunds
    updated_at: datetime | None = None


@dataclass
class BalanceTransaction:
    id: int                          # BIGSERIAL
    user_id: int
    amount: int                      # centavos, negative=debit positive=credit
    kind: str                        # TransactionKind value
    status: str                      # TransactionStatus value
    balance_after: int               # centavos, current_balance snapshot after op
    description: str | None = None
    reference_id: str | None = None  # ticket id for purchase/refund
    created_at: datetime | None = None
