"""LedgerRepository — concrete implementation of LedgerRepositoryProtocol.

Balance mutations are atomic PostgreSQL UPDATE ... RETURNING statements.
A debit returning 0 rows means the balance could not cover the amount.

Transaction ownership: the CALLER (application service / coordinator) commits
or rolls back. Nothing here calls commit().
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.enums import TransactionStatus
from src.lt_common.errors import AccountNotFoundError, InsufficientBalanceError, InternalError
from src.lt_ledger.domain.models import AccountBalance, BalanceTransaction

_BALANCE_COLUMNS = "user_id, current_balance, total_loaded, total_used, updated_at"

_GET_BALANCE_SQL = text(f"""
    SELECT {_BALANCE_COLUMNS}
    FROM user_balances
    WHERE user_id = :user_id
""")

_LOCK_BALANCE_SQL = text(f"""
    SELECT {_BALANCE_COLUMNS}
    FROM user_balances
    WHERE user_id = :user_id
    FOR UPDATE
""")

_DEBIT_SQL = text(f"""
    UPDATE user_balances
    SET current_balance = current_balance - :amount,
        total_used = total_used + :amount,
        updated_at = NOW()
    WHERE user_id = :user_id AND current_balance >= :amount
    RETURNING {_BALANCE_COLUMNS}
""")

_CREDIT_SQL = text(f"""
    UPDATE user_balances
    SET current_balance = current_balance + :amount,
        total_used = GREATEST(total_used - :amount, 0),
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING {_BALANCE_COLUMNS}
""")

_TRANSACTION_COLUMNS = (
    "id, user_id, amount, kind, status, balance_after, description, reference_id, created_at"
)

_INSERT_TRANSACTION_SQL = text(f"""
    INSERT INTO balance_transactions
        (user_id, amount, kind, status, balance_after, description, reference_id)
    VALUES
        (:user_id, :amount, :kind, :status, :balance_after, :description, :reference_id)
    RETURNING {_TRANSACTION_COLUMNS}
""")

_GET_TRANSACTION_BY_REFERENCE_SQL = text(f"""
    SELECT {_TRANSACTION_COLUMNS}
    FROM balance_transactions
    WHERE user_id = :user_id AND kind = :kind AND reference_id = :reference_id
    ORDER BY id DESC
    LIMIT 1
""")

_LIST_TRANSACTIONS_SQL = text(f"""
    SELECT {_TRANSACTION_COLUMNS}
    FROM balance_transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < :cursor_id)
      AND (CAST(:kind AS VARCHAR) IS NULL OR kind = :kind)
    ORDER BY id DESC
    LIMIT :limit
""")


def _row_to_balance(row: object) -> AccountBalance:
    return AccountBalance(
        user_id=row.user_id,  # type: ignore[attr-defined]
        current_balance=row.current_balance,  # type: ignore[attr-defined]
        total_loaded=row.total_loaded,  # type: ignore[attr-defined]
        total_used=row.total_used,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_transaction(row: object) -> BalanceTransaction:
    return BalanceTransaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        kind=row.kind,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    """Concrete repository; all balance operations atomic at the SQL level."""

    async def get_balance(self, db: AsyncSession, user_id: int) -> AccountBalance | None:
        result = await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_balance(row) if row else None

    async def lock_balance(self, db: AsyncSession, user_id: int) -> AccountBalance | None:
        """Exclusive row lock held until the caller's transaction ends."""
        result = await db.execute(_LOCK_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_balance(row) if row else None

    async def debit(self, db: AsyncSession, user_id: int, amount: int) -> AccountBalance:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_balance(db, user_id)
            if current is None:
                raise AccountNotFoundError(user_id)
            raise InsufficientBalanceError(amount, current.current_balance)
        return _row_to_balance(row)

    async def credit(self, db: AsyncSession, user_id: int, amount: int) -> AccountBalance:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(user_id)
        return _row_to_balance(row)

    async def append_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        amount: int,
        kind: str,
        balance_after: int,
        reference_id: str | None,
        description: str | None,
    ) -> BalanceTransaction:
        result = await db.execute(
            _INSERT_TRANSACTION_SQL,
            {
                "user_id": user_id,
                "amount": amount,
                "kind": kind,
                "status": TransactionStatus.COMPLETED.value,
                "balance_after": balance_after,
                "description": description,
                "reference_id": reference_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Balance transaction insert returned no rows")
        return _row_to_transaction(row)

    async def get_transaction_by_reference(
        self, db: AsyncSession, user_id: int, kind: str, reference_id: str
    ) -> BalanceTransaction | None:
        result = await db.execute(
            _GET_TRANSACTION_BY_REFERENCE_SQL,
            {"user_id": user_id, "kind": kind, "reference_id": reference_id},
        )
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        cursor_id: int | None,
        limit: int,
        kind: str | None,
    ) -> list[BalanceTransaction]:
        result = await db.execute(
            _LIST_TRANSACTIONS_SQL,
            {"user_id": user_id, "cursor_id": cursor_id, "kind": kind, "limit": limit},
        )
        return [_row_to_transaction(row) for row in result.fetchall()]
