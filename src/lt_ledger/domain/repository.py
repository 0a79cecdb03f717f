"""Repository Protocol for lt_ledger, implemented by LedgerRepository.

Unit tests inject an in-memory double that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_ledger.domain.models import AccountBalance, BalanceTransaction


class LedgerRepositoryProtocol(Protocol):
    async def get_balance(self, db: AsyncSession, user_id: int) -> AccountBalance | None: ...

    async def lock_balance(self, db: AsyncSession, user_id: int) -> AccountBalance | None: ...

    async def debit(self, db: AsyncSession, user_id: int, amount: int) -> AccountBalance: ...

    async def credit(self, db: AsyncSession, user_id: int, amount: int) -> AccountBalance: ...

    async def append_transaction(
        self,
        db: AsyncSession,
        user_id: int,
        amount: int,
        kind: str,
        balance_after: int,
        reference_id: str | None,
        description: str | None,
    ) -> BalanceTransaction: ...

    async def get_transaction_by_reference(
        self, db: AsyncSession, user_id: int, kind: str, reference_id: str
    ) -> BalanceTransaction | None: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        cursor_id: int | None,
        limit: int,
        kind: str | None,
    ) -> list[BalanceTransaction]: ...
