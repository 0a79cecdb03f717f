"""LedgerApplicationService — read side of the ledger.

Balances are only mutated inside the purchase and refund transactions
(lt_ticket); this service serves the agent's own balance and history.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.lt_common.errors import AccountNotFoundError
from src.lt_common.money import centavos_to_display
from src.lt_ledger.application.schemas import (
    BalanceResponse,
    TransactionItem,
    TransactionListResponse,
    cursor_decode,
    cursor_encode,
)
from src.lt_ledger.domain.repository import LedgerRepositoryProtocol
from src.lt_ledger.infrastructure.persistence import LedgerRepository


class LedgerApplicationService:
    def __init__(self, repo: LedgerRepositoryProtocol | None = None) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()

    async def get_balance(self, db: AsyncSession, user_id: int) -> BalanceResponse:
        balance = await self._repo.get_balance(db, user_id)
        if balance is None:
            raise AccountNotFoundError(user_id)
        return BalanceResponse.from_centavos(
            user_id=user_id,
            current=balance.current_balance,
            loaded=balance.total_loaded,
            used=balance.total_used,
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: int,
        cursor: str | None,
        limit: int,
        kind: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = await self._repo.list_transactions(db, user_id, cursor_id, limit + 1, kind)
        has_more = len(rows) > limit
        page = rows[:limit]

        items = [
            TransactionItem(
                id=t.id,
                kind=t.kind,
                status=t.status,
                amount_centavos=t.amount,
                amount_display=centavos_to_display(t.amount),
                balance_after_centavos=t.balance_after,
                balance_after_display=centavos_to_display(t.balance_after),
                reference_id=t.reference_id,
                description=t.description,
                created_at=t.created_at.isoformat() if t.created_at else "",
            )
            for t in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(items=items, next_cursor=next_cursor, has_more=has_more)
