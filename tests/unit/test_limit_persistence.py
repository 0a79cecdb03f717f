"""Unit tests for LimitRepository using MagicMock AsyncSession."""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.lt_common.errors import InternalError
from src.lt_limits.infrastructure.persistence import LimitRepository


def _total_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.draw_id = kwargs.get("draw_id", 1)
    row.bet_combination = kwargs.get("bet_combination", "123")
    row.bet_type = kwargs.get("bet_type", "standard")
    row.total_amount = kwargs.get("total_amount", 0)
    row.ticket_count = kwargs.get("ticket_count", 0)
    row.cap = kwargs.get("cap", 1_000_000)
    return row


def _result(one: Any = None, rows: list[Any] | None = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = one
    result.fetchall.return_value = rows or []
    return result


class TestEffectiveCap:
    async def test_returns_cap(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_total_row(cap=2_000_000))
        assert await LimitRepository().get_effective_cap(db, 1, "123", "standard") == 2_000_000

    async def test_unconfigured_is_none(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_total_row(cap=None))
        assert await LimitRepository().get_effective_cap(db, 1, "123", "standard") is None


class TestLockTotal:
    async def test_inserts_then_locks(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(), _result(_total_row(total_amount=950_000))]

        total = await LimitRepository().lock_total(db, 1, "123", "standard")

        assert total.total_amount == 950_000
        first_sql, second_sql = (str(c.args[0]) for c in db.execute.call_args_list)
        assert "ON CONFLICT" in first_sql
        assert "FOR UPDATE" in second_sql

    async def test_missing_row_after_insert(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(), _result(None)]
        with pytest.raises(InternalError):
            await LimitRepository().lock_total(db, 1, "123", "standard")


class TestAddToTotal:
    async def test_passes_signed_deltas(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_total_row(total_amount=0, ticket_count=0))

        await LimitRepository().add_to_total(db, 1, "123", "standard", -1000, -1)

        params = db.execute.call_args.args[1]
        assert params["amount"] == -1000
        assert params["ticket_delta"] == -1

    async def test_missing_row(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(None)
        with pytest.raises(InternalError):
            await LimitRepository().add_to_total(db, 1, "123", "standard", 100, 1)


async def test_list_totals_maps_caps() -> None:
    db = AsyncMock()
    db.execute.return_value = _result(rows=[
        _total_row(total_amount=1_000_000, ticket_count=12, cap=1_000_000),
        _total_row(bet_combination="456", total_amount=100, ticket_count=1, cap=None),
    ])

    rows = await LimitRepository().list_totals(db, 1, None, None, False, 500)

    assert rows[0].is_sold_out
    assert rows[1].cap is None
    assert not rows[1].is_sold_out
    assert db.execute.call_args.args[1]["sold_out_only"] is False


async def test_prize_multipliers_are_decimals() -> None:
    row = MagicMock()
    row.prize_category = "standard"
    row.multiplier = "450.00"
    db = AsyncMock()
    db.execute.return_value = _result(rows=[row])

    assert await LimitRepository().get_prize_multipliers(db) == {"standard": Decimal("450.00")}
