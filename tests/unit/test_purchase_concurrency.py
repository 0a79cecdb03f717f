"""Concurrent purchases racing for the same cap, balance and idempotency key."""

import asyncio

from src.lt_ticket.domain.errors import DuplicateBet, InsufficientFunds, LimitExceeded
from src.lt_ticket.domain.models import BetRequest, TicketReceipt

from store_doubles import FakeSession


async def test_last_slot_of_cap_goes_to_exactly_one_buyer(coordinator, store, open_draw) -> None:
    store.overrides[(open_draw.id, "123", "standard")] = 1000
    buyers = list(range(1, 21))
    for user_id in buyers:
        store.add_balance(user_id, 100_000)

    results = await asyncio.gather(*[
        coordinator.purchase(
            FakeSession(), user_id, open_draw.id, [BetRequest("standard", "123", 1000)]
        )
        for user_id in buyers
    ])

    receipts = [r for r in results if isinstance(r, TicketReceipt)]
    rejected = [r for r in results if isinstance(r, LimitExceeded)]
    assert len(receipts) == 1
    assert len(rejected) == 19
    assert all(r.remaining == 0 for r in rejected)
    assert store.total_for(open_draw.id, "123", "standard") == 1000
    assert sum(b.total_used for b in store.balances.values()) == 1000


async def test_totals_never_exceed_cap_under_partial_fills(coordinator, store, open_draw) -> None:
    store.overrides[(open_draw.id, "555", "standard")] = 5000
    for user_id in range(1, 11):
        store.add_balance(user_id, 100_000)

    results = await asyncio.gather(*[
        coordinator.purchase(
            FakeSession(), user_id, open_draw.id, [BetRequest("standard", "555", 700)]
        )
        for user_id in range(1, 11)
    ])

    accepted = sum(1 for r in results if isinstance(r, TicketReceipt))
    assert accepted == 7
    assert store.total_for(open_draw.id, "555", "standard") == 4900
    assert store.totals[(open_draw.id, "555", "standard")].ticket_count == 7


async def test_same_agent_cannot_overdraw_with_parallel_tickets(
    coordinator, store, open_draw
) -> None:
    store.add_balance(1, 2500)

    results = await asyncio.gather(*[
        coordinator.purchase(
            FakeSession(), 1, open_draw.id, [BetRequest("standard", f"{n:03d}", 1000)]
        )
        for n in range(5)
    ])

    assert sum(1 for r in results if isinstance(r, TicketReceipt)) == 2
    assert sum(1 for r in results if isinstance(r, InsufficientFunds)) == 3
    assert store.balances[1].current_balance == 500


async def test_parallel_same_bet_by_one_agent_yields_one_ticket(
    coordinator, store, open_draw
) -> None:
    store.add_balance(1, 100_000)

    results = await asyncio.gather(*[
        coordinator.purchase(FakeSession(), 1, open_draw.id, [BetRequest("rambolito", "123", 500)])
        for _ in range(5)
    ])

    assert sum(1 for r in results if isinstance(r, TicketReceipt)) == 1
    assert all(isinstance(r, DuplicateBet) for r in results if not isinstance(r, TicketReceipt))
    assert store.balances[1].current_balance == 99_500


async def test_same_idempotency_key_in_parallel_creates_one_ticket(
    coordinator, store, open_draw
) -> None:
    store.add_balance(1, 100_000)
    bets = [BetRequest("standard", "321", 1000)]

    results = await asyncio.gather(*[
        coordinator.purchase(FakeSession(), 1, open_draw.id, bets, "retry-42")
        for _ in range(4)
    ])

    assert all(isinstance(r, TicketReceipt) for r in results)
    assert len({r.ticket_id for r in results}) == 1
    assert sum(1 for r in results if not r.replayed) == 1
    assert len(store.tickets) == 1
    assert store.balances[1].current_balance == 99_000


async def test_opposite_bet_orders_do_not_deadlock(coordinator, store, open_draw) -> None:
    store.add_balance(1, 100_000)
    store.add_balance(2, 100_000)

    results = await asyncio.wait_for(
        asyncio.gather(
            coordinator.purchase(
                FakeSession(), 1, open_draw.id,
                [BetRequest("standard", "111", 100), BetRequest("standard", "999", 100)],
            ),
            coordinator.purchase(
                FakeSession(), 2, open_draw.id,
                [BetRequest("standard", "999", 100), BetRequest("standard", "111", 100)],
            ),
        ),
        timeout=5,
    )

    assert all(isinstance(r, TicketReceipt) for r in results)
    assert store.total_for(open_draw.id, "111", "standard") == 200
    assert store.total_for(open_draw.id, "999", "standard") == 200
