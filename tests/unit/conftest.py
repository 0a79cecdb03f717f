"""Fixtures wiring the in-memory store doubles into services under test."""

import itertools
from datetime import datetime
from decimal import Decimal

import pytest

from src.lt_common.enums import TimeSlot
from src.lt_draw.domain.models import Draw
from src.lt_ticket.application.coordinator import PurchaseCoordinator
from store_doubles import (
    MANILA,
    TODAY,
    FakeDrawRepository,
    FakeLedgerRepository,
    FakeLimitRepository,
    FakeTicketRepository,
    FixedClock,
    InMemoryStore,
)


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.global_caps = {"standard": 1_000_000, "rambolito": 500_000}
    s.prize_multipliers = {
        "standard": Decimal("450"),
        "rambolito_double": Decimal("150"),
        "rambolito": Decimal("75"),
    }
    return s


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 10, 0, tzinfo=MANILA))


@pytest.fixture
def open_draw(store: InMemoryStore) -> Draw:
    return store.add_draw(TODAY, TimeSlot.NINE_PM)


@pytest.fixture
def ledger_repo(store: InMemoryStore) -> FakeLedgerRepository:
    return FakeLedgerRepository(store)


@pytest.fixture
def limit_repo(store: InMemoryStore) -> FakeLimitRepository:
    return FakeLimitRepository(store)


@pytest.fixture
def draw_repo(store: InMemoryStore) -> FakeDrawRepository:
    return FakeDrawRepository(store)


@pytest.fixture
def ticket_repo(store: InMemoryStore) -> FakeTicketRepository:
    return FakeTicketRepository(store)


@pytest.fixture
def coordinator(
    ledger_repo: FakeLedgerRepository,
    limit_repo: FakeLimitRepository,
    draw_repo: FakeDrawRepository,
    ticket_repo: FakeTicketRepository,
    clock: FixedClock,
) -> PurchaseCoordinator:
    ids = itertools.count(1)
    numbers = itertools.count(1)
    return PurchaseCoordinator(
        ledger_repo=ledger_repo,
        limit_repo=limit_repo,
        draw_repo=draw_repo,
        ticket_repo=ticket_repo,
        clock=clock,
        side_effects=(),
        backoff_ms=0,
        id_factory=lambda: f"T{next(ids):04d}",
        ticket_number_factory=lambda: f"{next(numbers):017d}",
    )
