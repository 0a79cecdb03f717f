"""Unit tests for DrawScheduleService and the draw domain helpers."""

from datetime import date, datetime, timedelta, timezone

import pytest

from src.lt_common.enums import DrawStatus, TimeSlot
from src.lt_draw.application.service import DrawScheduleService
from src.lt_draw.domain.models import Draw, compute_cutoff, is_near_cutoff

from store_doubles import MANILA, TODAY, FakeSession


@pytest.fixture
def schedule(draw_repo, clock) -> DrawScheduleService:
    return DrawScheduleService(draw_repo, clock)


class TestComputeCutoff:
    @pytest.mark.parametrize(
        "slot, hour",
        [(TimeSlot.TWO_PM, 13), (TimeSlot.FIVE_PM, 16), (TimeSlot.NINE_PM, 20)],
    )
    def test_five_minutes_before_draw(self, slot, hour) -> None:
        cutoff = compute_cutoff(TODAY, slot.value, MANILA)
        assert cutoff == datetime(2026, 10, 19, hour, 55, tzinfo=MANILA)

    def test_nine_pm_cutoff_in_utc(self) -> None:
        cutoff = compute_cutoff(TODAY, "ninePM", MANILA)
        assert cutoff == datetime(2026, 10, 19, 12, 55, tzinfo=timezone.utc)

    def test_unknown_slot(self) -> None:
        with pytest.raises(ValueError):
            compute_cutoff(TODAY, "midnight", MANILA)


class TestNearCutoff:
    def test_inside_window(self) -> None:
        cutoff = datetime(2026, 10, 19, 20, 55, tzinfo=MANILA)
        assert is_near_cutoff(cutoff - timedelta(seconds=90), cutoff, 2)

    def test_outside_window(self) -> None:
        cutoff = datetime(2026, 10, 19, 20, 55, tzinfo=MANILA)
        assert not is_near_cutoff(cutoff - timedelta(minutes=5), cutoff, 2)

    def test_after_cutoff_is_not_near(self) -> None:
        cutoff = datetime(2026, 10, 19, 20, 55, tzinfo=MANILA)
        assert not is_near_cutoff(cutoff, cutoff, 2)


class TestDrawModel:
    def test_status_flags(self) -> None:
        draw = Draw(id=1, draw_date=TODAY, time_slot="twoPM", status=DrawStatus.OPEN.value)
        assert draw.is_open
        assert not draw.is_settled
        draw.status = DrawStatus.SETTLED.value
        assert draw.is_settled
        assert not draw.is_open


class TestEnsureDraws:
    async def test_creates_three_draws_per_day(self, schedule, store) -> None:
        created = await schedule.ensure_draws(FakeSession(), days=14)

        assert created == 42
        dates = {d.draw_date for d in store.draws.values()}
        assert min(dates) == TODAY
        assert max(dates) == date(2026, 11, 1)

    async def test_is_idempotent(self, schedule, store) -> None:
        await schedule.ensure_draws(FakeSession(), days=3)
        created = await schedule.ensure_draws(FakeSession(), days=3)

        assert created == 0
        assert len(store.draws) == 9

    async def test_fills_only_missing_slots(self, schedule, store) -> None:
        store.add_draw(TODAY, TimeSlot.TWO_PM)

        created = await schedule.ensure_draws(FakeSession(), days=1)

        assert created == 2
        slots = sorted(d.time_slot for d in store.draws.values())
        assert slots == ["fivePM", "ninePM", "twoPM"]

    async def test_uses_business_date_not_utc_date(self, schedule, store, clock) -> None:
        # 17:30 UTC on the 19th is already the 20th in Manila.
        clock.set(datetime(2026, 10, 19, 17, 30, tzinfo=timezone.utc))

        await schedule.ensure_draws(FakeSession(), days=1)

        assert {d.draw_date for d in store.draws.values()} == {date(2026, 10, 20)}

    async def test_stores_cutoff_instant(self, schedule, store) -> None:
        await schedule.ensure_draws(FakeSession(), days=1)

        nine_pm = next(d for d in store.draws.values() if d.time_slot == "ninePM")
        assert nine_pm.cutoff_at == datetime(2026, 10, 19, 20, 55, tzinfo=MANILA)


class TestCloseExpired:
    async def test_closes_only_draws_past_cutoff(self, schedule, store, clock) -> None:
        two = store.add_draw(TODAY, TimeSlot.TWO_PM)
        five = store.add_draw(TODAY, TimeSlot.FIVE_PM)
        nine = store.add_draw(TODAY, TimeSlot.NINE_PM)
        clock.set(datetime(2026, 10, 19, 17, 0, tzinfo=MANILA))

        closed = await schedule.close_expired(FakeSession())

        assert closed == [two.id, five.id]
        assert store.draws[two.id].status == DrawStatus.CLOSED
        assert store.draws[nine.id].status == DrawStatus.OPEN

    async def test_settled_draws_stay_settled(self, schedule, store, clock) -> None:
        draw = store.add_draw(TODAY, TimeSlot.TWO_PM, DrawStatus.SETTLED)
        clock.set(datetime(2026, 10, 19, 22, 0, tzinfo=MANILA))

        assert await schedule.close_expired(FakeSession()) == []
        assert store.draws[draw.id].status == DrawStatus.SETTLED


async def test_run_maintenance_reports_both_steps(schedule, store, clock) -> None:
    clock.set(datetime(2026, 10, 19, 15, 0, tzinfo=MANILA))

    response = await schedule.run_maintenance(FakeSession(), days=2)

    assert response.created_count == 6
    assert len(response.closed_draw_ids) == 1
    assert store.draws[response.closed_draw_ids[0]].time_slot == "twoPM"
