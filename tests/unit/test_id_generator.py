"""Tests for lt_common.id_generator and lt_common.datetime_utils."""

from datetime import UTC, datetime

import pytest

from src.lt_common.datetime_utils import BusinessClock, utc_now
from src.lt_common.id_generator import (
    SnowflakeIdGenerator,
    TicketNumberGenerator,
    generate_id,
    generate_ticket_number,
)


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        assert isinstance(gen.next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current

    def test_machine_id_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            SnowflakeIdGenerator(machine_id=1024)


class TestTicketNumberGenerator:
    def test_seventeen_digits(self) -> None:
        number = TicketNumberGenerator(machine_id=3).next_number()
        assert len(number) == 17
        assert number.isdigit()
        assert number[13] == "3"

    def test_unique_and_increasing(self) -> None:
        gen = TicketNumberGenerator()
        numbers = [gen.next_number() for _ in range(3000)]
        assert len(set(numbers)) == 3000
        assert numbers == sorted(numbers)

    def test_machine_id_must_be_one_digit(self) -> None:
        with pytest.raises(ValueError):
            TicketNumberGenerator(machine_id=10)


def test_module_level_generators() -> None:
    assert generate_id() != generate_id()
    assert len(generate_ticket_number()) == 17


class TestClocks:
    def test_utc_now_is_aware_utc(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo == UTC

    def test_business_clock_zone(self) -> None:
        clock = BusinessClock("Asia/Manila")
        now = clock.now()
        assert now.tzinfo is clock.tz
        assert now.utcoffset().total_seconds() == 8 * 3600
