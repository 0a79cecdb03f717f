"""ID generators: snowflake-style ticket ids and 17-digit printable ticket numbers.

Both are monotonically increasing within one process and unique across
processes as long as every process has its own machine_id.
"""

import threading
import time
from collections.abc import Callable

from config.settings import settings


class SnowflakeIdGenerator:
    """Simple snowflake ID generator.

    Layout (64 bits):
      - 41 bits: millisecond timestamp (since custom epoch)
      - 10 bits: machine_id (0-1023)
      - 12 bits: sequence (0-4095 per millisecond)
    """

    _EPOCH_MS = 1_700_000_000_000  # 2023-11-14 approx
    _MACHINE_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, machine_id: int = 0) -> None:
        if not (0 <= machine_id < (1 << self._MACHINE_BITS)):
            raise ValueError(f"machine_id must be 0-{(1 << self._MACHINE_BITS) - 1}")
        self._machine_id = machine_id
        self._sequence = 0
        self._last_timestamp_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            ts = self._current_ms()
            if ts == self._last_timestamp_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    ts = _wait_next_ms(ts, self._current_ms)
            else:
                self._sequence = 0

            self._last_timestamp_ms = ts
            id_int = (
                ((ts - self._EPOCH_MS) << (self._MACHINE_BITS + self._SEQUENCE_BITS))
                | (self._machine_id << self._SEQUENCE_BITS)
                | self._sequence
            )
            return str(id_int)

    def _current_ms(self) -> int:
        return int(time.time() * 1000)


class TicketNumberGenerator:
    """17-digit numeric ticket numbers printed on the slip.

    Layout (decimal digits):
      - 13: millisecond unix timestamp
      - 1:  machine_id (0-9)
      - 3:  sequence (000-999 per millisecond)
    """

    _MAX_SEQUENCE = 999

    def __init__(self, machine_id: int = 0) -> None:
        if not (0 <= machine_id <= 9):
            raise ValueError("machine_id must be 0-9")
        self._machine_id = machine_id
        self._sequence = 0
        self._last_timestamp_ms = -1
        self._lock = threading.Lock()

    def next_number(self) -> str:
        with self._lock:
            ts = self._current_ms()
            if ts == self._last_timestamp_ms:
                self._sequence += 1
                if self._sequence > self._MAX_SEQUENCE:
                    ts = _wait_next_ms(ts, self._current_ms)
                    self._sequence = 0
            else:
                self._sequence = 0

            self._last_timestamp_ms = ts
            return f"{ts % 10**13:013d}{self._machine_id}{self._sequence:03d}"

    def _current_ms(self) -> int:
        return int(time.time() * 1000)


def _wait_next_ms(last_ts: int, current_ms: Callable[[], int]) -> int:
    ts = current_ms()
    while ts <= last_ts:
        ts = current_ms()
    return ts


_default_generator = SnowflakeIdGenerator(machine_id=settings.MACHINE_ID)
_default_ticket_numbers = TicketNumberGenerator(machine_id=settings.MACHINE_ID)


def generate_id() -> str:
    """Generate a unique snowflake-style string ID using the module-level default generator."""
    return _default_generator.next_id()


def generate_ticket_number() -> str:
    """Generate a unique 17-digit ticket number using the module-level default generator."""
    return _default_ticket_numbers.next_number()
