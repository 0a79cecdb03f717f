"""Betting rules: pure functions, no I/O, safe for concurrent callers.

A combination is always three decimal digits. Clients may omit leading
zeros ("7" means "007"), so input is normalized before any other check.
"""

import re
from itertools import permutations

from src.lt_common.enums import BetType, PrizeCategory

_NON_DIGITS = re.compile(r"[^0-9]")
_ONE_TO_THREE_DIGITS = re.compile(r"^[0-9]{1,3}$")
_EXACTLY_THREE_DIGITS = re.compile(r"^[0-9]{3}$")

VALID_BET_TYPES: tuple[BetType, ...] = tuple(BetType)


def normalize_combination(raw: object) -> str | None:
    """Strip non-digits and left-pad 1-3 digits to 3. Returns None if not normalizable."""
    cleaned = _NON_DIGITS.sub("", str(raw if raw is not None else ""))
    if not _ONE_TO_THREE_DIGITS.match(cleaned):
        return None
    return cleaned.zfill(3)


def is_official_number(number: str) -> bool:
    """Official draw results are stored verbatim: exactly 3 digits, no padding."""
    return bool(_EXACTLY_THREE_DIGITS.match(number))


def distinct_digit_count(combination: str) -> int:
    return len(set(combination))


def is_triple(combination: str) -> bool:
    return distinct_digit_count(combination) == 1


def validate_bet_shape(bet_type: str, combination: object) -> str | None:
    """Return the rejection reason, or None if the bet is well-formed."""
    normalized = normalize_combination(combination)
    if normalized is None:
        return f"Invalid bet digits {combination!r}: must be 1-3 digits"
    if bet_type not in VALID_BET_TYPES:
        return f"Invalid bet type {bet_type!r}"
    if bet_type == BetType.RAMBOLITO and is_triple(normalized):
        return "Triple numbers (000, 111, 222, ...) are not allowed for rambolito"
    return None


def expand_winning_set(combination: str, bet_type: str) -> frozenset[str]:
    """All official numbers that make this bet a winner.

    standard  -> {combination}
    rambolito -> distinct permutations (3 for a double, 6 for distinct digits)
    """
    if bet_type == BetType.STANDARD:
        return frozenset({combination})
    if bet_type == BetType.RAMBOLITO:
        if is_triple(combination):
            raise ValueError(f"Rambolito bet on triple {combination} has no winning set")
        return frozenset("".join(p) for p in permutations(combination))
    raise ValueError(f"Invalid bet type {bet_type!r}")


def is_winner(bet_type: str, combination: str, official_number: str) -> bool:
    return official_number in expand_winning_set(combination, bet_type)


def prize_category(bet_type: str, combination: str) -> PrizeCategory | None:
    """Prize configuration key for a bet; None for a rambolito triple."""
    if bet_type == BetType.STANDARD:
        return PrizeCategory.STANDARD
    if bet_type == BetType.RAMBOLITO:
        distinct = distinct_digit_count(combination)
        if distinct == 1:
            return None
        if distinct == 2:
            return PrizeCategory.RAMBOLITO_DOUBLE
        return PrizeCategory.RAMBOLITO
    raise ValueError(f"Invalid bet type {bet_type!r}")
