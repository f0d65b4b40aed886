"""Canonical doses-per-day lookup shared by the frequency parser and the
days-supply calculator.

The parser emits ``OD``/``BID``/``TID``/``QID`` from these tables and the
calculator divides by the same rates, so the frequency shown to the user and
the arithmetic behind the refill date always agree.
"""
from __future__ import annotations

from typing import Optional

# Canonical daily code → administrations per day
DOSES_PER_DAY: dict[str, int] = {
    "OD":  1,
    "BID": 2,
    "TID": 3,
    "QID": 4,
}

# Administrations per day → canonical daily code (inverse of the above)
DAILY_CODES: dict[int, str] = {rate: code for code, rate in DOSES_PER_DAY.items()}

# Abbreviations and word forms the calculator accepts for each daily rate,
# in addition to the "<rate>X" numeric form.
DAILY_SYNONYMS: dict[int, tuple[str, ...]] = {
    4: ("QID",),
    3: ("TID", "THRICE"),
    2: ("BID", "TWICE"),
    1: ("OD", "QD", "ODHS", "QHS", "HS", "ONCE"),
}

# Spelled-out counts accepted wherever a small integer is expected
WORD_NUMBERS: dict[str, int] = {
    "one":    1,
    "once":   1,
    "two":    2,
    "twice":  2,
    "three":  3,
    "thrice": 3,
    "four":   4,
    "five":   5,
    "six":    6,
    "seven":  7,
    "eight":  8,
    "nine":   9,
    "ten":    10,
}

# Regex alternation of the word numerals, longest first
WORD_NUMBER_PATTERN = "|".join(sorted(WORD_NUMBERS, key=len, reverse=True))


def to_count(token: str) -> Optional[int]:
    """Return the integer behind a digit string or word numeral, else None."""
    cleaned = token.strip().lower()
    if cleaned.isdigit():
        return int(cleaned)
    return WORD_NUMBERS.get(cleaned)


def daily_code(count: int) -> str:
    """Canonical code for *count* administrations per day (``"6x/day"`` when unmapped)."""
    return DAILY_CODES.get(count, f"{count}x/day")


def doses_per_day(code: str) -> Optional[int]:
    """Administrations per day for a canonical daily code, else None."""
    return DOSES_PER_DAY.get(code.strip().upper())
