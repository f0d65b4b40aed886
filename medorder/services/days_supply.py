"""Days-supply calculator.

Estimates how many calendar days a dispensed quantity lasts at the dosing
rate described by a frequency string (canonical tokens such as ``"BID"`` or
``"Q6H PRN"`` as well as raw text such as ``"twice weekly"``).

    days_supply(30, "BID")        → 15.0
    days_supply(30, "Q6H")        → 7.5
    days_supply(10, "2x/week")    → 35.0
    days_supply(5, "0,1,6 months") → None   (series, no steady rate)

Results are never rounded here; callers pick their own rounding.  ``None``
means *unknown* and must not be read as zero days.

Rule table
----------
``SUPPLY_RULES`` is evaluated top to bottom against the upper-cased text.
A row either computes a number of days, declares the result unknown
(``compute is None``), or, when its compute function returns None, lets the
evaluation fall through to the next row.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Callable, Optional

from medorder.models.medication import DaysSupplyResult
from medorder.services.dose_rates import (
    DAILY_CODES,
    DAILY_SYNONYMS,
    WORD_NUMBER_PATTERN,
    WORD_NUMBERS,
    to_count,
)

logger = logging.getLogger(__name__)

Compute = Callable[[re.Match, float], Optional[float]]

DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class SupplyRule:
    name: str
    pattern: re.Pattern[str]
    compute: Optional[Compute]  # None → unknown days supply


def _rule(name: str, pattern: str, compute: Optional[Compute]) -> SupplyRule:
    return SupplyRule(name=name, pattern=re.compile(pattern), compute=compute)


def _positive(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    count = to_count(raw)
    return count if count and count > 0 else None


# A numeric or word multiplier only means "per day" when no digit and no
# week/month qualifier follows it ("1x/week", "once a month", "1x2 x weekly").
_PER_DAY_ONLY = r"(?!\s*\d)(?!\s*(?:/|A\b|PER\b|TIMES?\b)?\s*(?:WEEK|WK|MONTH|MO\b))"


def _daily_rule(rate: int) -> SupplyRule:
    synonyms = DAILY_SYNONYMS[rate]
    abbreviations = [s for s in synonyms if s.lower() not in WORD_NUMBERS]
    words = [s for s in synonyms if s.lower() in WORD_NUMBERS]
    spelled = [w.upper() for w, n in WORD_NUMBERS.items() if n == rate and w.upper() not in synonyms]

    alternatives = [rf"\b(?:{'|'.join(abbreviations)})\b"]
    scoped = [rf"(?<![\dX.]){rate}X", rf"(?<![\d.]){rate}\s*TIMES\b"]
    scoped += [rf"\b{w}\b" for w in words]
    if spelled:
        scoped.append(rf"\b(?:{'|'.join(spelled)})\s+TIMES\b")
    alternatives.append(rf"(?:{'|'.join(scoped)}){_PER_DAY_ONLY}")

    def compute(_m: re.Match, quantity: float, rate: int = rate) -> float:
        return quantity / rate

    return _rule(DAILY_CODES[rate].lower(), "|".join(alternatives), compute)


# ---------------------------------------------------------------------------
# Compute helpers
# ---------------------------------------------------------------------------

def _every_n_hours(m: re.Match, quantity: float) -> Optional[float]:
    hours = _positive(m.group(1) or m.group(2))
    return quantity * hours / 24 if hours else None


def _every_n(multiplier: int) -> Compute:
    def compute(m: re.Match, quantity: float) -> Optional[float]:
        n = _positive(m.group(1))
        return quantity * n * multiplier if n else None
    return compute


def _every_n_units(m: re.Match, quantity: float) -> Optional[float]:
    n = _positive(m.group(1))
    if not n:
        return None
    unit = m.group(2)
    multiplier = {"DAY": 1, "WEEK": DAYS_PER_WEEK, "MONTH": DAYS_PER_MONTH}[unit]
    return quantity * n * multiplier


def _alternating_weekly(m: re.Match, quantity: float) -> Optional[float]:
    average = (int(m.group(1)) + int(m.group(2))) / 2
    return (quantity / average) * DAYS_PER_WEEK if average > 0 else None


def _per_period(days: int) -> Compute:
    def compute(m: re.Match, quantity: float) -> Optional[float]:
        n = _positive(m.group(1))
        return (quantity / n) * days if n else None
    return compute


def _times(days: int) -> Compute:
    return lambda _m, quantity: quantity * days


def _per_day(m: re.Match, quantity: float) -> Optional[float]:
    n = _positive(m.group(1))
    return quantity / n if n else None


_WORD_N = rf"({WORD_NUMBER_PATTERN.upper()})"

# ---------------------------------------------------------------------------
# Supply rules, evaluated in order (first applicable row wins)
# ---------------------------------------------------------------------------
SUPPLY_RULES: tuple[SupplyRule, ...] = (
    # 1–4: fixed daily rates from the shared dose-rate table (QID, TID, BID, OD)
    *(_daily_rule(rate) for rate in sorted(DAILY_SYNONYMS, reverse=True)),
    # 5: every N hours
    _rule("every_n_hours", r"\bQ\s*(\d+)\s*(?:H|HRS?|HOURS?)\b|\bEVERY\s+(\d+)\s*(?:H|HRS?|HOURS?)\b",
          _every_n_hours),
    # 6: QnD, QOD, QnW, QnM
    _rule("every_n_days_code",   r"\bQ\s*(\d+)\s*D(?:AYS?)?\b",             _every_n(1)),
    _rule("every_other_day",     r"\b(?:QOD|EOD|EVERY\s+OTHER\s+DAY)\b",    _times(2)),
    _rule("every_n_weeks_code",  r"\bQ\s*(\d+)\s*(?:W|WKS?|WEEKS?)\b",      _every_n(DAYS_PER_WEEK)),
    _rule("every_n_months_code", r"\bQ\s*(\d+)\s*(?:M|MOS?|MONTHS?)\b",     _every_n(DAYS_PER_MONTH)),
    # 7: every N day(s) / week(s) / month(s)
    _rule("every_n_units", r"\bEVERY\s+(\d+)\s*(DAY|WEEK|MONTH)S?\b", _every_n_units),
    # 8: weekly family
    _rule("every_other_week",   r"\bBIWEEKLY\b|\bEVERY\s+OTHER\s+(?:WEEK|WK)\b",               _times(14)),
    _rule("alternating_weekly", r"(\d+)\s*X\s*(\d+)\s*X?\s*(?:/\s*)?WEEK",                      _alternating_weekly),
    _rule("times_per_week",     r"(\d+)\s*(?:X|TIMES)\s*(?:/|A\b|PER\b)?\s*(?:WEEK|WK)",        _per_period(DAYS_PER_WEEK)),
    _rule("words_per_week",     rf"\b{_WORD_N}\s+(?:TIMES\s+)?(?:(?:A|PER)\s+)?(?:WEEK|WK)",   _per_period(DAYS_PER_WEEK)),
    _rule("weekly",             r"WEEK",                                                       _times(DAYS_PER_WEEK)),
    # 9: monthly family
    _rule("monthly_series",  r"\d+\s*,\s*\d+.*MONTH|MONTH.*\d+\s*,\s*\d+",                      None),
    _rule("bimonthly",       r"\bBIMONTHLY\b",                                                 _times(2 * DAYS_PER_MONTH)),
    _rule("times_per_month", r"(\d+)\s*(?:X|TIMES)\s*(?:/|A\b|PER\b)?\s*(?:MONTH|MO\b)",        _per_period(DAYS_PER_MONTH)),
    _rule("words_per_month", rf"\b{_WORD_N}\s+(?:TIMES\s+)?(?:(?:A|PER)\s+)?MONTH",            _per_period(DAYS_PER_MONTH)),
    _rule("monthly",         r"MONTH",                                                         _times(DAYS_PER_MONTH)),
    # 10: single administration
    _rule("single", r"\b(?:ONCE|SINGLE|ONE\s+TIME)\b", _times(1)),
    # 11: hemodialysis sessions
    _rule("hemodialysis", r"\bEACH\s+HD\b|\bHD\s*X\s*\d+|\b(?:HEMO)?DIALYSIS\b", None),
    # 12: vaccine / booster series
    _rule("vaccine_series",
          r"\b(?:VACCINE|VACCINATION|BOOSTER|SERIES)\b.*\d|\d.*\b(?:VACCINE|VACCINATION|BOOSTER|SERIES)\b"
          r"|\bDOSES?\s+AT\b",
          None),
    # 13: generic Nx/day, N times a day, five times daily
    _rule("times_per_day", rf"\b(\d+|{WORD_NUMBER_PATTERN.upper()})\s*(?:X|TIMES)\s*(?:/|A\b|PER\b)?\s*(?:DAY|DAILY)",
          _per_day),
    # 14: once-daily phrases without a multiplier
    _rule("daily", r"\b(?:DAILY|EVERY\s+DAY|NIGHTLY|AT\s+NIGHT|BEDTIME|(?:AT|BEFORE)\s+BED)\b", _times(1)),
)


def _coerce_quantity(quantity: object) -> Optional[float]:
    if isinstance(quantity, bool):
        return None
    try:
        value = float(quantity)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def estimate_days_supply(quantity: object, frequency: str) -> DaysSupplyResult:
    """
    Run the supply rule table and report which row decided.

    Parameters
    ----------
    quantity:
        Dispensed quantity; must be a positive finite number.  Anything else
        yields an unknown result with ``rule="invalid_quantity"``.
    frequency:
        Canonical token or raw frequency text.

    Returns
    -------
    DaysSupplyResult
        ``days`` is None when no deterministic daily rate could be derived.
    """
    text = (frequency or "").strip()
    qty = _coerce_quantity(quantity)
    if qty is None:
        logger.warning("estimate_days_supply: unusable quantity %r", quantity)
        return DaysSupplyResult(quantity=None, frequency=text, days=None, rule="invalid_quantity")

    upper = text.upper()
    for rule in SUPPLY_RULES:
        m = rule.pattern.search(upper)
        if not m:
            continue
        if rule.compute is None:
            logger.debug("estimate_days_supply: %r → unknown (rule=%s)", text, rule.name)
            return DaysSupplyResult(quantity=qty, frequency=text, days=None, rule=rule.name)
        days = rule.compute(m, qty)
        if days is None:
            continue
        logger.debug("estimate_days_supply: %s x %r → %s days (rule=%s)", qty, text, days, rule.name)
        return DaysSupplyResult(quantity=qty, frequency=text, days=days, rule=rule.name)

    return DaysSupplyResult(quantity=qty, frequency=text, days=None, rule="unmatched")


def days_supply(quantity: object, frequency: str) -> Optional[float]:
    """Days covered by *quantity* at *frequency*, or None when unknown."""
    return estimate_days_supply(quantity, frequency).days
