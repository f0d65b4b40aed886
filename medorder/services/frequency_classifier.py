"""Frequency classifier for free-text medication orders.

The order text is scanned against ``FREQUENCY_RULES`` top to bottom and the
first rule that matches produces the canonical token (``"BID"``, ``"Q6H"``,
``"2x/week"`` ...).  Two steps run after the table:

* PRN augmentation: a standalone ``PRN`` appends ``" PRN"`` to whatever base
  frequency was found (``"Q4H PRN"``), or stands alone when there is none.
* Dose-series fallback: only when nothing else matched, vaccine-style
  schedules such as ``"3 doses at 0, 1, 6 months"`` are kept in a normalized
  textual form.

Numeric per-day multipliers are mapped through the shared dose-rate table so
that ``"4x/day"`` and ``"QID"`` end up as the same token.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from medorder.services.cues import CueMatch
from medorder.services.dose_rates import WORD_NUMBER_PATTERN, daily_code, to_count

logger = logging.getLogger(__name__)

Normalizer = Callable[[re.Match], str]


@dataclass(frozen=True)
class FrequencyRule:
    name: str
    pattern: re.Pattern[str]
    normalize: Normalizer


def _rule(name: str, pattern: str, normalize: Normalizer) -> FrequencyRule:
    return FrequencyRule(name=name, pattern=re.compile(pattern, re.IGNORECASE), normalize=normalize)


def _const(token: str) -> Normalizer:
    return lambda _m: token


def _count(m: re.Match) -> int:
    """Integer captured by the first non-empty group (digits or word numeral)."""
    raw = next(g for g in m.groups() if g)
    return to_count(raw) or 0


def _interval(suffix: str) -> Normalizer:
    return lambda m: f"Q{_count(m)}{suffix}"


def _per_day(m: re.Match) -> str:
    return daily_code(_count(m))


def _per_week(m: re.Match) -> str:
    return f"{_count(m)}x/week"


def _per_month(m: re.Match) -> str:
    return f"{_count(m)}x/month"


_N = rf"(\d{{1,2}}|{WORD_NUMBER_PATTERN})"
_ONCE_TWICE = r"(once|twice|thrice)"

# ---------------------------------------------------------------------------
# Frequency rules, evaluated in order (first match wins)
# ---------------------------------------------------------------------------
FREQUENCY_RULES: tuple[FrequencyRule, ...] = (
    # Fixed compound schedule, kept verbatim (ahead of "OD" which would shadow it)
    _rule("od_weekdays_bid_weekends", r"\bOD\s+weekdays\s*;?\s*BID\s+weekends\b",
          _const("OD weekdays; BID weekends")),
    # Standard abbreviations
    _rule("od",   r"\b(?:OD|QD)\b", _const("OD")),
    _rule("bid",  r"\bBID\b",       _const("BID")),
    _rule("tid",  r"\bTID\b",       _const("TID")),
    _rule("qid",  r"\bQID\b",       _const("QID")),
    _rule("qhs",  r"\b(?:QHS|HS)\b", _const("QHS")),
    _rule("odhs", r"\bODHS\b",      _const("OD HS")),
    _rule("stat", r"\bSTAT\b",      _const("STAT")),
    # Intervals: every 4 hours, q12h, q3d, every 2 weeks, q2wk, q1mo, q3m
    _rule("every_n_hours",  r"\b(?:every|q)\s*(\d{1,2})\s*(?:h|hr|hrs|hour|hours)\b", _interval("H")),
    _rule("every_n_days",   r"\b(?:every|q)\s*(\d{1,2})\s*(?:d|day|days)\b",         _interval("D")),
    _rule("every_n_weeks",  r"\b(?:every|q)\s*(\d{1,2})\s*(?:w|wk|wks|week|weeks)\b", _interval("W")),
    _rule("every_n_months", r"\b(?:every|q)\s*(\d{1,2})\s*(?:mo|mos|month|months)\b|\bq\s*(\d{1,2})\s*m\b",
          _interval("M")),
    # Alternate day / week shorthand
    _rule("every_other_day",  r"\b(?:qod|eod|every\s+other\s+day)\b",              _const("QOD")),
    _rule("every_other_week", r"\b(?:every\s+other\s+(?:week|wk|w)|biweekly)\b",   _const("Q2W")),
    _rule("bimonthly",        r"\bbimonthly\b",                                     _const("Q2M")),
    # Per-day multipliers: 3x/day, 3x a day, 2x daily, three times a day, twice daily
    _rule("times_per_day",   rf"\b{_N}\s*(?:x|times)\s*(?:/|per|a)?\s*(?:day|daily|d)\b", _per_day),
    _rule("once_twice_day",  rf"\b{_ONCE_TWICE}\s+(?:(?:a|per)\s+)?(?:day|daily)\b",      _per_day),
    # Per-week multipliers: 1x a week, 3x/week, 2x a wk, three times a week, twice weekly
    _rule("times_per_week",  rf"\b{_N}\s*(?:x|times)\s*(?:/|per|a)?\s*(?:week|wk)\b",        _per_week),
    _rule("once_twice_week", rf"\b{_ONCE_TWICE}\s+(?:(?:a|per)\s+)?(?:week|wk|weekly)\b",     _per_week),
    # Per-month multipliers: 2x/month, twice a month
    _rule("times_per_month",  rf"\b{_N}\s*(?:x|times)\s*(?:/|per|a)?\s*(?:month|mo)\b",      _per_month),
    _rule("once_twice_month", rf"\b{_ONCE_TWICE}\s+(?:(?:a|per)\s+)?(?:month|monthly)\b",   _per_month),
    # Single weekly / monthly / daily frequency
    _rule("weekly",  r"\b(?:weekly|every\s+week)\b",   _const("1x/week")),
    _rule("monthly", r"\b(?:monthly|every\s+month)\b", _const("1x/month")),
    _rule("daily",   r"\b(?:daily|every\s+day)\b",     _const("OD")),
    # Bedtime phrases
    _rule("bedtime", r"\b(?:at\s+night|(?:at|before)\s+bed(?:time)?|bedtime|nightly)\b", _const("QHS")),
)

_PRN_RE = re.compile(r"\b(?:PRN|as\s+needed)\b", re.IGNORECASE)

# Vaccine-style dose series: "3 doses at 0, 1, 6 months"
_DOSE_SERIES_RE = re.compile(
    r"\b(\d+\s*doses?)\b.*?\b(?:at\s*)?(0\s*,\s*1\s*,\s*6|\d+[\s,]+\d+(?:[\s,]+\d+)*)\s*months?",
    re.IGNORECASE,
)


def match_frequency(text: str) -> Optional[CueMatch]:
    """
    Classify the frequency of *text* and locate its earliest trigger.

    Returns None when neither the rule table, the PRN token nor the dose
    series recognized anything.
    """
    frequency: Optional[str] = None
    start: Optional[int] = None

    for rule in FREQUENCY_RULES:
        m = rule.pattern.search(text)
        if m:
            frequency = rule.normalize(m)
            start = m.start()
            logger.debug("match_frequency: rule=%s %r → %s", rule.name, m.group(0), frequency)
            break

    prn = _PRN_RE.search(text)
    if prn:
        frequency = f"{frequency} PRN" if frequency else "PRN"
        start = prn.start() if start is None else min(start, prn.start())

    if frequency is None:
        series = _DOSE_SERIES_RE.search(text)
        if series:
            frequency = re.sub(r"\s+", " ", f"{series.group(1)} at {series.group(2)} months")
            start = series.start()
            logger.debug("match_frequency: dose series %r", frequency)

    if frequency is None or start is None:
        return None
    return CueMatch(value=frequency, start=start)


def classify_frequency(text: str) -> str:
    """Canonical frequency token for *text*, or ``""`` when nothing is recognized."""
    match = match_frequency(text or "")
    return match.value if match else ""
