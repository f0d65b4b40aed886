"""Order-entry helpers built on top of the parser and the supply calculator.

Implements the inline entry flow of the reconciliation list:

    "Amoxicillin 500mg PO TID #30"
        → parse_medication_string  (name, dosage, frequency, route)
        → extract_quantity         (30, from "#30")
        → days_supply              (10.0)
        → refill_date              (start date + 10 days)

A refill / end date is only produced when the days supply is known; an
unknown supply leaves the date unset rather than defaulting to the start
date.
"""
from __future__ import annotations

import logging
import math
import re
from datetime import date, timedelta
from typing import Callable, Optional

from medorder.core.config import REFILL_ROUNDING
from medorder.models.medication import MedicationDraft, MedicationStatus
from medorder.services.days_supply import days_supply
from medorder.services.medication_parser import parse_medication_string

logger = logging.getLogger(__name__)

# Quantity dispensed, written pharmacy-style: "#30", "# 5"
_QUANTITY_RE = re.compile(r"#\s*(\d+)\b")

_ROUNDING: dict[str, Callable[[float], int]] = {
    "floor": math.floor,
    "ceil":  math.ceil,
    # half-up: 2.5 days -> 3
    "round": lambda days: math.floor(days + 0.5),
}


def extract_quantity(text: str) -> Optional[int]:
    """Dispensed quantity from a ``#<N>`` marker in *text*, or None."""
    m = _QUANTITY_RE.search(text or "")
    if not m:
        return None
    quantity = int(m.group(1))
    return quantity if quantity > 0 else None


def derive_status(frequency: str) -> MedicationStatus:
    """``prn`` for as-needed frequencies, ``active`` otherwise."""
    if "PRN" in (frequency or "").upper():
        return MedicationStatus.PRN
    return MedicationStatus.ACTIVE


def refill_date(
    start: date,
    quantity: Optional[float],
    frequency: str,
    rounding: Optional[str] = None,
) -> Optional[date]:
    """
    Date on which *quantity* dispensed on *start* runs out at *frequency*.

    Parameters
    ----------
    start:
        Dispensing / start date.
    quantity:
        Units dispensed; ``None`` means not recorded.
    frequency:
        Canonical frequency token or raw frequency text.
    rounding:
        ``"floor"``, ``"ceil"`` or ``"round"`` applied to fractional supplies;
        defaults to ``MEDORDER_REFILL_ROUNDING``.

    Returns
    -------
    date | None
        None when the quantity is missing or the days supply is unknown.
    """
    mode = (rounding or REFILL_ROUNDING).lower()
    if mode not in _ROUNDING:
        raise ValueError(f"Unsupported rounding mode {mode!r}; expected one of {sorted(_ROUNDING)}")

    if quantity is None or not frequency:
        return None
    days = days_supply(quantity, frequency)
    if days is None:
        logger.debug("refill_date: unknown supply for %r x %r", quantity, frequency)
        return None
    return start + timedelta(days=int(_ROUNDING[mode](days)))


def build_medication_draft(text: str, start_date: Optional[date] = None) -> MedicationDraft:
    """
    Prefill a new medication record from one inline entry line.

    The start date defaults to today.  Status is ``prn`` when the parsed
    frequency is as-needed.
    """
    start = start_date or date.today()
    parsed = parse_medication_string(text)
    quantity = extract_quantity(text)

    supply: Optional[float] = None
    refill: Optional[date] = None
    if quantity is not None and parsed.frequency:
        supply = days_supply(quantity, parsed.frequency)
        refill = refill_date(start, quantity, parsed.frequency)

    draft = MedicationDraft(
        name=parsed.name,
        dosage=parsed.dosage,
        frequency=parsed.frequency,
        route=parsed.route,
        status=derive_status(parsed.frequency),
        start_date=start,
        quantity=quantity,
        days_supply=supply,
        refill_date=refill,
    )
    logger.debug("build_medication_draft: %r → %s", text, draft)
    return draft
