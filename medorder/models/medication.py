"""Pydantic models produced by the order-string parser and the supply calculator.

None of these models carry identity: they are built per call and handed to
the caller, which owns the persisted medication record.
"""
from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MedicationStatus(str, Enum):
    """Lifecycle status of a medication record on the reconciliation list."""
    ACTIVE       = "active"
    DISCONTINUED = "discontinued"
    PRN          = "prn"


class ParsedMedication(BaseModel):
    """
    Structured fields recovered from one free-text order line.

    Examples
    --------
    "Metformin 500mg PO BID"   → name="Metformin", dosage="500mg",
                                 frequency="BID", route="PO"
    "Vitamin D supplement"     → name="Vitamin D supplement", dosage="",
                                 frequency="", route="PO"
    """

    name: str = Field(default="", description="Drug name, whole input when no cue was found")
    dosage: str = Field(default="", description="First recognized dosage substring")
    frequency: str = Field(default="", description="Canonical frequency token, e.g. 'BID', 'Q6H PRN'")
    route: str = Field(default="PO", description="Administration route code; PO when nothing matched")

    model_config = {"frozen": True}


class DaysSupplyResult(BaseModel):
    """
    Outcome of the days-supply rule table.

    ``days is None`` means *unknown*: no deterministic daily rate could be
    derived (vaccine series, dialysis sessions, unrecognized text).  It is
    never reported as ``0``.
    """

    quantity: Optional[float] = None
    frequency: str = ""
    days: Optional[float] = Field(default=None, description="Calendar days covered; fractional allowed")
    rule: str = Field(default="unmatched", description="Name of the rule that decided the result")

    model_config = {"frozen": True}

    @property
    def is_known(self) -> bool:
        return self.days is not None


class MedicationDraft(BaseModel):
    """
    A new medication record prefilled from an inline entry line.

    This is what the entry form hands to the persistence layer; ``refill_date``
    stays ``None`` whenever the days supply is unknown.
    """

    name: str
    dosage: str
    frequency: str
    route: str
    status: MedicationStatus = MedicationStatus.ACTIVE
    start_date: date
    quantity: Optional[int] = None
    days_supply: Optional[float] = None
    refill_date: Optional[date] = None

    model_config = {"frozen": True}
