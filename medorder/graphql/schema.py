from __future__ import annotations

from datetime import date
from typing import Optional

import strawberry

from medorder.services.days_supply import estimate_days_supply
from medorder.services.medication_parser import parse_medication_string
from medorder.services.refill import build_medication_draft


@strawberry.type
class ParsedMedicationNode:
    name: str
    dosage: str
    frequency: str
    route: str


@strawberry.type
class DaysSupplyNode:
    """Days supply for a quantity/frequency pair; ``days`` is null when unknown."""
    quantity: Optional[float]
    frequency: str
    days: Optional[float]
    rule: str
    is_known: bool


@strawberry.type
class MedicationDraftNode:
    name: str
    dosage: str
    frequency: str
    route: str
    status: str
    start_date: date
    quantity: Optional[int]
    days_supply: Optional[float]
    refill_date: Optional[date]


@strawberry.type
class Query:
    @strawberry.field
    def parse_medication(self, text: str) -> ParsedMedicationNode:
        parsed = parse_medication_string(text)
        return ParsedMedicationNode(**parsed.model_dump())

    @strawberry.field
    def days_supply(self, quantity: float, frequency: str) -> DaysSupplyNode:
        result = estimate_days_supply(quantity, frequency)
        return DaysSupplyNode(
            quantity=result.quantity,
            frequency=result.frequency,
            days=result.days,
            rule=result.rule,
            is_known=result.is_known,
        )

    @strawberry.field
    def medication_draft(self, text: str, start_date: Optional[date] = None) -> MedicationDraftNode:
        draft = build_medication_draft(text, start_date=start_date)
        return MedicationDraftNode(
            name=draft.name,
            dosage=draft.dosage,
            frequency=draft.frequency,
            route=draft.route,
            status=draft.status.value,
            start_date=draft.start_date,
            quantity=draft.quantity,
            days_supply=draft.days_supply,
            refill_date=draft.refill_date,
        )


schema = strawberry.Schema(query=Query)
