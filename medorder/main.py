from datetime import date
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from strawberry.fastapi import GraphQLRouter

from medorder.core.config import CORS_ORIGINS, configure_logging
from medorder.graphql.schema import schema
from medorder.models.medication import DaysSupplyResult, MedicationDraft, ParsedMedication
from medorder.services.days_supply import estimate_days_supply
from medorder.services.medication_parser import parse_medication_string
from medorder.services.refill import build_medication_draft


configure_logging()

app = FastAPI(title="Medication Order Parser")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(GraphQLRouter(schema), prefix="/graphql")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/medications/parse", response_model=ParsedMedication)
async def parse_medication(text: str = Query(..., description="One free-text order line")) -> ParsedMedication:
    return parse_medication_string(text)


@app.get("/medications/days-supply", response_model=DaysSupplyResult)
async def get_days_supply(
    quantity: float = Query(..., gt=0, description="Dispensed quantity"),
    frequency: str = Query(..., description="Canonical frequency token or raw frequency text"),
) -> DaysSupplyResult:
    """
    Days a dispensed quantity lasts at the given frequency.

    ``days`` is null when no deterministic daily rate can be derived; the
    caller should then leave the refill date unset.
    """
    return estimate_days_supply(quantity, frequency)


@app.get("/medications/draft", response_model=MedicationDraft)
async def get_medication_draft(
    text: str = Query(..., description="Inline entry line, e.g. 'Amoxicillin 500mg PO TID #30'"),
    start_date: Optional[date] = Query(None, description="Start date (defaults to today)"),
) -> MedicationDraft:
    return build_medication_draft(text, start_date=start_date)
