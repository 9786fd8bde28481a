"""
TripLedger - FastAPI Web Backend

This module exposes the trip ledger over a small stateless HTTP API.

Every request carries the full trip snapshot. Nothing is stored: the caller
owns the trip record and persists whatever snapshot comes back.

Endpoints:
    POST /settlements/calculate  - Balances, spending, transfers, analytics
    POST /settlements/record     - Record a confirmed transfer
    POST /journal                - Unified, filtered transaction journal
    POST /conversion             - Recompute a local/rate/settlement triple
    GET  /health                 - Health check

Usage:
    uvicorn main:app --reload
"""

import logging
from typing import Literal, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from analytics import explain_all_members, generate_analytics
from config.settings import get_settings
from currency import Conversion
from ledger import ALL_METHODS, build_journal, calculate_balances, filter_journal
from recorder import record_settlement
from settlement import optimize_settlements
from trips import Trip

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# =============================================================================
# Pydantic Models for Request/Response Validation
# =============================================================================

class TripPayload(BaseModel):
    """Trip snapshot as sent by the client."""
    trip_id: Optional[str] = Field(None, description="Trip identifier")
    title: str = Field("", description="Trip title")
    settlement_currency: Optional[str] = Field(None, description="Settlement currency code")
    fx_rate: Optional[float] = Field(None, description="Default exchange rate")
    members: list[str] = Field(default_factory=list, description="Internal members")
    external_names: list[str] = Field(default_factory=list, description="External names")
    expenses: list[dict] = Field(default_factory=list, description="Expense records")
    bookings: list[dict] = Field(default_factory=list, description="Booking records")
    plan_days: list[dict] = Field(default_factory=list, description="Plan days with scheduled items")


class RecordRequest(BaseModel):
    """Request model for recording a settlement transfer."""
    trip: TripPayload
    from_person: str = Field(..., min_length=1, description="Debtor who pays")
    to_person: str = Field(..., min_length=1, description="Creditor who receives")
    amount: float = Field(..., gt=0, description="Amount in settlement currency")
    date: Optional[str] = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Payment date (YYYY-MM-DD)")


class JournalRequest(BaseModel):
    """Request model for the transaction journal."""
    trip: TripPayload
    member: Optional[str] = Field(None, description="Only transactions paid by this person")
    payment_method: Literal["All", "Cash", "Credit Card"] = ALL_METHODS


class ConversionRequest(BaseModel):
    """Request model for a conversion edit."""
    local: Optional[Union[float, str]] = 0
    rate: Optional[Union[float, str]] = 1
    settlement: Optional[Union[float, str]] = 0
    field: Literal["local", "rate", "settlement"]
    value: Optional[Union[float, str]] = None


class CalculateResponse(BaseModel):
    """Response model for calculation results."""
    settlement_currency: str
    balances: dict
    spending: dict
    settlements: list
    analytics: dict
    warnings: list
    explanations: list


class RecordResponse(BaseModel):
    """Response model for a recorded settlement."""
    expense: dict
    trip: dict


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.APP_NAME,
    description="Expense splitting and debt settlement for group trips",
    version="1.0.0"
)


def _load_trip(payload: TripPayload) -> Trip:
    """Convert the request payload into a Trip snapshot."""
    return Trip.from_dict(payload.model_dump())


# =============================================================================
# API Endpoints
# =============================================================================

@app.post("/settlements/calculate", response_model=CalculateResponse)
async def calculate_settlements(payload: TripPayload):
    """
    Calculate balances and settlement transfers for a trip snapshot.

    Request flow:
        1. Build the Trip snapshot
        2. Calculate balances and spending (ledger.py)
        3. Optimize settlements (settlement.py)
        4. Generate analytics and explanations (analytics.py)
        5. Return complete results
    """
    try:
        trip = _load_trip(payload)

        ledger_result = calculate_balances(trip)
        transfers = optimize_settlements(ledger_result.balances)
        analytics_result = generate_analytics(trip, ledger_result)
        explanations = explain_all_members(trip, ledger_result)

        return CalculateResponse(
            settlement_currency=trip.settlement_currency,
            balances=ledger_result.balances,
            spending=ledger_result.spending,
            settlements=[t.to_dict() for t in transfers],
            analytics=analytics_result["analytics"],
            warnings=analytics_result["warnings"],
            explanations=explanations
        )

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Settlement calculation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/settlements/record", response_model=RecordResponse, status_code=201)
async def record_trip_settlement(request: RecordRequest):
    """
    Record a confirmed transfer as a settlement expense.

    Returns the new expense and the updated snapshot for the caller to
    persist.
    """
    try:
        trip = _load_trip(request.trip)

        expense = record_settlement(
            request.from_person,
            request.to_person,
            request.amount,
            date=request.date,
            settlement_currency=trip.settlement_currency
        )
        updated = trip.with_expense(expense)

        return RecordResponse(expense=expense.to_dict(), trip=updated.to_dict())

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Recording settlement failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/journal")
async def get_journal(request: JournalRequest):
    """Return the trip's transactions, newest first, optionally filtered."""
    try:
        trip = _load_trip(request.trip)
        transactions = filter_journal(
            build_journal(trip),
            member=request.member,
            payment_method=request.payment_method
        )
        return {"transactions": [t.to_dict() for t in transactions]}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Building journal failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/conversion")
async def update_conversion(request: ConversionRequest):
    """Apply one field edit to a local/rate/settlement triple."""
    conversion = Conversion(request.local, request.rate, request.settlement)

    if request.field == "local":
        conversion = conversion.set_local(request.value)
    elif request.field == "rate":
        conversion = conversion.set_rate(request.value)
    else:
        conversion = conversion.set_settlement(request.value)

    return conversion.to_dict()


# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint to verify API is running."""
    return {"status": "healthy", "service": settings.APP_NAME}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
