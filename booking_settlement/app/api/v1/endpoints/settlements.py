"""
Settlement API Endpoints.

Invoked by the booking handlers once a booking is confirmed.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from booking_settlement.app.db.session import get_db
from booking_settlement.app.core.dependencies import get_actor
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.schemas.settlement import SettlementResponse

router = APIRouter(prefix="/settlements", tags=["Settlements"])


@router.post("/bookings/{booking_id}", response_model=SettlementResponse)
async def settle_booking(
    booking_id: str = Path(..., description="Booking ID"),
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Settle a confirmed booking.
    
    Charges the customer's wallet, posts the booking journal entry and pays
    the flight creator's commission. A booking can be settled once.
    """
    result = await SettlementOrchestrator(db).settle_booking(booking_id, actor=actor)
    return SettlementResponse.model_validate(result)
