"""
Commission Model API Endpoints (admin).
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from booking_settlement.app.db.session import get_db
from booking_settlement.app.core.dependencies import get_actor
from booking_settlement.app.domain.settlement.orchestrator import SettlementOrchestrator
from booking_settlement.app.schemas.commission import CommissionModelCreate, CommissionModelResponse

router = APIRouter(prefix="/admin/commission-models", tags=["Admin - Commission Models"])


@router.post("", response_model=CommissionModelResponse, status_code=201)
async def create_commission_model(
    model: CommissionModelCreate,
    actor: str = Depends(get_actor),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a commission model.
    
    Percentage rates must not add up to more than 100.
    """
    return await SettlementOrchestrator(db).create_commission_model(
        model.id,
        model.name,
        model.calculation_type,
        model.charter_commission,
        model.creator_commission,
        model.web_service_commission,
        actor=actor,
    )


@router.get("", response_model=List[CommissionModelResponse])
async def list_commission_models(db: AsyncSession = Depends(get_db)):
    return await SettlementOrchestrator(db).list_commission_models()


@router.get("/{model_id}", response_model=CommissionModelResponse)
async def get_commission_model(
    model_id: str = Path(..., description="Commission model ID"),
    db: AsyncSession = Depends(get_db)
):
    return await SettlementOrchestrator(db).get_commission_model(model_id)
