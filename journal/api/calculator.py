"""Position-size calculator API."""

from fastapi import APIRouter, Depends

from journal.schemas.calculator import PositionSizeRequest, PositionSizeResponse
from journal.services.calculator import position_size
from journal.api.deps import get_current_user

router = APIRouter(prefix="/api/calculator", tags=["calculator"], dependencies=[Depends(get_current_user)])


@router.post("/position-size", response_model=PositionSizeResponse)
def calculate_position_size(body: PositionSizeRequest):
    return position_size(
        entry=body.entry,
        stop_loss=body.stop_loss,
        account_balance=body.account_balance,
        risk_percentage=body.risk_percentage,
    )
