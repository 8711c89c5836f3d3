"""
Damage calculator API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.calculator import CalculatorRequest, CalculatorResponse
from ..services.calculator_service import CalculatorService
from ..dependencies import get_calculator_service

router = APIRouter()


@router.post("", response_model=CalculatorResponse)
async def calculate_damage(
    request: CalculatorRequest,
    service: CalculatorService = Depends(get_calculator_service),
):
    """
    Team damage against one enemy.

    Returns every hero's raw damage model, plus resisted and amplified
    summaries, percent-of-health effects and time-to-kill curves for the
    selected heroes.
    """
    try:
        return service.calculate(request)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
