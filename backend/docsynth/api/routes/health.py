"""Health check endpoints."""

from fastapi import APIRouter, Depends

from docsynth.api.deps import get_strategy_state
from docsynth.schemas import HealthResponse
from docsynth.services.discovery import StrategyState

router = APIRouter()


@router.get("/health", tags=["system"], response_model=HealthResponse)
def healthcheck(state: StrategyState = Depends(get_strategy_state)) -> HealthResponse:
    """Readiness probe that also reports the chosen enumeration strategy."""

    return HealthResponse(
        status="ok",
        enumeration_is_reliable=state.enumeration_is_reliable,
        probed=state.probed,
    )
