"""Operations dashboard and service health."""

from __future__ import annotations

from fastapi import APIRouter

from agms_api.dependencies import DbDep, OperationsUser
from agms_api.schemas.flights import OperationsDashboardResponse
from agms_api.services.flight_service import FlightService

router = APIRouter(tags=["operations"])


@router.get("/operations/dashboard", response_model=OperationsDashboardResponse)
async def operations_dashboard(
    user: OperationsUser, db: DbDep
) -> OperationsDashboardResponse:
    """Flight and aircraft statistics with the currently active flights."""
    return await FlightService(db).operations_dashboard()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
