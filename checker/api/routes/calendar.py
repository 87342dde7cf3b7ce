from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Request
from fastapi import Response

from checker.api.schemas.calendar import CalendarStateResponse
from checker.api.schemas.calendar import GridCellResponse
from checker.api.schemas.calendar import TodayResponse
from checker.services.calendar_service import CalendarModel
from checker.services.calendar_service import ContributedToday
from checker.services.fetch_service import FetchCoordinator


router = APIRouter()


async def ticked_coordinator(request: Request) -> FetchCoordinator:
    """Run one polling tick and return the coordinator.

    Declared async so every tick and state change happens on the event loop.
    """

    coordinator = request.app.state.coordinator
    if coordinator is None:
        raise HTTPException(status_code=503, detail=request.app.state.startup_error)

    request.app.state.polling_loop.tick()
    return coordinator


def require_model(coordinator: FetchCoordinator) -> CalendarModel:
    if coordinator.model is None:
        raise HTTPException(status_code=404, detail="calendar not loaded")
    return coordinator.model


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Contributes Checker"}


@router.get("/health/live")
async def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.post("/fetch", status_code=202)
async def trigger_fetch(
    response: Response,
    coordinator: FetchCoordinator = Depends(ticked_coordinator),
) -> dict[str, str]:
    """Start a contribution fetch unless one is already running."""

    if coordinator.trigger():
        return {"status": "started"}

    response.status_code = 200
    return {"status": "in_flight"}


@router.get("/calendar", response_model=CalendarStateResponse)
async def get_calendar(
    coordinator: FetchCoordinator = Depends(ticked_coordinator),
) -> CalendarStateResponse:
    """Return fetch state, the last error, and the last loaded calendar."""

    model = coordinator.model
    return CalendarStateResponse(
        state=coordinator.state.name,
        error=coordinator.error,
        total_contributions=model.total_contributions if model else None,
        weeks=model.weeks if model else [],
    )


@router.get("/calendar/today", response_model=TodayResponse)
async def get_today(
    today: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
    coordinator: FetchCoordinator = Depends(ticked_coordinator),
) -> TodayResponse:
    """Return whether the loaded calendar has an entry for today."""

    status = require_model(coordinator).today_status(today)
    if isinstance(status, ContributedToday):
        return TodayResponse(
            status="contributed",
            date=status.date,
            count=status.count,
            color=status.color,
        )
    return TodayResponse(status="no_data", date=status.date)


@router.get("/calendar/grid", response_model=list[GridCellResponse])
async def get_grid(
    coordinator: FetchCoordinator = Depends(ticked_coordinator),
) -> list[GridCellResponse]:
    """Return heatmap cells with decoded colors."""

    return [
        GridCellResponse(
            column=cell.column,
            row=cell.row,
            date=cell.date,
            count=cell.count,
            level=cell.level,
            rgb=cell.rgb,
        )
        for cell in require_model(coordinator).grid()
    ]
