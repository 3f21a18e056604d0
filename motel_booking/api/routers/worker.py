from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from motel_booking.api.dependencies import get_use_cases
from motel_booking.api.schemas.reservations import NoShowSweepResponse
from motel_booking.infrastructure.db.retry import retry_on_deadlock

router = APIRouter()


@router.post(
    "/workers/no-shows",
    response_model=NoShowSweepResponse,
    status_code=status.HTTP_200_OK,
)
async def sweep_no_shows(
    use_cases: Annotated[dict, Depends(get_use_cases)],
    limit: int = Query(default=100, gt=0, le=1000),
) -> NoShowSweepResponse:
    """Mark confirmed reservations whose window ended without check-in."""

    async def sweep():
        return await use_cases["mark_no_shows"].execute(limit=limit)

    marked = await retry_on_deadlock(sweep, max_attempts=3, base_delay=0.1)
    return NoShowSweepResponse(
        marked=len(marked), reservation_ids=[reservation.id for reservation in marked]
    )
