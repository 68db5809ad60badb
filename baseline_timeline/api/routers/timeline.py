from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from baseline_timeline.core.logging import get_logger
from baseline_timeline.models.timeline import TimelineData
from baseline_timeline.services.feed_fetch_service import TimelineError
from baseline_timeline.services.timeline_service import TimelineService, get_timeline_service

logger = get_logger().bind(module="timeline_router")

router = APIRouter(
    prefix="/timeline",
    tags=["timeline"],
)


@router.get("", response_model=TimelineData, response_model_by_alias=True)
async def get_timeline(
    service: TimelineService = Depends(get_timeline_service),
) -> TimelineData:
    try:
        return await service.get_timeline_data()
    except TimelineError as exc:
        logger.error("timeline_unavailable", url=exc.url, error=str(exc))
        raise HTTPException(status_code=502, detail=str(exc)) from exc
