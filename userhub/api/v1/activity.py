"""
Recent activity window (read-only).
"""

from typing import List

from fastapi import APIRouter, Query

from userhub.api.deps import CurrentContext, Services
from userhub.kernel.activity import ActivityLogEntry

router = APIRouter()


@router.get("", response_model=List[ActivityLogEntry])
async def recent_activity(
    context: CurrentContext,
    services: Services,
    limit: int = Query(50, ge=1, le=1000),
):
    """Most recent activity entries, newest first. Empty when the log store is down."""
    return await services.activity_log.recent(limit)
