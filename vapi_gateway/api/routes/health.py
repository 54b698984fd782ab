"""
Aggregated health endpoint for load balancers and the browser client.
"""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from vapi_gateway import __version__
from vapi_gateway.core.deps import HealthAggregatorDep, PropertySearchDep
from vapi_gateway.services.health import check_datastore

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(aggregator: HealthAggregatorDep, search: PropertySearchDep) -> JSONResponse:
    """
    Status of each backing service, computed fresh on every call.

    Returns:
        200 when at least one service is healthy, 503 otherwise
    """
    services = {
        "vapi": await aggregator.check(),
        "database": await asyncio.to_thread(check_datastore, search.session_factory),
    }

    any_healthy = any(status.status == "healthy" for status in services.values())

    return JSONResponse(
        status_code=200 if any_healthy else 503,
        content={
            "status": "OK" if any_healthy else "DEGRADED",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "services": {
                name: status.model_dump(exclude_none=True)
                for name, status in services.items()
            },
        },
    )
