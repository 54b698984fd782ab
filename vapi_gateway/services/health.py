"""
Service health checks.

The Vapi check reads the configured assistant; the datastore check counts
property rows. Both always return a status and never raise.
"""

import structlog
from sqlalchemy.orm import Session, sessionmaker

from vapi_gateway.repositories.property_repository import PropertyRepository
from vapi_gateway.schemas.vapi import HealthStatus
from vapi_gateway.services.vapi_service import VapiService

logger = structlog.get_logger(__name__)


class HealthAggregator:
    """Reports the Vapi gateway as healthy, error or not_configured."""

    def __init__(self, vapi_service: VapiService):
        self.vapi_service = vapi_service

    async def check(self) -> HealthStatus:
        if not self.vapi_service.initialized:
            return HealthStatus(
                status="not_configured",
                message="Vapi credentials are missing or incomplete"
            )

        try:
            assistant = await self.vapi_service.get_assistant()
        except Exception as e:
            # Health reporting is a boundary: every failure becomes a status
            logger.warning("vapi_health_check_failed", error_type=type(e).__name__, error=str(e))
            return HealthStatus(status="error", message=str(e))

        return HealthStatus(
            status="healthy",
            assistantId=self.vapi_service.assistant_id,
            assistantName=(assistant or {}).get("name") or "Unknown",
        )


def check_datastore(session_factory: sessionmaker[Session] | None) -> HealthStatus:
    """Check the property datastore with a row count."""
    if session_factory is None:
        return HealthStatus(status="not_configured", message="Database URL not configured")

    try:
        with session_factory() as db:
            PropertyRepository(db).count()
    except Exception as e:
        logger.warning("datastore_health_check_failed", error_type=type(e).__name__, error=str(e))
        return HealthStatus(status="error", message="Connection failed")

    return HealthStatus(status="healthy")
