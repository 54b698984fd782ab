"""
FastAPI dependencies for dependency injection.

Services are built once per application in `main.create_app()` and kept on
`app.state`; these dependencies hand them to route functions.

Design decisions:
- One VapiService (and so one pooled httpx.AsyncClient) per application
- Services are looked up on the request's app, so tests can build an app
  with fake upstreams or replace a dependency via `app.dependency_overrides`
"""

from typing import Annotated

from fastapi import Depends, Request

from vapi_gateway.services.health import HealthAggregator
from vapi_gateway.services.property_search import PropertySearchService
from vapi_gateway.services.vapi_service import VapiService
from vapi_gateway.services.webhooks import WebhookInterpreter


def get_vapi_service(request: Request) -> VapiService:
    """
    Dependency that provides the application's Vapi call gateway.

    Usage in endpoint:
        @router.get("/assistant")
        async def assistant(vapi: VapiServiceDep):
            return await vapi.get_assistant()
    """
    return request.app.state.vapi_service


def get_health_aggregator(request: Request) -> HealthAggregator:
    return request.app.state.health_aggregator


def get_webhook_interpreter(request: Request) -> WebhookInterpreter:
    return request.app.state.webhook_interpreter


def get_property_search(request: Request) -> PropertySearchService:
    return request.app.state.property_search


# ===== Type Aliases for Cleaner Endpoint Signatures =====

VapiServiceDep = Annotated[VapiService, Depends(get_vapi_service)]
HealthAggregatorDep = Annotated[HealthAggregator, Depends(get_health_aggregator)]
WebhookInterpreterDep = Annotated[WebhookInterpreter, Depends(get_webhook_interpreter)]
PropertySearchDep = Annotated[PropertySearchService, Depends(get_property_search)]
