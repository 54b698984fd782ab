"""
REST endpoints for the Vapi call gateway.

Every successful response has the shape `{"success": true, "data": ...}`.
Failures are raised as gateway exceptions and turned into
`{"success": false, "error": ...}` by the handlers in `main.py`.
"""

from typing import Any

import structlog
from fastapi import APIRouter, Body, Query, Request
from fastapi.responses import JSONResponse

from vapi_gateway.core.deps import VapiServiceDep, WebhookInterpreterDep
from vapi_gateway.core.exceptions import MalformedWebhookError
from vapi_gateway.schemas.vapi import (
    PhoneCallRequest,
    TransportSpec,
    WebCallData,
    WebCallRequest,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/vapi", tags=["vapi"])


@router.get("/assistant")
async def get_assistant(vapi: VapiServiceDep) -> dict[str, Any]:
    """Configured assistant's metadata."""
    assistant = await vapi.get_assistant()
    return {"success": True, "data": assistant}


@router.patch("/assistant")
async def update_assistant(
    vapi: VapiServiceDep,
    updates: dict[str, Any] = Body(...)
) -> dict[str, Any]:
    """Apply a partial update to the configured assistant."""
    assistant = await vapi.update_assistant(updates)
    return {"success": True, "data": assistant}


@router.post("/call/phone")
async def create_phone_call(payload: PhoneCallRequest, vapi: VapiServiceDep) -> dict[str, Any]:
    """
    Dial a phone number with the assistant.

    Returns 400 when `phoneNumber` is missing or not in international format.
    """
    call = await vapi.make_call(payload.phoneNumber, payload.assistantId)
    return {"success": True, "data": call}


@router.post("/call")
async def create_web_call(vapi: VapiServiceDep, payload: WebCallRequest | None = None) -> dict[str, Any]:
    """
    Create a browser web call over the Vapi websocket transport.

    The response is pruned to what the browser needs to connect:
    call ID, websocket URL and the public key.
    """
    assistant_id = payload.assistantId if payload else None
    transport = TransportSpec()

    logger.info(
        "web_call_requested",
        assistant_id=assistant_id or vapi.assistant_id,
        transport_provider=transport.provider,
        audio_format=transport.audioFormat.model_dump()
    )

    call = await vapi.create_web_call(assistant_id, transport.model_dump())
    return {"success": True, "data": WebCallData.from_call(call).model_dump()}


@router.get("/calls")
async def list_calls(
    vapi: VapiServiceDep,
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0)
) -> dict[str, Any]:
    """
    Recent calls.

    `offset` is accepted for client compatibility but the upstream listing
    only receives `limit`.
    """
    calls = await vapi.get_calls(limit)
    return {"success": True, "data": calls}


@router.get("/calls/{call_id}")
async def get_call(call_id: str, vapi: VapiServiceDep) -> dict[str, Any]:
    call = await vapi.get_call(call_id)
    return {"success": True, "data": call}


@router.delete("/calls/{call_id}")
async def end_call(call_id: str, vapi: VapiServiceDep) -> dict[str, Any]:
    result = await vapi.end_call(call_id)
    return {"success": True, "data": result}


@router.get("/calls/{call_id}/transcript")
async def get_call_transcript(call_id: str, vapi: VapiServiceDep) -> dict[str, Any]:
    transcript = await vapi.get_call_transcript(call_id)
    return {"success": True, "data": {"transcript": transcript}}


@router.get("/config")
async def get_vapi_config(vapi: VapiServiceDep) -> dict[str, Any]:
    """
    Public configuration for the browser Web SDK.

    Exposes only the public key and assistant ID, never the private key.
    """
    return {
        "success": True,
        "publicKey": vapi.public_key,
        "assistantId": vapi.assistant_id,
    }


@router.post("/webhook")
async def receive_webhook(request: Request, interpreter: WebhookInterpreterDep):
    """
    Receive status events from Vapi.

    Always answers 200 once the payload has a `type` and `data`, even if
    handling fails, so Vapi does not retry delivery.
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("webhook_body_unparseable")
        raise MalformedWebhookError()

    ack = await interpreter.handle(payload)
    return JSONResponse(content=ack.model_dump(exclude_none=True))
