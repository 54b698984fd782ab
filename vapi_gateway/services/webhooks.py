"""
Interpreter for webhook events pushed by Vapi.

Each recognized event type gets its own structured log entry; nothing is
persisted. Delivery is always acknowledged once the payload is well-formed,
even if handling fails, so Vapi does not start redelivering.
"""

from typing import Any, Awaitable, Callable

import structlog
from pydantic import ValidationError as PydanticValidationError

from vapi_gateway.core.exceptions import MalformedWebhookError
from vapi_gateway.schemas.vapi import WebhookAck, WebhookEvent

logger = structlog.get_logger(__name__)


class WebhookInterpreter:
    """
    Dispatches webhook events by type.

    Usage:
        interpreter = WebhookInterpreter()
        ack = await interpreter.handle({"type": "call-ended", "data": {"callId": "c1"}})
    """

    def __init__(self):
        self.handlers: dict[str, Callable[[dict[str, Any]], Awaitable[None]]] = {
            "status-update": self.on_status_update,
            "transcript": self.on_transcript,
            "call-ended": self.on_call_ended,
            "speech-update": self.on_speech_update,
            "conversation-update": self.on_conversation_update,
            "end-of-call-report": self.on_end_of_call_report,
        }

    @staticmethod
    def parse(payload: Any) -> WebhookEvent:
        """
        Validate the envelope.

        A non-string `type` is kept as its string form and falls through to
        the unhandled-type branch.

        Raises:
            MalformedWebhookError: Payload is not an object, or lacks `type` or `data`
        """
        if not isinstance(payload, dict):
            raise MalformedWebhookError()

        event_type = payload.get("type")
        if event_type is None or event_type == "" or payload.get("data") is None:
            raise MalformedWebhookError()

        try:
            return WebhookEvent(**{**payload, "type": str(event_type)})
        except PydanticValidationError as e:
            raise MalformedWebhookError(details=[err["msg"] for err in e.errors()]) from e

    async def handle(self, payload: Any) -> WebhookAck:
        event = self.parse(payload)
        logger.info("webhook_received", event_type=event.type)

        try:
            handler = self.handlers.get(event.type)
            if handler is None:
                logger.info("webhook_unhandled_type", event_type=event.type, data=event.data)
            elif not isinstance(event.data, dict):
                logger.warning("webhook_data_not_object", event_type=event.type, data_type=type(event.data).__name__)
            else:
                await handler(event.data)
        except Exception as e:
            # Acknowledge anyway; a dropped event beats a redelivery storm
            logger.exception("webhook_processing_failed", event_type=event.type, error=str(e))
            return WebhookAck(success=False, error=str(e))

        return WebhookAck(success=True)

    async def on_status_update(self, data: dict[str, Any]) -> None:
        if data.get("callId"):
            logger.info("call_status_updated", call_id=data["callId"], status=data.get("status"))

    async def on_transcript(self, data: dict[str, Any]) -> None:
        if data.get("callId") and data.get("transcript"):
            logger.info(
                "call_transcript_received",
                call_id=data["callId"],
                role=data.get("role"),
                transcript=data["transcript"]
            )

    async def on_call_ended(self, data: dict[str, Any]) -> None:
        if data.get("callId"):
            logger.info("call_ended_event", call_id=data["callId"], reason=data.get("endedReason"))

    async def on_speech_update(self, data: dict[str, Any]) -> None:
        logger.debug(
            "speech_update",
            call_id=data.get("callId"),
            role=data.get("role"),
            status=data.get("status")
        )

    async def on_conversation_update(self, data: dict[str, Any]) -> None:
        messages = data.get("messages") or data.get("conversation") or []
        logger.info(
            "conversation_update",
            call_id=data.get("callId"),
            message_count=len(messages)
        )

    async def on_end_of_call_report(self, data: dict[str, Any]) -> None:
        logger.info(
            "end_of_call_report",
            call_id=data.get("callId"),
            ended_reason=data.get("endedReason"),
            duration_seconds=data.get("durationSeconds"),
            cost=data.get("cost"),
            summary=data.get("summary")
        )
