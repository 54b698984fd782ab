"""
Pydantic schemas for the Vapi gateway REST surface.

This module defines models for:
- Call creation requests from the browser client
- Web-call responses pruned for the browser
- Service health reports
- Webhook events received from Vapi and their acknowledgements

Design decisions:
- camelCase field names on the wire, matching the browser client and Vapi
- Flexible dicts for upstream objects the gateway only relays
- Required-ness enforced by the call gateway, not the schema, so missing
  inputs surface as 400 with a specific message
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class PhoneCallRequest(BaseModel):
    """Body of POST /api/vapi/call/phone."""
    phoneNumber: str | None = Field(
        default=None,
        description="Number to dial in international format"
    )
    assistantId: str | None = Field(
        default=None,
        description="Assistant override (configured assistant when omitted)"
    )

    model_config = ConfigDict(extra="ignore")


class WebCallRequest(BaseModel):
    """Body of POST /api/vapi/call."""
    assistantId: str | None = None

    model_config = ConfigDict(extra="ignore")


class AudioFormat(BaseModel):
    format: str = "pcm_s16le"
    container: str = "raw"
    sampleRate: int = 16000


class TransportSpec(BaseModel):
    """Audio transport requested for a web call."""
    provider: str = "vapi.websocket"
    audioFormat: AudioFormat = Field(default_factory=AudioFormat)


class WebCallTransport(BaseModel):
    provider: str | None = None
    websocketCallUrl: str


class WebCallData(BaseModel):
    """
    The only web-call fields forwarded to the browser.

    Everything else Vapi returns stays on the server.
    """
    id: str
    transport: WebCallTransport
    publicKey: str | None = None

    @classmethod
    def from_call(cls, call: dict[str, Any]) -> "WebCallData":
        transport = call.get("transport") or {}
        return cls(
            id=call["id"],
            transport=WebCallTransport(
                provider=transport.get("provider"),
                websocketCallUrl=transport["websocketCallUrl"],
            ),
            publicKey=call.get("publicKey"),
        )


class HealthStatus(BaseModel):
    """Point-in-time status of one backing service. Never cached."""
    status: Literal["healthy", "error", "not_configured", "initializing"]
    message: str | None = None
    assistantId: str | None = None
    assistantName: str | None = None


class WebhookEvent(BaseModel):
    """
    Event pushed by Vapi to POST /api/vapi/webhook.

    Types seen in practice: status-update, transcript, call-ended,
    speech-update, conversation-update, end-of-call-report. Unknown types
    are accepted.
    """
    type: str
    data: Any

    model_config = ConfigDict(extra="allow")


class WebhookAck(BaseModel):
    """Acknowledgement returned for every delivered webhook."""
    success: bool
    error: str | None = None
