"""
Call gateway for the Vapi AI platform.

Exposes the call lifecycle (phone calls, browser web calls, listing,
lookup, ending, transcripts) and assistant metadata on top of a
single-attempt HTTP transport.

Design decisions:
- Readiness is computed once in the constructor from the credential
  policy; every operation re-checks it before building a request
- Private key for server-side operations, public key for web calls
- Methods log failures and re-raise; the REST layer maps exception types
  to HTTP statuses
"""

from typing import Any

import structlog

from vapi_gateway.core.exceptions import (
    ConfigurationError,
    InvalidUpstreamResponseError,
    ValidationError,
    VapiError,
)
from vapi_gateway.services.credentials import CredentialPolicy, Credentials
from vapi_gateway.services.transport import VapiTransport
from vapi_gateway.utils.helpers import normalize_phone_number

logger = structlog.get_logger(__name__)

# Browser web calls stream raw 16 kHz PCM over the Vapi websocket transport
DEFAULT_WEB_TRANSPORT: dict[str, Any] = {
    "provider": "vapi.websocket",
    "audioFormat": {
        "format": "pcm_s16le",
        "container": "raw",
        "sampleRate": 16000,
    },
}


class VapiService:
    """
    Vapi call gateway.

    Usage:
        service = VapiService(
            Credentials.from_settings(settings),
            VapiTransport(settings.vapi_base_url, timeout=settings.vapi_timeout),
        )
        if service.initialized:
            call = await service.make_call("+14155550123")
        await service.close()

    Attributes:
        initialized: True when the credential triple is complete
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: VapiTransport,
        phone_number_id: str | None = None,
        web_call_path: str = "/call/web"
    ):
        self.credentials = credentials
        self.policy = CredentialPolicy(credentials)
        self.transport = transport
        self.phone_number_id = phone_number_id
        self.web_call_path = web_call_path

        self.initialized = self.policy.validate()
        if self.initialized:
            logger.info("vapi_service_initialized", assistant_id=credentials.assistant_id)
        else:
            logger.warning("vapi_service_not_configured", missing=self.policy.missing())

    @property
    def assistant_id(self) -> str | None:
        return self.credentials.assistant_id

    @property
    def public_key(self) -> str | None:
        return self.credentials.public_key

    def _ensure_initialized(self) -> None:
        if not self.initialized:
            raise ConfigurationError("Vapi service not initialized")

    async def _send(
        self,
        operation: str,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Any = None
    ) -> Any:
        try:
            return await self.transport.send(method, path, headers, body)
        except VapiError as e:
            logger.error(
                "vapi_operation_failed",
                operation=operation,
                error_code=e.error_code.value,
                error=e.message
            )
            raise

    # ===== Assistant =====

    async def get_assistant(self) -> dict[str, Any]:
        """
        Fetch the configured assistant's metadata.

        Raises:
            ConfigurationError: Gateway not initialized or assistant ID missing
            UpstreamHTTPError / UpstreamTransportError: Upstream failure
        """
        self._ensure_initialized()
        if not self.assistant_id:
            raise ConfigurationError("Assistant ID not configured")

        return await self._send(
            "get_assistant",
            "GET",
            f"/assistant/{self.assistant_id}",
            self.policy.private_headers(),
        )

    async def update_assistant(self, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Patch the configured assistant.

        Args:
            updates: Partial assistant object, forwarded as-is
        """
        self._ensure_initialized()
        if not self.assistant_id:
            raise ConfigurationError("Assistant ID not configured")

        result = await self._send(
            "update_assistant",
            "PATCH",
            f"/assistant/{self.assistant_id}",
            self.policy.private_headers(),
            updates,
        )
        logger.info("assistant_updated", assistant_id=self.assistant_id, fields=sorted(updates))
        return result

    # ===== Calls =====

    async def make_call(
        self,
        phone_number: str | None,
        assistant_id: str | None = None
    ) -> dict[str, Any]:
        """
        Start an outbound phone call.

        The number is validated and normalized before anything is sent, so a
        malformed number never costs an upstream request.

        Args:
            phone_number: International number; spaces, hyphens and
                parentheses are ignored
            assistant_id: Overrides the configured assistant

        Returns:
            Vapi call object (carries `id`)

        Raises:
            ValidationError: Phone number missing or malformed
        """
        self._ensure_initialized()

        if not phone_number:
            raise ValidationError("Phone number is required")

        number = normalize_phone_number(phone_number)

        call_data = {
            "assistantId": assistant_id or self.assistant_id,
            "phoneNumberId": self.phone_number_id,
            "customer": {"number": number},
        }

        result = await self._send(
            "make_call",
            "POST",
            "/call/phone",
            self.policy.private_headers(),
            call_data,
        )
        logger.info("phone_call_initiated", call_id=result.get("id"))
        return result

    async def create_web_call(
        self,
        assistant_id: str | None = None,
        transport: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """
        Create a browser web call.

        The request is authorized with the public key. A caller-supplied
        transport replaces the default websocket profile entirely.

        Returns:
            Upstream call object plus `publicKey` for the browser

        Raises:
            InvalidUpstreamResponseError: Response lacks `id` or
                `transport.websocketCallUrl`
        """
        self._ensure_initialized()

        call_data = {
            "assistantId": assistant_id or self.assistant_id,
            "transport": transport or DEFAULT_WEB_TRANSPORT,
        }

        result = await self._send(
            "create_web_call",
            "POST",
            self.web_call_path,
            self.policy.public_headers(),
            call_data,
        )

        call_transport = result.get("transport") if isinstance(result, dict) else None
        if (
            not isinstance(result, dict)
            or not result.get("id")
            or not isinstance(call_transport, dict)
            or not call_transport.get("websocketCallUrl")
        ):
            logger.error("web_call_response_incomplete", call_id=result.get("id") if isinstance(result, dict) else None)
            raise InvalidUpstreamResponseError("Invalid response from Vapi service")

        logger.info("web_call_created", call_id=result["id"])
        return {**result, "publicKey": self.public_key}

    async def get_calls(self, limit: int = 100) -> Any:
        """List recent calls. Only `limit` is sent upstream."""
        self._ensure_initialized()

        return await self._send(
            "get_calls",
            "GET",
            f"/call?limit={limit}",
            self.policy.private_headers(),
        )

    async def get_call(self, call_id: str | None) -> dict[str, Any]:
        self._ensure_initialized()
        if not call_id:
            raise ValidationError("Call ID is required")

        return await self._send(
            "get_call",
            "GET",
            f"/call/{call_id}",
            self.policy.private_headers(),
        )

    async def end_call(self, call_id: str | None) -> Any:
        self._ensure_initialized()
        if not call_id:
            raise ValidationError("Call ID is required")

        result = await self._send(
            "end_call",
            "DELETE",
            f"/call/{call_id}",
            self.policy.private_headers(),
        )
        logger.info("call_ended", call_id=call_id)
        return result

    async def get_call_transcript(self, call_id: str | None) -> Any:
        """Transcript of a call, or None when the call has none yet."""
        call = await self.get_call(call_id)
        if not isinstance(call, dict):
            logger.warning("call_lookup_not_object", call_id=call_id, body_type=type(call).__name__)
            return None
        return call.get("transcript") or None

    async def close(self) -> None:
        """Release the HTTP transport."""
        await self.transport.close()
