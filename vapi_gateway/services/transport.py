"""
HTTP transport for the Vapi REST API.

Issues exactly one request per call and turns the response into either a
parsed JSON payload or a typed exception.

Design decisions:
- httpx.AsyncClient for async operations and connection pooling
- No retry layer: a failed request is reported, never repeated
- Authorization headers are supplied per request so the caller decides
  which credential goes out
- Distinct exceptions for "Vapi answered with an error" and "Vapi could
  not be reached"
"""

import json
from typing import Any

import httpx
import structlog

from vapi_gateway.core.exceptions import (
    UpstreamHTTPError,
    UpstreamParseError,
    UpstreamTransportError,
)

logger = structlog.get_logger(__name__)


class VapiTransport:
    """
    Single-attempt async HTTP client for the Vapi API.

    Usage:
        transport = VapiTransport("https://api.vapi.ai", timeout=30.0)
        try:
            assistant = await transport.send(
                "GET", "/assistant/asst_123",
                headers={"Authorization": "Bearer sk_..."}
            )
        finally:
            await transport.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """
        Args:
            base_url: Full upstream URL including scheme
            timeout: Seconds before a hung request is abandoned
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def send(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        body: Any = None
    ) -> Any:
        """
        Send one request and parse the JSON response.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: Path relative to the base URL, query string included
            headers: Per-request headers (Authorization)
            body: JSON-serializable payload, omitted when None

        Returns:
            Parsed JSON payload; `{}` for an empty 2xx body

        Raises:
            UpstreamHTTPError: Non-2xx status
            UpstreamParseError: 2xx status with a body that is not JSON
            UpstreamTransportError: Connection, DNS, TLS or timeout failure
        """
        content = json.dumps(body) if body is not None else None

        try:
            response = await self.client.request(
                method=method,
                url=path,
                headers=headers,
                content=content,
            )
        except httpx.RequestError as e:
            logger.error(
                "vapi_request_failed",
                method=method,
                path=path,
                error_type=type(e).__name__,
                error=str(e)
            )
            raise UpstreamTransportError(
                f"Request Error: {str(e) or type(e).__name__}",
                details={"error_type": type(e).__name__}
            ) from e

        text = response.text

        if not response.is_success:
            raise UpstreamHTTPError(
                response.status_code,
                _error_message(text) or response.reason_phrase
            )

        if not text.strip():
            return {}

        try:
            return json.loads(text)
        except ValueError as e:
            logger.error(
                "vapi_response_parse_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                body=text[:200]
            )
            raise UpstreamParseError(
                f"Parse Error: {str(e)}",
                details={"status_code": response.status_code}
            ) from e

    async def close(self) -> None:
        """Close the HTTP client and release pooled connections."""
        await self.client.aclose()


def _error_message(text: str) -> str:
    """Pull the provider's `message` field out of an error body, else return the raw text."""
    try:
        payload = json.loads(text)
    except ValueError:
        return text

    if isinstance(payload, dict) and payload.get("message"):
        message = payload["message"]
        # Vapi reports validation failures as a list of strings
        if isinstance(message, list):
            return "; ".join(str(item) for item in message)
        return str(message)
    return text
