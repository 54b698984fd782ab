"""
Vapi credential triple and the policy deciding which key each call uses.

Key usage:
- private key: assistant reads/updates, phone calls, call listing/lookup/end
- public key: web-call creation (the only key sent on that request)

Web calls still require the private key to be configured; it gates the
operation locally but never goes upstream on that path.
"""

from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

# Values shipped in .env templates that mean "not filled in yet"
PLACEHOLDER_VALUES = frozenset({
    "your_vapi_private_key",
    "your_vapi_private_key_here",
    "your_vapi_public_key",
    "your_vapi_public_key_here",
    "your_vapi_assistant_id",
    "your_vapi_assistant_id_here",
    "your_private_key",
    "your_public_key",
    "your_assistant_id",
    "changeme",
    "placeholder",
})


def is_placeholder(value: str | None) -> bool:
    """True when a credential is empty or a template placeholder."""
    if value is None or not value.strip():
        return True
    return value.strip().lower() in PLACEHOLDER_VALUES


@dataclass(frozen=True)
class Credentials:
    """Process-wide Vapi credentials, read-only after startup."""

    private_key: str | None
    public_key: str | None
    assistant_id: str | None

    @classmethod
    def from_settings(cls, settings: Any) -> "Credentials":
        return cls(
            private_key=settings.vapi_private_key,
            public_key=settings.vapi_public_key,
            assistant_id=settings.vapi_assistant_id,
        )

    def __repr__(self) -> str:
        # Keys must never end up in logs or tracebacks
        return (
            f"Credentials(private_key={'set' if self.private_key else None}, "
            f"public_key={'set' if self.public_key else None}, "
            f"assistant_id={self.assistant_id!r})"
        )


class CredentialPolicy:
    """
    Validates the credential triple and builds per-operation auth headers.

    Usage:
        policy = CredentialPolicy(Credentials.from_settings(settings))
        if policy.validate():
            headers = policy.private_headers()
    """

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def missing(self) -> list[str]:
        """Names of credentials that are absent or placeholders."""
        checks = {
            "VAPI_PRIVATE_KEY": self.credentials.private_key,
            "VAPI_PUBLIC_KEY": self.credentials.public_key,
            "VAPI_ASSISTANT_ID": self.credentials.assistant_id,
        }
        return [name for name, value in checks.items() if is_placeholder(value)]

    def validate(self) -> bool:
        """
        Check that all three credentials are usable.

        Returns:
            True when private key, public key and assistant ID are all set
            and none of them is a placeholder.
        """
        missing = self.missing()
        for name in missing:
            logger.warning("vapi_credential_missing", credential=name)
        return not missing

    def private_headers(self) -> dict[str, str]:
        """Authorization header for server-side operations."""
        return {"Authorization": f"Bearer {self.credentials.private_key}"}

    def public_headers(self) -> dict[str, str]:
        """Authorization header for browser-facing web-call creation."""
        return {"Authorization": f"Bearer {self.credentials.public_key}"}
