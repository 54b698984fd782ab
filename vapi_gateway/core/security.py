"""
Security utilities: response security headers and per-IP rate limiting.
"""

import time
from dataclasses import dataclass

from vapi_gateway.config import Settings

CSP_HEADER = "Content-Security-Policy"

# The browser client loads the Vapi SDK from public CDNs and opens the
# call websocket against Vapi directly
CSP_DIRECTIVES = {
    "default-src": ["'self'"],
    "connect-src": ["'self'", "wss://api.vapi.ai", "https://api.vapi.ai", "wss://*.vapi.ai"],
    "script-src": [
        "'self'",
        "'unsafe-inline'",
        "'unsafe-eval'",
        "https://unpkg.com",
        "https://cdn.jsdelivr.net",
    ],
    "style-src": ["'self'", "'unsafe-inline'"],
    "img-src": ["'self'", "data:", "https:"],
    "frame-ancestors": ["'none'"],
}


def get_security_headers() -> dict[str, str]:
    """Headers attached to every response."""
    csp = "; ".join(f"{name} {' '.join(values)}" for name, values in CSP_DIRECTIVES.items())
    return {
        CSP_HEADER: csp,
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "no-referrer",
    }


@dataclass
class RateLimitRule:
    """Fixed-window limit applied to paths under `prefix`."""
    prefix: str
    max_requests: int
    window_seconds: float
    message: str

    def matches(self, path: str) -> bool:
        # Segment match: /api/vapi/call covers /api/vapi/call/phone, not /api/vapi/calls
        base = self.prefix.rstrip("/")
        return path == base or path.startswith(f"{base}/")


class RateLimiter:
    """
    In-memory fixed-window rate limiter keyed by (rule, client IP).

    Every matching rule consumes one slot; the request is rejected when any
    of them is exhausted. Expired windows are swept at most once per
    shortest rule window.
    """

    def __init__(self, rules: list[RateLimitRule]):
        self.rules = rules
        self._windows: dict[tuple[str, str], tuple[float, int]] = {}
        self._window_lengths = {rule.prefix: rule.window_seconds for rule in rules}
        self._sweep_interval = min(self._window_lengths.values(), default=0)
        self._last_sweep: float | None = None

    def check(self, path: str, client_ip: str, now: float | None = None) -> RateLimitRule | None:
        """
        Count a request.

        Returns:
            The first rule that is exceeded, or None when the request may proceed
        """
        now = time.monotonic() if now is None else now
        if self._last_sweep is None or now - self._last_sweep >= self._sweep_interval:
            self._sweep(now)

        exceeded = None

        for rule in self.rules:
            if not rule.matches(path):
                continue

            key = (rule.prefix, client_ip)
            started, count = self._windows.get(key, (now, 0))
            if now - started >= rule.window_seconds:
                started, count = now, 0

            count += 1
            self._windows[key] = (started, count)
            if count > rule.max_requests and exceeded is None:
                exceeded = rule

        return exceeded

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, (started, _) in self._windows.items()
            if now - started >= self._window_lengths[key[0]]
        ]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now


def build_rate_limiter(settings: Settings) -> RateLimiter:
    """General limit on /api/ and a tighter one on call creation."""
    return RateLimiter([
        RateLimitRule(
            prefix="/api/",
            max_requests=settings.general_rate_limit,
            window_seconds=15 * 60,
            message="Too many requests, please try again later.",
        ),
        RateLimitRule(
            prefix="/api/vapi/call",
            max_requests=settings.call_rate_limit,
            window_seconds=60,
            message="Too many call attempts, please wait a moment.",
        ),
    ])
