"""Test doubles shared across the suite."""

import json

import httpx

from vapi_gateway.config import Settings

PRIVATE_KEY = "sk_test_private_key"
PUBLIC_KEY = "pk_test_public_key"
ASSISTANT_ID = "asst_test_123"


class FakeVapi:
    """
    In-memory stand-in for the Vapi API, served through httpx.MockTransport.

    Register responses with `add`; every request that reaches the fake is
    recorded in `requests`. Unregistered routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], object] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json_body=None, text: str | None = None) -> None:
        if text is not None:
            self.routes[(method, path)] = lambda request: httpx.Response(status, text=text)
        else:
            self.routes[(method, path)] = lambda request: httpx.Response(status, json=json_body)

    def fail(self, method: str, path: str, error: type[httpx.RequestError] = httpx.ConnectError) -> None:
        def raise_error(request: httpx.Request):
            raise error("Connection refused", request=request)
        self.routes[(method, path)] = raise_error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.raw_path.decode()))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found", "statusCode": 404})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last_request.content)


def make_settings(**overrides) -> Settings:
    """Settings that ignore the local .env file."""
    values = {
        "vapi_private_key": PRIVATE_KEY,
        "vapi_public_key": PUBLIC_KEY,
        "vapi_assistant_id": ASSISTANT_ID,
        "app_env": "test",
        "log_format": "console",
        "static_dir": "tests/no-client",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)
