"""Tests for the webhook interpreter and POST /api/vapi/webhook."""

import pytest
from unittest.mock import AsyncMock

from vapi_gateway.core.exceptions import MalformedWebhookError
from vapi_gateway.services.webhooks import WebhookInterpreter

RECOGNIZED_EVENTS = [
    ("status-update", {"callId": "c1", "status": "in-progress"}),
    ("transcript", {"callId": "c1", "role": "user", "transcript": "Two bedrooms in Austin"}),
    ("call-ended", {"callId": "c1", "endedReason": "customer-ended-call"}),
    ("speech-update", {"callId": "c1", "role": "assistant", "status": "started"}),
    ("conversation-update", {"callId": "c1", "messages": [{"role": "user"}, {"role": "assistant"}]}),
    ("end-of-call-report", {"callId": "c1", "durationSeconds": 42, "summary": "Booked a viewing"}),
]


class TestWebhookInterpreter:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event_type, data", RECOGNIZED_EVENTS)
    async def test_recognized_types_are_acknowledged(self, event_type, data):
        ack = await WebhookInterpreter().handle({"type": event_type, "data": data})

        assert ack.success is True
        assert ack.error is None

    def test_each_recognized_type_has_its_own_handler(self):
        interpreter = WebhookInterpreter()

        assert set(interpreter.handlers) == {event_type for event_type, _ in RECOGNIZED_EVENTS}
        assert len(set(interpreter.handlers.values())) == len(RECOGNIZED_EVENTS)

    @pytest.mark.asyncio
    async def test_dispatches_to_matching_handler(self):
        interpreter = WebhookInterpreter()
        interpreter.handlers["call-ended"] = AsyncMock()

        await interpreter.handle({"type": "call-ended", "data": {"callId": "c9"}})

        interpreter.handlers["call-ended"].assert_awaited_once_with({"callId": "c9"})

    @pytest.mark.asyncio
    async def test_unknown_type_is_acknowledged(self):
        ack = await WebhookInterpreter().handle({"type": "hang", "data": {}})

        assert ack.success is True

    @pytest.mark.asyncio
    async def test_handler_failure_is_acknowledged_with_error(self):
        interpreter = WebhookInterpreter()
        interpreter.handlers["call-ended"] = AsyncMock(side_effect=RuntimeError("boom"))

        ack = await interpreter.handle({"type": "call-ended", "data": {"callId": "c1"}})

        assert ack.success is False
        assert ack.error == "boom"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("event_type", [5, {"x": 1}, ["call-ended"], True])
    async def test_non_string_type_is_treated_as_unhandled(self, event_type):
        interpreter = WebhookInterpreter()
        interpreter.handlers["call-ended"] = AsyncMock()

        ack = await interpreter.handle({"type": event_type, "data": {"callId": "c1"}})

        assert ack.success is True
        interpreter.handlers["call-ended"].assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", ["ended", 42, ["c1"]])
    async def test_non_object_data_is_acknowledged_without_dispatch(self, data):
        interpreter = WebhookInterpreter()
        interpreter.handlers["call-ended"] = AsyncMock()

        ack = await interpreter.handle({"type": "call-ended", "data": data})

        assert ack.success is True
        interpreter.handlers["call-ended"].assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"data": {"callId": "c1"}},
            {"type": "call-ended"},
            {"type": "", "data": {}},
            {"type": "call-ended", "data": None},
            ["call-ended"],
            None,
        ],
    )
    async def test_malformed_envelope_is_rejected(self, payload):
        with pytest.raises(MalformedWebhookError):
            await WebhookInterpreter().handle(payload)


class TestWebhookEndpoint:

    @pytest.mark.parametrize("event_type, data", RECOGNIZED_EVENTS + [("model-output", {"output": "hi"})])
    def test_every_type_returns_200(self, client, event_type, data):
        response = client.post("/api/vapi/webhook", json={"type": event_type, "data": data})

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_missing_type_returns_400(self, client):
        response = client.post("/api/vapi/webhook", json={"data": {"callId": "c1"}})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["error"] == "Invalid webhook payload"

    def test_missing_data_returns_400(self, client):
        response = client.post("/api/vapi/webhook", json={"type": "call-ended"})

        assert response.status_code == 400

    @pytest.mark.parametrize("event_type", [5, {"x": 1}])
    def test_non_string_type_returns_200(self, client, event_type):
        response = client.post("/api/vapi/webhook", json={"type": event_type, "data": {"callId": "c1"}})

        assert response.status_code == 200
        assert response.json() == {"success": True}

    @pytest.mark.parametrize("data", ["ended", 42, ["c1"]])
    def test_non_object_data_returns_200(self, client, data):
        response = client.post("/api/vapi/webhook", json={"type": "call-ended", "data": data})

        assert response.status_code == 200
        assert response.json() == {"success": True}

    def test_non_json_body_returns_400(self, client):
        response = client.post(
            "/api/vapi/webhook",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_processing_failure_still_returns_200(self, app, client):
        app.state.webhook_interpreter.handlers["transcript"] = AsyncMock(side_effect=ValueError("bad transcript"))

        response = client.post("/api/vapi/webhook", json={"type": "transcript", "data": {"callId": "c1"}})

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "bad transcript"}

    def test_webhooks_work_without_credentials(self, unconfigured_client, fake_vapi):
        response = unconfigured_client.post("/api/vapi/webhook", json={"type": "call-ended", "data": {}})

        assert response.status_code == 200
        assert fake_vapi.requests == []
