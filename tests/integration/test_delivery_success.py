"""Integration tests for happy-path webhook delivery."""

import json

import pytest

from src.webhook_dispatcher.dispatcher import build_envelope
from src.webhook_dispatcher.engine import WebhookDeliveryEngine
from src.webhook_dispatcher.signer import WebhookSigner


pytestmark = pytest.mark.integration


def _deliver(engine, subscriber, event_type="user_created", data=None):
    full, serialized = build_envelope(event_type, data if data is not None else {"id": "u1"})
    return engine.deliver(subscriber, event_type, serialized, full)


class TestDeliverySuccess:
    """Test successful delivery to endpoints returning 2xx."""

    @pytest.mark.parametrize("code", [200, 201, 202, 204])
    def test_delivery_to_2xx_endpoint(self, engine, endpoint_server, subscriber, code):
        endpoint_server.set_response_code(code)

        record = _deliver(engine, subscriber)

        assert record.success is True
        assert record.status_code == code
        assert record.error is None
        assert record.error_type is None
        assert endpoint_server.get_request_count() == 1

    def test_response_body_is_recorded(self, engine, endpoint_server, subscriber):
        record = _deliver(engine, subscriber)
        assert json.loads(record.response) == {"status": "ok"}

    def test_response_body_is_truncated(self, retry_manager, recorder, endpoint_server, subscriber):
        eng = WebhookDeliveryEngine(
            retry_manager=retry_manager, recorder=recorder, timeout_seconds=5, response_body_limit=5
        )
        record = _deliver(eng, subscriber)
        assert record.response == '{"sta'

    def test_delivery_uses_post_with_json_content_type(self, engine, endpoint_server, subscriber):
        _deliver(engine, subscriber)

        received = endpoint_server.get_received_events()
        assert len(received) == 1
        assert received[0]["headers"]["Content-Type"] == "application/json"

    def test_delivery_includes_webhook_headers(self, engine, endpoint_server, subscriber):
        record = _deliver(engine, subscriber, event_type="user_created")

        headers = endpoint_server.get_received_events()[0]["headers"]
        assert headers["X-Webhook-Event"] == "user_created"
        assert headers["X-Webhook-Delivery-Id"] == record.id
        assert headers["X-Webhook-Signature"] != ""

    def test_signature_header_matches_body(self, engine, endpoint_server, subscriber, webhook_secret):
        _deliver(engine, subscriber)

        received = endpoint_server.get_received_events()[0]
        expected = WebhookSigner(webhook_secret).sign(received["body"])
        assert received["headers"]["X-Webhook-Signature"] == expected

    def test_body_is_exact_envelope(self, engine, endpoint_server, subscriber):
        _deliver(engine, subscriber, data={"id": "u1"})

        received = endpoint_server.get_received_events()[0]
        assert received["body"] == '{"event":"user_created","data":{"id":"u1"}}'

    def test_record_carries_subscriber_and_payload(self, engine, endpoint_server, subscriber):
        record = _deliver(engine, subscriber, data={"id": "u1"})

        assert record.webhook_id == subscriber.id
        assert record.owner_id == subscriber.owner_id
        assert record.event_type == "user_created"
        assert record.payload == {"event": "user_created", "data": {"id": "u1"}}
        assert record.created_at.tzinfo is not None
