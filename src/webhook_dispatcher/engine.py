import logging
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import requests

from src.models.delivery import DeliveryErrorType, DeliveryRecord
from src.models.subscriber import Subscriber
from src.webhook_dispatcher.recorder import DeliveryRecorder
from src.webhook_dispatcher.retry import RetryManager
from src.webhook_dispatcher.settings import get_settings
from src.webhook_dispatcher.signer import WebhookSigner

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Webhook-Signature"
EVENT_HEADER = "X-Webhook-Event"
DELIVERY_ID_HEADER = "X-Webhook-Delivery-Id"

DEFAULT_NETWORK_ERROR = "Network error delivering webhook"


@dataclass
class _AttemptOutcome:
    status_code: int | None = None
    body: str | None = None
    error: str | None = None
    elapsed_ms: float = 0.0


class WebhookDeliveryEngine:
    """Delivers one event to one subscriber with bounded retries."""

    def __init__(
        self,
        retry_manager: RetryManager,
        recorder: DeliveryRecorder,
        timeout_seconds: float | None = None,
        response_body_limit: int | None = None,
    ):
        settings = get_settings()
        self.retry_manager = retry_manager
        self.recorder = recorder
        self.timeout_seconds = (
            timeout_seconds if timeout_seconds is not None else settings.request_timeout_seconds
        )
        self.response_body_limit = (
            response_body_limit if response_body_limit is not None
            else settings.response_body_limit
        )

    def deliver(
        self,
        subscriber: Subscriber,
        event_type: str,
        serialized_payload: str,
        full_payload: dict,
        cancel_event: threading.Event | None = None,
    ) -> DeliveryRecord:
        """Deliver with automatic retries and record the final outcome.

        Args:
            subscriber: The endpoint to deliver to.
            event_type: Event name, sent in the event header.
            serialized_payload: Exact body to sign and transmit.
            full_payload: The `{event, data}` envelope, kept on the record.
            cancel_event: When set, no further retries are started.

        Returns:
            The delivery record that was handed to the recorder.
        """
        cancel_event = cancel_event or threading.Event()
        delivery_id = str(uuid.uuid4())
        body = serialized_payload.encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            SIGNATURE_HEADER: WebhookSigner(subscriber.secret).sign(body),
            EVENT_HEADER: event_type,
            DELIVERY_ID_HEADER: delivery_id,
        }

        retry_count = 0
        while True:
            outcome = self._attempt(subscriber.url, body, headers)
            logger.debug(
                "Webhook %s attempt %d: status=%s error=%s (%.1fms)",
                subscriber.id,
                retry_count + 1,
                outcome.status_code,
                outcome.error,
                outcome.elapsed_ms,
            )

            # Success
            if outcome.status_code is not None and 200 <= outcome.status_code < 300:
                break

            if not self.retry_manager.should_retry(outcome.status_code):
                break

            if not self.retry_manager.has_attempts_remaining(retry_count):
                break

            delay = self.retry_manager.next_delay(retry_count)
            logger.warning(
                "Retrying webhook %s in %.3fs after %s",
                subscriber.id,
                delay,
                outcome.status_code or outcome.error,
            )
            # wait() returns True as soon as the caller cancels
            if cancel_event.wait(delay):
                logger.info("Delivery to webhook %s cancelled, not retrying", subscriber.id)
                break

            retry_count += 1

        record = self._build_record(delivery_id, subscriber, event_type, full_payload, outcome)
        if record.success:
            logger.info(
                "Delivered %s to webhook %s (status %s)",
                event_type, subscriber.id, record.status_code,
            )
        else:
            logger.warning(
                "Delivery of %s to webhook %s failed after %d attempt(s): %s",
                event_type, subscriber.id, retry_count + 1, record.error,
            )
        self.recorder.record(record)
        return record

    def _attempt(self, url: str, body: bytes, headers: dict[str, str]) -> _AttemptOutcome:
        start = time.monotonic()
        outcome = _AttemptOutcome()
        try:
            resp = requests.post(
                url,
                data=body,
                headers=headers,
                timeout=self.timeout_seconds,
                allow_redirects=False,
            )
            # A body that cannot be read counts as no response at all
            text = resp.text
            outcome.status_code = resp.status_code
            outcome.body = text[: self.response_body_limit]
        except requests.exceptions.RequestException as e:
            outcome.error = str(e) or DEFAULT_NETWORK_ERROR
        outcome.elapsed_ms = (time.monotonic() - start) * 1000
        return outcome

    def _build_record(
        self,
        delivery_id: str,
        subscriber: Subscriber,
        event_type: str,
        full_payload: dict,
        outcome: _AttemptOutcome,
    ) -> DeliveryRecord:
        error = None
        error_type = None
        status_code = outcome.status_code
        if status_code is None:
            error = outcome.error or DEFAULT_NETWORK_ERROR
            error_type = DeliveryErrorType.NETWORK
        elif not 200 <= status_code < 300:
            error, error_type = _classify_status(status_code)

        return DeliveryRecord(
            id=delivery_id,
            webhook_id=subscriber.id,
            owner_id=subscriber.owner_id,
            event_type=event_type,
            payload=full_payload,
            created_at=datetime.now(timezone.utc),
            status_code=status_code,
            response=outcome.body if status_code is not None else None,
            error=error,
            error_type=error_type,
        )


def _classify_status(status_code: int) -> tuple[str, DeliveryErrorType]:
    if status_code in (401, 403):
        return "Invalid signature", DeliveryErrorType.SIGNATURE
    if status_code >= 500:
        return f"Failed with status: {status_code}", DeliveryErrorType.SERVER
    return f"Failed with status: {status_code}", DeliveryErrorType.CLIENT
