import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

from src.models.delivery import DeliveryRecord
from src.observability.metrics import MetricsCollector
from src.persistence.base import WebhookStore
from src.webhook_dispatcher.engine import WebhookDeliveryEngine
from src.webhook_dispatcher.query import DeliveryQuery
from src.webhook_dispatcher.recorder import DeliveryRecorder
from src.webhook_dispatcher.retry import RetryManager
from src.webhook_dispatcher.settings import get_settings

logger = logging.getLogger(__name__)


class PayloadValidationError(ValueError):
    """Raised when send_event is called with an unusable event type or payload."""


def build_envelope(event_type: str, payload: Any) -> tuple[dict, str]:
    """Return the `{event, data}` envelope and the exact string sent on the wire."""
    if not isinstance(event_type, str) or not event_type:
        raise PayloadValidationError("event_type must be a non-empty string")
    # Travels in an HTTP header, so it must be a single latin-1 line
    if not event_type.isprintable():
        raise PayloadValidationError(f"event_type contains control characters: {event_type!r}")
    try:
        event_type.encode("latin-1")
    except UnicodeEncodeError as e:
        raise PayloadValidationError(f"event_type is not latin-1 encodable: {event_type!r}") from e
    full_payload = {"event": event_type, "data": payload}
    try:
        serialized = json.dumps(full_payload, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise PayloadValidationError(f"payload is not JSON serializable: {e}") from e
    return full_payload, serialized


class WebhookDispatcher:
    """Fans an event out to every eligible subscriber of an owner."""

    def __init__(
        self,
        store: WebhookStore,
        engine: WebhookDeliveryEngine | None = None,
        metrics: MetricsCollector | None = None,
    ):
        settings = get_settings()
        self.store = store
        self.engine = engine or WebhookDeliveryEngine(
            retry_manager=RetryManager(
                base_delay=settings.backoff_base_seconds,
                max_retries=settings.max_retries,
            ),
            recorder=DeliveryRecorder(store),
        )
        self.metrics = metrics
        self.query = DeliveryQuery(store)

    def send_event(self, event_type: str, payload: Any, owner_id: str) -> list[DeliveryRecord]:
        """Deliver an event to all eligible subscribers and wait for every outcome.

        Raises:
            PayloadValidationError: before any I/O, if the event cannot be built.

        Individual delivery failures are returned as records with
        `success == False`; they are never raised.
        """
        full_payload, serialized = build_envelope(event_type, payload)

        try:
            subscribers = self.store.list_subscribers(owner_id)
        except Exception:
            logger.exception("Failed to list webhooks for owner %s", owner_id)
            return []

        eligible = [s for s in subscribers if s.is_eligible(event_type)]
        if not eligible:
            logger.debug("No webhooks subscribed to %s for owner %s", event_type, owner_id)
            return []

        cancel_event = threading.Event()
        results: list[DeliveryRecord] = []
        # One worker per subscriber so no delivery queues behind another's retries
        with ThreadPoolExecutor(max_workers=len(eligible), thread_name_prefix="webhook") as pool:
            futures = [
                pool.submit(
                    self.engine.deliver,
                    subscriber,
                    event_type,
                    serialized,
                    full_payload,
                    cancel_event,
                )
                for subscriber in eligible
            ]
            try:
                wait(futures)
            except BaseException:
                # Let in-flight attempts finish but start nothing new
                cancel_event.set()
                pool.shutdown(wait=False, cancel_futures=True)
                raise

        for future in futures:
            record = future.result()
            results.append(record)
            if self.metrics is not None:
                self.metrics.record(record)

        logger.info(
            "Dispatched %s to %d webhook(s): %d succeeded",
            event_type,
            len(results),
            sum(1 for r in results if r.success),
        )
        return results

    def get_deliveries(
        self, owner_id: str, webhook_id: str, limit: int = DeliveryQuery.DEFAULT_LIMIT
    ) -> list[DeliveryRecord]:
        return self.query.get_deliveries(owner_id, webhook_id, limit)
