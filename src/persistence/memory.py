import threading

from src.models.delivery import DeliveryRecord
from src.models.subscriber import Subscriber


class InMemoryWebhookStore:
    """Thread-safe in-process store for subscribers and delivery records."""

    def __init__(self, subscribers: list[Subscriber] | None = None):
        self._subscribers: dict[str, Subscriber] = {}
        self._deliveries: list[DeliveryRecord] = []
        self._lock = threading.Lock()
        for subscriber in subscribers or ():
            self.add_subscriber(subscriber)

    def add_subscriber(self, subscriber: Subscriber) -> None:
        with self._lock:
            self._subscribers[subscriber.id] = subscriber

    def list_subscribers(self, owner_id: str) -> list[Subscriber]:
        with self._lock:
            return [s for s in self._subscribers.values() if s.owner_id == owner_id]

    def record_delivery(self, record: DeliveryRecord) -> None:
        with self._lock:
            self._deliveries.append(record)

    def list_deliveries(
        self, owner_id: str, webhook_id: str, limit: int
    ) -> list[DeliveryRecord]:
        with self._lock:
            matching = [
                d for d in self._deliveries
                if d.owner_id == owner_id and d.webhook_id == webhook_id
            ]
        matching.sort(key=lambda d: d.created_at, reverse=True)
        return matching[:max(limit, 0)]

    def get_failed_deliveries(self) -> list[DeliveryRecord]:
        with self._lock:
            return [d for d in self._deliveries if not d.success]

    def all_deliveries(self) -> list[DeliveryRecord]:
        with self._lock:
            return list(self._deliveries)

    def clear(self) -> None:
        with self._lock:
            self._deliveries.clear()
