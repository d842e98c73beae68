from typing import Protocol

from src.models.delivery import DeliveryRecord
from src.models.subscriber import Subscriber


class WebhookStore(Protocol):
    """Persistence collaborator owning subscriber registrations and delivery history.

    Adapters map their raw rows into `Subscriber` / `DeliveryRecord` before
    handing them to the dispatcher. Any method may raise; callers decide how
    much of that is visible upstream.
    """

    def list_subscribers(self, owner_id: str) -> list[Subscriber]:
        ...

    def record_delivery(self, record: DeliveryRecord) -> None:
        ...

    def list_deliveries(
        self, owner_id: str, webhook_id: str, limit: int
    ) -> list[DeliveryRecord]:
        ...
