import logging

from src.models.delivery import DeliveryRecord
from src.persistence.base import WebhookStore

logger = logging.getLogger(__name__)


class DeliveryQuery:
    """Read path over recent delivery history for one subscriber."""

    DEFAULT_LIMIT = 10

    def __init__(self, store: WebhookStore):
        self.store = store

    def get_deliveries(
        self, owner_id: str, webhook_id: str, limit: int = DEFAULT_LIMIT
    ) -> list[DeliveryRecord]:
        """Most recent deliveries first, at most `limit`. Degrades to [] on store errors."""
        if limit <= 0:
            return []
        try:
            deliveries = self.store.list_deliveries(owner_id, webhook_id, limit)
        except Exception:
            logger.exception(
                "Failed to list deliveries for webhook %s", webhook_id
            )
            return []
        return list(deliveries)[:limit]
