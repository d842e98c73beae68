import logging

from src.models.delivery import DeliveryRecord
from src.persistence.base import WebhookStore

logger = logging.getLogger(__name__)


class DeliveryRecorder:
    """Writes final delivery outcomes to the store on a best-effort basis."""

    def __init__(self, store: WebhookStore):
        self.store = store

    def record(self, record: DeliveryRecord) -> None:
        """Persist a delivery record. Store errors are logged and never raised."""
        try:
            self.store.record_delivery(record)
        except Exception:
            logger.exception(
                "Failed to record webhook delivery %s for webhook %s",
                record.id,
                record.webhook_id,
            )
