import uuid
from datetime import datetime, timedelta, timezone

from src.models.delivery import DeliveryErrorType, DeliveryRecord
from src.models.subscriber import Subscriber


class SubscriberFactory:
    """Factory for creating Subscriber instances with sensible defaults."""

    @staticmethod
    def create(**overrides) -> Subscriber:
        events = overrides.pop("events", ("user_created",))
        defaults = {
            "id": f"wh_{uuid.uuid4().hex[:16]}",
            "url": "http://127.0.0.1:19999/webhook",
            "secret": uuid.uuid4().hex,
            "events": frozenset(events),
            "is_active": True,
            "owner_id": f"user_{uuid.uuid4().hex[:8]}",
        }
        defaults.update(overrides)
        return Subscriber(**defaults)


class DeliveryRecordFactory:
    """Factory for creating DeliveryRecord instances, optionally aged by `age_seconds`."""

    @staticmethod
    def create(age_seconds: float = 0, **overrides) -> DeliveryRecord:
        event_type = overrides.pop("event_type", "user_created")
        defaults = {
            "id": str(uuid.uuid4()),
            "webhook_id": f"wh_{uuid.uuid4().hex[:16]}",
            "owner_id": f"user_{uuid.uuid4().hex[:8]}",
            "event_type": event_type,
            "payload": {"event": event_type, "data": {}},
            "created_at": datetime.now(timezone.utc) - timedelta(seconds=age_seconds),
            "status_code": 200,
            "response": '{"status": "ok"}',
        }
        defaults.update(overrides)
        return DeliveryRecord(**defaults)

    @staticmethod
    def create_failed(status_code: int | None = 500, **overrides) -> DeliveryRecord:
        if status_code is None:
            overrides.setdefault("error", "connection refused")
            overrides.setdefault("error_type", DeliveryErrorType.NETWORK)
            overrides.setdefault("response", None)
        else:
            overrides.setdefault("error", f"Failed with status: {status_code}")
            overrides.setdefault("error_type", DeliveryErrorType.SERVER)
        return DeliveryRecordFactory.create(status_code=status_code, **overrides)
