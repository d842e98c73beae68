from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class DeliveryErrorType(Enum):
    NETWORK = "network"
    CLIENT = "client"
    SERVER = "server"
    SIGNATURE = "signature"


@dataclass(frozen=True)
class DeliveryRecord:
    """Final outcome of delivering one event to one subscriber."""

    id: str
    webhook_id: str
    owner_id: str
    event_type: str
    payload: dict
    created_at: datetime
    status_code: int | None = None
    response: str | None = None
    error: str | None = None
    error_type: DeliveryErrorType | None = None

    @property
    def success(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "webhook_id": self.webhook_id,
            "user_id": self.owner_id,
            "event_type": self.event_type,
            "payload": self.payload,
            "status_code": self.status_code,
            "response": self.response,
            "error": self.error,
            "error_type": self.error_type.value if self.error_type else None,
            "created_at": self.created_at.isoformat(),
        }
