from .dispatcher import PayloadValidationError, WebhookDispatcher, build_envelope
from .engine import WebhookDeliveryEngine
from .query import DeliveryQuery
from .recorder import DeliveryRecorder
from .retry import RetryManager
from .settings import DispatcherSettings, get_settings
from .signer import WebhookSigner

__all__ = [
    "WebhookDispatcher",
    "PayloadValidationError",
    "build_envelope",
    "WebhookDeliveryEngine",
    "DeliveryQuery",
    "DeliveryRecorder",
    "RetryManager",
    "DispatcherSettings",
    "get_settings",
    "WebhookSigner",
]
