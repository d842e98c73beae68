from .crypto import generate_signature, verify_signature
from .factories import DeliveryRecordFactory, SubscriberFactory

__all__ = [
    "generate_signature", "verify_signature",
    "SubscriberFactory", "DeliveryRecordFactory",
]
