from .subscriber import Subscriber
from .delivery import DeliveryErrorType, DeliveryRecord

__all__ = [
    "Subscriber",
    "DeliveryErrorType", "DeliveryRecord",
]
