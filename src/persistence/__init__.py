from .base import WebhookStore
from .memory import InMemoryWebhookStore

__all__ = [
    "WebhookStore",
    "InMemoryWebhookStore",
]
