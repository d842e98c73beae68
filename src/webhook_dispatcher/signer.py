from src.utils.crypto import generate_signature, verify_signature


class WebhookSigner:
    """Signs and verifies serialized webhook payloads using HMAC-SHA256."""

    def __init__(self, secret: str):
        self.secret = secret

    def sign(self, payload: str | bytes) -> str:
        return generate_signature(payload, self.secret)

    def verify(self, payload: str | bytes, signature: str) -> bool:
        return verify_signature(payload, self.secret, signature)
