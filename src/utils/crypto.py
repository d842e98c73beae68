import hashlib
import hmac


def generate_signature(payload: str | bytes, secret: str) -> str:
    """Generate HMAC-SHA256 signature over the exact serialized payload."""
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return hmac.new(
        secret.encode("utf-8"),
        payload,
        hashlib.sha256,
    ).hexdigest()


def verify_signature(payload: str | bytes, secret: str, signature: str) -> bool:
    """Verify HMAC-SHA256 signature against a serialized payload."""
    expected = generate_signature(payload, secret)
    return hmac.compare_digest(expected, signature)
