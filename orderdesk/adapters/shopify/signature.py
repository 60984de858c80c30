"""Shopify webhook HMAC verification."""

import base64
import hashlib
import hmac


def compute_signature(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, secret: str, header_value: str | None) -> bool:
    """Check the ``X-Shopify-Hmac-Sha256`` header against the raw request body."""
    if not secret or not header_value:
        return False
    return hmac.compare_digest(compute_signature(body, secret), header_value.strip())
