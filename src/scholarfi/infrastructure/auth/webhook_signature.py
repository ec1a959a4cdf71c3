"""
Webhook signature verification.

HMAC-SHA256 over the exact raw request body, hex encoded.
"""

import hashlib
import hmac
from typing import Optional

SIGNATURE_PREFIX = "sha256="


def compute_signature(raw_body: bytes, secret: str) -> str:
    """
    Compute hex HMAC-SHA256 of a payload.

    Args:
        raw_body: Raw request body
        secret: Shared webhook secret

    Returns:
        Lowercase hex digest
    """
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify_signature(
    raw_body: bytes, provided_signature: Optional[str], secret: Optional[str]
) -> bool:
    """
    Verify webhook signature in constant time.

    Never raises: a missing secret, missing signature or malformed
    signature all verify as False.

    Args:
        raw_body: Raw request body exactly as received
        provided_signature: Hex signature from the request header,
            optionally prefixed with "sha256="
        secret: Shared webhook secret

    Returns:
        True if the signature matches the body
    """
    if not secret or not provided_signature:
        return False

    signature = provided_signature.strip()
    if signature.lower().startswith(SIGNATURE_PREFIX):
        signature = signature[len(SIGNATURE_PREFIX):]

    try:
        provided = signature.lower().encode("ascii")
    except UnicodeEncodeError:
        return False

    expected = compute_signature(raw_body, secret).encode("ascii")
    return hmac.compare_digest(expected, provided)
