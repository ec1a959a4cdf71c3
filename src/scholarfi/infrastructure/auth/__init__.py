"""
Inbound authentication helpers.
"""

from scholarfi.infrastructure.auth.webhook_signature import (
    compute_signature,
    verify_signature,
)

__all__ = ["compute_signature", "verify_signature"]
