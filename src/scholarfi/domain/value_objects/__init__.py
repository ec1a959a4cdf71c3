"""
Domain value objects.
"""

from scholarfi.domain.value_objects.child_identity import (
    ChildIdentity,
    derive_child_address,
)
from scholarfi.domain.value_objects.idempotency_key import IdempotencyKey
from scholarfi.domain.value_objects.owner_policy import OwnerPolicy

__all__ = [
    "ChildIdentity",
    "derive_child_address",
    "IdempotencyKey",
    "OwnerPolicy",
]
