"""
Idempotency key generation.
"""

import hashlib
import json


class IdempotencyKey:
    """
    Utility class for generating idempotency keys.

    Provides standard key generation for user-initiated operations.
    """

    @staticmethod
    def from_user_request(user_id: str, operation: str, **params) -> str:
        """
        Generate key for user-initiated operations.

        Args:
            user_id: User identifier
            operation: Operation name (e.g., "create_child_account")
            **params: Operation parameters

        Returns:
            Idempotency key (SHA256 hash)

        Example:
            key = IdempotencyKey.from_user_request(
                user_id="did:privy:parent",
                operation="create_child_account",
                child_name="Alex",
                child_date_of_birth=1000000000,
            )
        """
        content = f"{user_id}_{operation}_{json.dumps(params, sort_keys=True)}"
        return hashlib.sha256(content.encode()).hexdigest()

    @staticmethod
    def from_caller(operation: str, caller_key: str) -> str:
        """
        Namespace a caller-supplied key by operation.

        Args:
            operation: Operation name
            caller_key: Key supplied in the request

        Returns:
            Namespaced idempotency key
        """
        return f"{operation}:{caller_key}"
