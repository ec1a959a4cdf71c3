"""
ChildIdentity value object - Deterministic cross-chain child identifier.
"""

from dataclasses import dataclass

from web3 import Web3

# Separator between provider user ID and child name in the hash preimage
IDENTITY_SEPARATOR = "-"


def derive_child_address(provider_user_id: str, child_name: str) -> str:
    """
    Derive the child address used as join key across all chains.

    keccak256("<provider_user_id>-<child_name>"), truncated to the first
    20 bytes and EIP-55 checksummed. The address is an identifier only and
    has no private key behind it.

    Args:
        provider_user_id: Wallet provider user ID of the child
        child_name: Child display name (not required to be unique)

    Returns:
        Checksummed 0x-prefixed address

    Raises:
        ValueError: If provider_user_id is empty
    """
    if not provider_user_id:
        raise ValueError("Provider user ID is required")

    digest = Web3.keccak(text=f"{provider_user_id}{IDENTITY_SEPARATOR}{child_name}")
    return Web3.to_checksum_address(Web3.to_hex(digest)[:42])


@dataclass(frozen=True)
class ChildIdentity:
    """
    Value object pairing a child's provider identity with its address.

    Business rules:
    - Provider user ID is issued once by the wallet provider
    - Address is always derived, never assigned
    - Same (provider_user_id, child_name) always yields the same address
    """

    provider_user_id: str
    child_name: str
    address: str

    @classmethod
    def derive(cls, provider_user_id: str, child_name: str) -> "ChildIdentity":
        """Build identity with its derived address."""
        return cls(
            provider_user_id=provider_user_id,
            child_name=child_name,
            address=derive_child_address(provider_user_id, child_name),
        )

    def __str__(self) -> str:
        return self.address
