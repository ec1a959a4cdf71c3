"""
Privy wallet provider integration.
"""

from scholarfi.infrastructure.privy.privy_client import PrivyClient

__all__ = ["PrivyClient"]
