"""
Scholar-Fi backend.

Custodial child accounts across Privy, Base, Celo and Oasis.
"""

__version__ = "0.1.0"
