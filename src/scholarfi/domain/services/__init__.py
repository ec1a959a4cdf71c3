"""
Domain service interfaces.
"""

from scholarfi.domain.services.i_chain_registrar import (
    IBaseSplitter,
    ICeloVerifier,
    IOasisDatastore,
)
from scholarfi.domain.services.i_notification_sender import INotificationSender
from scholarfi.domain.services.i_wallet_provider import IWalletProvider

__all__ = [
    "IBaseSplitter",
    "ICeloVerifier",
    "IOasisDatastore",
    "INotificationSender",
    "IWalletProvider",
]
