"""
Test fixtures and configuration.
"""

from typing import Generator
from unittest.mock import AsyncMock

import pytest

from scholarfi.config.settings import Settings, override_settings, reset_settings
from scholarfi.di.container import reset_container
from scholarfi.domain.entities.child_account import (
    ProviderUser,
    WalletPurpose,
    WalletRecord,
)
from scholarfi.domain.services.i_chain_registrar import (
    IBaseSplitter,
    ICeloVerifier,
    IOasisDatastore,
)
from scholarfi.domain.services.i_notification_sender import INotificationSender
from scholarfi.domain.services.i_wallet_provider import IWalletProvider
from scholarfi.domain.value_objects.owner_policy import OwnerPolicy

from tests.helpers.builders import (
    CHECKING_WALLET,
    CHILD_USER_ID,
    PARENT_WALLET,
    VAULT_WALLET,
)


@pytest.fixture
def test_settings() -> Generator[Settings, None, None]:
    """Install test settings and a fresh DI container."""
    settings = Settings(
        ENV="test",
        LOG_LEVEL="WARNING",
        DATABASE_URL=None,
        PRIVY_APP_ID="test-app-id",
        PRIVY_APP_SECRET="test-app-secret",
        PRIVY_WEBHOOK_SECRET="test-webhook-secret",
        METRICS_ENABLED=False,
        RECONCILE_INTERVAL_SECONDS=0,
    )
    override_settings(settings)
    reset_container()
    yield settings
    reset_settings()
    reset_container()


@pytest.fixture
def wallet_provider() -> AsyncMock:
    """Wallet provider mock that succeeds on every call."""
    provider = AsyncMock(spec=IWalletProvider)
    provider.verify_gas_sponsorship.return_value = True
    provider.get_user_wallet.return_value = PARENT_WALLET
    provider.create_user.return_value = ProviderUser(
        id=CHILD_USER_ID, email="child-1@scholarfi.internal"
    )
    provider.create_key_quorum.side_effect = (
        lambda user_ids, threshold, display_name: OwnerPolicy.quorum(
            "quorum-1", tuple(user_ids), threshold
        )
    )

    def _create_wallet(owner, purpose, time_lock=None):
        if purpose == WalletPurpose.CHECKING:
            return WalletRecord("wallet-checking", CHECKING_WALLET, purpose, owner)
        return WalletRecord("wallet-vault", VAULT_WALLET, purpose, owner, time_lock)

    provider.create_wallet.side_effect = _create_wallet
    return provider


@pytest.fixture
def base_splitter() -> AsyncMock:
    splitter = AsyncMock(spec=IBaseSplitter)
    splitter.register_child_wallets.return_value = "0xbase"
    return splitter


@pytest.fixture
def celo_verifier() -> AsyncMock:
    verifier = AsyncMock(spec=ICeloVerifier)
    verifier.register_child.return_value = "0xcelo"
    verifier.get_verification_events.return_value = []
    return verifier


@pytest.fixture
def oasis_datastore() -> AsyncMock:
    datastore = AsyncMock(spec=IOasisDatastore)
    datastore.create_child_profile.return_value = "0xoasis"
    datastore.mark_age_verified.return_value = "0xverified"
    datastore.record_deposit.return_value = "0xdeposit"
    return datastore


@pytest.fixture
def notification_sender() -> AsyncMock:
    return AsyncMock(spec=INotificationSender)

