"""
Dependency Injection Container for Scholar-Fi.

Manages all service instances and their dependencies.
"""

from typing import Optional

from scholarfi.application.use_cases.check_verifications import (
    CheckVerifications,
)
from scholarfi.application.use_cases.create_child_account import (
    CreateChildAccount,
)
from scholarfi.application.use_cases.handle_balance_change import (
    HandleBalanceChange,
)
from scholarfi.config.settings import get_settings
from scholarfi.domain.repositories.i_cursor_store import ICursorStore
from scholarfi.domain.repositories.i_idempotency_store import IIdempotencyStore
from scholarfi.domain.services.i_chain_registrar import (
    IBaseSplitter,
    ICeloVerifier,
    IOasisDatastore,
)
from scholarfi.domain.services.i_notification_sender import INotificationSender
from scholarfi.domain.services.i_wallet_provider import IWalletProvider
from scholarfi.infrastructure.blockchain.base_splitter_client import (
    BaseSplitterClient,
)
from scholarfi.infrastructure.blockchain.celo_verifier_client import (
    CeloVerifierClient,
)
from scholarfi.infrastructure.blockchain.oasis_datastore_client import (
    OasisDatastoreClient,
)
from scholarfi.infrastructure.monitoring import get_logger
from scholarfi.infrastructure.notifications.notifier import (
    LoggingNotificationSender,
    WebhookNotificationSender,
)
from scholarfi.infrastructure.persistence.cursor_store import (
    InMemoryCursorStore,
    SqlCursorStore,
)
from scholarfi.infrastructure.persistence.database import Database
from scholarfi.infrastructure.persistence.idempotency_store import (
    InMemoryIdempotencyStore,
    SqlIdempotencyStore,
)
from scholarfi.infrastructure.privy.privy_client import PrivyClient

logger = get_logger(__name__)


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of all clients, stores and use cases.
    Use cases are cached because they hold process-wide locks
    (idempotency keys, single-flight reconciliation).
    """

    def __init__(self):
        """Initialize container with None instances."""
        # Infrastructure
        self._database: Optional[Database] = None

        # Domain Services - Custody
        self._wallet_provider: Optional[IWalletProvider] = None
        self._notification_sender: Optional[INotificationSender] = None

        # Domain Services - Blockchain
        self._base_splitter: Optional[IBaseSplitter] = None
        self._celo_verifier: Optional[ICeloVerifier] = None
        self._oasis_datastore: Optional[IOasisDatastore] = None

        # Repositories
        self._cursor_store: Optional[ICursorStore] = None
        self._idempotency_store: Optional[IIdempotencyStore] = None

        # Use Cases
        self._create_child_account: Optional[CreateChildAccount] = None
        self._check_verifications: Optional[CheckVerifications] = None
        self._handle_balance_change: Optional[HandleBalanceChange] = None

    async def initialize(self) -> None:
        """Initialize all services and establish connections."""
        if self.database is not None:
            await self.database.connect()
            await self.database.create_tables()
        else:
            logger.warning(
                "DATABASE_URL not set - cursor and idempotency state is in-memory"
            )

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if self._wallet_provider:
            await self._wallet_provider.close()

        if self._notification_sender:
            await self._notification_sender.close()

        if self._base_splitter:
            await self._base_splitter.close()

        if self._celo_verifier:
            await self._celo_verifier.close()

        if self._oasis_datastore:
            await self._oasis_datastore.close()

        if self._database:
            await self._database.disconnect()

    # Infrastructure Getters

    @property
    def database(self) -> Optional[Database]:
        """Get database instance (None when DATABASE_URL is unset)."""
        if self._database is None and get_settings().DATABASE_URL:
            self._database = Database(
                database_url=get_settings().DATABASE_URL,
                echo=get_settings().DATABASE_ECHO,
            )
        return self._database

    # Domain Service Getters - Custody

    @property
    def wallet_provider(self) -> IWalletProvider:
        """Get Privy client instance."""
        if self._wallet_provider is None:
            settings = get_settings()
            self._wallet_provider = PrivyClient(
                app_id=settings.PRIVY_APP_ID,
                app_secret=settings.PRIVY_APP_SECRET,
                api_url=settings.PRIVY_API_URL,
                timeout=settings.PRIVY_TIMEOUT,
            )
        return self._wallet_provider

    @property
    def notification_sender(self) -> INotificationSender:
        """Get notification sender (webhook if configured, else log)."""
        if self._notification_sender is None:
            webhook_url = get_settings().NOTIFICATION_WEBHOOK_URL
            if webhook_url:
                self._notification_sender = WebhookNotificationSender(webhook_url)
            else:
                self._notification_sender = LoggingNotificationSender()
        return self._notification_sender

    # Domain Service Getters - Blockchain

    @property
    def base_splitter(self) -> IBaseSplitter:
        """Get Base deposit splitter client."""
        if self._base_splitter is None:
            settings = get_settings()
            self._base_splitter = BaseSplitterClient(
                rpc_url=settings.BASE_RPC_URL,
                contract_address=settings.BASE_SPLITTER_ADDRESS,
                private_key=settings.BASE_PRIVATE_KEY,
                receipt_timeout=settings.TX_RECEIPT_TIMEOUT,
            )
        return self._base_splitter

    @property
    def celo_verifier(self) -> ICeloVerifier:
        """Get Celo age verifier client."""
        if self._celo_verifier is None:
            settings = get_settings()
            self._celo_verifier = CeloVerifierClient(
                rpc_url=settings.CELO_RPC_URL,
                contract_address=settings.CELO_VERIFIER_ADDRESS,
                private_key=settings.CELO_PRIVATE_KEY,
                receipt_timeout=settings.TX_RECEIPT_TIMEOUT,
            )
        return self._celo_verifier

    @property
    def oasis_datastore(self) -> IOasisDatastore:
        """Get Oasis child datastore client."""
        if self._oasis_datastore is None:
            settings = get_settings()
            self._oasis_datastore = OasisDatastoreClient(
                rpc_url=settings.OASIS_RPC_URL,
                contract_address=settings.OASIS_DATASTORE_ADDRESS,
                private_key=settings.OASIS_PRIVATE_KEY,
                receipt_timeout=settings.TX_RECEIPT_TIMEOUT,
            )
        return self._oasis_datastore

    # Repository Getters

    @property
    def cursor_store(self) -> ICursorStore:
        """Get verification cursor store."""
        if self._cursor_store is None:
            if self.database is not None:
                self._cursor_store = SqlCursorStore(self.database)
            else:
                self._cursor_store = InMemoryCursorStore()
        return self._cursor_store

    @property
    def idempotency_store(self) -> Optional[IIdempotencyStore]:
        """Get idempotency store (None when idempotency is disabled)."""
        if not get_settings().IDEMPOTENCY_ENABLED:
            return None
        if self._idempotency_store is None:
            if self.database is not None:
                self._idempotency_store = SqlIdempotencyStore(self.database)
            else:
                self._idempotency_store = InMemoryIdempotencyStore()
        return self._idempotency_store

    # Use Case Getters

    @property
    def create_child_account(self) -> CreateChildAccount:
        """Get create child account use case."""
        if self._create_child_account is None:
            settings = get_settings()
            self._create_child_account = CreateChildAccount(
                wallet_provider=self.wallet_provider,
                base_splitter=self.base_splitter,
                celo_verifier=self.celo_verifier,
                oasis_datastore=self.oasis_datastore,
                idempotency_store=self.idempotency_store,
                idempotency_ttl=settings.IDEMPOTENCY_TTL_SECONDS,
                gas_sponsorship_chain_id=settings.GAS_SPONSORSHIP_CHAIN_ID,
            )
        return self._create_child_account

    @property
    def check_verifications(self) -> CheckVerifications:
        """Get check verifications use case."""
        if self._check_verifications is None:
            self._check_verifications = CheckVerifications(
                celo_verifier=self.celo_verifier,
                oasis_datastore=self.oasis_datastore,
                wallet_provider=self.wallet_provider,
                notification_sender=self.notification_sender,
                cursor_store=self.cursor_store,
                lookback_blocks=get_settings().VERIFICATION_LOOKBACK_BLOCKS,
            )
        return self._check_verifications

    @property
    def handle_balance_change(self) -> HandleBalanceChange:
        """Get handle balance change use case."""
        if self._handle_balance_change is None:
            self._handle_balance_change = HandleBalanceChange(
                oasis_datastore=self.oasis_datastore,
            )
        return self._handle_balance_change


# Global container instance
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global DI container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


async def initialize_container() -> DIContainer:
    """Initialize and return DI container."""
    container = get_container()
    await container.initialize()
    return container


async def shutdown_container() -> None:
    """Shutdown DI container."""
    container = get_container()
    await container.shutdown()


def reset_container() -> None:
    """Drop the global container (for testing)."""
    global _container
    _container = None
