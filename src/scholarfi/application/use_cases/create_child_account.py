"""
Create Child Account use case.

Provisions a child across the wallet provider and three chains.
IDEMPOTENT: the same idempotency key returns the first completed result,
retrying any degradable steps that result left unfinished.
"""

import asyncio
import secrets
import time
import weakref
from dataclasses import dataclass, replace
from typing import Optional

from scholarfi.application.saga import FailurePolicy, SagaReport, SagaRunner, SagaStep
from scholarfi.domain.entities.child_account import (
    AccountCreationResult,
    ChildProfile,
    ProviderUser,
    WalletPurpose,
    WalletRecord,
    vault_unlock_date,
)
from scholarfi.domain.exceptions import (
    ParentWalletMissingError,
    PolicyUpdateError,
    ProviderError,
    ProviderUserCreationError,
    ValidationError,
    WalletCreationError,
)
from scholarfi.domain.repositories.i_idempotency_store import IIdempotencyStore
from scholarfi.domain.services.i_chain_registrar import (
    IBaseSplitter,
    ICeloVerifier,
    IOasisDatastore,
)
from scholarfi.domain.services.i_wallet_provider import IWalletProvider
from scholarfi.domain.value_objects.child_identity import ChildIdentity
from scholarfi.domain.value_objects.idempotency_key import IdempotencyKey
from scholarfi.domain.value_objects.owner_policy import OwnerPolicy
from scholarfi.infrastructure.monitoring import get_logger, log_performance, metrics

logger = get_logger(__name__)

OPERATION = "create_child_account"
CHILD_EMAIL_DOMAIN = "scholarfi.internal"
QUORUM_THRESHOLD = 1

# Result flag names of the degradable steps a replay may retry
RESULT_FLAGS = {
    "policies": "policies",
    "base_registration": "base",
    "celo_registration": "celo",
    "oasis_profile": "oasis",
}


@dataclass
class ChildAccountContext:
    """State threaded through the creation steps."""

    parent_user_id: str
    child_name: str
    child_date_of_birth: int
    parent_email: str
    gas_sponsorship_enabled: bool = True
    parent_wallet: Optional[str] = None
    child_email: str = ""
    child_user: Optional[ProviderUser] = None
    identity: Optional[ChildIdentity] = None
    quorum: Optional[OwnerPolicy] = None
    checking: Optional[WalletRecord] = None
    vault: Optional[WalletRecord] = None


class CreateChildAccount:
    """
    Create a complete child account.

    Steps (failure policy):
    1. gas sponsorship check (degrade, fails open)
    2. parent wallet lookup (abort)
    3. child provider user (abort)
    4. child address derivation (never fails)
    5. parent+child key quorum (abort)
    6. checking wallet owned by the quorum (abort)
    7. vault wallet owned by the parent, time-locked until 18 (abort)
    8. signer policies (degrade)
    9-11. Base, Celo and Oasis registration (degrade, independent)

    Nothing is rolled back: once wallets exist they are returned, and
    every degradable step reports its own flag.
    """

    def __init__(
        self,
        wallet_provider: IWalletProvider,
        base_splitter: IBaseSplitter,
        celo_verifier: ICeloVerifier,
        oasis_datastore: IOasisDatastore,
        idempotency_store: Optional[IIdempotencyStore] = None,
        idempotency_ttl: int = 86400,
        gas_sponsorship_chain_id: int = 84532,
    ):
        """
        Initialize use case with dependencies.

        Args:
            wallet_provider: Custody vendor client
            base_splitter: Base deposit splitter client
            celo_verifier: Celo age verifier client
            oasis_datastore: Oasis profile datastore client
            idempotency_store: Store for completed results (None disables)
            idempotency_ttl: Seconds a completed result is replayed
            gas_sponsorship_chain_id: Chain checked for gas sponsorship
        """
        self.wallet_provider = wallet_provider
        self.base_splitter = base_splitter
        self.celo_verifier = celo_verifier
        self.oasis_datastore = oasis_datastore
        self.idempotency_store = idempotency_store
        self.idempotency_ttl = idempotency_ttl
        self.gas_sponsorship_chain_id = gas_sponsorship_chain_id
        self._key_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

        degrade = FailurePolicy.DEGRADE
        self.saga = SagaRunner(
            OPERATION,
            [
                SagaStep("gas_sponsorship", self._check_gas_sponsorship, degrade),
                SagaStep("parent_wallet", self._resolve_parent_wallet),
                SagaStep("child_user", self._create_child_user),
                SagaStep("child_address", self._derive_child_address),
                SagaStep("key_quorum", self._create_key_quorum),
                SagaStep("checking_wallet", self._create_checking_wallet),
                SagaStep("vault_wallet", self._create_vault_wallet),
                SagaStep("policies", self._create_policies, degrade),
                SagaStep("base_registration", self._register_on_base, degrade),
                SagaStep("celo_registration", self._register_on_celo, degrade),
                SagaStep("oasis_profile", self._create_oasis_profile, degrade),
            ],
        )

    async def execute(
        self,
        parent_user_id: str,
        child_name: str,
        child_date_of_birth: int,
        parent_email: str,
        idempotency_key: Optional[str] = None,
    ) -> AccountCreationResult:
        """
        Execute child account creation with idempotency protection.

        Args:
            parent_user_id: Parent provider user ID
            child_name: Child display name
            child_date_of_birth: Date of birth as unix seconds
            parent_email: Parent contact email
            idempotency_key: Optional caller-supplied key

        Returns:
            AccountCreationResult with per-step flags

        Raises:
            ValidationError: If inputs are invalid
            ParentWalletMissingError: If the parent has no embedded wallet
            ProviderUserCreationError: If the child user cannot be created
            WalletCreationError: If the quorum or a wallet cannot be created
        """
        self._validate(parent_user_id, child_name, child_date_of_birth, parent_email)

        if self.idempotency_store is None:
            return await self._create(
                parent_user_id, child_name, child_date_of_birth, parent_email
            )

        if idempotency_key:
            key = IdempotencyKey.from_caller(OPERATION, idempotency_key)
        else:
            key = IdempotencyKey.from_user_request(
                user_id=parent_user_id,
                operation=OPERATION,
                child_name=child_name,
                child_date_of_birth=child_date_of_birth,
            )

        lock = self._key_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._key_locks[key] = lock

        async with lock:
            cached = await self.idempotency_store.get(key)
            if cached is None:
                result = await self._create(
                    parent_user_id, child_name, child_date_of_birth, parent_email
                )
            else:
                result = AccountCreationResult.from_dict(cached)
                if not result.failed_steps():
                    logger.info(f"Idempotent replay of child account creation: {key}")
                    return result
                result = await self._retry_failed_steps(
                    result,
                    parent_user_id,
                    child_name,
                    child_date_of_birth,
                    parent_email,
                )

            await self.idempotency_store.set(
                key, result.to_dict(), ttl=self.idempotency_ttl
            )
            return result

    @staticmethod
    def _validate(
        parent_user_id: str,
        child_name: str,
        child_date_of_birth: int,
        parent_email: str,
    ) -> None:
        if not parent_user_id:
            raise ValidationError("parentUserId", "is required")
        if not child_name or not child_name.strip():
            raise ValidationError("childName", "is required")
        if not child_date_of_birth or child_date_of_birth <= 0:
            raise ValidationError(
                "childDateOfBirth", "must be a positive unix timestamp"
            )
        if not parent_email:
            raise ValidationError("parentEmail", "is required")

    async def _create(
        self,
        parent_user_id: str,
        child_name: str,
        child_date_of_birth: int,
        parent_email: str,
    ) -> AccountCreationResult:
        logger.info(f"Creating child account for parent: {parent_user_id}")
        start_time = time.perf_counter()

        context = ChildAccountContext(
            parent_user_id=parent_user_id,
            child_name=child_name,
            child_date_of_birth=child_date_of_birth,
            parent_email=parent_email,
        )
        report = await self.saga.run(context)
        result = self._build_result(context, report)

        duration = log_performance(
            logger, OPERATION, start_time, failed_steps=result.failed_steps()
        )
        metrics.child_accounts_created_total.inc()
        metrics.child_account_creation_duration_seconds.observe(duration)
        logger.info(f"{result.message}: {result.child_address}")
        return result

    @staticmethod
    def _build_result(
        context: ChildAccountContext, report: SagaReport
    ) -> AccountCreationResult:
        result = AccountCreationResult(
            child_address=context.identity.address,
            child_user_id=context.child_user.id,
            child_privy_email=context.child_email,
            checking_wallet=context.checking.address,
            vault_wallet=context.vault.address,
            parent_wallet=context.parent_wallet,
            checking_wallet_id=context.checking.id,
            vault_wallet_id=context.vault.id,
            quorum_id=context.quorum.quorum_id,
            vault_unlock_date=context.vault.time_lock,
            gas_sponsorship_enabled=context.gas_sponsorship_enabled,
            policies_created=report.succeeded("policies"),
            base_registered=report.succeeded("base_registration"),
            celo_registered=report.succeeded("celo_registration"),
            oasis_profile_created=report.succeeded("oasis_profile"),
        )

        CreateChildAccount._set_message(result)
        return result

    async def _retry_failed_steps(
        self,
        result: AccountCreationResult,
        parent_user_id: str,
        child_name: str,
        child_date_of_birth: int,
        parent_email: str,
    ) -> AccountCreationResult:
        """
        Re-run the degradable steps a previous attempt left unfinished.

        Users, wallets and the child address are taken from the earlier
        result, so a retry never provisions anything twice.
        """
        failed = result.failed_steps()
        logger.info(
            f"Retrying failed steps for {result.child_address}: {', '.join(failed)}"
        )

        context = ChildAccountContext(
            parent_user_id=parent_user_id,
            child_name=child_name,
            child_date_of_birth=child_date_of_birth,
            parent_email=parent_email,
            gas_sponsorship_enabled=result.gas_sponsorship_enabled,
            parent_wallet=result.parent_wallet,
            child_email=result.child_privy_email,
            child_user=ProviderUser(
                id=result.child_user_id, email=result.child_privy_email
            ),
            identity=ChildIdentity(
                result.child_user_id, child_name, result.child_address
            ),
            quorum=OwnerPolicy.quorum(
                result.quorum_id,
                (parent_user_id, result.child_user_id),
                QUORUM_THRESHOLD,
            ),
        )
        context.checking = WalletRecord(
            result.checking_wallet_id,
            result.checking_wallet,
            WalletPurpose.CHECKING,
            context.quorum,
        )
        context.vault = WalletRecord(
            result.vault_wallet_id,
            result.vault_wallet,
            WalletPurpose.VAULT,
            OwnerPolicy.single(parent_user_id),
            result.vault_unlock_date,
        )

        runner = SagaRunner(
            f"{OPERATION}_retry",
            [s for s in self.saga.steps if RESULT_FLAGS.get(s.name) in failed],
        )
        report = await runner.run(context)

        retried = replace(
            result,
            policies_created=result.policies_created or report.succeeded("policies"),
            base_registered=(
                result.base_registered or report.succeeded("base_registration")
            ),
            celo_registered=(
                result.celo_registered or report.succeeded("celo_registration")
            ),
            oasis_profile_created=(
                result.oasis_profile_created or report.succeeded("oasis_profile")
            ),
        )
        self._set_message(retried)
        logger.info(f"{retried.message}: {retried.child_address}")
        return retried

    @staticmethod
    def _set_message(result: AccountCreationResult) -> None:
        failed = result.failed_steps()
        if failed:
            result.message = (
                "Child account created with partial failures: " + ", ".join(failed)
            )
        else:
            result.message = "Child account created successfully"

    # ================================================================
    # Steps
    # ================================================================

    async def _check_gas_sponsorship(self, ctx: ChildAccountContext) -> None:
        ctx.gas_sponsorship_enabled = await self.wallet_provider.verify_gas_sponsorship(
            self.gas_sponsorship_chain_id
        )
        if not ctx.gas_sponsorship_enabled:
            logger.warning(
                "Gas sponsorship not enabled - deposits will require parent to have ETH"
            )

    async def _resolve_parent_wallet(self, ctx: ChildAccountContext) -> None:
        wallet = await self.wallet_provider.get_user_wallet(ctx.parent_user_id)
        if not wallet:
            raise ParentWalletMissingError(ctx.parent_user_id)
        ctx.parent_wallet = wallet
        logger.info(f"Parent wallet: {wallet}")

    async def _create_child_user(self, ctx: ChildAccountContext) -> None:
        created_at = int(time.time() * 1000)
        ctx.child_email = (
            f"child-{created_at}-{secrets.token_hex(4)}@{CHILD_EMAIL_DOMAIN}"
        )
        try:
            ctx.child_user = await self.wallet_provider.create_user(
                ctx.child_email,
                {
                    "name": ctx.child_name,
                    "parent_email": ctx.parent_email,
                    "account_type": "child",
                    "created_at": created_at,
                },
            )
        except ProviderError as e:
            raise ProviderUserCreationError(e.message)
        logger.info(f"Child Privy user created: {ctx.child_user.id}")

    async def _derive_child_address(self, ctx: ChildAccountContext) -> None:
        ctx.identity = ChildIdentity.derive(ctx.child_user.id, ctx.child_name)
        logger.info(f"Child address (identifier): {ctx.identity.address}")

    async def _create_key_quorum(self, ctx: ChildAccountContext) -> None:
        try:
            ctx.quorum = await self.wallet_provider.create_key_quorum(
                [ctx.parent_user_id, ctx.child_user.id],
                QUORUM_THRESHOLD,
                f"{ctx.child_name} checking",
            )
        except ProviderError as e:
            raise WalletCreationError("key quorum", ctx.child_user.id, e.message)

    async def _create_checking_wallet(self, ctx: ChildAccountContext) -> None:
        try:
            ctx.checking = await self.wallet_provider.create_wallet(
                ctx.quorum, WalletPurpose.CHECKING
            )
        except ProviderError as e:
            raise WalletCreationError("checking wallet", ctx.child_user.id, e.message)
        logger.info(f"Checking wallet: {ctx.checking.address}")

    async def _create_vault_wallet(self, ctx: ChildAccountContext) -> None:
        try:
            ctx.vault = await self.wallet_provider.create_wallet(
                OwnerPolicy.single(ctx.parent_user_id),
                WalletPurpose.VAULT,
                time_lock=vault_unlock_date(ctx.child_date_of_birth),
            )
        except ProviderError as e:
            raise WalletCreationError("vault wallet", ctx.child_user.id, e.message)
        logger.info(f"Vault wallet: {ctx.vault.address}")

    async def _create_policies(self, ctx: ChildAccountContext) -> None:
        # Checking: parent and child sign, no limits
        await self._create_policy(
            ctx.checking.address, [ctx.parent_user_id, ctx.child_user.id]
        )
        # Vault: parent only until the child is verified
        await self._create_policy(
            ctx.vault.address, [ctx.parent_user_id], time_lock=ctx.vault.time_lock
        )
        logger.info("Privy wallet policies created")

    async def _create_policy(
        self, wallet_address: str, signers: list, time_lock: Optional[int] = None
    ) -> None:
        try:
            await self.wallet_provider.create_wallet_policy(
                wallet_address, signers, time_lock=time_lock
            )
        except ProviderError as e:
            raise PolicyUpdateError(wallet_address, e.message)

    async def _register_on_base(self, ctx: ChildAccountContext) -> None:
        await self.base_splitter.register_child_wallets(
            ctx.identity.address, ctx.checking.address, ctx.vault.address
        )

    async def _register_on_celo(self, ctx: ChildAccountContext) -> None:
        await self.celo_verifier.register_child(ctx.identity.address, ctx.parent_wallet)

    async def _create_oasis_profile(self, ctx: ChildAccountContext) -> None:
        await self.oasis_datastore.create_child_profile(
            ChildProfile(
                child_address=ctx.identity.address,
                name=ctx.child_name,
                date_of_birth=ctx.child_date_of_birth,
                email=ctx.parent_email,
                child_provider_id=ctx.child_user.id,
                parent_provider_id=ctx.parent_user_id,
                checking_wallet=ctx.checking.address,
                vault_wallet=ctx.vault.address,
                parent_wallet=ctx.parent_wallet,
            )
        )
