"""
Privy wallet provider client.

HTTP client for the Privy REST API with lazy client lifecycle management.
"""

import asyncio
from typing import Any, List, Optional, Sequence

import httpx

from scholarfi.domain.entities.child_account import (
    ProviderUser,
    WalletPolicy,
    WalletPurpose,
    WalletRecord,
)
from scholarfi.domain.exceptions import EntityNotFoundError, ProviderError
from scholarfi.domain.services.i_wallet_provider import IWalletProvider
from scholarfi.domain.value_objects.owner_policy import OwnerPolicy
from scholarfi.infrastructure.monitoring import get_logger, metrics

logger = get_logger(__name__)


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first present key (Privy mixes snake and camel case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


class PrivyClient(IWalletProvider):
    """
    Privy REST API client.

    Design:
    - Client is lazily initialized on first use
    - Lock ensures single client per instance
    - Basic auth with app_id:app_secret plus privy-app-id header
    - httpx errors are translated to ProviderError
    """

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        api_url: str = "https://api.privy.io/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Privy client.

        Args:
            app_id: Privy application ID
            app_secret: Privy application secret
            api_url: REST API base URL
            timeout: Request timeout in seconds
            transport: Optional transport override (tests)
        """
        self.app_id = app_id
        self.app_secret = app_secret
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """
        Ensure HTTP client is initialized.

        Returns:
            Initialized AsyncClient instance
        """
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        base_url=self.api_url,
                        auth=httpx.BasicAuth(self.app_id, self.app_secret),
                        headers={"privy-app-id": self.app_id},
                        timeout=self.timeout,
                        transport=self._transport,
                        limits=httpx.Limits(
                            max_connections=10,
                            max_keepalive_connections=5,
                        ),
                    )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        payload: Optional[dict] = None,
    ) -> Any:
        """
        Send request to Privy and decode the JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            operation: Operation name for metrics and errors
            payload: Optional JSON body

        Returns:
            Decoded JSON response (None for empty bodies)

        Raises:
            ProviderError: On HTTP, network or decoding failure
        """
        metrics.provider_requests_total.labels(operation=operation).inc()
        try:
            client = await self._ensure_client()
            response = await client.request(method, path, json=payload)
            response.raise_for_status()
            if not response.content:
                return None
            return response.json()

        except httpx.HTTPStatusError as e:
            metrics.provider_errors_total.labels(
                operation=operation, error_type="http_status"
            ).inc()
            raise ProviderError(
                f"Privy {operation} failed: "
                f"{e.response.status_code} - {e.response.text}",
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            metrics.provider_errors_total.labels(
                operation=operation, error_type="network"
            ).inc()
            raise ProviderError(f"Network error during Privy {operation}: {e}")
        except ValueError as e:
            metrics.provider_errors_total.labels(
                operation=operation, error_type="decode"
            ).inc()
            raise ProviderError(f"Invalid Privy {operation} response: {e}")

    # ================================================================
    # App
    # ================================================================

    async def verify_gas_sponsorship(self, chain_id: int) -> bool:
        """
        Check gas sponsorship in the app configuration.

        Fails open: account creation must not be blocked by this check.

        Args:
            chain_id: Chain ID (for logging; sponsorship is app-wide)

        Returns:
            Sponsorship flag, or True if the app config is unreachable
        """
        logger.info(f"Checking gas sponsorship for chain {chain_id}")
        try:
            app_config = await self._request(
                "GET", f"/apps/{self.app_id}", "get_app"
            )
        except ProviderError as e:
            logger.warning(
                f"Could not verify gas sponsorship via API ({e.message}); "
                f"enable it for chain {chain_id} in the Privy dashboard"
            )
            return True

        rpc_config = _pick(app_config or {}, "rpc_config", "rpcConfig", default={})
        enabled = bool(
            _pick(
                rpc_config, "sponsorship_enabled", "sponsorshipEnabled", default=False
            )
        )
        if enabled:
            logger.info("Gas sponsorship is enabled")
        else:
            logger.warning(
                "Gas sponsorship NOT enabled - deposits will require "
                "the parent to hold ETH"
            )
        return enabled

    # ================================================================
    # Users
    # ================================================================

    @staticmethod
    def _parse_user(data: dict) -> ProviderUser:
        """Map Privy user JSON to ProviderUser."""
        linked = _pick(data, "linked_accounts", "linkedAccounts", default=[])

        email = None
        email_field = data.get("email")
        if isinstance(email_field, dict):
            email = email_field.get("address")

        embedded_wallet = None
        for account in linked:
            account_type = account.get("type")
            if account_type == "email" and email is None:
                email = account.get("address")
            elif account_type == "wallet" and embedded_wallet is None:
                client_type = _pick(
                    account, "wallet_client_type", "walletClientType"
                )
                connector = _pick(account, "connector_type", "connectorType")
                if client_type == "privy" or connector == "embedded":
                    embedded_wallet = account.get("address")

        return ProviderUser(
            id=data["id"],
            email=email,
            embedded_wallet=embedded_wallet,
        )

    async def get_user(self, user_id: str) -> ProviderUser:
        """
        Get Privy user by ID.

        Raises:
            EntityNotFoundError: If Privy has no such user
            ProviderError: On any other API failure
        """
        try:
            data = await self._request("GET", f"/users/{user_id}", "get_user")
        except ProviderError as e:
            if e.status_code == 404:
                raise EntityNotFoundError("Privy user", user_id)
            raise
        try:
            return self._parse_user(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(f"Invalid Privy get_user response: {e}")

    async def get_user_wallet(self, user_id: str) -> Optional[str]:
        """
        Get embedded wallet of a user.

        Args:
            user_id: Privy user ID

        Returns:
            Embedded wallet address, or None if the user is unknown or has
            no embedded wallet
        """
        logger.info(f"Getting wallet for user: {user_id}")
        try:
            user = await self.get_user(user_id)
        except EntityNotFoundError:
            logger.warning(f"User {user_id} not found")
            return None

        if user.embedded_wallet is None:
            logger.warning(f"User {user_id} has no embedded wallet")
        return user.embedded_wallet

    async def create_user(self, email: str, metadata: dict) -> ProviderUser:
        """Create Privy user linked to an email."""
        logger.info(f"Creating Privy user with email: {email}")
        data = await self._request(
            "POST",
            "/users",
            "create_user",
            payload={
                "linked_accounts": [{"type": "email", "address": email}],
                "custom_metadata": metadata,
            },
        )
        try:
            user = self._parse_user(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ProviderError(f"Invalid Privy create_user response: {e}")
        if user.email is None:
            user.email = email
        logger.info(f"Created Privy user: {user.id}")
        return user

    # ================================================================
    # Key quorums and wallets
    # ================================================================

    async def create_key_quorum(
        self, user_ids: Sequence[str], threshold: int, display_name: str
    ) -> OwnerPolicy:
        """Create key quorum over Privy users."""
        data = await self._request(
            "POST",
            "/key_quorums",
            "create_key_quorum",
            payload={
                "user_ids": list(user_ids),
                "authorization_threshold": threshold,
                "display_name": display_name,
            },
        )
        try:
            quorum_id = data["id"]
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Invalid Privy create_key_quorum response: {e}")
        logger.info(f"Created key quorum {quorum_id} ({threshold}-of-{len(user_ids)})")
        return OwnerPolicy.quorum(quorum_id, tuple(user_ids), threshold)

    async def create_wallet(
        self,
        owner: OwnerPolicy,
        purpose: WalletPurpose,
        time_lock: Optional[int] = None,
    ) -> WalletRecord:
        """Create Ethereum wallet owned by a user or quorum."""
        payload = {"chain_type": "ethereum", **owner.to_payload()}
        metadata = {"purpose": purpose.value}
        if time_lock is not None:
            metadata["unlock_date"] = time_lock
        payload["metadata"] = metadata

        data = await self._request(
            "POST", "/wallets", f"create_{purpose.value}_wallet", payload=payload
        )
        try:
            wallet = WalletRecord(
                id=data["id"],
                address=data["address"],
                purpose=purpose,
                owner=owner,
                time_lock=time_lock,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Invalid Privy create_wallet response: {e}")
        logger.info(f"Created {purpose.value} wallet: {wallet.address}")
        return wallet

    # ================================================================
    # Policies
    # ================================================================

    @staticmethod
    def _parse_policy(wallet_address: str, data: dict) -> WalletPolicy:
        """Map Privy policy JSON to WalletPolicy."""
        time_locks = _pick(data, "time_locks", "timeLocks")
        time_lock = None
        if isinstance(time_locks, dict):
            time_lock = _pick(time_locks, "unlock_date", "unlockDate")
        return WalletPolicy(
            id=data["id"],
            wallet_address=wallet_address,
            signers=list(data.get("signers") or []),
            time_lock=time_lock,
        )

    @staticmethod
    def _policy_body(signers: Sequence[str], time_lock: Optional[int]) -> dict:
        return {
            "signers": list(signers),
            "timeLocks": (
                {"unlockDate": time_lock} if time_lock is not None else None
            ),
        }

    async def create_wallet_policy(
        self,
        wallet_address: str,
        signers: Sequence[str],
        time_lock: Optional[int] = None,
    ) -> WalletPolicy:
        """Create signer policy for a wallet."""
        logger.info(f"Creating wallet policy for {wallet_address}")
        body = self._policy_body(signers, time_lock)
        if time_lock is None:
            body.pop("timeLocks")
        data = await self._request(
            "POST",
            f"/wallets/{wallet_address}/policies",
            "create_policy",
            payload=body,
        )
        try:
            policy = self._parse_policy(wallet_address, data)
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Invalid Privy create_policy response: {e}")
        logger.info(f"Created wallet policy: {policy.id}")
        return policy

    async def list_wallet_policies(self, wallet_address: str) -> List[WalletPolicy]:
        """List policies attached to a wallet."""
        data = await self._request(
            "GET", f"/wallets/{wallet_address}/policies", "list_policies"
        )
        items = data.get("data", []) if isinstance(data, dict) else data or []
        try:
            return [self._parse_policy(wallet_address, item) for item in items]
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Invalid Privy list_policies response: {e}")

    async def update_wallet_policy(self, policy: WalletPolicy) -> WalletPolicy:
        """Replace signers and time-lock of a policy."""
        logger.info(
            f"Updating wallet policy {policy.id} for {policy.wallet_address}"
        )
        data = await self._request(
            "PATCH",
            f"/wallets/{policy.wallet_address}/policies/{policy.id}",
            "update_policy",
            payload=self._policy_body(policy.signers, policy.time_lock),
        )
        if not data:
            return policy
        try:
            updated = self._parse_policy(policy.wallet_address, data)
        except (KeyError, TypeError) as e:
            raise ProviderError(f"Invalid Privy update_policy response: {e}")
        logger.info(f"Updated wallet policy: {updated.id}")
        return updated
