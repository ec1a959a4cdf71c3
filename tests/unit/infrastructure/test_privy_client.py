"""
Unit tests for PrivyClient.

Requests are answered by httpx.MockTransport; no network access.
"""

import base64
import json

import httpx
import pytest

from scholarfi.domain.entities.child_account import WalletPolicy, WalletPurpose
from scholarfi.domain.exceptions import EntityNotFoundError, ProviderError
from scholarfi.domain.value_objects.owner_policy import OwnerPolicy
from scholarfi.infrastructure.privy.privy_client import PrivyClient

API_URL = "https://privy.test/v1"


class _Router:
    """Records requests and answers from a (method, path) table."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path.removeprefix("/v1"))
        if key not in self.routes:
            return httpx.Response(404, json={"error": "not found"})
        status, body = self.routes[key]
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def _client(routes: dict):
    router = _Router(routes)
    client = PrivyClient(
        app_id="app-1",
        app_secret="secret-1",
        api_url=API_URL,
        transport=httpx.MockTransport(router),
    )
    return client, router


class TestPrivyClient:
    """Unit tests for PrivyClient."""

    # ================================================================
    # Transport
    # ================================================================

    async def test_sends_basic_auth_and_app_header(self):
        client, router = _client({("GET", "/users/u1"): (200, {"id": "u1"})})

        await client.get_user("u1")

        request = router.requests[0]
        expected = base64.b64encode(b"app-1:secret-1").decode()
        assert request.headers["authorization"] == f"Basic {expected}"
        assert request.headers["privy-app-id"] == "app-1"
        await client.close()

    async def test_http_error_becomes_provider_error(self):
        client, _ = _client({("GET", "/users/u1"): (500, {"error": "boom"})})

        with pytest.raises(ProviderError) as exc_info:
            await client.get_user("u1")

        assert exc_info.value.status_code == 500
        await client.close()

    async def test_network_error_becomes_provider_error(self):
        def _fail(request):
            raise httpx.ConnectError("refused", request=request)

        client = PrivyClient(
            "app-1", "secret-1", API_URL, transport=httpx.MockTransport(_fail)
        )

        with pytest.raises(ProviderError):
            await client.get_user("u1")
        await client.close()

    # ================================================================
    # Gas sponsorship
    # ================================================================

    async def test_gas_sponsorship_enabled(self):
        client, _ = _client(
            {
                ("GET", "/apps/app-1"): (
                    200,
                    {"rpc_config": {"sponsorship_enabled": True}},
                )
            }
        )

        assert await client.verify_gas_sponsorship(84532) is True
        await client.close()

    async def test_gas_sponsorship_disabled(self):
        client, _ = _client(
            {
                ("GET", "/apps/app-1"): (
                    200,
                    {"rpcConfig": {"sponsorshipEnabled": False}},
                )
            }
        )

        assert await client.verify_gas_sponsorship(84532) is False
        await client.close()

    async def test_gas_sponsorship_fails_open(self):
        client, _ = _client({("GET", "/apps/app-1"): (503, {"error": "down"})})

        assert await client.verify_gas_sponsorship(84532) is True
        await client.close()

    # ================================================================
    # Users
    # ================================================================

    async def test_get_user_parses_email_and_embedded_wallet(self):
        client, _ = _client(
            {
                ("GET", "/users/u1"): (
                    200,
                    {
                        "id": "u1",
                        "linked_accounts": [
                            {"type": "email", "address": "kid@example.com"},
                            {
                                "type": "wallet",
                                "address": "0xexternal",
                                "wallet_client_type": "metamask",
                            },
                            {
                                "type": "wallet",
                                "address": "0xembedded",
                                "wallet_client_type": "privy",
                            },
                        ],
                    },
                )
            }
        )

        user = await client.get_user("u1")

        assert user.email == "kid@example.com"
        assert user.embedded_wallet == "0xembedded"
        await client.close()

    async def test_get_user_wallet_accepts_embedded_connector(self):
        client, _ = _client(
            {
                ("GET", "/users/u1"): (
                    200,
                    {
                        "id": "u1",
                        "linkedAccounts": [
                            {
                                "type": "wallet",
                                "address": "0xembedded",
                                "connectorType": "embedded",
                            }
                        ],
                    },
                )
            }
        )

        assert await client.get_user_wallet("u1") == "0xembedded"
        await client.close()

    async def test_get_user_wallet_none_without_embedded_wallet(self):
        client, _ = _client(
            {("GET", "/users/u1"): (200, {"id": "u1", "linked_accounts": []})}
        )

        assert await client.get_user_wallet("u1") is None
        await client.close()

    async def test_get_user_wallet_none_for_unknown_user(self):
        client, _ = _client({})

        assert await client.get_user_wallet("missing") is None
        await client.close()

    async def test_unknown_user_is_not_found(self):
        client, _ = _client({})

        with pytest.raises(EntityNotFoundError):
            await client.get_user("missing")
        await client.close()

    async def test_create_user_links_email(self):
        client, router = _client({("POST", "/users"): (200, {"id": "did:x:1"})})

        user = await client.create_user("child@scholarfi.internal", {"name": "Alex"})

        assert user.id == "did:x:1"
        assert user.email == "child@scholarfi.internal"
        assert router.last_json == {
            "linked_accounts": [
                {"type": "email", "address": "child@scholarfi.internal"}
            ],
            "custom_metadata": {"name": "Alex"},
        }
        await client.close()

    # ================================================================
    # Key quorums and wallets
    # ================================================================

    async def test_create_key_quorum(self):
        client, router = _client({("POST", "/key_quorums"): (200, {"id": "q1"})})

        owner = await client.create_key_quorum(["p", "c"], 1, "Alex checking")

        assert owner.quorum_id == "q1"
        assert owner.members == ("p", "c")
        assert router.last_json == {
            "user_ids": ["p", "c"],
            "authorization_threshold": 1,
            "display_name": "Alex checking",
        }
        await client.close()

    async def test_create_vault_wallet_with_time_lock(self):
        client, router = _client(
            {("POST", "/wallets"): (200, {"id": "w2", "address": "0xvault"})}
        )

        wallet = await client.create_wallet(
            OwnerPolicy.single("p"), WalletPurpose.VAULT, time_lock=1567648000
        )

        assert wallet.address == "0xvault"
        assert wallet.time_lock == 1567648000
        assert router.last_json == {
            "chain_type": "ethereum",
            "owner": {"user_id": "p"},
            "metadata": {"purpose": "vault", "unlock_date": 1567648000},
        }
        await client.close()

    async def test_create_checking_wallet_owned_by_quorum(self):
        client, router = _client(
            {("POST", "/wallets"): (200, {"id": "w1", "address": "0xchecking"})}
        )

        await client.create_wallet(
            OwnerPolicy.quorum("q1", ("p", "c")), WalletPurpose.CHECKING
        )

        assert router.last_json["owner_id"] == "q1"
        assert router.last_json["metadata"] == {"purpose": "checking"}
        await client.close()

    async def test_malformed_wallet_response(self):
        client, _ = _client({("POST", "/wallets"): (200, {"id": "w1"})})

        with pytest.raises(ProviderError):
            await client.create_wallet(OwnerPolicy.single("p"), WalletPurpose.VAULT)
        await client.close()

    # ================================================================
    # Policies
    # ================================================================

    async def test_create_policy_without_time_lock(self):
        client, router = _client(
            {
                ("POST", "/wallets/0xchecking/policies"): (
                    200,
                    {"id": "pol-1", "signers": ["p", "c"]},
                )
            }
        )

        policy = await client.create_wallet_policy("0xchecking", ["p", "c"])

        assert policy.signers == ["p", "c"]
        assert router.last_json == {"signers": ["p", "c"]}
        await client.close()

    async def test_create_policy_with_time_lock(self):
        client, router = _client(
            {
                ("POST", "/wallets/0xvault/policies"): (
                    200,
                    {"id": "pol-2", "signers": ["p"], "timeLocks": {"unlockDate": 5}},
                )
            }
        )

        policy = await client.create_wallet_policy("0xvault", ["p"], time_lock=5)

        assert policy.time_lock == 5
        assert router.last_json == {"signers": ["p"], "timeLocks": {"unlockDate": 5}}
        await client.close()

    async def test_list_policies_accepts_data_envelope(self):
        client, _ = _client(
            {
                ("GET", "/wallets/0xvault/policies"): (
                    200,
                    {"data": [{"id": "pol-2", "signers": ["p"]}]},
                )
            }
        )

        policies = await client.list_wallet_policies("0xvault")

        assert [p.id for p in policies] == ["pol-2"]
        await client.close()

    async def test_update_policy_clears_time_lock(self):
        client, router = _client(
            {("PATCH", "/wallets/0xvault/policies/pol-2"): (200, None)}
        )
        policy = WalletPolicy("pol-2", "0xvault", ["p", "c"], time_lock=None)

        updated = await client.update_wallet_policy(policy)

        assert updated == policy
        assert router.last_json == {"signers": ["p", "c"], "timeLocks": None}
        await client.close()
