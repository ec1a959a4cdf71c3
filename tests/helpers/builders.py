"""
Shared test data builders.
"""

from scholarfi.domain.entities.child_account import ChildProfile

PARENT_USER_ID = "did:privy:parent"
CHILD_USER_ID = "did:x:1"
PARENT_EMAIL = "parent@example.com"
PARENT_WALLET = "0x1111111111111111111111111111111111111111"
CHECKING_WALLET = "0x2222222222222222222222222222222222222222"
VAULT_WALLET = "0x3333333333333333333333333333333333333333"
CHILD_ADDRESS = "0x4444444444444444444444444444444444444444"

# Well-known hardhat dev key; never funded outside local chains
TEST_PRIVATE_KEY = (
    "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
)
TEST_SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def make_profile(
    child_address: str = CHILD_ADDRESS,
    child_provider_id: str = CHILD_USER_ID,
) -> ChildProfile:
    """Build an Oasis profile for a registered child."""
    return ChildProfile(
        child_address=child_address,
        name="Alex",
        date_of_birth=1000000000,
        email=PARENT_EMAIL,
        child_provider_id=child_provider_id,
        parent_provider_id=PARENT_USER_ID,
        checking_wallet=CHECKING_WALLET,
        vault_wallet=VAULT_WALLET,
        parent_wallet=PARENT_WALLET,
    )
