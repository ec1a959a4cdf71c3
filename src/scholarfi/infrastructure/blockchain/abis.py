"""
Contract ABIs for the Scholar-Fi contracts.

Only the functions and events the backend uses are listed.
"""

from typing import Optional


def _address(name: str) -> dict:
    return {"internalType": "address", "name": name, "type": "address"}


def _string(name: str) -> dict:
    return {"internalType": "string", "name": name, "type": "string"}


def _uint(name: str) -> dict:
    return {"internalType": "uint256", "name": name, "type": "uint256"}


def _bool(name: str) -> dict:
    return {"internalType": "bool", "name": name, "type": "bool"}


def _function(
    name: str, inputs: list, outputs: Optional[list] = None, view: bool = False
) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": inputs,
        "outputs": outputs or [],
        "stateMutability": "view" if view else "nonpayable",
    }


# ParentDepositSplitter (Base Sepolia)
BASE_SPLITTER_ABI = [
    _function(
        "registerChildWallets",
        [
            _address("childAddress"),
            _address("checkingWallet"),
            _address("vaultWallet"),
        ],
    ),
]

# ScholarFiAgeVerifier (Celo Sepolia)
CELO_VERIFIER_ABI = [
    _function(
        "registerChild",
        [_address("childAddress"), _address("parentAddress")],
    ),
    _function(
        "isChildVerified",
        [_address("childAddress")],
        [_bool("")],
        view=True,
    ),
    {
        "type": "event",
        "name": "ChildVerified",
        "anonymous": False,
        "inputs": [
            {**_address("childAddress"), "indexed": True},
            {**_address("parentAddress"), "indexed": True},
            {**_uint("timestamp"), "indexed": False},
            {
                "indexed": False,
                "internalType": "struct ISelfVerificationRoot.GenericDiscloseOutputV2",
                "name": "output",
                "type": "tuple",
                "components": [
                    {"internalType": "bytes32", "name": "scope", "type": "bytes32"},
                    _uint("nonce"),
                ],
            },
        ],
    },
]

# ChildDataStore (Oasis Sapphire)
OASIS_DATASTORE_ABI = [
    _function(
        "createChildProfile",
        [
            _address("childAddress"),
            _string("name"),
            _uint("dateOfBirth"),
            _string("email"),
            _string("childProviderId"),
            _string("parentProviderId"),
            _address("checkingWallet"),
            _address("vaultWallet"),
            _address("parentWallet"),
        ],
    ),
    _function(
        "getChildProfile",
        [_address("childAddress")],
        [
            _string("name"),
            _uint("dateOfBirth"),
            _string("email"),
            _string("childProviderId"),
            _string("parentProviderId"),
            _address("checkingWallet"),
            _address("vaultWallet"),
            _address("parentWallet"),
            _bool("isVerified"),
            _uint("totalDeposited"),
            _uint("lastUpdated"),
        ],
        view=True,
    ),
    _function("markAgeVerified", [_address("childAddress")]),
    _function(
        "walletToChild",
        [_address("wallet")],
        [_address("")],
        view=True,
    ),
    _function(
        "recordDeposit",
        [_address("childAddress"), _uint("amount")],
    ),
]
