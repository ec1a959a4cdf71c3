"""
Blockchain infrastructure: web3 clients for Base, Celo and Oasis.
"""

from scholarfi.infrastructure.blockchain.base_splitter_client import (
    BaseSplitterClient,
)
from scholarfi.infrastructure.blockchain.celo_verifier_client import (
    CeloVerifierClient,
)
from scholarfi.infrastructure.blockchain.evm_contract_client import (
    EvmContractClient,
)
from scholarfi.infrastructure.blockchain.oasis_datastore_client import (
    OasisDatastoreClient,
)

__all__ = [
    "BaseSplitterClient",
    "CeloVerifierClient",
    "EvmContractClient",
    "OasisDatastoreClient",
]
