"""
Verification entities - Age verification events and reconciliation reports.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class VerificationEvent:
    """
    ChildVerified event observed on Celo.

    Transient: fully reconstructable by re-scanning the chain.
    """

    child_address: str
    parent_address: str
    timestamp: int
    block_number: int
    transaction_hash: str
    log_index: int = 0

    def to_dict(self) -> dict:
        """Convert to API representation."""
        return {
            "childAddress": self.child_address,
            "parentAddress": self.parent_address,
            "timestamp": self.timestamp,
            "blockNumber": self.block_number,
            "transactionHash": self.transaction_hash,
        }


@dataclass
class VerificationReport:
    """Result of one reconciliation pass."""

    last_block: int
    events: List[VerificationEvent] = field(default_factory=list)
    skipped: int = 0
    failed: int = 0

    @property
    def events_processed(self) -> int:
        return len(self.events)

    def to_dict(self) -> dict:
        """Convert to API representation."""
        return {
            "success": True,
            "eventsProcessed": self.events_processed,
            "lastBlock": self.last_block,
            "events": [event.to_dict() for event in self.events],
        }
