"""
OwnerPolicy value object - Who controls a provider wallet.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class OwnerPolicy:
    """
    Value object describing wallet ownership.

    Business rules:
    - Exactly one of user_id or quorum_id is set
    - Quorum owners list their members and signature threshold
    - Threshold must be between 1 and the number of members
    """

    user_id: Optional[str] = None
    quorum_id: Optional[str] = None
    members: Tuple[str, ...] = field(default_factory=tuple)
    threshold: int = 1

    def __post_init__(self):
        """Validate ownership on creation."""
        if bool(self.user_id) == bool(self.quorum_id):
            raise ValueError("Exactly one of user_id or quorum_id is required")

        if self.quorum_id:
            if not self.members:
                raise ValueError("Quorum owner requires members")
            if not 1 <= self.threshold <= len(self.members):
                raise ValueError(
                    f"Invalid threshold {self.threshold} for "
                    f"{len(self.members)} members"
                )

    @classmethod
    def single(cls, user_id: str) -> "OwnerPolicy":
        """Owner policy for a single provider user."""
        return cls(user_id=user_id)

    @classmethod
    def quorum(
        cls, quorum_id: str, members: Tuple[str, ...], threshold: int = 1
    ) -> "OwnerPolicy":
        """Owner policy for a key quorum."""
        return cls(quorum_id=quorum_id, members=tuple(members), threshold=threshold)

    @property
    def is_quorum(self) -> bool:
        return self.quorum_id is not None

    def to_payload(self) -> dict:
        """Convert to provider API owner payload."""
        if self.is_quorum:
            return {"owner_id": self.quorum_id}
        return {"owner": {"user_id": self.user_id}}
