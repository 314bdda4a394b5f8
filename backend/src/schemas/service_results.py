"""
Structured result types for the dual-write orchestrations.

Registration and starter pack minting span two independently failing
systems. Their results carry a `ConsistencyState` so the caller (and the
sync-queue sweeper) can tell a fully written outcome from one that only
reached the off-chain store.
"""

from dataclasses import dataclass, field
from typing import Optional, List, TYPE_CHECKING

from ..core.constants import ConsistencyState

if TYPE_CHECKING:
    from .player import PlayerRead


@dataclass
class StarterPackResult:
    """What a starter pack mint produced, complete or not."""
    tank_id: Optional[int] = None
    fish_ids: List[int] = field(default_factory=list)
    tx_hashes: List[str] = field(default_factory=list)
    consistency: ConsistencyState = ConsistencyState.CONSISTENT

    @property
    def is_complete(self) -> bool:
        return self.consistency == ConsistencyState.CONSISTENT

    def to_dict(self) -> dict:
        return {
            "tank_id": self.tank_id,
            "fish_ids": list(self.fish_ids),
            "tx_hashes": list(self.tx_hashes),
            "consistency": self.consistency.value,
        }


@dataclass
class RegistrationResult:
    """
    Outcome of `PlayerService.register_player`.

    `created` is False on the idempotent fast path. `starter_pack` is set when
    the inline starter pack ran; when it failed, `starter_pack_error` holds the
    error code, `starter_pack` holds whatever was minted and `consistency` is
    PARTIAL.
    """
    player: "PlayerRead"
    created: bool
    consistency: ConsistencyState = ConsistencyState.CONSISTENT
    tx_hash: Optional[str] = None
    starter_pack: Optional[StarterPackResult] = None
    starter_pack_error: Optional[str] = None

    @classmethod
    def existing(
        cls,
        player: "PlayerRead",
        consistency: ConsistencyState = ConsistencyState.CONSISTENT,
    ) -> "RegistrationResult":
        """
        Result for a player that was already registered.

        `consistency` is OFFCHAIN_ONLY when no on-chain registration was ever
        recorded for the player.
        """
        return cls(player=player, created=False, consistency=consistency)

    def to_dict(self) -> dict:
        return {
            "player": self.player.model_dump(mode="json"),
            "created": self.created,
            "consistency": self.consistency.value,
            "tx_hash": self.tx_hash,
            "starter_pack": self.starter_pack.to_dict() if self.starter_pack else None,
            "starter_pack_error": self.starter_pack_error,
        }


# Error codes for consistent client-side error handling
class ServiceErrorCodes:
    """Standardized error codes across all services."""

    # Common errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Ledger errors
    ON_CHAIN_ERROR = "ON_CHAIN_ERROR"

    # Lineage errors
    LINEAGE_TOO_DEEP = "LINEAGE_TOO_DEEP"
