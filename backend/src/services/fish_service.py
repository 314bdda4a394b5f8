"""
Service for fish reads.

A fish is split across both stores: the off-chain row holds owner, tank,
species, dna and parents; the ledger holds XP, feeding time and breed
readiness. Reads here merge the two and derive the life stage from XP.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, OnChainError, ValidationError
from ..core.fish_growth import get_fish_state_for_xp, xp_to_next_state
from ..core.logging_config import get_logger
from ..core.metrics import metrics
from ..core.onchain import FishChainState, OnChainClient
from ..models.fish import Fish
from ..models.player import Player
from ..schemas.fish import FishDetail, FishRead

logger = get_logger(__name__)


def _to_detail(fish: Fish, chain_state: FishChainState) -> FishDetail:
    return FishDetail(
        **FishRead.model_validate(fish).model_dump(),
        xp=chain_state.xp,
        state=get_fish_state_for_xp(chain_state.xp),
        xp_to_next_state=xp_to_next_state(chain_state.xp),
        last_fed_at=chain_state.last_fed_at,
        is_ready_to_breed=chain_state.is_ready_to_breed,
        is_bred=fish.is_bred,
    )


class FishService:
    """Service for reading fish."""

    @staticmethod
    async def get_fish_by_id(
        db: AsyncSession, chain: OnChainClient, fish_id: int
    ) -> FishDetail:
        """
        Get a fish with its on-chain progress.

        Raises:
            ValidationError: fish_id is not a positive integer
            NotFoundError: No off-chain row for the fish
            OnChainError: The ledger read failed
        """
        if not isinstance(fish_id, int) or isinstance(fish_id, bool) or fish_id <= 0:
            raise ValidationError("Invalid fish ID")

        fish = await FishService.get_fish_row(db, fish_id)
        if fish is None:
            raise NotFoundError(f"Fish with ID {fish_id} not found")

        chain_state = await FishService.read_chain_state(chain, fish.id)
        return _to_detail(fish, chain_state)

    @staticmethod
    async def get_fish_by_owner(
        db: AsyncSession, chain: OnChainClient, owner: str
    ) -> List[FishDetail]:
        """
        Every fish an owner has, ordered by id. Empty when they have none.

        Raises:
            ValidationError: Blank owner
            NotFoundError: Owner is not a registered player
            OnChainError: A ledger read failed
        """
        if not isinstance(owner, str) or not owner.strip():
            raise ValidationError("Owner address is required")
        owner = owner.strip()

        player = await db.execute(select(Player.address).where(Player.address == owner))
        if player.scalar_one_or_none() is None:
            raise NotFoundError(f"Player with address {owner} not found")

        result = await db.execute(
            select(Fish).where(Fish.owner == owner).order_by(Fish.id.asc())
        )
        details = []
        for fish in result.scalars().all():
            chain_state = await FishService.read_chain_state(chain, fish.id)
            details.append(_to_detail(fish, chain_state))
        return details

    @staticmethod
    async def read_chain_state(chain: OnChainClient, fish_id: int) -> FishChainState:
        """On-chain state of a fish, with failures wrapped as OnChainError."""
        try:
            chain_state = await chain.get_fish(fish_id)
            if chain_state.xp < 0:
                raise ValueError(f"negative xp {chain_state.xp}")
            return chain_state
        except Exception as e:
            metrics.track_onchain_failure("get_fish")
            logger.error(
                "Failed to read fish on-chain",
                extra={"fish_id": fish_id, "error": str(e)},
            )
            raise OnChainError(
                f"Failed to read fish {fish_id} on-chain: {e}",
                stage="get_fish",
            ) from e

    @staticmethod
    async def get_fish_row(db: AsyncSession, fish_id: int) -> Optional[Fish]:
        result = await db.execute(select(Fish).where(Fish.id == fish_id))
        return result.scalar_one_or_none()
