"""
Service for decoration reads.

Kind, owner, display flag and image come from the off-chain row; the XP
multiplier is read from the ledger on every call.
"""

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import NotFoundError, OnChainError, ValidationError
from ..core.logging_config import get_logger
from ..core.metrics import metrics
from ..core.onchain import OnChainClient
from ..models.decoration import Decoration
from ..models.player import Player
from ..schemas.decoration import DecorationRead

logger = get_logger(__name__)


class DecorationService:
    """Service for reading decorations."""

    @staticmethod
    async def get_decoration_by_id(
        db: AsyncSession, chain: OnChainClient, decoration_id: int
    ) -> DecorationRead:
        """
        Get a decoration with its on-chain XP multiplier.

        Raises:
            ValidationError: decoration_id is not a positive integer
            NotFoundError: No off-chain row for the decoration
            OnChainError: The ledger read failed
        """
        if (
            not isinstance(decoration_id, int)
            or isinstance(decoration_id, bool)
            or decoration_id <= 0
        ):
            raise ValidationError("Invalid decoration ID")

        result = await db.execute(select(Decoration).where(Decoration.id == decoration_id))
        decoration = result.scalar_one_or_none()
        if decoration is None:
            raise NotFoundError(f"Decoration with ID {decoration_id} not found")

        return await DecorationService._merge(chain, decoration)

    @staticmethod
    async def get_decorations_by_owner(
        db: AsyncSession, chain: OnChainClient, owner: str
    ) -> List[DecorationRead]:
        """
        Every decoration an owner has, ordered by id.

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
            select(Decoration).where(Decoration.owner == owner).order_by(Decoration.id.asc())
        )
        return [
            await DecorationService._merge(chain, decoration)
            for decoration in result.scalars().all()
        ]

    @staticmethod
    async def _merge(chain: OnChainClient, decoration: Decoration) -> DecorationRead:
        try:
            chain_state = await chain.get_decoration(decoration.id)
        except Exception as e:
            metrics.track_onchain_failure("get_decoration")
            logger.error(
                "Failed to read decoration on-chain",
                extra={"decoration_id": decoration.id, "error": str(e)},
            )
            raise OnChainError(
                f"Failed to read decoration {decoration.id} on-chain: {e}",
                stage="get_decoration",
            ) from e

        return DecorationRead(
            id=decoration.id,
            owner=decoration.owner,
            kind=decoration.kind,
            is_active=decoration.is_active,
            image_url=decoration.image_url,
            created_at=decoration.created_at,
            xp_multiplier=chain_state.xp_multiplier,
        )
