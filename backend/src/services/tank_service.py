"""
Service for tank reads and fish-slot admission control.

Capacity is an on-chain figure; occupancy is the off-chain count of fish
assigned to the tank. `check_capacity` combines the two.
"""

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ConflictError, NotFoundError, OnChainError, ValidationError
from ..core.logging_config import get_logger
from ..core.metrics import metrics
from ..core.onchain import OnChainClient
from ..models.fish import Fish
from ..models.player import Player
from ..models.tank import Tank
from ..schemas.tank import TankWithUsage

logger = get_logger(__name__)


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class TankService:
    """Service for managing tank operations."""

    @staticmethod
    async def check_capacity(
        db: AsyncSession,
        chain: OnChainClient,
        tank_id: int,
        additional_count: int = 1,
    ) -> None:
        """
        Fail unless the tank can take `additional_count` more fish.

        Advisory only: no lock is held, so a caller that waits before
        mutating must check again.

        Args:
            db: Database session
            chain: On-chain client used to read the capacity
            tank_id: Tank to check
            additional_count: Fish about to be added

        Raises:
            ValidationError: Non-positive tank id or additional count
            NotFoundError: Tank has no off-chain row
            OnChainError: Capacity read failed
            ConflictError: occupancy + additional_count > capacity
        """
        if not _is_positive_int(tank_id):
            raise ValidationError("Invalid tank ID")
        if not _is_positive_int(additional_count):
            raise ValidationError("additional_count must be a positive integer")

        tank = await TankService.get_tank_row(db, tank_id)
        if tank is None:
            raise NotFoundError(f"Tank with ID {tank_id} not found")

        capacity = await TankService.read_capacity(chain, tank_id)
        occupancy = await TankService.count_fish(db, tank_id)

        if occupancy + additional_count > capacity:
            logger.info(
                "Tank capacity check rejected",
                extra={
                    "tank_id": tank_id,
                    "occupancy": occupancy,
                    "additional_count": additional_count,
                    "capacity": capacity,
                },
            )
            raise ConflictError(
                f"Tank {tank_id} is at capacity: {occupancy}/{capacity} fish, "
                f"cannot add {additional_count}"
            )

    @staticmethod
    async def read_capacity(chain: OnChainClient, tank_id: int) -> int:
        """On-chain capacity of a tank, with failures wrapped as OnChainError."""
        try:
            return await chain.get_tank_capacity(tank_id)
        except Exception as e:
            metrics.track_onchain_failure("get_tank_capacity")
            logger.error(
                "Failed to read tank capacity on-chain",
                extra={"tank_id": tank_id, "error": str(e)},
            )
            raise OnChainError(
                f"Failed to read capacity for tank {tank_id} on-chain: {e}",
                stage="get_tank_capacity",
            ) from e

    @staticmethod
    async def count_fish(db: AsyncSession, tank_id: int) -> int:
        result = await db.execute(
            select(func.count(Fish.id)).where(Fish.tank_id == tank_id)
        )
        return result.scalar_one()

    @staticmethod
    async def get_tank_row(db: AsyncSession, tank_id: int) -> Optional[Tank]:
        result = await db.execute(select(Tank).where(Tank.id == tank_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def owner_has_tank(db: AsyncSession, owner: str) -> bool:
        result = await db.execute(select(Tank.id).where(Tank.owner == owner).limit(1))
        return result.first() is not None

    @staticmethod
    async def get_first_tank_id_by_owner(
        db: AsyncSession, owner: str
    ) -> Optional[int]:
        """
        Id of the owner's oldest tank.

        Returns:
            Tank id if the owner has any tank, None otherwise
        """
        if not isinstance(owner, str) or not owner.strip():
            raise ValidationError("Owner address is required")
        result = await db.execute(
            select(Tank.id)
            .where(Tank.owner == owner.strip())
            .order_by(Tank.created_at.asc(), Tank.id.asc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_tanks_by_owner(
        db: AsyncSession, chain: OnChainClient, owner: str
    ) -> List[TankWithUsage]:
        """
        Every tank an owner has, with on-chain capacity and occupancy.

        Raises:
            ValidationError: Blank owner
            NotFoundError: Owner is not a registered player
            OnChainError: A capacity read failed
        """
        if not isinstance(owner, str) or not owner.strip():
            raise ValidationError("Owner address is required")
        owner = owner.strip()

        player = await db.execute(select(Player.address).where(Player.address == owner))
        if player.scalar_one_or_none() is None:
            raise NotFoundError(f"Player with address {owner} not found")

        result = await db.execute(
            select(Tank)
            .where(Tank.owner == owner)
            .order_by(Tank.created_at.asc(), Tank.id.asc())
        )
        tanks = []
        for tank in result.scalars().all():
            capacity = await TankService.read_capacity(chain, tank.id)
            fish_count = await TankService.count_fish(db, tank.id)
            tanks.append(
                TankWithUsage(
                    id=tank.id,
                    owner=tank.owner,
                    name=tank.name,
                    sprite_url=tank.sprite_url,
                    created_at=tank.created_at,
                    capacity=capacity,
                    fish_count=fish_count,
                    capacity_usage=fish_count / capacity if capacity > 0 else 0.0,
                )
            )
        return tanks
