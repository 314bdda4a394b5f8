from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.core.database import get_db
from backend.src.core.onchain import OnChainClient, get_onchain_client
from backend.src.schemas.tank import CapacityCheck, TankWithUsage
from backend.src.services.tank_service import TankService

router = APIRouter()


@router.get(
    "/owner/{owner}",
    response_model=List[TankWithUsage],
    summary="List an owner's tanks with capacity usage",
)
async def get_tanks_by_owner(
    owner: str,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> List[TankWithUsage]:
    return await TankService.get_tanks_by_owner(db, chain, owner)


@router.post(
    "/{tank_id}/capacity-check",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Check whether a tank can take more fish",
)
async def check_capacity(
    tank_id: int,
    body: CapacityCheck,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> None:
    """
    204 when the fish fit, 409 when they would exceed the on-chain capacity.
    """
    await TankService.check_capacity(db, chain, tank_id, body.additional_count)
