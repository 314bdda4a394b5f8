from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.core.database import get_db
from backend.src.core.onchain import OnChainClient, get_onchain_client
from backend.src.schemas.fish import FamilyTree, FishDetail
from backend.src.services.fish_service import FishService
from backend.src.services.lineage_service import LineageService

router = APIRouter()


@router.get(
    "/owner/{owner}",
    response_model=List[FishDetail],
    summary="List an owner's fish with their on-chain progress",
)
async def get_fish_by_owner(
    owner: str,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> List[FishDetail]:
    return await FishService.get_fish_by_owner(db, chain, owner)


@router.get("/{fish_id}", response_model=FishDetail, summary="Get a fish")
async def get_fish(
    fish_id: int,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> FishDetail:
    return await FishService.get_fish_by_id(db, chain, fish_id)


@router.get(
    "/{fish_id}/family-tree",
    response_model=FamilyTree,
    summary="Get a fish's ancestors and descendants",
)
async def get_family_tree(fish_id: int, db: AsyncSession = Depends(get_db)) -> FamilyTree:
    return await LineageService.build_family_tree(db, fish_id)
