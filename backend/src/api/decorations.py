from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.core.database import get_db
from backend.src.core.onchain import OnChainClient, get_onchain_client
from backend.src.schemas.decoration import DecorationRead
from backend.src.services.decoration_service import DecorationService

router = APIRouter()


@router.get(
    "/owner/{owner}",
    response_model=List[DecorationRead],
    summary="List an owner's decorations",
)
async def get_decorations_by_owner(
    owner: str,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> List[DecorationRead]:
    return await DecorationService.get_decorations_by_owner(db, chain, owner)


@router.get("/{decoration_id}", response_model=DecorationRead, summary="Get a decoration")
async def get_decoration(
    decoration_id: int,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> DecorationRead:
    return await DecorationService.get_decoration_by_id(db, chain, decoration_id)
