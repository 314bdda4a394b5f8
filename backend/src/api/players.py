from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.core.database import get_db
from backend.src.core.logging_config import get_logger
from backend.src.core.onchain import OnChainClient, get_onchain_client
from backend.src.schemas.player import PlayerProfile, PlayerRegister
from backend.src.services.player_service import PlayerService

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/register",
    status_code=status.HTTP_200_OK,
    summary="Register a player",
)
async def register_player(
    *,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
    player_in: PlayerRegister,
) -> dict:
    """
    Register a wallet address, or return the already registered player.

    - **address**: The player's wallet address.
    """
    result = await PlayerService.register_player(db, chain, player_in.address)
    return result.to_dict()


@router.post(
    "/{address}/starter-pack",
    status_code=status.HTTP_201_CREATED,
    summary="Mint the one-time starter pack",
)
async def mint_starter_pack(
    address: str,
    db: AsyncSession = Depends(get_db),
    chain: OnChainClient = Depends(get_onchain_client),
) -> dict:
    pack = await PlayerService.mint_starter_pack(db, chain, address)
    return pack.to_dict()


@router.get("/{address}", response_model=PlayerProfile, summary="Get a player profile")
async def get_player(address: str, db: AsyncSession = Depends(get_db)) -> PlayerProfile:
    return await PlayerService.get_player_profile(db, address)
