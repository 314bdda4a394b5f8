"""
Pydantic models (schemas) for player data.
Used for API validation and serialization.
"""

from datetime import datetime
from typing import Annotated, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .tank import TankRead
from .fish import FishRead


class PlayerRegister(BaseModel):
    """
    Schema for registering a player.
    """

    address: Annotated[str, Field(min_length=1, max_length=128)]


class PlayerRead(BaseModel):
    """
    Schema for a player as stored off-chain.
    """

    model_config = ConfigDict(from_attributes=True)

    address: str
    total_xp: int = 0
    fish_count: int = 0
    tournaments_won: int = 0
    reputation: int = 0
    offspring_created: int = 0
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PlayerProfile(PlayerRead):
    """
    Player with every tank and fish they own.
    """

    tanks: List[TankRead] = []
    fish: List[FishRead] = []
