"""
Pydantic models (schemas) for tank data.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class TankRead(BaseModel):
    """
    Off-chain tank fields.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner: str
    name: Optional[str] = None
    sprite_url: Optional[str] = None
    created_at: Optional[datetime] = None


class TankWithUsage(TankRead):
    """
    Tank merged with its on-chain capacity and current occupancy.
    """

    capacity: int
    fish_count: int
    capacity_usage: float


class CapacityCheck(BaseModel):
    """
    Request body for an admission check.
    """

    additional_count: int = 1
