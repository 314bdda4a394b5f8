"""
Pydantic models (schemas) for decoration data.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from ..core.constants import DecorationKind


class DecorationRead(BaseModel):
    """
    Off-chain decoration fields merged with the on-chain XP multiplier.

    `xp_multiplier` is a percentage bonus: 10 means +10% XP.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner: str
    kind: DecorationKind
    is_active: bool = False
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    xp_multiplier: int
