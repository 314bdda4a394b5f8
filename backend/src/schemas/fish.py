"""
Pydantic models (schemas) for fish and lineage data.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict

from ..core.constants import FishState


class FishRead(BaseModel):
    """
    Off-chain fish fields.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner: str
    tank_id: Optional[int] = None
    species: str
    dna: Optional[str] = None
    sprite_url: Optional[str] = None
    parent1_id: Optional[int] = None
    parent2_id: Optional[int] = None
    created_at: Optional[datetime] = None


class FishDetail(FishRead):
    """
    Off-chain fish merged with its on-chain progress.

    `state` is derived from `xp`; `xp_to_next_state` is None for adults.
    """

    xp: int
    state: FishState
    xp_to_next_state: Optional[int] = None
    last_fed_at: int = 0
    is_ready_to_breed: bool = False
    is_bred: bool = False


class FamilyTreeNode(BaseModel):
    """
    A fish as seen from a lineage walk.

    `generation` is the distance from the root: 0 for the root itself,
    1 for parents (or children), 2 for grandparents, and so on.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    generation: int
    parent1_id: Optional[int] = None
    parent2_id: Optional[int] = None
    species: Optional[str] = None
    owner: Optional[str] = None


class FamilyTree(BaseModel):
    """
    Ancestors (root included at generation 0) and descendants of a fish.
    """

    fish_id: int
    ancestors: List[FamilyTreeNode]
    descendants: List[FamilyTreeNode]
    ancestor_generation_count: int
    descendant_generation_count: int
