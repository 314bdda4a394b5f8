"""
SQLAlchemy model for fish, including the lineage parent pointers.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base


class Fish(Base):
    """
    Off-chain half of a fish.

    Genetics, life stage and breed readiness live on-chain. `parent1_id` and
    `parent2_id` point back into this table: both null for minted fish, both
    set for bred fish. Nothing here guarantees the resulting graph is
    acyclic; see `LineageService`.
    """

    __tablename__ = "fish"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    owner: Mapped[str] = mapped_column(String, ForeignKey("players.address"), index=True)
    tank_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("tanks.id", ondelete="SET NULL"), nullable=True, index=True
    )
    species: Mapped[str] = mapped_column(String, default="Guppy")
    dna: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    sprite_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # Lineage
    parent1_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("fish.id", ondelete="SET NULL"), nullable=True, index=True
    )
    parent2_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("fish.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    player = relationship("Player", back_populates="fish")
    tank = relationship("Tank", back_populates="fish")

    __table_args__ = (Index("idx_fish_parents", "parent1_id", "parent2_id"),)

    @property
    def is_bred(self) -> bool:
        return self.parent1_id is not None and self.parent2_id is not None

    def __repr__(self) -> str:
        return f"<Fish(id={self.id}, owner='{self.owner}')>"
