"""
SQLAlchemy models for tanks.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Tank(Base):
    """
    Off-chain half of a tank.

    The id is assigned by the ledger at mint time. Capacity lives on-chain
    only, so occupancy limits are enforced by `TankService.check_capacity`
    rather than by a constraint here.
    """

    __tablename__ = "tanks"

    id = Column(Integer, primary_key=True, autoincrement=False)
    owner = Column(
        String, ForeignKey("players.address"), nullable=False, index=True
    )
    name = Column(String, nullable=True)
    sprite_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    player = relationship("Player", back_populates="tanks")
    fish = relationship("Fish", back_populates="tank")

    def __repr__(self):
        return f"<Tank(id={self.id}, owner='{self.owner}')>"
