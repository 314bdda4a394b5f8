"""
SQLAlchemy models for players.
"""

from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Player(Base):
    """
    Off-chain player row, keyed by wallet address.

    The counters mirror on-chain values and start at zero; the ledger stays
    authoritative for them.
    """

    __tablename__ = "players"

    address = Column(String, primary_key=True, index=True)

    # Counters (zeroed on registration)
    total_xp = Column(Integer, default=0, nullable=False)
    fish_count = Column(Integer, default=0, nullable=False)
    tournaments_won = Column(Integer, default=0, nullable=False)
    reputation = Column(Integer, default=0, nullable=False)
    offspring_created = Column(Integer, default=0, nullable=False)

    # Profile
    avatar_url = Column(String, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    tanks = relationship("Tank", back_populates="player", order_by="Tank.id")
    fish = relationship("Fish", back_populates="player", order_by="Fish.id")
    decorations = relationship(
        "Decoration", back_populates="player", order_by="Decoration.id"
    )

    def __init__(self, **kwargs):
        defaults = {
            "total_xp": 0,
            "fish_count": 0,
            "tournaments_won": 0,
            "reputation": 0,
            "offspring_created": 0,
        }
        for key, value in defaults.items():
            kwargs.setdefault(key, value)
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<Player(address='{self.address}')>"

    __table_args__ = {"extend_existing": True}
