"""
SQLAlchemy model for decorations.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship
from .base import Base


class Decoration(Base):
    """
    Off-chain half of a decoration.

    The id and kind are assigned at mint time; the XP multiplier lives
    on-chain only. `is_active` is whether the owner currently displays it.
    """

    __tablename__ = "decorations"

    id = Column(Integer, primary_key=True, autoincrement=False)
    owner = Column(
        String, ForeignKey("players.address"), nullable=False, index=True
    )
    kind = Column(String, nullable=False)  # DecorationKind value
    is_active = Column(Boolean, nullable=False, default=False)
    image_url = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    player = relationship("Player", back_populates="decorations")

    def __repr__(self):
        return f"<Decoration(id={self.id}, owner='{self.owner}', kind='{self.kind}')>"
