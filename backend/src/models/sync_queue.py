"""
SQLAlchemy model for the sync queue.
"""

from sqlalchemy import Column, Integer, String, DateTime, Index, func
from .base import Base
from ..core.constants import SyncStatus


class SyncQueueItem(Base):
    """
    One row per submitted on-chain transaction.

    Rows start `pending` and are moved to `confirmed` or `failed` by an
    external confirmation process. They are never deleted here.
    """

    __tablename__ = "sync_queue"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tx_hash = Column(String, unique=True, nullable=False, index=True)
    entity_type = Column(String, nullable=False)  # SyncEntityType value
    entity_id = Column(String, nullable=False)
    status = Column(String, nullable=False, default=SyncStatus.PENDING.value)
    retry_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_sync_queue_status_created", "status", "created_at"),)

    def __repr__(self):
        return f"<SyncQueueItem(tx_hash='{self.tx_hash}', status='{self.status}')>"
