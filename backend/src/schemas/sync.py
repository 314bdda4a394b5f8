"""
Pydantic models (schemas) for sync queue data.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict

from ..core.constants import SyncEntityType, SyncStatus


class SyncQueueItemRead(BaseModel):
    """
    A tracked on-chain transaction.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    tx_hash: str
    entity_type: SyncEntityType
    entity_id: str
    status: SyncStatus
    retry_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SyncEnqueue(BaseModel):
    """
    Request body for recording a submitted transaction.

    Fields stay plain strings so the service does the validation and callers
    get the same `VALIDATION_ERROR` body as every other rejected input.
    """

    tx_hash: str
    entity_type: str
    entity_id: str


class SyncStatusUpdate(BaseModel):
    """
    Request body for a status transition.
    """

    status: str
