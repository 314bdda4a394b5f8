from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.src.core.config import settings
from backend.src.core.database import get_db
from backend.src.core.errors import NotFoundError
from backend.src.schemas.sync import SyncEnqueue, SyncQueueItemRead, SyncStatusUpdate
from backend.src.services.sync_service import SyncService

router = APIRouter()


@router.post(
    "",
    response_model=SyncQueueItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Track a submitted transaction",
)
async def enqueue(body: SyncEnqueue, db: AsyncSession = Depends(get_db)) -> SyncQueueItemRead:
    return await SyncService.enqueue(db, body.tx_hash, body.entity_type, body.entity_id)


@router.get(
    "/pending",
    response_model=List[SyncQueueItemRead],
    summary="Pending transactions, oldest first",
)
async def list_pending(
    limit: Optional[int] = Query(default=None, ge=1),
    db: AsyncSession = Depends(get_db),
) -> List[SyncQueueItemRead]:
    return await SyncService.list_pending(db, limit or settings.SYNC_PENDING_BATCH_SIZE)


@router.get("/{tx_hash}", response_model=SyncQueueItemRead, summary="Look up a transaction")
async def get_by_tx_hash(tx_hash: str, db: AsyncSession = Depends(get_db)) -> SyncQueueItemRead:
    item = await SyncService.find_by_tx_hash(db, tx_hash)
    if item is None:
        raise NotFoundError(f"Sync queue entry not found for tx_hash: {tx_hash}")
    return item


@router.patch(
    "/{tx_hash}",
    response_model=SyncQueueItemRead,
    summary="Record a confirmation or failure",
)
async def update_status(
    tx_hash: str, body: SyncStatusUpdate, db: AsyncSession = Depends(get_db)
) -> SyncQueueItemRead:
    return await SyncService.update_status(db, tx_hash, body.status)
