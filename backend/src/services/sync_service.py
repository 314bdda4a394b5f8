"""
Service for the sync queue.

Tracks every transaction the backend submits to the ledger so an external
sweeper can confirm or retry it. The sweeper pulls work with
`list_pending()`; nothing here runs in the background.
"""

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.constants import SyncEntityType, SyncStatus
from ..core.errors import NotFoundError, ValidationError
from ..core.logging_config import get_logger
from ..core.metrics import metrics
from ..models.sync_queue import SyncQueueItem
from ..schemas.sync import SyncQueueItemRead

logger = get_logger(__name__)

VALID_ENTITY_TYPES = [entity_type.value for entity_type in SyncEntityType]
VALID_STATUSES = [status.value for status in SyncStatus]


def _require_text(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


class SyncService:
    """Service for managing sync queue entries."""

    @staticmethod
    async def enqueue(
        db: AsyncSession,
        tx_hash: str,
        entity_type: str,
        entity_id: str,
    ) -> SyncQueueItemRead:
        """
        Record a submitted transaction as pending.

        Args:
            db: Database session
            tx_hash: Hash returned by the on-chain call
            entity_type: One of player, fish, tank, decoration
            entity_id: Id of the affected entity, as a string

        Returns:
            The created sync queue entry

        Raises:
            ValidationError: On blank input, unknown entity type, or a tx hash
                that is already queued
        """
        tx_hash = _require_text(tx_hash, "Transaction hash")
        entity_type_value = getattr(entity_type, "value", entity_type)
        if entity_type_value not in VALID_ENTITY_TYPES:
            raise ValidationError(
                f"Invalid entity type: {entity_type_value}. "
                f"Must be one of: {', '.join(VALID_ENTITY_TYPES)}"
            )
        entity_id = _require_text(
            str(entity_id) if isinstance(entity_id, int) else entity_id, "Entity ID"
        )

        item = SyncQueueItem(
            tx_hash=tx_hash,
            entity_type=entity_type_value,
            entity_id=entity_id,
            status=SyncStatus.PENDING.value,
            retry_count=0,
        )
        db.add(item)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(
                "Sync queue entry already exists",
                extra={"tx_hash": tx_hash},
            )
            raise ValidationError(
                f"Transaction hash {tx_hash} already exists in sync queue"
            )
        await db.refresh(item)

        metrics.track_sync_transition(SyncStatus.PENDING.value)
        logger.info(
            "Added entry to sync queue",
            extra={
                "id": item.id,
                "tx_hash": tx_hash,
                "entity_type": entity_type_value,
                "entity_id": entity_id,
            },
        )
        return SyncQueueItemRead.model_validate(item)

    @staticmethod
    async def update_status(
        db: AsyncSession, tx_hash: str, status: str
    ) -> SyncQueueItemRead:
        """
        Move a transaction to a new status.

        A transition to `failed` bumps `retry_count` in the same UPDATE, using
        the stored value rather than one read earlier, so concurrent failure
        reports each count once.

        Raises:
            ValidationError: Blank tx hash or unknown status
            NotFoundError: No entry for the tx hash
        """
        tx_hash = _require_text(tx_hash, "Transaction hash")
        status_value = getattr(status, "value", status)
        if status_value not in VALID_STATUSES:
            raise ValidationError(
                f"Invalid status: {status_value}. Must be one of: {', '.join(VALID_STATUSES)}"
            )

        existing = await SyncService._get_row(db, tx_hash)
        if existing is None:
            raise NotFoundError(f"Sync queue entry not found for tx_hash: {tx_hash}")

        values = {"status": status_value}
        if status_value == SyncStatus.FAILED.value:
            values["retry_count"] = SyncQueueItem.retry_count + 1

        await db.execute(
            update(SyncQueueItem)
            .where(SyncQueueItem.tx_hash == tx_hash)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        await db.refresh(existing)

        metrics.track_sync_transition(status_value)
        logger.info(
            "Updated sync queue status",
            extra={
                "tx_hash": tx_hash,
                "status": status_value,
                "retry_count": existing.retry_count,
            },
        )
        return SyncQueueItemRead.model_validate(existing)

    @staticmethod
    async def list_pending(
        db: AsyncSession, limit: Optional[int] = None
    ) -> List[SyncQueueItemRead]:
        """
        Pending entries, oldest first.

        Args:
            db: Database session
            limit: Optional cap on how many entries to return

        Returns:
            Pending entries ordered by creation time; empty when none
        """
        if limit is not None and (not isinstance(limit, int) or limit < 1):
            raise ValidationError("limit must be a positive integer")

        query = (
            select(SyncQueueItem)
            .where(SyncQueueItem.status == SyncStatus.PENDING.value)
            .order_by(SyncQueueItem.created_at.asc(), SyncQueueItem.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return [SyncQueueItemRead.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def find_by_tx_hash(
        db: AsyncSession, tx_hash: str
    ) -> Optional[SyncQueueItemRead]:
        """
        Get a sync queue entry by transaction hash.

        Returns:
            The entry if found, None otherwise
        """
        tx_hash = _require_text(tx_hash, "Transaction hash")
        row = await SyncService._get_row(db, tx_hash)
        return SyncQueueItemRead.model_validate(row) if row is not None else None

    @staticmethod
    async def find_by_entity(
        db: AsyncSession, entity_type: str, entity_id: str
    ) -> List[SyncQueueItemRead]:
        """
        Every entry recorded for an entity, oldest first.

        Returns:
            Matching entries in any status; empty when none
        """
        entity_type_value = getattr(entity_type, "value", entity_type)
        if entity_type_value not in VALID_ENTITY_TYPES:
            raise ValidationError(f"Invalid entity type: {entity_type_value}")
        entity_id = _require_text(
            str(entity_id) if isinstance(entity_id, int) else entity_id, "Entity ID"
        )

        result = await db.execute(
            select(SyncQueueItem)
            .where(
                SyncQueueItem.entity_type == entity_type_value,
                SyncQueueItem.entity_id == entity_id,
            )
            .order_by(SyncQueueItem.created_at.asc(), SyncQueueItem.id.asc())
        )
        return [SyncQueueItemRead.model_validate(row) for row in result.scalars().all()]

    @staticmethod
    async def _get_row(db: AsyncSession, tx_hash: str) -> Optional[SyncQueueItem]:
        result = await db.execute(
            select(SyncQueueItem).where(SyncQueueItem.tx_hash == tx_hash)
        )
        return result.scalar_one_or_none()
