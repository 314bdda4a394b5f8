"""
Service for player registration and the starter pack.

Both orchestrations write to the off-chain store and the ledger in sequence,
without a shared transaction. A failed on-chain call is reported through
`OnChainError.consistency` instead of being rolled back: rows other requests
may already be reading are never deleted here. Every submitted transaction
is recorded in the sync queue so the confirmation sweeper can reconcile.

Known races (not closed here): two concurrent starter pack mints for the
same address can both pass the "already has a tank" check, and the capacity
check is not held across the fish mints.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.config import settings
from ..core.constants import ConsistencyState, SyncEntityType
from ..core.errors import (
    ConflictError,
    NotFoundError,
    OnChainError,
    ServiceError,
    ValidationError,
)
from ..core.logging_config import get_logger
from ..core.metrics import metrics
from ..core.onchain import OnChainClient
from ..models.fish import Fish
from ..models.player import Player
from ..models.tank import Tank
from ..schemas.player import PlayerProfile, PlayerRead
from ..schemas.service_results import RegistrationResult, StarterPackResult
from .sync_service import SyncService
from .tank_service import TankService

logger = get_logger(__name__)


def _validate_address(address: Optional[str]) -> str:
    if not isinstance(address, str) or not address.strip():
        raise ValidationError("Address is required")
    return address.strip()


class PlayerService:
    """Service for managing player operations."""

    @staticmethod
    async def register_player(
        db: AsyncSession,
        chain: OnChainClient,
        address: str,
        with_starter_pack: Optional[bool] = None,
    ) -> RegistrationResult:
        """
        Register a player, or return the existing one.

        A known address returns its row untouched and never calls the ledger
        again; its consistency is OFFCHAIN_ONLY when the sync queue holds no
        registration for it. A new address gets a zeroed off-chain row and then the on-chain
        registration; the response does not wait for confirmation.

        Args:
            db: Database session
            chain: On-chain client
            address: Player's wallet address
            with_starter_pack: Mint the starter pack inline for new players.
                Defaults to STARTER_PACK_ON_REGISTER.

        Returns:
            RegistrationResult with the player snapshot

        Raises:
            ValidationError: Blank address
            OnChainError: On-chain registration failed; the off-chain row is
                kept (consistency OFFCHAIN_ONLY)
            ConflictError: The registration was accepted on-chain but its
                transaction hash is already queued
        """
        address = _validate_address(address)
        if with_starter_pack is None:
            with_starter_pack = settings.STARTER_PACK_ON_REGISTER

        existing = await PlayerService.get_player_row(db, address)
        if existing is not None:
            player_read = PlayerRead.model_validate(existing)
            registrations = await SyncService.find_by_entity(
                db, SyncEntityType.PLAYER, address
            )
            consistency = (
                ConsistencyState.CONSISTENT
                if registrations
                else ConsistencyState.OFFCHAIN_ONLY
            )
            logger.debug(
                "Player already registered",
                extra={"address": address, "consistency": consistency.value},
            )
            return RegistrationResult.existing(player_read, consistency)

        player = Player(address=address)
        db.add(player)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.error(
                "Failed to create player off-chain",
                extra={"address": address, "error": str(e)},
            )
            raise
        await db.refresh(player)
        metrics.track_player_registered()

        player_read = PlayerRead.model_validate(player)

        try:
            tx_hash = await chain.register_player(address)
        except Exception as e:
            metrics.track_onchain_failure("register_player")
            logger.error(
                "On-chain registration failed, player exists off-chain only",
                extra={"address": address, "error": str(e)},
            )
            raise OnChainError(
                f"Failed to register player on-chain: {e}",
                stage="register_player",
                consistency=ConsistencyState.OFFCHAIN_ONLY,
                partial=player_read,
            ) from e

        await PlayerService._track_transaction(
            db, tx_hash, SyncEntityType.PLAYER, address
        )

        logger.info(
            "Player registered",
            extra={"address": address, "tx_hash": tx_hash},
        )
        result = RegistrationResult(player=player_read, created=True, tx_hash=tx_hash)

        if with_starter_pack:
            try:
                result.starter_pack = await PlayerService.mint_starter_pack(
                    db, chain, address
                )
            except ServiceError as e:
                logger.warning(
                    "Inline starter pack failed, registration kept",
                    extra={"address": address, "error_code": e.error_code, "error": e.message},
                )
                result.starter_pack_error = e.error_code
                result.consistency = ConsistencyState.PARTIAL
                if isinstance(e, OnChainError) and e.partial is not None:
                    result.starter_pack = e.partial
            refreshed = await PlayerService.get_player_row(db, address)
            await db.refresh(refreshed)
            result.player = PlayerRead.model_validate(refreshed)

        return result

    @staticmethod
    async def mint_starter_pack(
        db: AsyncSession, chain: OnChainClient, address: str
    ) -> StarterPackResult:
        """
        Grant the one-time starter pack: one tank plus STARTER_FISH_COUNT fish.

        Steps run strictly in order; each on-chain mint is awaited before the
        row that carries its id is inserted.

        Args:
            db: Database session
            chain: On-chain client
            address: Player's wallet address

        Returns:
            StarterPackResult with the new tank id, fish ids and tx hashes

        Raises:
            ValidationError: Blank address
            NotFoundError: Player is not registered
            ConflictError: Player already owns a tank, or a minted transaction
                hash is already queued
            OnChainError: Tank mint failed (FAILED, nothing written) or a later
                on-chain step failed (PARTIAL, `partial` holds what was minted)
        """
        address = _validate_address(address)

        player = await PlayerService.get_player_row(db, address)
        if player is None:
            raise NotFoundError(f"Player with address {address} not found")

        if await TankService.owner_has_tank(db, address):
            logger.warning(
                "Starter pack already granted",
                extra={"address": address},
            )
            raise ConflictError(f"Player {address} already has a starter pack")

        try:
            tank_receipt = await chain.mint_tank(address, settings.STARTER_TANK_CAPACITY)
        except Exception as e:
            metrics.track_onchain_failure("mint_tank")
            metrics.track_starter_pack(ConsistencyState.FAILED.value)
            logger.error(
                "Starter tank mint failed",
                extra={"address": address, "error": str(e)},
            )
            raise OnChainError(
                f"Failed to mint starter tank on-chain: {e}",
                stage="mint_tank",
                consistency=ConsistencyState.FAILED,
            ) from e

        db.add(Tank(id=tank_receipt.id, owner=address, name=settings.STARTER_TANK_NAME))
        await db.commit()

        pack = StarterPackResult(
            tank_id=tank_receipt.id,
            tx_hashes=[tank_receipt.tx_hash],
            consistency=ConsistencyState.PARTIAL,
        )
        await PlayerService._track_transaction(
            db, tank_receipt.tx_hash, SyncEntityType.TANK, str(tank_receipt.id)
        )

        try:
            await TankService.check_capacity(
                db, chain, tank_receipt.id, settings.STARTER_FISH_COUNT
            )
            for _ in range(settings.STARTER_FISH_COUNT):
                await PlayerService._mint_starter_fish(db, chain, address, pack)
        except OnChainError as e:
            e.consistency = ConsistencyState.PARTIAL
            e.partial = pack
            metrics.track_starter_pack(ConsistencyState.PARTIAL.value)
            logger.error(
                "Starter pack minted partially",
                extra={
                    "address": address,
                    "tank_id": pack.tank_id,
                    "fish_ids": pack.fish_ids,
                    "stage": e.stage,
                },
            )
            raise

        pack.consistency = ConsistencyState.CONSISTENT
        metrics.track_starter_pack(pack.consistency.value)
        logger.info(
            "Starter pack minted",
            extra={
                "address": address,
                "tank_id": pack.tank_id,
                "fish_ids": pack.fish_ids,
            },
        )
        return pack

    @staticmethod
    async def _mint_starter_fish(
        db: AsyncSession,
        chain: OnChainClient,
        address: str,
        pack: StarterPackResult,
    ) -> None:
        try:
            dna = chain.generate_random_dna()
            fish_receipt = await chain.mint_fish(address, dna)
        except Exception as e:
            metrics.track_onchain_failure("mint_fish")
            raise OnChainError(
                f"Failed to mint starter fish on-chain: {e}",
                stage="mint_fish",
            ) from e

        db.add(
            Fish(
                id=fish_receipt.id,
                owner=address,
                tank_id=pack.tank_id,
                species=settings.STARTER_FISH_SPECIES,
                dna=dna,
            )
        )
        # Counter moves with the row so an early stop leaves them in agreement
        await db.execute(
            update(Player)
            .where(Player.address == address)
            .values(fish_count=Player.fish_count + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

        pack.fish_ids.append(fish_receipt.id)
        pack.tx_hashes.append(fish_receipt.tx_hash)
        await PlayerService._track_transaction(
            db, fish_receipt.tx_hash, SyncEntityType.FISH, str(fish_receipt.id)
        )

    @staticmethod
    async def _track_transaction(
        db: AsyncSession, tx_hash: str, entity_type: SyncEntityType, entity_id: str
    ) -> None:
        """
        Queue a transaction the ledger already accepted.

        Raises:
            ConflictError: The hash is already queued for another entity
        """
        try:
            await SyncService.enqueue(db, tx_hash, entity_type, entity_id)
        except ValidationError as e:
            logger.error(
                "Submitted transaction could not be queued",
                extra={
                    "tx_hash": tx_hash,
                    "entity_type": entity_type.value,
                    "entity_id": entity_id,
                    "error": e.message,
                },
            )
            raise ConflictError(
                f"Transaction {tx_hash} for {entity_type.value} {entity_id} "
                f"could not be queued: {e.message}"
            ) from e

    @staticmethod
    async def get_player_profile(db: AsyncSession, address: str) -> PlayerProfile:
        """
        Get a player together with their tanks and fish.

        Raises:
            ValidationError: Blank address
            NotFoundError: Player is not registered
        """
        address = _validate_address(address)
        result = await db.execute(
            select(Player)
            .where(Player.address == address)
            .options(selectinload(Player.tanks), selectinload(Player.fish))
            .execution_options(populate_existing=True)
        )
        player = result.scalar_one_or_none()
        if player is None:
            raise NotFoundError(f"Player with address {address} not found")
        return PlayerProfile.model_validate(player)

    @staticmethod
    async def get_player_row(db: AsyncSession, address: str) -> Optional[Player]:
        """
        Get player by address.

        Returns:
            Player if found, None otherwise
        """
        result = await db.execute(select(Player).where(Player.address == address))
        return result.scalar_one_or_none()
