"""
Tests for PlayerService.

Covers idempotent registration, the starter pack orchestration and how far
each of them got when the ledger fails part way.
"""

import pytest
from sqlalchemy import func, select

from backend.src.core.config import settings
from backend.src.core.constants import ConsistencyState, SyncEntityType, SyncStatus
from backend.src.core.errors import ConflictError, NotFoundError, OnChainError, ValidationError
from backend.src.models.fish import Fish
from backend.src.models.player import Player
from backend.src.models.tank import Tank
from backend.src.services.player_service import PlayerService
from backend.src.services.sync_service import SyncService


async def _count(session, column, *criteria) -> int:
    result = await session.execute(select(func.count(column)).where(*criteria))
    return result.scalar_one()


async def _fish_count(session, address: str) -> int:
    player = await PlayerService.get_player_row(session, address)
    await session.refresh(player)
    return player.fish_count


class TestRegisterPlayer:
    """Tests for PlayerService.register_player()"""

    @pytest.mark.asyncio
    async def test_register_new_player(self, session, chain):
        result = await PlayerService.register_player(
            session, chain, "0xalice", with_starter_pack=False
        )

        assert result.created is True
        assert result.consistency == ConsistencyState.CONSISTENT
        assert result.player.address == "0xalice"
        assert result.player.total_xp == 0
        assert result.player.fish_count == 0
        assert result.player.reputation == 0
        assert chain.calls_to("register_player") == [("0xalice",)]

        item = await SyncService.find_by_tx_hash(session, result.tx_hash)
        assert item.entity_type == SyncEntityType.PLAYER
        assert item.entity_id == "0xalice"
        assert item.status == SyncStatus.PENDING

    @pytest.mark.asyncio
    async def test_register_is_idempotent(self, session, chain):
        first = await PlayerService.register_player(
            session, chain, "0xalice", with_starter_pack=False
        )
        second = await PlayerService.register_player(
            session, chain, "0xalice", with_starter_pack=False
        )

        assert second.created is False
        assert second.tx_hash is None
        assert second.consistency == ConsistencyState.CONSISTENT
        assert second.player.address == first.player.address
        assert len(chain.calls_to("register_player")) == 1
        assert await _count(session, Player.address) == 1

    @pytest.mark.asyncio
    async def test_register_existing_player_skips_starter_pack(
        self, session, chain, create_player
    ):
        await create_player("0xbob", total_xp=120)

        result = await PlayerService.register_player(
            session, chain, "0xbob", with_starter_pack=True
        )

        assert result.created is False
        assert result.player.total_xp == 120
        assert result.consistency == ConsistencyState.OFFCHAIN_ONLY
        assert result.starter_pack is None
        assert chain.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", ["", "   ", None])
    async def test_register_blank_address(self, session, chain, address):
        with pytest.raises(ValidationError):
            await PlayerService.register_player(session, chain, address)

        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_onchain_failure_keeps_offchain_row(self, session, chain):
        chain.fail("register_player")

        with pytest.raises(OnChainError) as exc_info:
            await PlayerService.register_player(
                session, chain, "0xcarol", with_starter_pack=False
            )

        error = exc_info.value
        assert error.consistency == ConsistencyState.OFFCHAIN_ONLY
        assert error.stage == "register_player"
        assert error.partial.address == "0xcarol"
        assert await PlayerService.get_player_row(session, "0xcarol") is not None
        assert await SyncService.list_pending(session) == []

    @pytest.mark.asyncio
    async def test_retry_after_onchain_failure_returns_existing(self, session, chain):
        chain.fail("register_player")
        with pytest.raises(OnChainError):
            await PlayerService.register_player(
                session, chain, "0xcarol", with_starter_pack=False
            )

        result = await PlayerService.register_player(
            session, chain, "0xcarol", with_starter_pack=False
        )

        assert result.created is False
        assert result.consistency == ConsistencyState.OFFCHAIN_ONLY
        assert result.tx_hash is None
        assert len(chain.calls_to("register_player")) == 1

    @pytest.mark.asyncio
    async def test_register_with_inline_starter_pack(self, session, chain):
        result = await PlayerService.register_player(
            session, chain, "0xdave", with_starter_pack=True
        )

        assert result.starter_pack is not None
        assert result.starter_pack.consistency == ConsistencyState.CONSISTENT
        assert len(result.starter_pack.fish_ids) == settings.STARTER_FISH_COUNT
        assert result.player.fish_count == settings.STARTER_FISH_COUNT
        assert result.starter_pack_error is None

    @pytest.mark.asyncio
    async def test_inline_starter_pack_failure_keeps_registration(self, session, chain):
        chain.fail("mint_tank")

        result = await PlayerService.register_player(
            session, chain, "0xerin", with_starter_pack=True
        )

        assert result.created is True
        assert result.consistency == ConsistencyState.PARTIAL
        assert result.starter_pack_error == "ON_CHAIN_ERROR"
        assert result.starter_pack is None
        assert await PlayerService.get_player_row(session, "0xerin") is not None

    @pytest.mark.asyncio
    async def test_inline_starter_pack_partial_mint_is_partial(self, session, chain):
        chain.fail("mint_fish", after=1)

        result = await PlayerService.register_player(
            session, chain, "0xerin", with_starter_pack=True
        )

        assert result.consistency == ConsistencyState.PARTIAL
        assert result.starter_pack.consistency == ConsistencyState.PARTIAL
        assert len(result.starter_pack.fish_ids) == 1
        assert result.player.fish_count == 1

    @pytest.mark.asyncio
    async def test_queued_hash_conflict_after_registration(self, session, chain):
        queued = chain.peek_tx_hash()
        await SyncService.enqueue(session, queued, SyncEntityType.FISH, "7")

        with pytest.raises(ConflictError):
            await PlayerService.register_player(
                session, chain, "0xgrace", with_starter_pack=False
            )

        assert await PlayerService.get_player_row(session, "0xgrace") is not None
        assert chain.calls_to("register_player") == [("0xgrace",)]
        item = await SyncService.find_by_tx_hash(session, queued)
        assert item.entity_type == SyncEntityType.FISH

    @pytest.mark.asyncio
    async def test_inline_starter_pack_defaults_to_setting(self, session, chain, monkeypatch):
        monkeypatch.setattr(settings, "STARTER_PACK_ON_REGISTER", False)

        result = await PlayerService.register_player(session, chain, "0xfrank")

        assert result.starter_pack is None
        assert chain.calls_to("mint_tank") == []


class TestMintStarterPack:
    """Tests for PlayerService.mint_starter_pack()"""

    @pytest.mark.asyncio
    async def test_starter_pack_success(self, session, chain, create_player):
        await create_player("0xalice")

        pack = await PlayerService.mint_starter_pack(session, chain, "0xalice")

        assert pack.consistency == ConsistencyState.CONSISTENT
        assert pack.is_complete
        assert pack.tank_id == 100
        assert pack.fish_ids == [1000, 1001]
        assert len(pack.tx_hashes) == 3
        assert chain.calls_to("mint_tank") == [("0xalice", settings.STARTER_TANK_CAPACITY)]

        tank = await session.get(Tank, 100)
        assert tank.owner == "0xalice"
        assert tank.name == settings.STARTER_TANK_NAME

        fish = (await session.execute(select(Fish).order_by(Fish.id))).scalars().all()
        assert [f.id for f in fish] == [1000, 1001]
        assert all(f.tank_id == 100 for f in fish)
        assert all(f.species == settings.STARTER_FISH_SPECIES for f in fish)
        assert all(f.dna.startswith("0x") and len(f.dna) == 66 for f in fish)
        assert await _fish_count(session, "0xalice") == 2

        pending = await SyncService.list_pending(session)
        assert [(item.entity_type, item.entity_id) for item in pending] == [
            (SyncEntityType.TANK, "100"),
            (SyncEntityType.FISH, "1000"),
            (SyncEntityType.FISH, "1001"),
        ]

    @pytest.mark.asyncio
    async def test_fish_count_setting(self, session, chain, create_player, monkeypatch):
        monkeypatch.setattr(settings, "STARTER_FISH_COUNT", 3)
        await create_player("0xalice")

        pack = await PlayerService.mint_starter_pack(session, chain, "0xalice")

        assert len(pack.fish_ids) == 3
        assert await _fish_count(session, "0xalice") == 3

    @pytest.mark.asyncio
    async def test_second_starter_pack_conflict(self, session, chain, create_player):
        await create_player("0xalice")
        await PlayerService.mint_starter_pack(session, chain, "0xalice")

        with pytest.raises(ConflictError):
            await PlayerService.mint_starter_pack(session, chain, "0xalice")

        assert len(chain.calls_to("mint_tank")) == 1
        assert await _count(session, Tank.id) == 1

    @pytest.mark.asyncio
    async def test_unknown_player(self, session, chain):
        with pytest.raises(NotFoundError):
            await PlayerService.mint_starter_pack(session, chain, "0xghost")

        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_tank_mint_failure_writes_nothing(self, session, chain, create_player):
        await create_player("0xalice")
        chain.fail("mint_tank")

        with pytest.raises(OnChainError) as exc_info:
            await PlayerService.mint_starter_pack(session, chain, "0xalice")

        assert exc_info.value.consistency == ConsistencyState.FAILED
        assert exc_info.value.stage == "mint_tank"
        assert await _count(session, Tank.id) == 0
        assert await _count(session, Fish.id) == 0
        assert chain.calls_to("mint_fish") == []

    @pytest.mark.asyncio
    async def test_fish_mint_failure_is_partial(self, session, chain, create_player):
        await create_player("0xalice")
        chain.fail("mint_fish", after=1)

        with pytest.raises(OnChainError) as exc_info:
            await PlayerService.mint_starter_pack(session, chain, "0xalice")

        error = exc_info.value
        assert error.consistency == ConsistencyState.PARTIAL
        assert error.stage == "mint_fish"
        assert error.partial.tank_id == 100
        assert error.partial.fish_ids == [1000]
        assert error.partial.consistency == ConsistencyState.PARTIAL

        # Counter agrees with the fish rows actually written
        assert await _count(session, Fish.id, Fish.owner == "0xalice") == 1
        assert await _fish_count(session, "0xalice") == 1
        assert await _count(session, Tank.id) == 1

    @pytest.mark.asyncio
    async def test_capacity_read_failure_is_partial(self, session, chain, create_player):
        await create_player("0xalice")
        chain.fail("get_tank_capacity")

        with pytest.raises(OnChainError) as exc_info:
            await PlayerService.mint_starter_pack(session, chain, "0xalice")

        assert exc_info.value.consistency == ConsistencyState.PARTIAL
        assert exc_info.value.partial.fish_ids == []
        assert chain.calls_to("mint_fish") == []


class TestPlayerProfile:
    """Tests for PlayerService.get_player_profile()"""

    @pytest.mark.asyncio
    async def test_profile_includes_tanks_and_fish(self, session, chain, create_player):
        await create_player("0xalice")
        await PlayerService.mint_starter_pack(session, chain, "0xalice")

        profile = await PlayerService.get_player_profile(session, "0xalice")

        assert profile.address == "0xalice"
        assert [tank.id for tank in profile.tanks] == [100]
        assert [fish.id for fish in profile.fish] == [1000, 1001]
        assert profile.fish_count == 2

    @pytest.mark.asyncio
    async def test_profile_unknown_player(self, session):
        with pytest.raises(NotFoundError):
            await PlayerService.get_player_profile(session, "0xghost")
