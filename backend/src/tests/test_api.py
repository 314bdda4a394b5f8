"""
HTTP-level tests: routing, request validation and the mapping of service
errors onto status codes.
"""

import pytest
from httpx import AsyncClient

from backend.src.core.config import settings
from backend.src.core.onchain import FishChainState


class TestStatusEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_metrics(self, client: AsyncClient):
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "aquarium_backend_info" in response.text


class TestPlayerEndpoints:
    @pytest.mark.asyncio
    async def test_register_and_profile(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "STARTER_PACK_ON_REGISTER", True)

        response = await client.post("/players/register", json={"address": "0xalice"})

        assert response.status_code == 200
        body = response.json()
        assert body["created"] is True
        assert body["consistency"] == "consistent"
        assert body["starter_pack"]["consistency"] == "consistent"
        assert body["player"]["fish_count"] == settings.STARTER_FISH_COUNT

        profile = await client.get("/players/0xalice")
        assert profile.status_code == 200
        assert len(profile.json()["tanks"]) == 1
        assert len(profile.json()["fish"]) == settings.STARTER_FISH_COUNT

    @pytest.mark.asyncio
    async def test_register_twice(self, client: AsyncClient, monkeypatch):
        monkeypatch.setattr(settings, "STARTER_PACK_ON_REGISTER", False)
        await client.post("/players/register", json={"address": "0xbob"})

        response = await client.post("/players/register", json={"address": "0xbob"})

        assert response.status_code == 200
        assert response.json()["created"] is False
        assert response.json()["consistency"] == "consistent"

    @pytest.mark.asyncio
    async def test_register_empty_address(self, client: AsyncClient):
        response = await client.post("/players/register", json={"address": ""})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_register_onchain_failure(self, client: AsyncClient, chain):
        chain.fail("register_player")

        response = await client.post("/players/register", json={"address": "0xcarol"})

        assert response.status_code == 502
        assert response.json() == {
            "error_code": "ON_CHAIN_ERROR",
            "message": response.json()["message"],
            "stage": "register_player",
            "consistency": "offchain_only",
        }

    @pytest.mark.asyncio
    async def test_starter_pack_conflict(self, client: AsyncClient, create_player):
        await create_player("0xdave")

        first = await client.post("/players/0xdave/starter-pack")
        second = await client.post("/players/0xdave/starter-pack")

        assert first.status_code == 201
        assert first.json()["tank_id"] == 100
        assert second.status_code == 409
        assert second.json()["error_code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_unknown_profile(self, client: AsyncClient):
        response = await client.get("/players/0xghost")

        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"


class TestTankEndpoints:
    @pytest.mark.asyncio
    async def test_capacity_check(self, client: AsyncClient, create_player, create_tank, create_fish):
        await create_player("0xowner")
        await create_tank(1, "0xowner", capacity=2)
        await create_fish(10, tank_id=1)

        ok = await client.post("/tanks/1/capacity-check", json={"additional_count": 1})
        full = await client.post("/tanks/1/capacity-check", json={"additional_count": 2})

        assert ok.status_code == 204
        assert full.status_code == 409

    @pytest.mark.asyncio
    async def test_tanks_by_owner(self, client: AsyncClient, create_player, create_tank):
        await create_player("0xowner")
        await create_tank(1, "0xowner", capacity=5)

        response = await client.get("/tanks/owner/0xowner")

        assert response.status_code == 200
        assert response.json()[0]["capacity"] == 5
        assert response.json()[0]["fish_count"] == 0


class TestFishEndpoints:
    @pytest.mark.asyncio
    async def test_get_fish(self, client: AsyncClient, chain, create_player, create_fish):
        await create_player("0xowner")
        await create_fish(10)
        chain.fish_states[10] = FishChainState(xp=60, last_fed_at=5, is_ready_to_breed=False)

        response = await client.get("/fish/10")

        assert response.status_code == 200
        assert response.json()["state"] == "Juvenile"
        assert response.json()["xp_to_next_state"] == 90

    @pytest.mark.asyncio
    async def test_get_fish_not_found(self, client: AsyncClient):
        response = await client.get("/fish/10")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_fish_ledger_down(self, client: AsyncClient, chain, create_fish):
        await create_fish(10)
        chain.fail("get_fish")

        response = await client.get("/fish/10")

        assert response.status_code == 502
        assert response.json()["stage"] == "get_fish"

    @pytest.mark.asyncio
    async def test_fish_by_owner(self, client: AsyncClient, create_player, create_fish):
        await create_player("0xowner")
        await create_fish(11)
        await create_fish(10)

        response = await client.get("/fish/owner/0xowner")

        assert response.status_code == 200
        assert [f["id"] for f in response.json()] == [10, 11]

    @pytest.mark.asyncio
    async def test_family_tree(self, client: AsyncClient, create_fish):
        await create_fish(1)
        await create_fish(2, parent1_id=1)

        response = await client.get("/fish/2/family-tree")

        assert response.status_code == 200
        assert response.json()["ancestor_generation_count"] == 1

    @pytest.mark.asyncio
    async def test_family_tree_invalid_id(self, client: AsyncClient):
        response = await client.get("/fish/0/family-tree")

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_family_tree_too_deep(self, client: AsyncClient, create_fish, monkeypatch):
        monkeypatch.setattr(settings, "LINEAGE_MAX_DEPTH", 1)
        await create_fish(1)
        await create_fish(2, parent1_id=1)
        await create_fish(3, parent1_id=2)

        response = await client.get("/fish/3/family-tree")

        assert response.status_code == 500
        assert response.json()["error_code"] == "LINEAGE_TOO_DEEP"


class TestDecorationEndpoints:
    @pytest.mark.asyncio
    async def test_get_decoration(self, client: AsyncClient, create_player, create_decoration):
        await create_player("0xowner")
        await create_decoration(5, kind="Ornament", xp_multiplier=10)

        response = await client.get("/decorations/5")

        assert response.status_code == 200
        assert response.json()["kind"] == "Ornament"
        assert response.json()["xp_multiplier"] == 10

    @pytest.mark.asyncio
    async def test_decorations_by_owner(
        self, client: AsyncClient, create_player, create_decoration
    ):
        await create_player("0xowner")
        await create_decoration(6)
        await create_decoration(5)

        response = await client.get("/decorations/owner/0xowner")

        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [5, 6]

    @pytest.mark.asyncio
    async def test_unknown_owner(self, client: AsyncClient):
        response = await client.get("/decorations/owner/0xnobody")

        assert response.status_code == 404


class TestSyncEndpoints:
    @pytest.mark.asyncio
    async def test_enqueue_and_confirm(self, client: AsyncClient):
        created = await client.post(
            "/sync", json={"tx_hash": "0xabc", "entity_type": "fish", "entity_id": "1"}
        )
        assert created.status_code == 201

        pending = await client.get("/sync/pending")
        assert [item["tx_hash"] for item in pending.json()] == ["0xabc"]

        failed = await client.patch("/sync/0xabc", json={"status": "failed"})
        assert failed.json()["retry_count"] == 1

        confirmed = await client.patch("/sync/0xabc", json={"status": "confirmed"})
        assert confirmed.json()["status"] == "confirmed"
        assert (await client.get("/sync/pending")).json() == []

    @pytest.mark.asyncio
    async def test_duplicate_enqueue(self, client: AsyncClient):
        payload = {"tx_hash": "0xdup", "entity_type": "tank", "entity_id": "3"}
        await client.post("/sync", json=payload)

        response = await client.post("/sync", json=payload)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_tx_hash(self, client: AsyncClient):
        assert (await client.get("/sync/0xnone")).status_code == 404
        assert (
            await client.patch("/sync/0xnone", json={"status": "confirmed"})
        ).status_code == 404
