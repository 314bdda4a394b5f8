"""
On-chain ledger client.

`OnChainClient` is the interface the reconciliation services depend on.
`HttpOnChainClient` implements it against the JSON relayer that fronts the
game contracts. Every call may fail (network, timeout, contract revert); the
services wrap any such failure as `OnChainError`, so implementations simply
let their exceptions escape.
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .config import settings
from .logging_config import get_logger

logger = get_logger(__name__)

DNA_BYTES = 32


@dataclass(frozen=True)
class MintReceipt:
    """Id assigned by the ledger and the hash of the minting transaction."""
    id: int
    tx_hash: str


@dataclass(frozen=True)
class FishChainState:
    """Fish fields only the ledger holds."""
    xp: int
    last_fed_at: int
    is_ready_to_breed: bool


@dataclass(frozen=True)
class DecorationChainState:
    """Decoration fields only the ledger holds."""
    xp_multiplier: int


class OnChainClient(ABC):
    """Operations the backend needs from the ledger."""

    @abstractmethod
    async def register_player(self, address: str) -> str:
        """Register a player; returns the transaction hash."""

    @abstractmethod
    async def mint_tank(self, owner: str, capacity: int) -> MintReceipt:
        """Mint a tank for `owner` with the given fish capacity."""

    @abstractmethod
    async def mint_fish(self, owner: str, dna: str) -> MintReceipt:
        """Mint a fish for `owner` carrying `dna`."""

    @abstractmethod
    async def get_tank_capacity(self, tank_id: int) -> int:
        """Read a tank's on-chain capacity."""

    @abstractmethod
    async def get_fish(self, fish_id: int) -> FishChainState:
        """Read a fish's XP, feeding time and breed readiness."""

    @abstractmethod
    async def get_decoration(self, decoration_id: int) -> DecorationChainState:
        """Read a decoration's XP multiplier."""

    def generate_random_dna(self) -> str:
        """Fresh random genetic payload as a 0x-prefixed hex string."""
        return "0x" + secrets.token_hex(DNA_BYTES)


class HttpOnChainClient(OnChainClient):
    """
    Relayer-backed client.

    The relayer signs and submits transactions on the backend's behalf and
    answers reads from the indexed contract state. Timeouts come from
    `ONCHAIN_TIMEOUT_SECONDS`.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.ONCHAIN_RPC_URL,
            timeout=timeout if timeout is not None else settings.ONCHAIN_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post(path, json=payload)
        response.raise_for_status()
        return response.json()

    async def _get(self, path: str) -> Dict[str, Any]:
        response = await self._client.get(path)
        response.raise_for_status()
        return response.json()

    async def register_player(self, address: str) -> str:
        data = await self._post("/players/register", {"address": address})
        return data["tx_hash"]

    async def mint_tank(self, owner: str, capacity: int) -> MintReceipt:
        data = await self._post("/tanks/mint", {"owner": owner, "capacity": capacity})
        return MintReceipt(id=int(data["tank_id"]), tx_hash=data["tx_hash"])

    async def mint_fish(self, owner: str, dna: str) -> MintReceipt:
        data = await self._post("/fish/mint", {"owner": owner, "dna": dna})
        return MintReceipt(id=int(data["fish_id"]), tx_hash=data["tx_hash"])

    async def get_tank_capacity(self, tank_id: int) -> int:
        data = await self._get(f"/tanks/{tank_id}")
        return int(data["capacity"])

    async def get_fish(self, fish_id: int) -> FishChainState:
        data = await self._get(f"/fish/{fish_id}")
        return FishChainState(
            xp=int(data["xp"]),
            last_fed_at=int(data.get("last_fed_at") or 0),
            is_ready_to_breed=bool(data.get("is_ready_to_breed", False)),
        )

    async def get_decoration(self, decoration_id: int) -> DecorationChainState:
        data = await self._get(f"/decorations/{decoration_id}")
        return DecorationChainState(xp_multiplier=int(data["xp_multiplier"]))

    async def aclose(self) -> None:
        await self._client.aclose()


_onchain_client: Optional[OnChainClient] = None


def get_onchain_client() -> OnChainClient:
    """
    Dependency to get the process-wide on-chain client.
    """
    global _onchain_client
    if _onchain_client is None:
        _onchain_client = HttpOnChainClient()
        logger.info(
            "On-chain client created",
            extra={"rpc_url": settings.ONCHAIN_RPC_URL},
        )
    return _onchain_client


async def close_onchain_client() -> None:
    global _onchain_client
    if isinstance(_onchain_client, HttpOnChainClient):
        await _onchain_client.aclose()
    _onchain_client = None
