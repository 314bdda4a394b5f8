import os
import yaml
from pathlib import Path
from typing import Dict, Any
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def load_game_config() -> Dict[str, Any]:
    """Load game configuration from config.yml"""
    config_path = Path("/app/backend/config.yml")
    if not config_path.exists():
        # Fallback to relative path for development
        config_path = Path("backend/config.yml")

    if config_path.exists():
        with open(config_path, "r") as f:
            return yaml.safe_load(f) or {}
    return {}


# Load game config from YAML
game_config = load_game_config()

_starter_pack = game_config.get("game", {}).get("starter_pack", {})
_lineage = game_config.get("game", {}).get("lineage", {})
_onchain = game_config.get("onchain", {})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    # Database settings
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", "postgresql+asyncpg://aquarium:aquarium@db:5432/aquarium"
    )
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "").lower() in ("true", "1", "yes")

    # On-chain relayer settings
    ONCHAIN_RPC_URL: str = os.getenv(
        "ONCHAIN_RPC_URL", _onchain.get("rpc_url", "http://relayer:8545")
    )
    ONCHAIN_TIMEOUT_SECONDS: float = float(
        os.getenv("ONCHAIN_TIMEOUT_SECONDS", str(_onchain.get("timeout_seconds", 15.0)))
    )

    # Starter pack settings from config.yml with fallbacks
    STARTER_TANK_CAPACITY: int = int(
        os.getenv("STARTER_TANK_CAPACITY", str(_starter_pack.get("tank_capacity", 10)))
    )
    STARTER_TANK_NAME: str = _starter_pack.get("tank_name", "Starter Tank")
    STARTER_FISH_COUNT: int = int(
        os.getenv("STARTER_FISH_COUNT", str(_starter_pack.get("fish_count", 2)))
    )
    STARTER_FISH_SPECIES: str = _starter_pack.get("fish_species", "Guppy")
    STARTER_PACK_ON_REGISTER: bool = os.getenv(
        "STARTER_PACK_ON_REGISTER", str(_starter_pack.get("on_register", True))
    ).lower() in ("true", "1", "yes")

    # Lineage settings
    LINEAGE_MAX_DEPTH: int = int(
        os.getenv("LINEAGE_MAX_DEPTH", str(_lineage.get("max_depth", 50)))
    )

    # Sync queue settings
    SYNC_PENDING_BATCH_SIZE: int = int(os.getenv("SYNC_PENDING_BATCH_SIZE", "100"))

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    @model_validator(mode="after")
    def validate_starter_pack(self) -> "Settings":
        """Ensure the starter pack fits in the starter tank."""
        if self.STARTER_TANK_CAPACITY < 1 or self.STARTER_FISH_COUNT < 1:
            raise ValueError(
                "STARTER_TANK_CAPACITY and STARTER_FISH_COUNT must both be positive."
            )
        if self.STARTER_FISH_COUNT > self.STARTER_TANK_CAPACITY:
            raise ValueError(
                "STARTER_FISH_COUNT cannot exceed STARTER_TANK_CAPACITY; "
                "the starter tank would be over capacity."
            )
        if self.LINEAGE_MAX_DEPTH < 1:
            raise ValueError("LINEAGE_MAX_DEPTH must be positive.")
        return self


settings = Settings()
