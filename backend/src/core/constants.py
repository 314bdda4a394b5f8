"""
Shared constants and enums used across multiple layers.

This module contains enums and constants that are needed by both:
- Models (database layer)
- Schemas (API/serialization layer)
- Services (business logic layer)

Placing them here avoids circular imports and cross-layer dependencies.
"""

from enum import Enum


class SyncEntityType(str, Enum):
    """Kinds of entity an on-chain transaction can touch."""
    PLAYER = "player"
    FISH = "fish"
    TANK = "tank"
    DECORATION = "decoration"


class SyncStatus(str, Enum):
    """Confirmation lifecycle of a submitted transaction."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class ConsistencyState(str, Enum):
    """Outcome of a write that spans the off-chain store and the ledger."""
    CONSISTENT = "consistent"
    OFFCHAIN_ONLY = "offchain_only"
    PARTIAL = "partial"
    FAILED = "failed"


class DecorationKind(str, Enum):
    """Decoration types a tank can hold."""
    PLANT = "Plant"
    STATUE = "Statue"
    BACKGROUND = "Background"
    ORNAMENT = "Ornament"


class FishState(str, Enum):
    """Fish life stages: Baby -> Juvenile -> YoungAdult -> Adult."""
    BABY = "Baby"
    JUVENILE = "Juvenile"
    YOUNG_ADULT = "YoungAdult"
    ADULT = "Adult"


# XP thresholds per life stage (upper bounds, exclusive)
BABY_MAX_XP = 50
JUVENILE_MAX_XP = 150
YOUNG_ADULT_MAX_XP = 350
