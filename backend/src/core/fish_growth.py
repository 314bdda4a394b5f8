"""
Fish life-stage thresholds.

    Baby:       0 <= xp < 50
    Juvenile:   50 <= xp < 150
    YoungAdult: 150 <= xp < 350
    Adult:      xp >= 350
"""

from typing import Optional

from .constants import (
    FishState,
    BABY_MAX_XP,
    JUVENILE_MAX_XP,
    YOUNG_ADULT_MAX_XP,
)


def get_fish_state_for_xp(xp: int) -> FishState:
    """Life stage a fish with `xp` experience should be in."""
    if xp < 0:
        raise ValueError(f"xp cannot be negative: {xp}")
    if xp < BABY_MAX_XP:
        return FishState.BABY
    if xp < JUVENILE_MAX_XP:
        return FishState.JUVENILE
    if xp < YOUNG_ADULT_MAX_XP:
        return FishState.YOUNG_ADULT
    return FishState.ADULT


def xp_to_next_state(xp: int) -> Optional[int]:
    """XP still needed to reach the next stage, or None for adults."""
    state = get_fish_state_for_xp(xp)
    thresholds = {
        FishState.BABY: BABY_MAX_XP,
        FishState.JUVENILE: JUVENILE_MAX_XP,
        FishState.YOUNG_ADULT: YOUNG_ADULT_MAX_XP,
    }
    if state not in thresholds:
        return None
    return thresholds[state] - xp
