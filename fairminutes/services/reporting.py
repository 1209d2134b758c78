"""Per-player and per-quarter reporting helpers for allocations."""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..models import DEFAULT_FORMATION, Allocation, AllocationValidationError, FormationConfig
from ..utils.constants import SUB_LABEL


def quarter_breakdown(allocation: Allocation, player: str,
                      squad: Optional[Sequence[str]] = None,
                      config: FormationConfig = DEFAULT_FORMATION) -> List[int]:
    """
    Minutes played by ``player`` in each quarter.

    Args:
        allocation: Allocation to report on
        player: Player name
        squad: Optional squad the player must belong to
        config: Supplies the number of quarters

    Returns:
        One entry per quarter, zero where the player has no slot

    Raises:
        AllocationValidationError: If ``squad`` is given and excludes the player
    """
    if squad is not None and player not in squad:
        raise AllocationValidationError(f"Player '{player}' is not in the squad")

    breakdown = []
    for quarter in range(1, config.quarter_count + 1):
        quarter_allocation = allocation.get_quarter(quarter)
        breakdown.append(quarter_allocation.minutes_for(player) if quarter_allocation else 0)
    return breakdown


def quarter_roles(allocation: Allocation, player: str,
                  config: FormationConfig = DEFAULT_FORMATION) -> List[str]:
    """Per-quarter label: ``"GK"``, outfield minutes as text, or ``"sub"``."""
    roles = []
    for quarter in range(1, config.quarter_count + 1):
        quarter_allocation = allocation.get_quarter(quarter)
        if quarter_allocation is None or player not in quarter_allocation.players():
            roles.append(SUB_LABEL)
        elif quarter_allocation.goalkeeper == player:
            roles.append("GK")
        else:
            roles.append(str(quarter_allocation.minutes_for(player)))
    return roles


def substitutes_for_quarter(allocation: Allocation, quarter: int,
                            squad: Sequence[str]) -> List[str]:
    """Squad members without a slot in ``quarter``, in squad order."""
    quarter_allocation = allocation.get_quarter(quarter)
    if quarter_allocation is None:
        return list(squad)
    playing = set(quarter_allocation.players())
    return [p for p in squad if p not in playing]


def goalkeeper_counts(allocation: Allocation) -> Dict[str, int]:
    """Number of quarters each player spends in goal."""
    counter = Counter(q.goalkeeper for q in allocation.quarters if q.goalkeeper)
    return dict(counter)
