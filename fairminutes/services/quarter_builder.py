"""
Quarter builder for the Fair Minutes allocation engine.

Fills one quarter with a goalkeeper and two waves of outfield players from an
ordered candidate pool.
"""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from ..models import (
    DEFAULT_FORMATION, FormationConfig, FormationError, PlayerSlot,
    Position, QuarterAllocation, Wave,
)


def _pick_goalkeeper(candidates: Sequence[str],
                     pinned_goalkeeper: Optional[str],
                     goalkeeper_pool: Optional[Sequence[str]]) -> str:
    if pinned_goalkeeper and pinned_goalkeeper in candidates:
        return pinned_goalkeeper
    if goalkeeper_pool:
        for player in goalkeeper_pool:
            if player in candidates:
                return player
    return candidates[0]


def _wave_slots(players: Sequence[str], wave: Wave,
                config: FormationConfig) -> List[PlayerSlot]:
    minutes = config.minutes_for_wave(wave)
    return [
        PlayerSlot(player=player, position=position, minutes=minutes, wave=wave)
        for player, position in zip(players, config.outfield_labels())
    ]


def build_quarter(quarter: int,
                  candidates: Sequence[str],
                  config: FormationConfig = DEFAULT_FORMATION,
                  pinned_goalkeeper: Optional[str] = None,
                  goalkeeper_pool: Optional[Sequence[str]] = None,
                  minutes: Optional[Mapping[str, int]] = None) -> QuarterAllocation:
    """
    Build the slot set for a single quarter.

    Args:
        quarter: Quarter id the slots belong to
        candidates: Players available this quarter, lowest cumulative minutes first
        config: Formation shape to satisfy
        pinned_goalkeeper: Player forced into goal, ignored if not a candidate
        goalkeeper_pool: Players eligible to keep goal this rotation, in
            preference order; defaults to every candidate
        minutes: Cumulative minutes before this quarter, used to choose which
            first-wave players repeat in the second wave

    Returns:
        QuarterAllocation with the goalkeeper slot first, then the first wave
        and the second wave

    Raises:
        FormationError: If the pool cannot fill an outfield wave
    """
    if len(set(candidates)) != len(candidates):
        raise FormationError("Candidate pool contains duplicate players")

    needed = config.outfield_count
    if len(candidates) - 1 < needed:
        raise FormationError(
            f"Need at least {needed + 1} players to fill quarter {quarter}, "
            f"got {len(candidates)}"
        )

    goalkeeper = _pick_goalkeeper(candidates, pinned_goalkeeper, goalkeeper_pool)
    outfield = [p for p in candidates if p != goalkeeper]

    first_wave = outfield[:needed]
    second_wave = [p for p in outfield if p not in first_wave][:needed]
    if len(second_wave) < needed:
        # Small squads: first-wave players repeat, least-played first.
        totals = minutes or {}
        repeats = sorted(first_wave, key=lambda p: totals.get(p, 0))
        second_wave.extend(repeats[:needed - len(second_wave)])

    slots = [
        PlayerSlot(
            player=goalkeeper,
            position=Position.GOALKEEPER,
            minutes=config.quarter_duration,
        )
    ]
    slots.extend(_wave_slots(first_wave, Wave.FIRST, config))
    slots.extend(_wave_slots(second_wave, Wave.SECOND, config))
    return QuarterAllocation(quarter=quarter, slots=tuple(slots))
