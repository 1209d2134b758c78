"""
Slot mutators for the Fair Minutes allocation engine.

Each operation performs one local edit and returns a new :class:`Allocation`
with summary and warnings recomputed. The input allocation is never changed.
Mutators do not stop a caller from double-booking a player; use
:mod:`allocation_validator` to detect that.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple, Union

from ..models import (
    DEFAULT_FORMATION, Allocation, AllocationValidationError, FormationConfig,
    PlayerSlot, QuarterAllocation, SlotOperationError,
    SlotRangeError, Wave,
)
from .fairness_service import with_fairness


def _locate(allocation: Allocation, quarter: int, *slot_indices: int
            ) -> Tuple[int, QuarterAllocation]:
    index = allocation.quarter_index(quarter)
    if index is None:
        raise SlotRangeError(f"Quarter {quarter} not found")
    quarter_allocation = allocation.quarters[index]
    for slot_index in slot_indices:
        if not isinstance(slot_index, int) or not 0 <= slot_index < len(quarter_allocation.slots):
            raise SlotRangeError(f"Invalid slot index {slot_index} for quarter {quarter}")
    return index, quarter_allocation


def _check_candidate(player: str, candidates: Optional[Sequence[str]]) -> None:
    if not player or not str(player).strip():
        raise AllocationValidationError("Player name cannot be empty")
    if candidates is not None and player not in candidates:
        raise AllocationValidationError(f"Player '{player}' is not in the candidate pool")


def _rebuild(allocation: Allocation, index: int, quarter_allocation: QuarterAllocation,
             config: FormationConfig) -> Allocation:
    quarters = list(allocation.quarters)
    quarters[index] = quarter_allocation
    return with_fairness(Allocation.from_quarters(quarters), config)


def assign_slot(allocation: Allocation, quarter: int, slot_index: int, new_player: str,
                config: FormationConfig = DEFAULT_FORMATION,
                candidates: Optional[Sequence[str]] = None) -> Allocation:
    """
    Put ``new_player`` in a slot, keeping its position, minutes and wave.

    Raises:
        SlotRangeError: If the quarter or slot index is out of range
        AllocationValidationError: If the player is outside ``candidates``
    """
    index, quarter_allocation = _locate(allocation, quarter, slot_index)
    _check_candidate(new_player, candidates)
    slot = quarter_allocation.slots[slot_index]
    updated = quarter_allocation.with_slot(slot_index, slot.with_player(new_player))
    return _rebuild(allocation, index, updated, config)


def swap_slots(allocation: Allocation, quarter: int, slot_index_a: int, slot_index_b: int,
               config: FormationConfig = DEFAULT_FORMATION) -> Allocation:
    """
    Exchange the occupants of two slots in the same quarter.

    Positions, minutes and waves stay with their slots. Swapping a slot with
    itself is a no-op.

    Raises:
        SlotRangeError: If the quarter or either slot index is out of range
    """
    index, quarter_allocation = _locate(allocation, quarter, slot_index_a, slot_index_b)
    slot_a = quarter_allocation.slots[slot_index_a]
    slot_b = quarter_allocation.slots[slot_index_b]
    updated = (
        quarter_allocation
        .with_slot(slot_index_a, slot_a.with_player(slot_b.player))
        .with_slot(slot_index_b, slot_b.with_player(slot_a.player))
    )
    return _rebuild(allocation, index, updated, config)


def _other_slot_of(quarter_allocation: QuarterAllocation, player: str,
                   slot_index: int) -> Optional[int]:
    """Another slot held by ``player``, preferring the one in the same wave."""
    target = quarter_allocation.slots[slot_index]
    others = [
        i for i, slot in enumerate(quarter_allocation.slots)
        if i != slot_index and slot.player == player
    ]
    if not others:
        return None
    for i in others:
        if quarter_allocation.slots[i].wave is target.wave:
            return i
    return others[0]


def swap_with_substitute(allocation: Allocation, quarter: int, slot_index: int,
                         substitute_name: str,
                         config: FormationConfig = DEFAULT_FORMATION,
                         candidates: Optional[Sequence[str]] = None) -> Allocation:
    """
    Bring ``substitute_name`` into a slot.

    If the substitute already holds another slot in the quarter, the two
    players trade slots. Otherwise the substitute takes the slot and the
    displaced player leaves the quarter; their other quarters are untouched.

    Raises:
        SlotRangeError: If the quarter or slot index is out of range
        AllocationValidationError: If the substitute is outside ``candidates``
    """
    index, quarter_allocation = _locate(allocation, quarter, slot_index)
    _check_candidate(substitute_name, candidates)

    slot = quarter_allocation.slots[slot_index]
    if slot.player == substitute_name:
        return _rebuild(allocation, index, quarter_allocation, config)

    updated = quarter_allocation.with_slot(slot_index, slot.with_player(substitute_name))
    other_index = _other_slot_of(quarter_allocation, substitute_name, slot_index)
    if other_index is not None:
        other = quarter_allocation.slots[other_index]
        updated = updated.with_slot(other_index, other.with_player(slot.player))
    return _rebuild(allocation, index, updated, config)


def set_slot_wave(allocation: Allocation, quarter: int, slot_index: int,
                  wave: Union[str, Wave],
                  config: FormationConfig = DEFAULT_FORMATION) -> Allocation:
    """
    Move an outfield slot to another wave, recomputing its minutes.

    Raises:
        SlotRangeError: If the quarter or slot index is out of range
        SlotOperationError: If the slot is the goalkeeper slot
        FormationError: If ``wave`` is not a known wave
    """
    index, quarter_allocation = _locate(allocation, quarter, slot_index)
    slot = quarter_allocation.slots[slot_index]
    if slot.is_goalkeeper:
        raise SlotOperationError("Goalkeeper slots span the whole quarter and have no wave")
    target_wave = Wave.parse(wave)

    moved: PlayerSlot = replace(
        slot, wave=target_wave, minutes=config.minutes_for_wave(target_wave))
    updated = quarter_allocation.with_slot(slot_index, moved)
    return _rebuild(allocation, index, updated, config)
