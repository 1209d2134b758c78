"""
Allocation models for the Fair Minutes allocation engine.

An :class:`Allocation` is an immutable value: every edit produces a new
instance whose summary is derived from its slots.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .errors import AllocationValidationError, FormationError
from .formation import Position, Wave


@dataclass(frozen=True)
class PlayerSlot:
    """
    A single player assignment within a quarter.

    Attributes:
        player: Name of the player occupying the slot
        position: Position played in this slot
        minutes: Minutes the slot is worth
        wave: Outfield wave covered by the slot (``None`` for goalkeepers)
    """
    player: str
    position: Position
    minutes: int
    wave: Optional[Wave] = None

    @property
    def is_goalkeeper(self) -> bool:
        return self.position is Position.GOALKEEPER

    def overlaps(self, other: PlayerSlot) -> bool:
        """Whether the two slots cover overlapping time in the same quarter."""
        if self.is_goalkeeper or other.is_goalkeeper:
            return True
        return self.wave is other.wave

    def with_player(self, player: str) -> PlayerSlot:
        return replace(self, player=player)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "player": self.player,
            "position": self.position.value,
            "minutes": self.minutes,
        }
        if self.wave is not None:
            data["wave"] = self.wave.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlayerSlot:
        wave = data.get("wave")
        return cls(
            player=str(data["player"]),
            position=Position.parse(data["position"]),
            minutes=int(data["minutes"]),
            wave=Wave.parse(wave) if wave else None,
        )


@dataclass(frozen=True)
class QuarterAllocation:
    """All slots for a single quarter, goalkeeper first."""
    quarter: int
    slots: Tuple[PlayerSlot, ...] = ()

    def __post_init__(self):
        if not isinstance(self.slots, tuple):
            object.__setattr__(self, "slots", tuple(self.slots))

    @property
    def goalkeeper(self) -> Optional[str]:
        for slot in self.slots:
            if slot.is_goalkeeper:
                return slot.player
        return None

    def players(self) -> List[str]:
        """Distinct players in slot order."""
        seen: List[str] = []
        for slot in self.slots:
            if slot.player not in seen:
                seen.append(slot.player)
        return seen

    def slots_in_wave(self, wave: Wave) -> List[PlayerSlot]:
        return [slot for slot in self.slots if slot.wave is wave]

    def minutes_for(self, player: str) -> int:
        return sum(slot.minutes for slot in self.slots if slot.player == player)

    def with_slot(self, index: int, slot: PlayerSlot) -> QuarterAllocation:
        slots = list(self.slots)
        slots[index] = slot
        return replace(self, slots=tuple(slots))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quarter": self.quarter,
            "slots": [slot.to_dict() for slot in self.slots],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> QuarterAllocation:
        return cls(
            quarter=int(data["quarter"]),
            slots=tuple(PlayerSlot.from_dict(s) for s in data.get("slots", [])),
        )


def summarize_minutes(quarters: Iterable[QuarterAllocation]) -> Dict[str, int]:
    """Total minutes per player, keyed in order of first appearance."""
    summary: Dict[str, int] = {}
    for quarter in quarters:
        for slot in quarter.slots:
            summary[slot.player] = summary.get(slot.player, 0) + slot.minutes
    return summary


@dataclass(frozen=True)
class Allocation:
    """
    Complete lineup for a match.

    Attributes:
        quarters: Quarter allocations in match order
        summary: Player name -> total minutes across all quarters, read-only
        warnings: Human-readable fairness advisories

    Allocations compare by value and hash by value, so they can be used as
    dict keys or set members.
    """
    quarters: Tuple[QuarterAllocation, ...] = ()
    summary: Mapping[str, int] = field(default_factory=dict)
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.quarters, tuple):
            object.__setattr__(self, "quarters", tuple(self.quarters))
        if not isinstance(self.warnings, tuple):
            object.__setattr__(self, "warnings", tuple(self.warnings))
        object.__setattr__(self, "summary", MappingProxyType(dict(self.summary)))

    def __hash__(self) -> int:
        return hash((self.quarters, frozenset(self.summary.items()), self.warnings))

    @classmethod
    def from_quarters(cls, quarters: Sequence[QuarterAllocation],
                      warnings: Iterable[str] = ()) -> Allocation:
        """Build an allocation whose summary is derived from the slots."""
        return cls(
            quarters=tuple(quarters),
            summary=summarize_minutes(quarters),
            warnings=tuple(warnings),
        )

    def quarter_index(self, quarter: int) -> Optional[int]:
        """Position of the quarter with the given id, if present."""
        for index, quarter_allocation in enumerate(self.quarters):
            if quarter_allocation.quarter == quarter:
                return index
        return None

    def get_quarter(self, quarter: int) -> Optional[QuarterAllocation]:
        index = self.quarter_index(quarter)
        return self.quarters[index] if index is not None else None

    def players(self) -> List[str]:
        """Players referenced by any slot, in order of first appearance."""
        return list(summarize_minutes(self.quarters).keys())

    def total_minutes(self) -> int:
        return sum(slot.minutes for q in self.quarters for slot in q.slots)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape stored with a match record."""
        return {
            "quarters": [q.to_dict() for q in self.quarters],
            "summary": dict(self.summary),
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Allocation:
        """
        Create from a stored match record.

        The summary is re-derived from the slots when quarters are present.

        Raises:
            AllocationValidationError: If the structure is malformed
        """
        try:
            quarters = tuple(QuarterAllocation.from_dict(q) for q in data.get("quarters", []))
            if quarters:
                summary = summarize_minutes(quarters)
            else:
                summary = {str(k): int(v) for k, v in (data.get("summary") or {}).items()}
            warnings = tuple(str(w) for w in (data.get("warnings") or []))
        except FormationError as e:
            raise AllocationValidationError(str(e)) from e
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise AllocationValidationError(f"Malformed allocation data: {e}") from e
        return cls(quarters=quarters, summary=summary, warnings=warnings)
