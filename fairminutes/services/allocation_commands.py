"""
Command pattern implementation for allocation edits.

Allocations are immutable, so undo and redo simply restore the allocation a
command replaced. Mutator errors propagate to the caller and leave the
history untouched.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

from ..models import DEFAULT_FORMATION, Allocation, FormationConfig, Wave
from ..utils.constants import DEFAULT_MAX_HISTORY
from .slot_mutators import assign_slot, set_slot_wave, swap_slots, swap_with_substitute


class Command(ABC):
    """Abstract base class for allocation edits."""

    @abstractmethod
    def apply(self, allocation: Allocation, config: FormationConfig) -> Allocation:
        """
        Apply the edit.

        Returns:
            The edited allocation
        """
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Get human-readable description of the command."""
        pass


class AssignSlotCommand(Command):
    """Put a player into a slot."""

    def __init__(self, quarter: int, slot_index: int, player: str,
                 candidates: Optional[Sequence[str]] = None):
        self.quarter = quarter
        self.slot_index = slot_index
        self.player = player
        self.candidates = candidates

    def apply(self, allocation: Allocation, config: FormationConfig) -> Allocation:
        return assign_slot(allocation, self.quarter, self.slot_index, self.player,
                           config, candidates=self.candidates)

    @property
    def description(self) -> str:
        return f"Assign {self.player} to Q{self.quarter} slot {self.slot_index}"


class SwapSlotsCommand(Command):
    """Swap the occupants of two slots in one quarter."""

    def __init__(self, quarter: int, slot_index_a: int, slot_index_b: int):
        self.quarter = quarter
        self.slot_index_a = slot_index_a
        self.slot_index_b = slot_index_b

    def apply(self, allocation: Allocation, config: FormationConfig) -> Allocation:
        return swap_slots(allocation, self.quarter, self.slot_index_a, self.slot_index_b, config)

    @property
    def description(self) -> str:
        return f"Swap Q{self.quarter} slots {self.slot_index_a} and {self.slot_index_b}"


class SwapWithSubstituteCommand(Command):
    """Bring a substitute into a slot."""

    def __init__(self, quarter: int, slot_index: int, substitute: str,
                 candidates: Optional[Sequence[str]] = None):
        self.quarter = quarter
        self.slot_index = slot_index
        self.substitute = substitute
        self.candidates = candidates

    def apply(self, allocation: Allocation, config: FormationConfig) -> Allocation:
        return swap_with_substitute(allocation, self.quarter, self.slot_index,
                                    self.substitute, config, candidates=self.candidates)

    @property
    def description(self) -> str:
        return f"Substitute {self.substitute} into Q{self.quarter} slot {self.slot_index}"


class SetSlotWaveCommand(Command):
    """Move an outfield slot to another wave."""

    def __init__(self, quarter: int, slot_index: int, wave: Union[str, Wave]):
        self.quarter = quarter
        self.slot_index = slot_index
        self.wave = Wave.parse(wave)

    def apply(self, allocation: Allocation, config: FormationConfig) -> Allocation:
        return set_slot_wave(allocation, self.quarter, self.slot_index, self.wave, config)

    @property
    def description(self) -> str:
        return f"Move Q{self.quarter} slot {self.slot_index} to the {self.wave.value} wave"


class AllocationEditor:
    """
    Holds the current allocation of a match-editing session with undo/redo.

    Each history entry keeps the allocation before and after its command, so
    undo and redo never re-run a mutator.
    """

    def __init__(self, allocation: Allocation, config: FormationConfig = DEFAULT_FORMATION,
                 max_history: int = DEFAULT_MAX_HISTORY):
        """
        Initialize the editor.

        Args:
            allocation: Starting allocation
            config: Formation config threaded into every edit
            max_history: Maximum number of commands to keep in history
        """
        self.config = config
        self.max_history = max_history
        self._allocation = allocation
        self._history: List[tuple] = []
        self._current_index = -1

    @property
    def allocation(self) -> Allocation:
        return self._allocation

    def execute_command(self, command: Command) -> Allocation:
        """
        Apply a command and add it to history.

        Returns:
            The new current allocation
        """
        before = self._allocation
        after = command.apply(before, self.config)

        # Drop any redo tail
        self._history = self._history[:self._current_index + 1]
        self._history.append((command, before, after))
        self._current_index += 1

        if len(self._history) > self.max_history:
            self._history.pop(0)
            self._current_index -= 1

        self._allocation = after
        return after

    def undo(self) -> bool:
        """
        Undo the last command.

        Returns:
            True if undo was successful
        """
        if not self.can_undo():
            return False
        _, before, _ = self._history[self._current_index]
        self._allocation = before
        self._current_index -= 1
        return True

    def redo(self) -> bool:
        """
        Redo the next command.

        Returns:
            True if redo was successful
        """
        if not self.can_redo():
            return False
        _, _, after = self._history[self._current_index + 1]
        self._allocation = after
        self._current_index += 1
        return True

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self._current_index >= 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self._current_index < len(self._history) - 1

    def get_command_history(self) -> List[str]:
        """Get history of command descriptions."""
        return [command.description for command, _, _ in self._history]

    def clear_history(self) -> None:
        """Clear command history, keeping the current allocation."""
        self._history.clear()
        self._current_index = -1
