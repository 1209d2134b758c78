"""
Allocation validation service for checking lineup integrity after edits.

The slot mutators deliberately leave double-booking and formation drift to the
caller. These rules let the caller find such problems without raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..models import DEFAULT_FORMATION, Allocation, FormationConfig, Position, Wave


class ValidationResult:
    """Result of a validation operation with success status and error messages."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[str]] = None):
        self.is_valid = is_valid
        self.errors = errors or []
        if self.errors:
            self.is_valid = False

    def add_error(self, error: str) -> None:
        """Add an error message and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def combine(self, other: 'ValidationResult') -> 'ValidationResult':
        """Combine with another validation result."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors
        )


class ValidationRule(ABC):
    """Abstract base class for allocation validation rules."""

    @abstractmethod
    def validate(self, allocation: Allocation) -> ValidationResult:
        """Perform validation and return result."""
        pass


class QuarterStructureValidator(ValidationRule):
    """Validates quarter count, formation shape and slot minutes."""

    def __init__(self, config: FormationConfig = DEFAULT_FORMATION):
        self.config = config

    def validate(self, allocation: Allocation) -> ValidationResult:
        result = ValidationResult()
        config = self.config

        if len(allocation.quarters) != config.quarter_count:
            result.add_error(
                f"Expected {config.quarter_count} quarters, got {len(allocation.quarters)}"
            )

        for quarter in allocation.quarters:
            label = f"Quarter {quarter.quarter}"
            gk_slots = [s for s in quarter.slots if s.is_goalkeeper]
            if len(gk_slots) != 1:
                result.add_error(f"{label}: Expected 1 GK, got {len(gk_slots)}")
            for slot in gk_slots:
                if slot.minutes != config.quarter_duration:
                    result.add_error(
                        f"{label}: GK {slot.player} has {slot.minutes} minutes, "
                        f"expected {config.quarter_duration}"
                    )

            for wave in Wave:
                wave_slots = quarter.slots_in_wave(wave)
                for position, expected in (
                    (Position.DEFENDER, config.position_counts.DEF),
                    (Position.ATTACKER, config.position_counts.ATT),
                ):
                    found = len([s for s in wave_slots if s.position is position])
                    if found != expected:
                        result.add_error(
                            f"{label}: Expected {expected} {position.value} slots "
                            f"in the {wave.value} wave, got {found}"
                        )
                expected_minutes = config.minutes_for_wave(wave)
                for slot in wave_slots:
                    if slot.minutes != expected_minutes:
                        result.add_error(
                            f"{label}: {slot.player} has {slot.minutes} minutes in the "
                            f"{wave.value} wave, expected {expected_minutes}"
                        )

            waveless = [s for s in quarter.slots if not s.is_goalkeeper and s.wave is None]
            if waveless:
                result.add_error(f"{label}: {len(waveless)} outfield slot(s) have no wave")

        return result


class OverlapValidator(ValidationRule):
    """Validates that no player holds two overlapping slots in a quarter."""

    def validate(self, allocation: Allocation) -> ValidationResult:
        result = ValidationResult()
        for quarter in allocation.quarters:
            slots = quarter.slots
            reported = set()
            for i, first in enumerate(slots):
                for second in slots[i + 1:]:
                    if first.player != second.player or not first.overlaps(second):
                        continue
                    if first.player in reported:
                        continue
                    reported.add(first.player)
                    result.add_error(
                        f"Quarter {quarter.quarter}: {first.player} is assigned to "
                        f"overlapping slots"
                    )
        return result


class SquadMembershipValidator(ValidationRule):
    """Validates that every assigned player belongs to the squad."""

    def __init__(self, squad: Sequence[str]):
        self.squad = list(squad)

    def validate(self, allocation: Allocation) -> ValidationResult:
        result = ValidationResult()
        for player in allocation.players():
            if player not in self.squad:
                result.add_error(f"Player '{player}' is not in the squad")
        return result


class GoalkeeperOutfieldValidator(ValidationRule):
    """Validates that every goalkeeper also gets outfield time."""

    def validate(self, allocation: Allocation) -> ValidationResult:
        result = ValidationResult()
        keepers = []
        for quarter in allocation.quarters:
            keeper = quarter.goalkeeper
            if keeper and keeper not in keepers:
                keepers.append(keeper)

        for keeper in keepers:
            has_outfield = any(
                slot.player == keeper and not slot.is_goalkeeper
                for quarter in allocation.quarters
                for slot in quarter.slots
            )
            if not has_outfield:
                result.add_error(f"Player {keeper} played GK but has no outfield time")
        return result


class SuccessiveSubstituteValidator(ValidationRule):
    """Validates that nobody sits out two quarters in a row."""

    def __init__(self, squad: Sequence[str]):
        self.squad = list(squad)

    def validate(self, allocation: Allocation) -> ValidationResult:
        result = ValidationResult()
        ordered = sorted(allocation.quarters, key=lambda q: q.quarter)
        for player in self.squad:
            run: List[int] = []
            for quarter in ordered:
                if player in quarter.players():
                    run = []
                    continue
                run.append(quarter.quarter)
                if len(run) == 2:
                    result.add_error(
                        f"Player {player} is a substitute for consecutive quarters "
                        f"(Q{run[0]}-Q{run[-1]})"
                    )
        return result


class AllocationValidationService:
    """
    Allocation validation service orchestrating the individual rules.

    Squad-dependent rules only run when a squad is supplied.
    """

    def __init__(self, config: FormationConfig = DEFAULT_FORMATION):
        self.config = config
        self.structure_validator = QuarterStructureValidator(config)
        self.overlap_validator = OverlapValidator()
        self.goalkeeper_validator = GoalkeeperOutfieldValidator()

    def validate(self, allocation: Allocation,
                 squad: Optional[Sequence[str]] = None) -> ValidationResult:
        """
        Perform comprehensive allocation validation.

        Args:
            allocation: Allocation to check
            squad: Selected players; enables membership and substitute checks

        Returns:
            ValidationResult with success status and any error messages
        """
        result = ValidationResult()
        result = result.combine(self.structure_validator.validate(allocation))
        result = result.combine(self.overlap_validator.validate(allocation))

        if self.config.fairness.goalkeeper_requires_outfield_time:
            result = result.combine(self.goalkeeper_validator.validate(allocation))

        if squad is not None:
            result = result.combine(SquadMembershipValidator(squad).validate(allocation))
            result = result.combine(SuccessiveSubstituteValidator(squad).validate(allocation))

        return result
