"""
Services package for the Fair Minutes allocation engine.

This package contains the allocation engine operations and the collaborators
that store rules and allocations.
"""
from ..models.errors import (
    AllocationError, AllocationValidationError, SquadValidationError,
    FormationError, SlotRangeError, SlotOperationError
)
from .quarter_builder import build_quarter
from .allocation_generator import AllocationGenerator, generate, validate_squad
from .fairness_service import (
    FairnessService, FairnessReportExporter, evaluate, evaluate_summary, with_fairness
)
from .slot_mutators import assign_slot, swap_slots, swap_with_substitute, set_slot_wave
from .reporting import quarter_breakdown, quarter_roles, substitutes_for_quarter, goalkeeper_counts
from .allocation_validator import AllocationValidationService, ValidationResult
from .allocation_commands import (
    AllocationEditor, AssignSlotCommand, SwapSlotsCommand,
    SwapWithSubstituteCommand, SetSlotWaveCommand
)
from .persistence_service import PersistenceService
from .rules_service import RulesService

__all__ = [
    "AllocationError", "AllocationValidationError", "SquadValidationError",
    "FormationError", "SlotRangeError", "SlotOperationError",
    "build_quarter", "AllocationGenerator", "generate", "validate_squad",
    "FairnessService", "FairnessReportExporter", "evaluate", "evaluate_summary",
    "with_fairness",
    "assign_slot", "swap_slots", "swap_with_substitute", "set_slot_wave",
    "quarter_breakdown", "quarter_roles", "substitutes_for_quarter", "goalkeeper_counts",
    "AllocationValidationService", "ValidationResult",
    "AllocationEditor", "AssignSlotCommand", "SwapSlotsCommand",
    "SwapWithSubstituteCommand", "SetSlotWaveCommand",
    "PersistenceService", "RulesService"
]
