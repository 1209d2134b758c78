"""
Models package for the Fair Minutes allocation engine.

This package contains the core data models used throughout the application.
"""
from .errors import (
    AllocationError, AllocationValidationError, SquadValidationError,
    FormationError, SlotRangeError, SlotOperationError
)
from .formation import (
    Position, Wave, WaveDurations, PositionCounts, FairnessRules,
    FormationConfig, DEFAULT_FORMATION
)
from .allocation import PlayerSlot, QuarterAllocation, Allocation, summarize_minutes
from .fairness_report import FairnessReport, PlayerMinutesSummary

__all__ = [
    "AllocationError", "AllocationValidationError", "SquadValidationError",
    "FormationError", "SlotRangeError", "SlotOperationError",
    "Position", "Wave", "WaveDurations", "PositionCounts", "FairnessRules",
    "FormationConfig", "DEFAULT_FORMATION",
    "PlayerSlot", "QuarterAllocation", "Allocation", "summarize_minutes",
    "FairnessReport", "PlayerMinutesSummary"
]
