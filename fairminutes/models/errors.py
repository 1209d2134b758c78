"""Exceptions raised by the Fair Minutes allocation engine."""


class AllocationError(Exception):
    """Base class for all allocation engine errors."""
    pass


class AllocationValidationError(AllocationError, ValueError):
    """Input cannot produce a valid allocation."""
    pass


class SquadValidationError(AllocationValidationError):
    """Squad size or player names are not acceptable."""
    pass


class FormationError(AllocationValidationError):
    """Formation shape cannot be satisfied or is misconfigured."""
    pass


class SlotRangeError(AllocationError, IndexError):
    """Quarter or slot index outside the allocation."""
    pass


class SlotOperationError(AllocationError, ValueError):
    """Operation is not allowed on the addressed slot."""
    pass
