"""Dataclasses representing fairness reports for an allocation."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class PlayerMinutesSummary:
    """Minutes information for a single player."""

    name: str
    minutes: int
    delta_from_mean: float
    fairness: str


@dataclass(frozen=True)
class FairnessReport:
    """Spread statistics for the minutes handed out in an allocation."""

    summary: Dict[str, int] = field(default_factory=dict)
    mean: float = 0.0
    min: int = 0
    max: int = 0
    spread: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def variance(self) -> int:
        """Legacy name for :attr:`spread` (a range, not a statistical variance)."""
        return self.spread

    def to_dict(self) -> dict:
        return {
            "summary": dict(self.summary),
            "mean": self.mean,
            "min": self.min,
            "max": self.max,
            "spread": self.spread,
            "warnings": list(self.warnings),
        }
