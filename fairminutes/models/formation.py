"""Formation and match-structure models for the Fair Minutes allocation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import FormationError
from ..utils.constants import (
    DEFAULT_ATT_COUNT, DEFAULT_DEF_COUNT, DEFAULT_FIRST_WAVE_MIN,
    DEFAULT_GK_COUNT, DEFAULT_GK_REQUIRES_OUTFIELD, DEFAULT_MAX_SPREAD_MIN,
    DEFAULT_QUARTER_COUNT, DEFAULT_QUARTER_DURATION_MIN, DEFAULT_SECOND_WAVE_MIN,
)


class Position(Enum):
    """Player positions in a small-sided formation."""
    GOALKEEPER = "GK"
    DEFENDER = "DEF"
    ATTACKER = "ATT"

    @classmethod
    def parse(cls, value: Union[str, Position]) -> Position:
        """Accept either an enum member or its short code."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise FormationError(f"Unknown position: {value!r}") from None


class Wave(Enum):
    """Non-overlapping halves of a quarter used by outfield slots."""
    FIRST = "first"
    SECOND = "second"

    @classmethod
    def parse(cls, value: Union[str, Wave]) -> Wave:
        """Accept either an enum member or its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise FormationError(f"Unknown wave: {value!r}") from None


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key present in data (camelCase or snake_case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class WaveDurations:
    """Minutes covered by each wave of a quarter."""
    first: int = DEFAULT_FIRST_WAVE_MIN
    second: int = DEFAULT_SECOND_WAVE_MIN

    def for_wave(self, wave: Wave) -> int:
        return self.first if wave is Wave.FIRST else self.second

    def to_dict(self) -> Dict[str, int]:
        return {"first": self.first, "second": self.second}


@dataclass(frozen=True)
class PositionCounts:
    """Number of slots per position for one wave."""
    GK: int = DEFAULT_GK_COUNT
    DEF: int = DEFAULT_DEF_COUNT
    ATT: int = DEFAULT_ATT_COUNT

    @property
    def outfield(self) -> int:
        return self.DEF + self.ATT

    def to_dict(self) -> Dict[str, int]:
        return {"GK": self.GK, "DEF": self.DEF, "ATT": self.ATT}


@dataclass(frozen=True)
class FairnessRules:
    """Fairness tolerance applied when evaluating an allocation."""
    max_spread: int = DEFAULT_MAX_SPREAD_MIN
    goalkeeper_requires_outfield_time: bool = DEFAULT_GK_REQUIRES_OUTFIELD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "maxVariance": self.max_spread,
            "gkRequiresOutfield": self.goalkeeper_requires_outfield_time,
        }


@dataclass(frozen=True)
class FormationConfig:
    """
    Shape of a match: quarters, waves, formation and fairness tolerance.

    Instances are immutable and are passed explicitly to every engine call.

    Attributes:
        quarter_count: Number of quarters in the match
        quarter_duration: Minutes per quarter (a goalkeeper slot covers all of it)
        wave_durations: Minutes of the first and second outfield waves
        position_counts: Slots per position in one wave
        fairness: Spread tolerance and goalkeeper rotation rule
    """
    quarter_count: int = DEFAULT_QUARTER_COUNT
    quarter_duration: int = DEFAULT_QUARTER_DURATION_MIN
    wave_durations: WaveDurations = field(default_factory=WaveDurations)
    position_counts: PositionCounts = field(default_factory=PositionCounts)
    fairness: FairnessRules = field(default_factory=FairnessRules)

    def __post_init__(self):
        """Reject shapes the allocator cannot fill."""
        errors = self._collect_errors()
        if errors:
            raise FormationError(f"Invalid formation config: {'; '.join(errors)}")

    def _collect_errors(self) -> List[str]:
        errors = []
        if self.quarter_count < 1:
            errors.append("quarter count must be at least 1")
        if self.quarter_duration < 1:
            errors.append("quarter duration must be at least 1 minute")
        waves = self.wave_durations
        if waves.first < 1 or waves.second < 1:
            errors.append("wave durations must be at least 1 minute")
        elif waves.first + waves.second != self.quarter_duration:
            errors.append(
                f"wave durations ({waves.first}+{waves.second}) must add up to "
                f"the quarter duration ({self.quarter_duration})"
            )
        counts = self.position_counts
        if counts.GK != 1:
            errors.append(f"exactly 1 goalkeeper is required, got {counts.GK}")
        if counts.DEF < 0 or counts.ATT < 0:
            errors.append("position counts cannot be negative")
        elif counts.outfield < 1:
            errors.append("at least one outfield position is required")
        if self.fairness.max_spread < 0:
            errors.append("max spread cannot be negative")
        return errors

    @property
    def outfield_count(self) -> int:
        """Outfield slots in one wave."""
        return self.position_counts.outfield

    @property
    def slots_per_quarter(self) -> int:
        return self.position_counts.GK + 2 * self.outfield_count

    @property
    def players_per_quarter(self) -> int:
        """Players on the pitch at any moment."""
        return self.position_counts.GK + self.outfield_count

    @property
    def total_match_minutes(self) -> int:
        """Player-minutes handed out over the whole match."""
        return self.quarter_count * self.quarter_duration * self.players_per_quarter

    def minutes_for_wave(self, wave: Union[str, Wave]) -> int:
        return self.wave_durations.for_wave(Wave.parse(wave))

    def outfield_labels(self) -> List[Position]:
        """Position sequence for the outfield slots of one wave."""
        labels: List[Position] = []
        for position, count in (
            (Position.DEFENDER, self.position_counts.DEF),
            (Position.ATTACKER, self.position_counts.ATT),
        ):
            labels.extend([position] * count)
        return labels

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used by the rules store."""
        return {
            "quarters": self.quarter_count,
            "quarterDuration": self.quarter_duration,
            "waves": self.wave_durations.to_dict(),
            "positions": self.position_counts.to_dict(),
            "fairness": self.fairness.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]],
                  base: Optional[FormationConfig] = None) -> FormationConfig:
        """
        Build a config from a possibly partial override.

        Keys missing from ``data`` fall back to ``base`` (the defaults when
        omitted). Both camelCase and snake_case keys are accepted.

        Raises:
            FormationError: If a value is not numeric or the merged shape is invalid
        """
        base = base or DEFAULT_FORMATION
        data = data or {}
        waves = _pick(data, "waves", "wave_durations", default={}) or {}
        positions = _pick(data, "positions", "position_counts", default={}) or {}
        fairness = _pick(data, "fairness", default={}) or {}

        try:
            return cls(
                quarter_count=int(_pick(data, "quarters", "quarter_count",
                                        default=base.quarter_count)),
                quarter_duration=int(_pick(data, "quarterDuration", "quarter_duration",
                                           default=base.quarter_duration)),
                wave_durations=WaveDurations(
                    first=int(_pick(waves, "first", default=base.wave_durations.first)),
                    second=int(_pick(waves, "second", default=base.wave_durations.second)),
                ),
                position_counts=PositionCounts(
                    GK=int(_pick(positions, "GK", default=base.position_counts.GK)),
                    DEF=int(_pick(positions, "DEF", default=base.position_counts.DEF)),
                    ATT=int(_pick(positions, "ATT", default=base.position_counts.ATT)),
                ),
                fairness=FairnessRules(
                    max_spread=int(_pick(fairness, "maxVariance", "maxSpread", "max_spread",
                                         default=base.fairness.max_spread)),
                    goalkeeper_requires_outfield_time=bool(_pick(
                        fairness, "gkRequiresOutfield", "goalkeeperRequiresOutfieldTime",
                        "goalkeeper_requires_outfield_time",
                        default=base.fairness.goalkeeper_requires_outfield_time,
                    )),
                ),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, FormationError):
                raise
            raise FormationError(f"Invalid formation config value: {e}") from e


DEFAULT_FORMATION = FormationConfig()
