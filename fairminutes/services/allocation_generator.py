"""
Allocation generator for the Fair Minutes allocation engine.

Greedy rule: each quarter is built from the squad ordered by fewest minutes
played so far, so the next slot always goes to whoever has played least. That
keeps the spread low without any global optimisation.

Goalkeepers are planned for the whole match before any outfield slot is filled.
A planned goal turn counts towards the keeper's total from the start, so
outfield time is not spent on players who will collect a full quarter in goal
later. A player who sat out the previous quarter always goes to the front of
the order.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..models import (
    DEFAULT_FORMATION, Allocation, FormationConfig, QuarterAllocation,
    SquadValidationError,
)
from ..utils.constants import GOALKEEPER_REPEAT_BIAS_MIN, MAX_SQUAD_SIZE, MIN_SQUAD_SIZE
from .fairness_service import with_fairness
from .quarter_builder import build_quarter

logger = logging.getLogger(__name__)

ManualGoalkeepers = Sequence[Optional[str]]


def validate_squad(squad: Sequence[str]) -> List[str]:
    """
    Check squad size and names.

    Returns:
        The squad as a list, in the order given

    Raises:
        SquadValidationError: If the size is outside the supported range or a
            name is blank or duplicated
    """
    players = list(squad)
    if len(players) < MIN_SQUAD_SIZE:
        raise SquadValidationError(
            f"Need at least {MIN_SQUAD_SIZE} players for a match, got {len(players)}"
        )
    if len(players) > MAX_SQUAD_SIZE:
        raise SquadValidationError(
            f"Maximum {MAX_SQUAD_SIZE} players supported, got {len(players)}"
        )

    blank = [p for p in players if not isinstance(p, str) or not p.strip()]
    if blank:
        raise SquadValidationError("Player names cannot be empty")

    seen: Set[str] = set()
    duplicates = []
    for player in players:
        if player in seen and player not in duplicates:
            duplicates.append(player)
        seen.add(player)
    if duplicates:
        raise SquadValidationError(f"Duplicate players in squad: {', '.join(duplicates)}")
    return players


class AllocationGenerator:
    """
    Builds a full-match allocation for a squad.

    The generator holds no state between calls; ``generate`` is a pure
    function of the squad, the manual goalkeepers and the config.
    """

    def __init__(self, config: FormationConfig = DEFAULT_FORMATION):
        self.config = config

    def generate(self, squad: Sequence[str],
                 manual_goalkeepers: Optional[ManualGoalkeepers] = None) -> Allocation:
        """
        Allocate the squad across every quarter of the match.

        Args:
            squad: Selected player names; order breaks ties between equal totals
            manual_goalkeepers: One entry per quarter, a player name to pin that
                quarter's goalkeeper or an empty value to let the generator choose

        Returns:
            Allocation with summary and fairness warnings populated

        Raises:
            SquadValidationError: If the squad is outside the supported size
            FormationError: If the formation cannot be filled from the squad
        """
        players = validate_squad(squad)
        config = self.config
        order = {player: index for index, player in enumerate(players)}
        rotation_rule = config.fairness.goalkeeper_requires_outfield_time
        keepers = self._plan_goalkeepers(players, manual_goalkeepers, order)

        # Minutes played so far plus goal minutes still to come.
        projected: Dict[str, int] = {p: 0 for p in players}
        for keeper in keepers:
            projected[keeper] += config.quarter_duration
        outfield_minutes: Dict[str, int] = {p: 0 for p in players}
        last_played: Dict[str, int] = {p: 0 for p in players}

        quarters: List[QuarterAllocation] = []
        for quarter, keeper in enumerate(keepers, start=1):
            goal_turns_left = Counter(keepers[quarter:])
            former_keepers = set(keepers[:quarter - 1])

            def priority(player: str) -> Tuple[int, int, int, int, int, int]:
                sat_out = quarter > 1 and last_played[player] < quarter - 1
                needs_outfield = (rotation_rule and player in former_keepers
                                  and outfield_minutes[player] == 0)
                return (
                    0 if sat_out else 1,
                    projected[player],
                    -goal_turns_left[player],
                    0 if needs_outfield else 1,
                    last_played[player],
                    order[player],
                )

            quarter_allocation = build_quarter(
                quarter,
                sorted(players, key=priority),
                config,
                pinned_goalkeeper=keeper,
                minutes=projected,
            )
            quarters.append(quarter_allocation)

            for slot in quarter_allocation.slots:
                last_played[slot.player] = quarter
                if not slot.is_goalkeeper:
                    projected[slot.player] += slot.minutes
                    outfield_minutes[slot.player] += slot.minutes

        return with_fairness(Allocation.from_quarters(quarters), config)

    def _plan_goalkeepers(self, players: Sequence[str],
                          manual_goalkeepers: Optional[ManualGoalkeepers],
                          order: Dict[str, int]) -> List[str]:
        """Choose the goalkeeper of every quarter; pins first, then the rotation."""
        quarter_count = self.config.quarter_count
        pins = [self._pinned_goalkeeper(manual_goalkeepers, quarter, players)
                for quarter in range(1, quarter_count + 1)]
        reserved = {p for p in pins if p}

        goalkeeper_turns: Dict[str, int] = {p: 0 for p in players}
        kept_goal_this_rotation: Set[str] = set()
        keepers: List[str] = []
        for quarter, pinned in enumerate(pins, start=1):
            keeper = pinned or self._goalkeeper_pool(
                players, goalkeeper_turns, kept_goal_this_rotation, reserved, order)[0]
            keepers.append(keeper)
            goalkeeper_turns[keeper] += 1
            kept_goal_this_rotation.add(keeper)
            if kept_goal_this_rotation >= set(players):
                logger.debug("Goalkeeper rotation complete after quarter %s", quarter)
                kept_goal_this_rotation.clear()

        logger.debug("Planned goalkeepers: %s", keepers)
        return keepers

    def _pinned_goalkeeper(self, manual_goalkeepers: Optional[ManualGoalkeepers],
                           quarter: int, players: Sequence[str]) -> Optional[str]:
        if not manual_goalkeepers or quarter > len(manual_goalkeepers):
            return None
        name = manual_goalkeepers[quarter - 1]
        if not name:
            return None
        if name not in players:
            logger.debug(
                "Manual goalkeeper %r for Q%s is not in the squad; choosing automatically",
                name, quarter,
            )
            return None
        return name

    def _goalkeeper_pool(self, players: Sequence[str],
                         goalkeeper_turns: Dict[str, int],
                         kept_goal_this_rotation: Set[str],
                         reserved: Set[str],
                         order: Dict[str, int]) -> List[str]:
        """Players eligible to keep goal next, most deserving first."""
        # Players pinned to another quarter only keep again when nobody else can.
        pool = [p for p in players if p not in reserved] or list(players)
        if not self.config.fairness.goalkeeper_requires_outfield_time:
            return sorted(pool, key=lambda p: (goalkeeper_turns[p], order[p]))

        eligible = [p for p in pool if p not in kept_goal_this_rotation] or pool
        duration = self.config.quarter_duration

        def weighted_minutes(player: str) -> int:
            if goalkeeper_turns[player]:
                return goalkeeper_turns[player] * duration + GOALKEEPER_REPEAT_BIAS_MIN
            return 0

        return sorted(eligible, key=lambda p: (weighted_minutes(p), goalkeeper_turns[p], order[p]))


def generate(squad: Sequence[str],
             manual_goalkeepers: Optional[ManualGoalkeepers] = None,
             config: FormationConfig = DEFAULT_FORMATION) -> Allocation:
    """Generate an allocation for ``squad``; see :meth:`AllocationGenerator.generate`."""
    return AllocationGenerator(config).generate(squad, manual_goalkeepers)
