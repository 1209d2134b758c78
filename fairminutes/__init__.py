"""
Fair Minutes

Allocates playing time fairly across a small-sided football squad: builds a
lineup for every quarter, keeps it valid under edits and reports how evenly
minutes are spread.

This package provides the allocation engine and a Flask JSON API for the
lineup editor.
"""
from .models import Allocation, FormationConfig, DEFAULT_FORMATION, FairnessReport
from .services import (
    generate, evaluate, assign_slot, swap_slots, swap_with_substitute,
    set_slot_wave, quarter_breakdown, PersistenceService, RulesService
)
from .ui import create_app, run_web_app
from .utils import APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Allocation", "FormationConfig", "DEFAULT_FORMATION", "FairnessReport",
    "generate", "evaluate", "assign_slot", "swap_slots", "swap_with_substitute",
    "set_slot_wave", "quarter_breakdown", "PersistenceService", "RulesService",
    "create_app", "run_web_app", "APP_TITLE"
]
