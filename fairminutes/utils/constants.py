"""
Constants for the Fair Minutes allocation engine.

This module contains configuration constants used throughout the application.
"""

# Application metadata
APP_TITLE = "Fair Minutes"

# Squad limits for a small-sided match
MIN_SQUAD_SIZE = 5
MAX_SQUAD_SIZE = 15

# Default match structure
DEFAULT_QUARTER_COUNT = 4
DEFAULT_QUARTER_DURATION_MIN = 10
DEFAULT_FIRST_WAVE_MIN = 5
DEFAULT_SECOND_WAVE_MIN = 5

# Default 1-2-2 formation
DEFAULT_GK_COUNT = 1
DEFAULT_DEF_COUNT = 2
DEFAULT_ATT_COUNT = 2

# Fairness defaults
DEFAULT_MAX_SPREAD_MIN = 5
DEFAULT_GK_REQUIRES_OUTFIELD = True

# Extra minutes added to a former keeper's total when ranking goalkeepers.
# Smaller than any wave so it only breaks near-ties.
GOALKEEPER_REPEAT_BIAS_MIN = 1

# Edit history
DEFAULT_MAX_HISTORY = 50

# Rules override storage
DEFAULT_RULES_FILE = "rules_override.json"

# Web API defaults
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 7122

SUB_LABEL = "sub"
